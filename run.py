"""이 파일은 .py 엔트리포인트로 CI 보안 스캔 한 번을 실행합니다."""

import logging
import sys

from secgate.core.errors import InputConfigError
from secgate.core.inputs import load_inputs
from secgate.core.logging import setup_logging
from secgate.scanners import build_default_scanners
from secgate.services.orchestrator import Orchestrator, failure_message

logger = logging.getLogger("secgate")


def main() -> int:
    setup_logging()
    try:
        inputs = load_inputs()
    except InputConfigError as exc:
        logger.error("Invalid inputs: %s", exc)
        return 2

    outcome = Orchestrator(build_default_scanners(), inputs).run()
    if outcome.failed:
        logger.error(failure_message(outcome.verdict.reasons))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
