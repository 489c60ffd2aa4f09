"""이 파일은 .py 외부 도구 실행 어댑터로 subprocess 호출을 래핑합니다."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import subprocess
from typing import List, Optional

from secgate.core.errors import AdapterError

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    exit_code: int
    stdout: str
    stderr: str


class ToolRunner:
    # 스캐너 프로세스에는 기본 타임아웃을 두지 않는다.
    def __init__(self, timeout: Optional[int] = None) -> None:
        self.timeout = timeout

    def run(self, command: List[str], cwd: Optional[str] = None) -> ToolResult:
        logger.info("Running: %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
                cwd=cwd,
            )
        except subprocess.TimeoutExpired as exc:
            raise AdapterError(f"{command[0]} command timeout") from exc
        except OSError as exc:
            raise AdapterError(f"{command[0]} execution failed: {exc}") from exc

        # 종료 코드는 호출한 어댑터가 해석하고 여기서는 기록만 한다.
        logger.debug("%s exited with %d", command[0], result.returncode)
        return ToolResult(result.returncode, result.stdout, result.stderr)
