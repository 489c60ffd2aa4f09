"""이 파일은 .py 로깅 초기화 모듈로 기본 로그 포맷을 설정합니다."""

import logging
import os
from typing import Optional


def debug_mode_enabled() -> bool:
    return os.getenv("DEBUG_MODE", "").strip().lower() == "true"


def setup_logging(level: Optional[str] = None) -> None:
    # DEBUG_MODE=true면 시크릿 스캐너 상세 로그까지 출력한다.
    effective = level or ("DEBUG" if debug_mode_enabled() else "INFO")
    logging.basicConfig(
        level=effective.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
