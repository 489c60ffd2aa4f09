"""이 파일은 .py 코어 패키지 초기화 모듈로 주요 심볼을 재노출합니다."""

from .config import DEFAULT_SECRET_RULES_FILE, TEMP_ROOT, TOOL_CACHE_DIR
from .inputs import ActionInputs, load_inputs
from .logging import setup_logging
from .taxonomy import count_severities, normalize_severity
from .types import Category, Finding, ScanConfig, ScanResult, Severity, SeverityCounts

__all__ = [
    "ActionInputs",
    "Category",
    "DEFAULT_SECRET_RULES_FILE",
    "Finding",
    "ScanConfig",
    "ScanResult",
    "Severity",
    "SeverityCounts",
    "TEMP_ROOT",
    "TOOL_CACHE_DIR",
    "count_severities",
    "load_inputs",
    "normalize_severity",
    "setup_logging",
]
