"""이 파일은 .py 설정 모듈로 경로, 도구 버전, 기본값을 정의합니다."""

import os
import tempfile
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
PACKAGE_DIR = REPO_ROOT / "secgate"
DATA_DIR = PACKAGE_DIR / "data"
DEFAULT_SECRET_RULES_FILE = DATA_DIR / "gitleaks-rules.toml"
DEFAULT_CONFIG_FILE_NAME = ".secgate.yml"

# 러너 임시 디렉터리가 있으면 그 아래에 산출물을 둔다.
TEMP_ROOT = Path(os.getenv("RUNNER_TEMP") or tempfile.gettempdir())
TOOL_CACHE_DIR = Path(
    os.getenv("SECGATE_TOOL_CACHE", str(Path.home() / ".cache" / "secgate"))
)

TRIVY_VERSION = "0.66.0"
TRIVY_BINARY = "trivy"
GITLEAKS_VERSION = "8.27.2"
GITLEAKS_BINARY = "gitleaks"
CDXGEN_PACKAGE = "@cyclonedx/cdxgen"
CDXGEN_VERSION = "11.9.0"
CDXGEN_BINARY = "cdxgen"

DEFAULT_SCAN_TYPE = "fs"
DEFAULT_SEVERITY = "HIGH,CRITICAL"
DEFAULT_EXIT_CODE = "1"

UPLOAD_TIMEOUT_SECONDS = 300
UPLOAD_MAX_ATTEMPTS = 3
UPLOAD_BASE_DELAY_SECONDS = 2.0
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
