"""이 파일은 .py 스캐너 패키지 초기화 모듈로 기본 스캐너 구성을 제공합니다."""

from typing import List, Optional

from secgate.adapters.runner import ToolRunner

from .base import ScannerAdapter, clean_node_modules
from .config_scan import ConfigScanner
from .sbom import SbomScanner
from .secret import SecretScanner
from .vulnerability import VulnerabilityScanner


def build_default_scanners(runner: Optional[ToolRunner] = None) -> List[ScannerAdapter]:
    # 실행마다 새 인스턴스를 만들며, 목록 순서가 등록(실행) 순서이다.
    runner = runner or ToolRunner()
    vulnerability = VulnerabilityScanner(runner=runner)
    return [
        SbomScanner(runner=runner, fallback=vulnerability, trivy_installer=vulnerability.installer),
        vulnerability,
        SecretScanner(runner=runner),
        ConfigScanner(runner=runner),
    ]


__all__ = [
    "ConfigScanner",
    "SbomScanner",
    "ScannerAdapter",
    "SecretScanner",
    "VulnerabilityScanner",
    "build_default_scanners",
    "clean_node_modules",
]
