"""이 파일은 .py 스캐너 베이스 모듈로 어댑터 계약과 결과 생성 공통 로직을 제공합니다."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from pathlib import Path
import shutil
from typing import Any, Iterable, List, Optional, Protocol

from secgate.adapters.runner import ToolRunner
from secgate.core.errors import ScanPreconditionError
from secgate.core.taxonomy import count_severities
from secgate.core.types import Category, Finding, ScanConfig, ScanResult

logger = logging.getLogger(__name__)


class Installer(Protocol):
    def install(self) -> Path:
        ...


class ScannerAdapter(ABC):
    name: str = ""
    category: Category
    # 설치 전에도 PATH에 있는 바이너리를 이름으로 호출할 수 있다.
    default_binary: str = ""

    def __init__(self, runner: Optional[ToolRunner] = None, installer: Optional[Installer] = None) -> None:
        self.runner = runner or ToolRunner()
        self.installer = installer
        self.binary_path: Optional[Path] = None

    def install(self) -> Path:
        if self.installer is None:
            raise ScanPreconditionError(f"No installer configured for {self.name}")
        self.binary_path = self.installer.install()
        return self.binary_path

    @property
    def binary(self) -> str:
        return str(self.binary_path) if self.binary_path else self.default_binary

    @abstractmethod
    def scan(self, config: ScanConfig) -> ScanResult:
        raise NotImplementedError

    def cleanup(self) -> None:
        # 실행이 끝난 뒤 남겨 둔 산출물이 있으면 정리한다.
        return None

    def require_target(self, config: ScanConfig) -> Path:
        target = config.resolved_target()
        if not target.exists():
            raise ScanPreconditionError(f"Scan target does not exist: {target}")
        return target

    def build_result(self, findings: Iterable[Finding], **extra: Any) -> ScanResult:
        # total은 항상 Finding 개수이며 심각도 버킷은 Finding에서 다시 센다.
        items: List[Finding] = list(findings)
        return ScanResult(
            scanner_name=self.name,
            category=self.category,
            total=len(items),
            by_severity=count_severities(items),
            findings=tuple(items),
            **extra,
        )

    def empty_result(self, **extra: Any) -> ScanResult:
        return ScanResult.empty(self.name, self.category, **extra)


def clean_node_modules(target: Path, config: ScanConfig) -> bool:
    """스캔 대상 아래의 node_modules를 삭제합니다.

    호출자의 파일시스템을 변경하므로 ``clean_node_modules`` 옵션을 켠 경우에만
    동작하며, 삭제 실패는 경고로만 남깁니다.
    """
    if not config.clean_node_modules:
        return False
    node_modules = target / "node_modules"
    if not node_modules.is_dir():
        return False
    logger.warning("Deleting %s before scanning (clean-node-modules=true)", node_modules)
    try:
        shutil.rmtree(node_modules)
    except OSError as exc:
        logger.warning("Failed to delete node_modules: %s", exc)
        return False
    logger.info("node_modules deleted")
    return True
