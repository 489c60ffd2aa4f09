"""이 파일은 .py 스캔 실행 모듈로 스캐너 설치/실행 루프와 결과 집계를 담당합니다."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Iterable, List

from secgate.adapters.registry import AdapterRegistry
from secgate.core.types import ScanConfig, ScanResult
from secgate.scanners.base import ScannerAdapter

from .aggregator import AggregateResult, Aggregator

logger = logging.getLogger(__name__)


class ScanExecutor:
    def __init__(self, scanners: Iterable[ScannerAdapter]) -> None:
        # 등록 순서대로 설치/스캔하며 이름이 겹치면 등록 단계에서 거부한다.
        self.registry = AdapterRegistry()
        for scanner in scanners:
            self.registry.register(scanner)
        logger.info("Registered scanners: %s", ", ".join(self.registry.names()))

    def install_all(self) -> List[ScannerAdapter]:
        installed: List[ScannerAdapter] = []
        for scanner in self.registry:
            logger.info("Installing %s...", scanner.name)
            try:
                path = scanner.install()
            except Exception as exc:
                # 설치 실패는 해당 스캐너만 제외하고 나머지를 계속 진행한다.
                logger.warning("Failed to install %s: %s", scanner.name, exc)
                continue
            logger.info("%s installed at %s", scanner.name, path)
            installed.append(scanner)
        return installed

    def scan_all(self, scanners: Iterable[ScannerAdapter], config: ScanConfig) -> AggregateResult:
        aggregator = Aggregator()
        logger.info("Target: %s", config.scan_target)
        logger.info("Scan Type: %s", config.scan_type)
        logger.info("Severity Filter: %s", config.severity)
        for scanner in scanners:
            logger.info("Running %s...", scanner.name)
            try:
                result = scanner.scan(config)
            except Exception as exc:
                # 실패한 스캐너는 0건 결과로도 집계에 넣지 않는다.
                logger.warning("%s scan failed: %s", scanner.name, exc)
                continue
            aggregator.aggregate(attribute_result(scanner, result))
        return aggregator.result

    def cleanup_all(self) -> None:
        for scanner in self.registry:
            try:
                scanner.cleanup()
            except Exception as exc:
                logger.warning("Failed to cleanup %s: %s", scanner.name, exc)


def attribute_result(scanner: ScannerAdapter, result: ScanResult) -> ScanResult:
    # 대체 실행 결과는 등록된 스캐너 이름으로 집계하고 실제 생산자는 metadata에 남긴다.
    if result.scanner_name == scanner.name:
        return result
    logger.info("%s result was produced by %s", scanner.name, result.scanner_name)
    return replace(
        result,
        scanner_name=scanner.name,
        metadata={**result.metadata, "produced_by": result.scanner_name},
    )
