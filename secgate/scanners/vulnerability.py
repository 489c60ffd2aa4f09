"""이 파일은 .py 취약점 스캐너 어댑터로 Trivy 파일시스템 스캔 결과를 표준화합니다."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from secgate.adapters.installer import ToolInstaller, trivy_download_url
from secgate.adapters.runner import ToolRunner
from secgate.core.config import TRIVY_BINARY, TRIVY_VERSION
from secgate.core.errors import ToolOutputError
from secgate.core.storage import remove_quietly, temp_report_path
from secgate.core.types import Category, ScanConfig, ScanResult

from .base import Installer, ScannerAdapter
from .trivy_report import load_report, parse_vulnerabilities

logger = logging.getLogger(__name__)

SKIP_DIRS = "node_modules,.git,.github"


def default_trivy_installer() -> ToolInstaller:
    return ToolInstaller("trivy", TRIVY_VERSION, TRIVY_BINARY, trivy_download_url)


class VulnerabilityScanner(ScannerAdapter):
    name = "Trivy Vulnerability Scanner"
    category = Category.VULNERABILITY
    default_binary = TRIVY_BINARY

    def __init__(self, runner: Optional[ToolRunner] = None, installer: Optional[Installer] = None) -> None:
        super().__init__(runner=runner, installer=installer or default_trivy_installer())

    def build_command(self, config: ScanConfig, target: Path, output_path: Path) -> List[str]:
        command = [
            self.binary,
            config.scan_type,
            "--severity",
            config.severity_filter(),
            "--format",
            "json",
            "--output",
            str(output_path),
            # 실패 여부는 오케스트레이터의 정책이 판단한다.
            "--exit-code",
            "0",
            "--quiet",
        ]
        if config.ignore_unfixed:
            command.append("--ignore-unfixed")
        command.extend(["--skip-dirs", SKIP_DIRS, str(target)])
        return command

    def scan(self, config: ScanConfig) -> ScanResult:
        target = self.require_target(config)
        logger.info("Scanning %s (type=%s, severity=%s)", target, config.scan_type, config.severity_filter())
        output_path = temp_report_path("trivy-scan-results")
        try:
            result = self.runner.run(self.build_command(config, target, output_path), cwd=str(target.parent))
            if result.exit_code != 0 and result.stderr:
                logger.warning("Trivy stderr output: %s", result.stderr.strip())
            if not output_path.exists():
                logger.error("Output file was not created: %s", output_path)
                raise ToolOutputError("Trivy did not produce output file")
            return self.parse_report(output_path.read_text(encoding="utf-8"))
        finally:
            remove_quietly(output_path)

    def parse_report(self, text: str) -> ScanResult:
        # 해석 실패는 경고 후 0건 결과로 대체해 전체 실행을 멈추지 않는다.
        try:
            findings = parse_vulnerabilities(load_report(text))
        except ValueError as exc:
            logger.warning("Failed to parse Trivy results: %s", exc)
            return self.empty_result()

        scan_result = self.build_result(findings)
        log_severity_summary(scan_result, "vulnerabilities")
        return scan_result


def log_severity_summary(scan_result: ScanResult, noun: str) -> None:
    counts = scan_result.by_severity
    logger.info("Found %d %s", scan_result.total, noun)
    logger.info(
        "%d Critical | %d High | %d Medium | %d Low | %d Unknown",
        counts.critical,
        counts.high,
        counts.medium,
        counts.low,
        counts.unknown,
    )
