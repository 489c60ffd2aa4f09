"""이 파일은 .py 설정 오류 스캐너 어댑터로 Trivy config 결과를 표준화합니다."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from secgate.adapters.runner import ToolRunner
from secgate.core.config import TRIVY_BINARY
from secgate.core.errors import ToolOutputError
from secgate.core.storage import remove_quietly, temp_report_path
from secgate.core.types import Category, ScanConfig, ScanResult

from .base import Installer, ScannerAdapter
from .trivy_report import iter_results, load_report, parse_misconfigurations, result_entries
from .vulnerability import default_trivy_installer, log_severity_summary

logger = logging.getLogger(__name__)


class ConfigScanner(ScannerAdapter):
    """IaC/설정 파일의 잘못된 구성을 찾습니다.

    ``total`` 은 발견된 misconfiguration 수이고, 검사한 파일 수는
    ``files_scanned`` 로 따로 기록합니다. 업로드 페이로드용으로 Trivy의
    ``Results`` 레코드를 ``raw_results`` 에 그대로 보관합니다.
    """

    name = "Trivy config Scanner"
    category = Category.MISCONFIGURATION
    default_binary = TRIVY_BINARY

    def __init__(self, runner: Optional[ToolRunner] = None, installer: Optional[Installer] = None) -> None:
        super().__init__(runner=runner, installer=installer or default_trivy_installer())

    def build_command(self, config: ScanConfig, target: Path, output_path: Path) -> List[str]:
        return [
            self.binary,
            "config",
            "--severity",
            config.severity_filter(),
            "--format",
            "json",
            "--output",
            str(output_path),
            str(target),
        ]

    def scan(self, config: ScanConfig) -> ScanResult:
        target = self.require_target(config)
        logger.info("Scanning configuration in: %s (severity=%s)", target, config.severity_filter())
        output_path = temp_report_path("trivy-config-results")
        try:
            result = self.runner.run(self.build_command(config, target, output_path), cwd=str(target.parent))
            logger.info("Config scan completed with exit code: %d", result.exit_code)
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
            data = load_report(text)
            findings = parse_misconfigurations(data)
        except ValueError as exc:
            logger.warning("Failed to parse Trivy config results: %s", exc)
            return self.empty_result(files_scanned=0)

        if data is None:
            logger.warning("Trivy config output is empty")
            return self.empty_result(files_scanned=0)

        results = iter_results(data)
        # 업로드용 원본 레코드에도 객체가 아닌 항목은 남기지 않는다.
        raw_results = tuple(
            dict(result, Misconfigurations=result_entries(result, "Misconfigurations")) for result in results
        )
        scan_result = self.build_result(
            findings,
            files_scanned=len(results),
            raw_results=raw_results,
            metadata={
                "artifact_name": data.get("ArtifactName") or "",
                "artifact_type": data.get("ArtifactType") or "",
            },
        )
        logger.info("Files scanned: %d", len(results))
        log_severity_summary(scan_result, "misconfigurations")
        return scan_result
