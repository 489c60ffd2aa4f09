"""이 파일은 .py SBOM 스캐너 어댑터로 cdxgen SBOM 생성과 SBOM 기반 취약점 스캔을 수행합니다."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple
import uuid

from secgate.adapters.installer import NpmToolInstaller
from secgate.adapters.runner import ToolRunner
from secgate.core.config import CDXGEN_BINARY, CDXGEN_PACKAGE, CDXGEN_VERSION
from secgate.core.errors import SecgateError, ToolOutputError
from secgate.core.storage import artifacts_dir, ensure_artifacts_dir, remove_tree_quietly
from secgate.core.types import Category, ScanConfig, ScanResult

from .base import Installer, ScannerAdapter
from .trivy_report import load_report, parse_vulnerabilities
from .vulnerability import VulnerabilityScanner, default_trivy_installer, log_severity_summary

logger = logging.getLogger(__name__)

SBOM_SPEC_VERSION = "1.4"
SBOM_FILE_NAME = "sbom.json"
# 이 예외들이 발생하면 단순 취약점 스캐너로 한 번만 대체 실행한다.
FALLBACK_ERRORS = (SecgateError, ValueError, OSError)


class SbomScanner(ScannerAdapter):
    """SBOM을 만든 뒤 그 SBOM으로 취약점을 찾는 복합 어댑터입니다.

    생성된 SBOM 경로는 ``artifact_path`` 로 넘겨 업로드 단계에서 사용합니다.
    SBOM 생성이나 SBOM 스캔이 실패하면 원래 설정 그대로 ``fallback`` 스캐너를
    정확히 한 번 실행하고, 그 결과를 변경 없이 반환합니다. 대체 실행의 실패는
    호출자에게 그대로 전파됩니다.
    """

    name = "CDXgen SBOM Generator"
    category = Category.VULNERABILITY
    default_binary = CDXGEN_BINARY

    def __init__(
        self,
        runner: Optional[ToolRunner] = None,
        installer: Optional[Installer] = None,
        trivy_installer: Optional[Installer] = None,
        fallback: Optional[VulnerabilityScanner] = None,
        artifacts_root: Optional[Path] = None,
        run_id: Optional[str] = None,
    ) -> None:
        runner = runner or ToolRunner()
        super().__init__(
            runner=runner,
            installer=installer or NpmToolInstaller(CDXGEN_PACKAGE, CDXGEN_VERSION, CDXGEN_BINARY, runner=runner),
        )
        self.trivy_installer = trivy_installer or default_trivy_installer()
        self.trivy_path: Optional[Path] = None
        self.fallback = fallback or VulnerabilityScanner(runner=runner, installer=self.trivy_installer)
        self.artifacts_root = artifacts_root
        self.run_id = run_id or uuid.uuid4().hex

    def scan(self, config: ScanConfig) -> ScanResult:
        try:
            sbom_path, components = self.generate_sbom(config)
            logger.info("SBOM generated: %s (%d components)", sbom_path, components)
            return self.scan_sbom(config, sbom_path, components)
        except FALLBACK_ERRORS as exc:
            logger.error("SBOM scan failed: %s", exc)

        logger.info("Falling back to %s...", self.fallback.name)
        return self.fallback.scan(config)

    def generate_sbom(self, config: ScanConfig) -> Tuple[Path, int]:
        target = self.require_target(config)
        output_path = ensure_artifacts_dir(self.run_id, self.artifacts_root) / SBOM_FILE_NAME
        # 이전 실행의 SBOM이 남아 있으면 새 결과로 오인하지 않도록 지운다.
        output_path.unlink(missing_ok=True)

        command = [
            self.binary,
            "--spec-version",
            SBOM_SPEC_VERSION,
            "--deep",
            "--output",
            str(output_path),
            str(target),
        ]
        logger.info("Generating SBOM for: %s", target)
        result = self.runner.run(command, cwd=str(target))
        logger.info("SBOM generation completed with exit code: %d", result.exit_code)

        if not output_path.exists():
            logger.error("Output file not created: %s", output_path)
            logger.debug("cdxgen stdout: %s", result.stdout)
            logger.debug("cdxgen stderr: %s", result.stderr)
            raise ToolOutputError("cdxgen did not generate SBOM output file")

        try:
            document = json.loads(output_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ToolOutputError(f"cdxgen produced invalid SBOM JSON: {exc}") from exc
        if not isinstance(document, dict):
            raise ToolOutputError(f"cdxgen SBOM root is not an object: {type(document).__name__}")
        logger.info("SBOM spec version: %s", document.get("specVersion") or document.get("bomFormat"))
        components = document.get("components")
        return output_path, len(components) if isinstance(components, list) else 0

    def scan_sbom(self, config: ScanConfig, sbom_path: Path, components: int = 0) -> ScanResult:
        if self.trivy_path is None:
            self.trivy_path = self.trivy_installer.install()

        command: List[str] = [
            str(self.trivy_path),
            "sbom",
            "--severity",
            config.severity_filter(),
            "--format",
            "json",
            "--quiet",
            str(sbom_path),
        ]
        result = self.runner.run(command)
        metadata = {"components": components}

        if not result.stdout.strip():
            logger.warning("No vulnerabilities found in SBOM scan output")
            return self.empty_result(artifact_path=sbom_path, metadata=metadata)

        # 여기서의 해석 오류는 대체 실행으로 처리되도록 그대로 올린다.
        findings = parse_vulnerabilities(load_report(result.stdout))
        scan_result = self.build_result(findings, artifact_path=sbom_path, metadata=metadata)
        log_severity_summary(scan_result, "vulnerabilities")
        return scan_result

    def cleanup(self) -> None:
        # 업로드까지 끝난 뒤 이번 실행의 SBOM 산출물 디렉터리를 지운다.
        remove_tree_quietly(artifacts_dir(self.run_id, self.artifacts_root))
