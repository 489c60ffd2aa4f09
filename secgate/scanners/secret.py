"""이 파일은 .py 시크릿 스캐너 어댑터로 Gitleaks 리포트를 필터링/중복 제거해 표준화합니다."""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
import re
import time
from typing import Any, Dict, List, Optional, Tuple

from secgate.adapters.installer import ToolInstaller, gitleaks_download_url
from secgate.adapters.runner import ToolRunner
from secgate.core.config import DEFAULT_SECRET_RULES_FILE, GITLEAKS_BINARY, GITLEAKS_VERSION
from secgate.core.errors import AdapterError, ScanPreconditionError, ToolOutputError
from secgate.core.storage import remove_quietly, temp_report_path
from secgate.core.types import Category, Finding, ScanConfig, ScanResult

from .base import Installer, ScannerAdapter, clean_node_modules

logger = logging.getLogger(__name__)

SKIP_FILES = frozenset(
    {
        "package.json",
        "package-lock.json",
        "pom.xml",
        "build.gradle",
        "requirements.txt",
        "README.md",
        ".gitignore",
    }
)
EXCLUDED_DIRS = (".git/", ".github/", ".settings/", "target/", "build/", "dist/", "out/")
ENV_VAR_PATTERN = re.compile(r"[\"']?\$\{?[A-Z0-9_]+\}?[\"']?")
# 업로드 대상 화면이 기대하는 경로 형식에 맞춘 접두사이다.
UPLOAD_FILE_PREFIX = "//////"

DedupKey = Tuple[Any, Any, Any, Any, Any, Any]


def default_gitleaks_installer() -> ToolInstaller:
    return ToolInstaller("gitleaks", GITLEAKS_VERSION, GITLEAKS_BINARY, gitleaks_download_url)


def skip_reason(item: Dict[str, Any]) -> Optional[str]:
    """오탐으로 보고 버릴 항목이면 그 사유를, 아니면 None을 반환합니다."""
    file_path = str(item.get("File") or "")
    if PurePosixPath(file_path).name in SKIP_FILES:
        return "in skip files list"
    if "node_modules" in file_path:
        return "node_modules"
    if any(directory in file_path for directory in EXCLUDED_DIRS):
        return "excluded directory"
    if ENV_VAR_PATTERN.search(str(item.get("Match") or "")):
        return "env variable pattern"
    return None


def dedup_key(item: Dict[str, Any]) -> DedupKey:
    return (
        item.get("File"),
        item.get("StartLine"),
        item.get("EndLine"),
        item.get("StartColumn"),
        item.get("EndColumn"),
        item.get("Secret"),
    )


def filter_secrets(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    kept: List[Dict[str, Any]] = []
    for item in items:
        reason = skip_reason(item)
        if reason:
            logger.debug("Skipping %s - %s", item.get("File"), reason)
            continue
        kept.append(item)
    logger.debug("Secrets after filtering: %d", len(kept))
    return kept


def deduplicate_secrets(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # 같은 위치/같은 값은 처음 나온 항목만 남긴다.
    seen = set()
    unique: List[Dict[str, Any]] = []
    for item in items:
        key = dedup_key(item)
        if key in seen:
            logger.debug("Skipping duplicate: %s:%s (%s)", item.get("File"), item.get("StartLine"), item.get("RuleID"))
            continue
        seen.add(key)
        unique.append(item)
    logger.debug("Secrets after deduplication: %d", len(unique))
    return unique


def _as_field(value: Any) -> str:
    return "" if value is None else str(value)


def to_upload_record(item: Dict[str, Any]) -> Dict[str, str]:
    return {
        "RuleID": _as_field(item.get("RuleID")),
        "Description": _as_field(item.get("Description")),
        "File": f"{UPLOAD_FILE_PREFIX}{_as_field(item.get('File'))}",
        "Match": _as_field(item.get("Match")),
        "Secret": _as_field(item.get("Secret")),
        "StartLine": _as_field(item.get("StartLine")),
        "EndLine": _as_field(item.get("EndLine")),
        "StartColumn": _as_field(item.get("StartColumn")),
        "EndColumn": _as_field(item.get("EndColumn")),
    }


def to_finding(item: Dict[str, Any]) -> Finding:
    return Finding(
        category=Category.SECRET,
        severity=None,
        payload={
            "file": item.get("File"),
            "start_line": item.get("StartLine"),
            "end_line": item.get("EndLine"),
            "start_column": item.get("StartColumn"),
            "end_column": item.get("EndColumn"),
            "rule_id": item.get("RuleID"),
            "description": item.get("Description"),
            "matched_text": item.get("Match"),
            "secret_text": item.get("Secret"),
        },
    )


def format_duration(seconds: float) -> str:
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes}min {rest}s"


class SecretScanner(ScannerAdapter):
    name = "Secret Detector (Gitleaks)"
    category = Category.SECRET
    default_binary = GITLEAKS_BINARY

    def __init__(self, runner: Optional[ToolRunner] = None, installer: Optional[Installer] = None) -> None:
        super().__init__(runner=runner, installer=installer or default_gitleaks_installer())

    def rules_path(self, config: ScanConfig) -> Path:
        path = Path(config.secret_rules_path) if config.secret_rules_path else DEFAULT_SECRET_RULES_FILE
        if not path.is_file():
            raise ScanPreconditionError(f"Gitleaks rules file not found: {path}")
        return path

    def build_command(self, config: ScanConfig, target: Path, report_path: Path, rules_path: Path) -> List[str]:
        command = [
            self.binary,
            "dir",
            str(target),
            "--report-path",
            str(report_path),
            "--config",
            str(rules_path),
            "--no-banner",
        ]
        if config.debug:
            command.append("--verbose")
        return command

    def mark_safe_directory(self, target: Path) -> None:
        # 컨테이너 환경에서는 소유자가 달라 git이 저장소를 거부할 수 있다.
        try:
            result = self.runner.run(["git", "config", "--global", "--add", "safe.directory", str(target)])
        except AdapterError as exc:
            logger.warning("Could not configure Git safe directory: %s", exc)
            return
        if result.exit_code != 0:
            logger.warning("Could not configure Git safe directory (not a git repo?)")

    def scan(self, config: ScanConfig) -> ScanResult:
        started = time.monotonic()
        target = self.require_target(config)
        rules_path = self.rules_path(config)
        clean_node_modules(target, config)

        logger.info("Scanning for secrets in: %s", target)
        self.mark_safe_directory(target)

        report_path = temp_report_path("gitleaks-report")
        try:
            command = self.build_command(config, target, report_path, rules_path)
            logger.debug("Running Gitleaks: %s", " ".join(command))
            result = self.runner.run(command)
            logger.debug("Gitleaks exit code: %d", result.exit_code)
            logger.debug("Gitleaks stdout: %s", result.stdout)
            if result.stderr.strip():
                logger.debug("Gitleaks stderr: %s", result.stderr)
            if not report_path.exists():
                raise ToolOutputError("Gitleaks did not produce report file")
            items = self.load_report(report_path.read_text(encoding="utf-8"))
        finally:
            remove_quietly(report_path)

        unique = deduplicate_secrets(filter_secrets(items))
        duration = format_duration(time.monotonic() - started)
        logger.info("Unique secrets detected: %d", len(unique))
        logger.info("Scan duration: %s", duration)
        return self.build_result(
            [to_finding(item) for item in unique],
            raw_results=tuple(to_upload_record(item) for item in unique),
            metadata={"duration": duration},
        )

    @staticmethod
    def load_report(text: str) -> List[Dict[str, Any]]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ToolOutputError("Invalid JSON in gitleaks report") from exc
        if not isinstance(data, list):
            raise ToolOutputError(f"Unexpected gitleaks report type: {type(data).__name__}")
        if not data:
            logger.info("No secrets detected.")
        return [item for item in data if isinstance(item, dict)]
