"""이 파일은 .py Trivy JSON 리포트 해석 모듈입니다."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from secgate.core.taxonomy import normalize_severity
from secgate.core.types import Category, Finding

logger = logging.getLogger(__name__)


def load_report(text: Optional[str]) -> Optional[Dict[str, Any]]:
    # 빈 출력은 "결과 없음"으로 보고 None을 반환한다.
    if text is None or not text.strip():
        return None
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected report root type: {type(data).__name__}")
    return data


def iter_results(data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not data:
        return []
    results = data.get("Results")
    if not isinstance(results, list):
        logger.warning("No Results array found in JSON output")
        return []
    return [item for item in results if isinstance(item, dict)]


def result_entries(result: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    # 배열이 아닌 값은 손상된 출력으로 보고, 배열 안의 객체가 아닌 항목은 건너뛴다.
    value = result.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key} of {result.get('Target')} is not an array: {type(value).__name__}")
    entries = [item for item in value if isinstance(item, dict)]
    if len(entries) != len(value):
        logger.debug("Skipped %d malformed %s entries in %s", len(value) - len(entries), key, result.get("Target"))
    return entries


def parse_vulnerabilities(data: Optional[Dict[str, Any]]) -> List[Finding]:
    findings: List[Finding] = []
    for result in iter_results(data):
        vulns = result_entries(result, "Vulnerabilities")
        logger.debug("Result %s (%s): %d vulnerabilities", result.get("Target"), result.get("Type"), len(vulns))
        for vuln in vulns:
            findings.append(
                Finding(
                    category=Category.VULNERABILITY,
                    severity=normalize_severity(vuln.get("Severity")),
                    payload={
                        "identifier": vuln.get("VulnerabilityID"),
                        "package": vuln.get("PkgName"),
                        "installed_version": vuln.get("InstalledVersion"),
                        "fixed_version": vuln.get("FixedVersion"),
                        "title": vuln.get("Title"),
                        "target": result.get("Target"),
                    },
                )
            )
    return findings


def parse_misconfigurations(data: Optional[Dict[str, Any]]) -> List[Finding]:
    findings: List[Finding] = []
    for result in iter_results(data):
        for item in result_entries(result, "Misconfigurations"):
            cause = item.get("CauseMetadata")
            if not isinstance(cause, dict):
                cause = {}
            findings.append(
                Finding(
                    category=Category.MISCONFIGURATION,
                    severity=normalize_severity(item.get("Severity")),
                    payload={
                        "file": result.get("Target"),
                        "rule_id": item.get("ID") or item.get("AVDID"),
                        "title": item.get("Title"),
                        "description": item.get("Description") or item.get("Message"),
                        "line": cause.get("StartLine"),
                    },
                )
            )
    return findings
