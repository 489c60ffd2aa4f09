"""이 파일은 .py 리포팅 모듈로 콘솔 요약, Action 출력, PR 코멘트와 업로드 페이로드를 생성합니다."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from secgate.core.schemas import CombinedScanRequest, ConfigScanResponse, SecretRecord
from secgate.core.taxonomy import NAMED_SEVERITIES
from secgate.core.types import Category, Finding, ScanResult

from .aggregator import AggregateResult

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 50
SEVERITY_ICONS = {
    "CRITICAL": "🔴",
    "HIGH": "🟠",
    "MEDIUM": "🟡",
    "LOW": "🟢",
}


def _cell(value: Any, width: int) -> str:
    text = "N/A" if value in (None, "") else str(value)
    # 칸 너비보다 긴 값은 잘라서 표 모양을 유지한다.
    return text[: width - 3].ljust(width - 2)


def render_table(headers: Sequence[str], widths: Sequence[int], rows: List[Sequence[Any]]) -> List[str]:
    top = "┌" + "┬".join("─" * width for width in widths) + "┐"
    middle = "├" + "┼".join("─" * width for width in widths) + "┤"
    bottom = "└" + "┴".join("─" * width for width in widths) + "┘"

    def line(values: Sequence[Any]) -> str:
        return "│ " + " │ ".join(_cell(value, width) for value, width in zip(values, widths)) + " │"

    lines = [top, line(headers), middle]
    lines.extend(line(row) for row in rows)
    lines.append(bottom)
    return lines


def _by_severity(findings: Sequence[Finding]) -> List[Finding]:
    # 표는 CRITICAL → LOW 순으로 묶어서 보여준다.
    ordered: List[Finding] = []
    for severity in NAMED_SEVERITIES:
        ordered.extend(item for item in findings if item.severity == severity)
    ordered.extend(item for item in findings if item.severity not in NAMED_SEVERITIES)
    return ordered


def _severity_label(finding: Finding) -> str:
    name = finding.severity.value if finding.severity else ""
    return f"{SEVERITY_ICONS.get(name, '')} {name}".strip()


def _severity_lines(result: ScanResult) -> List[str]:
    return [
        f"   🔴 Critical: {result.critical}",
        f"   🟠 High: {result.high}",
        f"   🟡 Medium: {result.medium}",
        f"   🟢 Low: {result.low}",
    ]


def vulnerability_section(result: Optional[ScanResult]) -> List[str]:
    if result is None:
        return ["   ⚠️ No vulnerability scan results found."]
    lines = [f"📦 VULNERABILITY RESULTS ({result.scanner_name})", f"   Total Vulnerabilities: {result.total}"]
    lines.extend(_severity_lines(result))
    rows = [
        (item.get("package"), item.get("identifier"), _severity_label(item), item.get("fixed_version"))
        for item in _by_severity(result.findings)
    ]
    if rows:
        lines.append("")
        lines.append("📋 Vulnerability Details:")
        lines.extend(render_table(("Package", "Vulnerability", "Severity", "Fixed Version"), (35, 22, 14, 18), rows))
    return lines


def misconfiguration_section(result: Optional[ScanResult]) -> List[str]:
    if result is None:
        return ["   ⚠️ No Config scan results found."]
    lines = ["📋 CONFIG SCANNER RESULTS", f"   Total Misconfigurations: {result.total}"]
    lines.extend(_severity_lines(result))
    lines.append(f"   Total Config Files Scanned: {result.files_scanned or 0}")
    rows = [
        (item.get("file"), item.get("title") or item.get("rule_id"), _severity_label(item), item.get("line"))
        for item in _by_severity(result.findings)
    ]
    if rows:
        lines.append("")
        lines.append("📋 Misconfiguration Details:")
        lines.extend(render_table(("File", "Issue", "Severity", "Line"), (30, 35, 14, 10), rows))
    return lines


def secret_section(result: Optional[ScanResult]) -> List[str]:
    if result is None:
        return ["   ⚠️ No Secret scan results found."]
    lines = ["🔐 SECRET SCANNER RESULTS", f"   Total Secrets Detected: {result.total}"]
    rows = [
        (item.get("file"), item.get("rule_id"), item.get("start_line"), item.get("matched_text"))
        for item in result.findings
    ]
    if rows:
        lines.append("")
        lines.append("📋 Secret Details:")
        lines.extend(render_table(("File", "Secret Type", "Line", "Matched"), (35, 25, 10, 25), rows))
    return lines


def render_console_report(aggregate: AggregateResult) -> List[str]:
    # 결과가 없는 분류도 안내 문구로 섹션을 항상 출력한다.
    lines = [SEPARATOR, "CONSOLIDATED SECURITY REPORT", SEPARATOR]
    lines.extend(vulnerability_section(aggregate.find_by_category(Category.VULNERABILITY)))
    lines.append(SEPARATOR)
    lines.extend(misconfiguration_section(aggregate.find_by_category(Category.MISCONFIGURATION)))
    lines.append(SEPARATOR)
    lines.extend(secret_section(aggregate.find_by_category(Category.SECRET)))
    lines.append(SEPARATOR)
    return lines


def display_results(aggregate: AggregateResult) -> None:
    for line in render_console_report(aggregate):
        logger.info(line)


def build_outputs(aggregate: AggregateResult) -> Dict[str, Any]:
    return {
        "vulnerabilities-found": aggregate.total_findings,
        "critical-count": aggregate.critical,
        "high-count": aggregate.high,
        "scan-result": (
            f"Found {aggregate.total_findings} vulnerabilities: "
            f"{aggregate.critical} Critical, {aggregate.high} High, "
            f"{aggregate.medium} Medium, {aggregate.low} Low"
        ),
    }


def build_pr_comment(aggregate: AggregateResult) -> str:
    alarming = aggregate.critical > 0 or aggregate.high > 0
    status = "🔴 VULNERABILITIES DETECTED" if alarming else "✅ NO CRITICAL ISSUES"
    icon = "⚠️" if alarming else "✅"

    lines = [
        f"## {icon} Security Scan Report",
        "",
        f"**Status:** {status}",
        "",
        "### Consolidated Summary",
        "| Severity | Count |",
        "|----------|-------|",
        f"| 🔴 Critical | {aggregate.critical} |",
        f"| 🟠 High | {aggregate.high} |",
        f"| 🟡 Medium | {aggregate.medium} |",
        f"| 🟢 Low | {aggregate.low} |",
        f"| **Total** | **{aggregate.total_findings}** |",
    ]
    if len(aggregate.per_scanner) > 1:
        lines.extend(["", "### Scanner Breakdown", ""])
        for result in aggregate.per_scanner:
            lines.append(f"**{result.scanner_name}**: {result.total} issues ({result.critical} Critical, {result.high} High)")
    lines.append("")
    if aggregate.total_findings > 0:
        lines.append("⚠️ Please review and address the security issues found.")
    else:
        lines.append("✨ No security issues detected!")
    lines.extend(["", "---", "*Powered by secgate*"])
    return "\n".join(lines)


def build_upload_request(aggregate: AggregateResult) -> CombinedScanRequest:
    # config 결과는 도구 고유 형태(Results)를 그대로 싣는다.
    config_result = aggregate.find_by_category(Category.MISCONFIGURATION)
    config_response = ConfigScanResponse()
    if config_result is not None:
        config_response = ConfigScanResponse.model_validate(
            {
                "ArtifactName": config_result.metadata.get("artifact_name", ""),
                "ArtifactType": config_result.metadata.get("artifact_type", ""),
                "Results": list(config_result.raw_results),
            }
        )

    secret_result = aggregate.find_by_category(Category.SECRET)
    secrets = [SecretRecord.model_validate(record) for record in secret_result.raw_results] if secret_result else []
    return CombinedScanRequest(config_scan_response=config_response, secret_response=secrets)
