"""이 파일은 .py 택소노미 모듈로 심각도 정규화와 집계를 담당합니다."""

from typing import Iterable, List, Optional

from .types import Finding, Severity, SeverityCounts

NAMED_SEVERITIES = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)
_KNOWN = {item.value: item for item in Severity}


def normalize_severity(raw: Optional[str]) -> Severity:
    # None/공백을 처리하고 대문자 표준화한 뒤 알 수 없는 값은 UNKNOWN으로 둔다.
    if not raw or not isinstance(raw, str):
        return Severity.UNKNOWN
    return _KNOWN.get(raw.strip().upper(), Severity.UNKNOWN)


def count_severities(findings: Iterable[Finding]) -> SeverityCounts:
    # 심각도가 있는 Finding만 버킷별로 센다.
    counts = {item: 0 for item in Severity}
    for finding in findings:
        if finding.severity is None:
            continue
        counts[finding.severity] += 1
    return SeverityCounts(
        critical=counts[Severity.CRITICAL],
        high=counts[Severity.HIGH],
        medium=counts[Severity.MEDIUM],
        low=counts[Severity.LOW],
        unknown=counts[Severity.UNKNOWN],
    )


def parse_severity_list(value: Optional[str]) -> List[Severity]:
    # "HIGH,CRITICAL" 같은 입력을 중복 없이 순서대로 분해한다.
    parsed: List[Severity] = []
    for part in (value or "").split(","):
        normalized = part.strip().upper()
        if not normalized:
            continue
        severity = _KNOWN.get(normalized)
        if severity is None:
            raise ValueError(f"Unknown severity: {part.strip()}")
        if severity not in parsed:
            parsed.append(severity)
    return parsed
