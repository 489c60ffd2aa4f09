"""이 파일은 .py 테스트 모듈로 결과 집계와 분류 조회를 검증합니다."""

from secgate.core.types import Category, ScanResult, SeverityCounts
from secgate.services.aggregator import Aggregator


def _result(name: str, category: Category, total: int, **counts) -> ScanResult:
    return ScanResult(scanner_name=name, category=category, total=total, by_severity=SeverityCounts(**counts))


def test_aggregate_is_additive() -> None:
    aggregator = Aggregator()
    aggregator.aggregate(_result("CDXgen SBOM Generator", Category.VULNERABILITY, 3, critical=1, high=2))
    aggregator.aggregate(_result("Secret Detector (Gitleaks)", Category.SECRET, 4))
    aggregate = aggregator.aggregate(_result("Trivy config Scanner", Category.MISCONFIGURATION, 2, high=1, low=1))

    assert aggregate.total_findings == 9
    assert (aggregate.critical, aggregate.high, aggregate.medium, aggregate.low) == (1, 3, 0, 1)
    assert [item.scanner_name for item in aggregate.per_scanner] == [
        "CDXgen SBOM Generator",
        "Secret Detector (Gitleaks)",
        "Trivy config Scanner",
    ]


def test_find_by_category_returns_first_in_registration_order() -> None:
    aggregator = Aggregator()
    aggregator.aggregate(_result("CDXgen SBOM Generator", Category.VULNERABILITY, 1))
    aggregator.aggregate(_result("Trivy Vulnerability Scanner", Category.VULNERABILITY, 5))
    aggregate = aggregator.result

    assert aggregate.find_by_category(Category.VULNERABILITY).scanner_name == "CDXgen SBOM Generator"
    assert aggregate.find_by_category(Category.SECRET) is None


def test_find_by_category_string_matches_name_substring() -> None:
    aggregator = Aggregator()
    aggregator.aggregate(_result("Trivy config Scanner", Category.MISCONFIGURATION, 1))
    aggregator.aggregate(_result("Secret Detector (Gitleaks)", Category.SECRET, 1))
    aggregate = aggregator.result

    assert aggregate.find_by_category("CONFIG").scanner_name == "Trivy config Scanner"
    assert aggregate.find_by_category("secret").category == Category.SECRET
    assert aggregate.find_by_category("sbom") is None
