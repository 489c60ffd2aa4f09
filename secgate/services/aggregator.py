"""이 파일은 .py 집계 모듈로 스캐너별 결과를 하나의 합계로 누적합니다."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional, Union

from secgate.core.types import Category, ScanResult, SeverityCounts

logger = logging.getLogger(__name__)


@dataclass
class AggregateResult:
    """실행 한 번 동안만 유지되는 누적 결과입니다.

    ``total_findings`` 는 분류와 무관하게 모든 스캐너의 ``total`` 을 더한 값이므로
    분류별 수치는 ``find_by_category`` 로 스캐너 결과를 다시 찾아 확인합니다.
    """

    total_findings: int = 0
    by_severity: SeverityCounts = field(default_factory=SeverityCounts)
    # 등록 순서대로 성공한 스캐너 결과만 담는다.
    per_scanner: List[ScanResult] = field(default_factory=list)

    @property
    def critical(self) -> int:
        return self.by_severity.critical

    @property
    def high(self) -> int:
        return self.by_severity.high

    @property
    def medium(self) -> int:
        return self.by_severity.medium

    @property
    def low(self) -> int:
        return self.by_severity.low

    def find_by_category(self, key: Union[Category, str]) -> Optional[ScanResult]:
        # Category는 결과의 분류 필드로, 문자열은 스캐너 이름 부분 일치로 찾는다.
        if isinstance(key, Category):
            for result in self.per_scanner:
                if result.category == key:
                    return result
            return None

        needle = key.lower()
        for result in self.per_scanner:
            if needle in result.scanner_name.lower():
                return result
        return None


class Aggregator:
    def __init__(self) -> None:
        self.result = AggregateResult()

    def aggregate(self, scan_result: ScanResult) -> AggregateResult:
        self.result.total_findings += scan_result.total
        self.result.by_severity = self.result.by_severity + scan_result.by_severity
        self.result.per_scanner.append(scan_result)
        logger.debug(
            "Aggregated %s: total=%d (running total=%d)",
            scan_result.scanner_name,
            scan_result.total,
            self.result.total_findings,
        )
        return self.result
