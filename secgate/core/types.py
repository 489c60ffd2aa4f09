"""이 파일은 .py 타입 정의 모듈로 스캔 설정과 결과 모델을 제공합니다."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


class Severity(str, Enum):
    # 모든 Finding의 심각도는 정규화 후 이 다섯 값 중 하나가 된다.
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"


class Category(str, Enum):
    # 스캐너 결과의 분류로, 어댑터가 결과를 만들 때 직접 지정한다.
    VULNERABILITY = "VULNERABILITY"
    MISCONFIGURATION = "MISCONFIGURATION"
    SECRET = "SECRET"


@dataclass(frozen=True)
class SeverityCounts:
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    # 네 가지 명명된 버킷에 속하지 않는 심각도는 unknown으로 집계한다.
    unknown: int = 0

    def __add__(self, other: "SeverityCounts") -> "SeverityCounts":
        return SeverityCounts(
            critical=self.critical + other.critical,
            high=self.high + other.high,
            medium=self.medium + other.medium,
            low=self.low + other.low,
            unknown=self.unknown + other.unknown,
        )

    @property
    def named_total(self) -> int:
        return self.critical + self.high + self.medium + self.low

    def as_dict(self) -> Dict[str, int]:
        return {
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "unknown": self.unknown,
        }


@dataclass(frozen=True)
class Finding:
    # 도구별 출력 한 건을 공통 구조로 표준화한 값이다.
    category: Category
    # 시크릿 분류는 심각도 축이 없으므로 None이다.
    severity: Optional[Severity]
    # payload는 분류별 필드(package, rule_id, start_line 등)를 담는다.
    payload: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


@dataclass(frozen=True)
class ScanResult:
    """어댑터 한 번의 실행 결과로, 반환된 뒤에는 변경되지 않습니다."""

    scanner_name: str
    category: Category
    total: int = 0
    by_severity: SeverityCounts = field(default_factory=SeverityCounts)
    # 도구의 원래 순서(필터/중복 제거 후)를 유지한다.
    findings: Tuple[Finding, ...] = ()
    # 업로드 단계가 사용하는 산출물(SBOM 등) 경로이다.
    artifact_path: Optional[Path] = None
    # config 스캐너만 채우며, 검사한 파일 수를 total과 분리해 기록한다.
    files_scanned: Optional[int] = None
    # 업로드 페이로드에 필요한 도구 고유 형태의 레코드이다.
    raw_results: Tuple[Dict[str, Any], ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls, scanner_name: str, category: Category, **kwargs: Any) -> "ScanResult":
        return cls(scanner_name=scanner_name, category=category, **kwargs)

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


@dataclass
class ScanConfig:
    # 오케스트레이터가 모든 어댑터에 전달하는 공통 실행 설정이다.
    scan_target: str = "."
    severity: str = "HIGH,CRITICAL"
    workspace_dir: Path = field(default_factory=Path.cwd)
    scan_type: str = "fs"
    ignore_unfixed: bool = False
    # node_modules 삭제는 명시적으로 켠 경우에만 수행한다.
    clean_node_modules: bool = False
    secret_rules_path: Optional[Path] = None
    debug: bool = False

    def resolved_target(self) -> Path:
        # 상대 경로는 워크스페이스 기준으로 해석한다.
        target = Path(self.scan_target)
        if target.is_absolute():
            return target
        return (Path(self.workspace_dir) / target).resolve()

    def severity_filter(self) -> str:
        # 도구는 대문자 심각도 목록을 기대한다.
        return self.severity.upper()
