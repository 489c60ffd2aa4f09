"""이 파일은 .py 실패 정책 모듈로 분류별 토글과 결과 수로 통과/실패를 판정합니다."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from secgate.core.config import DEFAULT_EXIT_CODE
from secgate.core.inputs import ActionInputs
from secgate.core.types import Category, ScanResult

from .aggregator import AggregateResult


@dataclass(frozen=True)
class FailPolicy:
    fail_on_vulnerability: bool = True
    fail_on_misconfiguration: bool = True
    fail_on_secret: bool = True
    # 마스터 오버라이드 원문 값이며 "false"일 때만 의미가 있다.
    master_override: Optional[str] = None
    exit_code: str = DEFAULT_EXIT_CODE

    @classmethod
    def from_inputs(cls, inputs: ActionInputs) -> "FailPolicy":
        # 토글은 "false"(대소문자 무시)가 명시된 경우에만 꺼진다.
        return cls(
            fail_on_vulnerability=not _is_false(inputs.get("fail-on-vulnerability")),
            fail_on_misconfiguration=not _is_false(inputs.get("fail-on-misconfiguration")),
            fail_on_secret=not _is_false(inputs.get("fail-on-secret")),
            master_override=inputs.get("fail_on_vulneribility").lower() or None,
            exit_code=inputs.get("exit-code", DEFAULT_EXIT_CODE),
        )


def _is_false(value: str) -> bool:
    return value.lower() == "false"


@dataclass(frozen=True)
class Verdict:
    failed: bool
    reasons: List[str] = field(default_factory=list)
    # 통과 사유(오버라이드 등)를 기록해 로그에 남긴다.
    suppressed_by: Optional[str] = None


def _category_fails(enabled: bool, result: Optional[ScanResult]) -> bool:
    return enabled and result is not None and result.total > 0


def evaluate_fail_policy(policy: FailPolicy, aggregate: AggregateResult) -> Verdict:
    """집계 결과에 실패 정책을 적용해 판정을 반환합니다. 부수 효과는 없습니다."""
    if policy.master_override == "false":
        return Verdict(failed=False, suppressed_by="fail_on_vulneribility")
    if policy.exit_code == "0":
        return Verdict(failed=False, suppressed_by="exit-code")

    vulnerability = aggregate.find_by_category(Category.VULNERABILITY)
    misconfiguration = aggregate.find_by_category(Category.MISCONFIGURATION)
    secret = aggregate.find_by_category(Category.SECRET)

    reasons: List[str] = []
    if _category_fails(policy.fail_on_vulnerability, vulnerability):
        reasons.append(
            f"{vulnerability.total} vulnerabilities "
            f"({vulnerability.critical} Critical, {vulnerability.high} High)"
        )
    if _category_fails(policy.fail_on_misconfiguration, misconfiguration):
        reasons.append(
            f"{misconfiguration.total} misconfigurations "
            f"({misconfiguration.critical} Critical, {misconfiguration.high} High)"
        )
    if _category_fails(policy.fail_on_secret, secret):
        reasons.append(f"{secret.total} secrets detected")

    return Verdict(failed=bool(reasons), reasons=reasons)
