"""이 파일은 .py 오케스트레이터 서비스 모듈로 설치부터 실패 판정까지의 실행 흐름을 제공합니다."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, List, Optional

from secgate.adapters.github import GitHubClient, pull_request_number, write_outputs
from secgate.adapters.http import HttpClient
from secgate.core.errors import AdapterError
from secgate.core.inputs import ActionInputs
from secgate.scanners.base import ScannerAdapter

from .aggregator import AggregateResult
from .fail_policy import FailPolicy, Verdict, evaluate_fail_policy
from .reporting import build_outputs, build_pr_comment, display_results
from .scan_executor import ScanExecutor
from .upload import UploadOutcome, upload_report

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    aggregate: AggregateResult
    verdict: Verdict
    upload: UploadOutcome
    comment_posted: bool = False

    @property
    def failed(self) -> bool:
        return self.verdict.failed


class Orchestrator:
    """스캐너 목록을 받아 한 번의 CI 실행을 순서대로 진행합니다.

    단계: 설치 → 스캔(집계 포함) → 콘솔 출력 → Action 출력 → 업로드 → PR 코멘트 → 산출물 정리 → 실패 판정.
    각 단계는 이전 단계가 끝난 뒤에만 시작합니다.
    """

    def __init__(
        self,
        scanners: Iterable[ScannerAdapter],
        inputs: ActionInputs,
        http_client: Optional[HttpClient] = None,
        github_client: Optional[GitHubClient] = None,
    ) -> None:
        self.executor = ScanExecutor(scanners)
        self.inputs = inputs
        self.http_client = http_client
        self.github_client = github_client

    def run(self) -> RunOutcome:
        config = self.inputs.to_scan_config()

        installed = self.executor.install_all()
        aggregate = self.executor.scan_all(installed, config)

        display_results(aggregate)
        self.set_outputs(aggregate)
        upload = upload_report(aggregate, self.inputs, self.http_client)
        comment_posted = self.post_pr_comment(aggregate)
        # SBOM 등 업로드에 쓰인 산출물은 여기서 정리한다.
        self.executor.cleanup_all()

        verdict = evaluate_fail_policy(FailPolicy.from_inputs(self.inputs), aggregate)
        self.log_verdict(verdict, aggregate)
        return RunOutcome(aggregate=aggregate, verdict=verdict, upload=upload, comment_posted=comment_posted)

    def set_outputs(self, aggregate: AggregateResult) -> None:
        try:
            write_outputs(build_outputs(aggregate), self.inputs.env)
        except OSError as exc:
            logger.warning("Failed to write action outputs: %s", exc)

    def post_pr_comment(self, aggregate: AggregateResult) -> bool:
        token = self.inputs.get("github-token")
        number = pull_request_number(self.inputs.env)
        repository = self.inputs.env.get("GITHUB_REPOSITORY")
        if not token or number is None or not repository:
            return False

        client = self.github_client or GitHubClient(token)
        try:
            client.create_issue_comment(repository, number, build_pr_comment(aggregate))
        except AdapterError as exc:
            logger.warning("Failed to post PR comment: %s", exc)
            return False
        logger.info("Posted scan results to PR #%d", number)
        return True

    @staticmethod
    def log_verdict(verdict: Verdict, aggregate: AggregateResult) -> None:
        if verdict.failed:
            for reason in verdict.reasons:
                logger.error("Security scan found %s", reason)
            return
        if verdict.suppressed_by and aggregate.total_findings > 0:
            logger.warning(
                "Security scan found %d issues (%d Critical, %d High). Build proceeding because %s disables failure.",
                aggregate.total_findings,
                aggregate.critical,
                aggregate.high,
                verdict.suppressed_by,
            )
            return
        logger.info("Security scan completed successfully")


def failure_message(reasons: List[str]) -> str:
    return "Security scan failed: " + "; ".join(reasons)
