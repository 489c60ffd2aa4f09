"""이 파일은 .py 서비스 패키지 초기화 모듈로 핵심 서비스를 노출합니다."""

from .aggregator import AggregateResult, Aggregator
from .fail_policy import FailPolicy, Verdict, evaluate_fail_policy
from .orchestrator import Orchestrator, RunOutcome
from .scan_executor import ScanExecutor
from .upload import UploadOutcome, upload_report

__all__ = [
    "AggregateResult",
    "Aggregator",
    "FailPolicy",
    "Orchestrator",
    "RunOutcome",
    "ScanExecutor",
    "UploadOutcome",
    "Verdict",
    "evaluate_fail_policy",
    "upload_report",
]
