"""이 파일은 .py 테스트 모듈로 실행 단계 순서와 스캐너 실패 격리를 검증합니다."""

import json
from pathlib import Path
from typing import List, Optional

from conftest import FakeInstaller

from secgate.core.errors import AdapterError, ScanPreconditionError, ToolInstallError
from secgate.core.inputs import ActionInputs
from secgate.core.types import Category, ScanConfig, ScanResult, SeverityCounts
from secgate.scanners.base import ScannerAdapter
from secgate.services.orchestrator import Orchestrator


class StubScanner(ScannerAdapter):
    def __init__(self, name: str, category: Category, result: Optional[ScanResult] = None, error=None, install_error=None):
        super().__init__(installer=FakeInstaller(f"/opt/{name}", error=install_error))
        self.name = name
        self.category = category
        self.result = result
        self.error = error
        self.scanned: List[ScanConfig] = []
        self.cleaned = 0

    def scan(self, config: ScanConfig) -> ScanResult:
        self.scanned.append(config)
        if self.error is not None:
            raise self.error
        return self.result

    def cleanup(self) -> None:
        self.cleaned += 1


class FakeGitHub:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.comments: List[tuple] = []

    def create_issue_comment(self, repository: str, issue_number: int, body: str) -> dict:
        if self.error is not None:
            raise self.error
        self.comments.append((repository, issue_number, body))
        return {}


def _inputs(tmp_path: Path, values: Optional[dict] = None, **env: str) -> ActionInputs:
    return ActionInputs(values=values or {}, workspace_dir=tmp_path, env=env)


def _vuln(total: int = 2) -> ScanResult:
    return ScanResult("Vuln", Category.VULNERABILITY, total=total, by_severity=SeverityCounts(high=total))


def test_failing_scanners_are_excluded(tmp_path: Path) -> None:
    broken_install = StubScanner("Broken", Category.SECRET, install_error=ToolInstallError("no binary"))
    broken_scan = StubScanner("Config", Category.MISCONFIGURATION, error=ScanPreconditionError("missing"))
    working = StubScanner("Vuln", Category.VULNERABILITY, result=_vuln())

    outcome = Orchestrator([broken_install, working, broken_scan], _inputs(tmp_path)).run()

    assert broken_install.scanned == []
    assert len(broken_scan.scanned) == 1
    assert [item.scanner_name for item in outcome.aggregate.per_scanner] == ["Vuln"]
    assert outcome.failed is True
    assert outcome.verdict.reasons == ["2 vulnerabilities (0 Critical, 2 High)"]
    assert outcome.upload.attempted is False


def test_outputs_are_written_and_override_passes(tmp_path: Path) -> None:
    output_file = tmp_path / "github_output"
    scanner = StubScanner("Vuln", Category.VULNERABILITY, result=_vuln(3))
    inputs = _inputs(tmp_path, {"fail_on_vulneribility": "false"}, GITHUB_OUTPUT=str(output_file))

    outcome = Orchestrator([scanner], inputs).run()

    assert outcome.failed is False
    lines = output_file.read_text(encoding="utf-8").splitlines()
    assert "vulnerabilities-found=3" in lines
    assert "high-count=3" in lines


def test_pr_comment_posted_on_pull_request(tmp_path: Path) -> None:
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"pull_request": {"number": 12}}), encoding="utf-8")
    inputs = _inputs(
        tmp_path,
        {"github-token": "t0ken"},
        GITHUB_EVENT_NAME="pull_request",
        GITHUB_EVENT_PATH=str(event),
        GITHUB_REPOSITORY="acme/shop",
    )
    github = FakeGitHub()

    outcome = Orchestrator([StubScanner("Vuln", Category.VULNERABILITY, result=_vuln(0))], inputs, github_client=github).run()

    assert outcome.comment_posted is True
    repository, number, body = github.comments[0]
    assert (repository, number) == ("acme/shop", 12)
    assert "NO CRITICAL ISSUES" in body
    assert outcome.failed is False


def test_pr_comment_failure_is_a_warning(tmp_path: Path) -> None:
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"number": 5}), encoding="utf-8")
    inputs = _inputs(
        tmp_path,
        {"github-token": "t0ken"},
        GITHUB_EVENT_NAME="pull_request",
        GITHUB_EVENT_PATH=str(event),
        GITHUB_REPOSITORY="acme/shop",
    )
    github = FakeGitHub(error=AdapterError("forbidden"))

    outcome = Orchestrator([StubScanner("Vuln", Category.VULNERABILITY, result=_vuln(0))], inputs, github_client=github).run()

    assert outcome.comment_posted is False


def test_no_comment_outside_pull_requests(tmp_path: Path) -> None:
    github = FakeGitHub()
    inputs = _inputs(tmp_path, {"github-token": "t0ken"}, GITHUB_EVENT_NAME="push")
    outcome = Orchestrator([StubScanner("Vuln", Category.VULNERABILITY, result=_vuln(0))], inputs, github_client=github).run()
    assert outcome.comment_posted is False
    assert github.comments == []


def test_fallback_result_is_attributed_to_registered_scanner(tmp_path: Path) -> None:
    produced = ScanResult("Trivy Vulnerability Scanner", Category.VULNERABILITY, total=1, by_severity=SeverityCounts(low=1))
    sbom = StubScanner("CDXgen SBOM Generator", Category.VULNERABILITY, result=produced)

    outcome = Orchestrator([sbom], _inputs(tmp_path)).run()

    result = outcome.aggregate.find_by_category("sbom")
    assert result is not None
    assert result.total == 1
    assert result.metadata["produced_by"] == "Trivy Vulnerability Scanner"
    assert outcome.aggregate.find_by_category(Category.VULNERABILITY) is result


def test_matching_scanner_name_is_left_untouched(tmp_path: Path) -> None:
    scanner = StubScanner("Vuln", Category.VULNERABILITY, result=_vuln(1))
    outcome = Orchestrator([scanner], _inputs(tmp_path)).run()
    assert outcome.aggregate.per_scanner[0] is scanner.result
    assert "produced_by" not in scanner.result.metadata


def test_every_registered_scanner_is_cleaned_up(tmp_path: Path) -> None:
    broken = StubScanner("Broken", Category.SECRET, install_error=ToolInstallError("no binary"))
    working = StubScanner("Vuln", Category.VULNERABILITY, result=_vuln(0))

    Orchestrator([broken, working], _inputs(tmp_path)).run()

    assert (broken.cleaned, working.cleaned) == (1, 1)
