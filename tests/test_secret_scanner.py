"""이 파일은 .py 테스트 모듈로 Gitleaks 시크릿 스캐너의 필터와 중복 제거를 검증합니다."""

import json
from pathlib import Path

from conftest import FakeRunner

from secgate.core.config import DEFAULT_SECRET_RULES_FILE
from secgate.core.errors import ScanPreconditionError, ToolOutputError
from secgate.core.types import Category, ScanConfig
from secgate.scanners.secret import SecretScanner, deduplicate_secrets, skip_reason


def _item(file="src/settings.py", line=3, secret="hunter22", rule="strict-secret-detection-quoted", match=None):
    return {
        "RuleID": rule,
        "Description": "Detect likely passwords",
        "File": file,
        "Match": match or f'password = "{secret}"',
        "Secret": secret,
        "StartLine": line,
        "EndLine": line,
        "StartColumn": 5,
        "EndColumn": 24,
    }


def _config(target: Path, rules: Path, **kwargs) -> ScanConfig:
    return ScanConfig(scan_target=str(target), workspace_dir=target.parent, secret_rules_path=rules, **kwargs)


def _rules(tmp_path: Path) -> Path:
    rules = tmp_path / "rules.toml"
    rules.write_text('[[rules]]\nid = "x"\nregex = "x"\n', encoding="utf-8")
    return rules


def test_default_rules_file_is_packaged() -> None:
    assert DEFAULT_SECRET_RULES_FILE.is_file()
    assert "[[rules]]" in DEFAULT_SECRET_RULES_FILE.read_text(encoding="utf-8")


def test_scan_filters_dedups_and_builds_upload_records(runner: FakeRunner, tmp_path: Path, target_dir: Path) -> None:
    report = [
        _item(),
        # 같은 위치/값을 다른 규칙이 다시 잡은 경우
        _item(rule="strict-secret-detection-unquoted"),
        _item(line=9, secret="other-secret"),
        _item(file="package.json"),
        _item(file="web/node_modules/pkg/index.js"),
        _item(file="dist/bundle.js"),
        _item(match='token: "${API_TOKEN}"'),
    ]
    runner.when("gitleaks", "dir", write=json.dumps(report), output_flag="--report-path")

    result = SecretScanner(runner=runner).scan(_config(target_dir, _rules(tmp_path), debug=True))

    assert result.category == Category.SECRET
    assert result.total == 2
    assert result.by_severity.as_dict() == {"critical": 0, "high": 0, "medium": 0, "low": 0, "unknown": 0}
    assert all(finding.severity is None for finding in result.findings)
    assert result.findings[0].get("rule_id") == "strict-secret-detection-quoted"
    assert result.findings[0].get("file") == "src/settings.py"

    record = result.raw_results[0]
    assert record["File"] == "//////src/settings.py"
    assert record["StartLine"] == "3"
    assert record["EndColumn"] == "24"
    assert "duration" in result.metadata

    command = runner.calls_for("gitleaks", "dir")[0]
    assert command[2] == str(target_dir)
    assert "--no-banner" in command
    assert "--verbose" in command
    assert runner.calls_for("git", "config")


def test_empty_report_means_no_secrets(runner: FakeRunner, tmp_path: Path, target_dir: Path) -> None:
    runner.when("gitleaks", "dir", write="[]", output_flag="--report-path")
    result = SecretScanner(runner=runner).scan(_config(target_dir, _rules(tmp_path)))
    assert result.total == 0
    assert "--verbose" not in runner.calls_for("gitleaks", "dir")[0]


def test_invalid_report_raises(runner: FakeRunner, tmp_path: Path, target_dir: Path) -> None:
    runner.when("gitleaks", "dir", write="<html>", output_flag="--report-path")
    try:
        SecretScanner(runner=runner).scan(_config(target_dir, _rules(tmp_path)))
    except ToolOutputError as exc:
        assert "Invalid JSON" in str(exc)
    else:
        raise AssertionError("ToolOutputError not raised")


def test_missing_report_raises(runner: FakeRunner, tmp_path: Path, target_dir: Path) -> None:
    try:
        SecretScanner(runner=runner).scan(_config(target_dir, _rules(tmp_path)))
    except ToolOutputError:
        pass
    else:
        raise AssertionError("ToolOutputError not raised")


def test_missing_rules_file_raises(runner: FakeRunner, tmp_path: Path, target_dir: Path) -> None:
    try:
        SecretScanner(runner=runner).scan(_config(target_dir, tmp_path / "absent.toml"))
    except ScanPreconditionError as exc:
        assert "absent.toml" in str(exc)
    else:
        raise AssertionError("ScanPreconditionError not raised")
    assert runner.calls == []


def test_node_modules_is_kept_unless_enabled(runner: FakeRunner, tmp_path: Path, target_dir: Path) -> None:
    (target_dir / "node_modules").mkdir()
    runner.when("gitleaks", "dir", write="[]", output_flag="--report-path")
    SecretScanner(runner=runner).scan(_config(target_dir, _rules(tmp_path)))
    assert (target_dir / "node_modules").is_dir()

    SecretScanner(runner=runner).scan(_config(target_dir, _rules(tmp_path), clean_node_modules=True))
    assert not (target_dir / "node_modules").exists()


def test_dedup_requires_all_six_fields() -> None:
    base = _item()
    moved = dict(base, EndColumn=30)
    assert deduplicate_secrets([base, dict(base), moved]) == [base, moved]


def test_skip_reason() -> None:
    assert skip_reason(_item(file="a/README.md")) == "in skip files list"
    assert skip_reason(_item(file=".github/workflows/ci.yml")) == "excluded directory"
    assert skip_reason(_item(match="key=$SECRET_KEY")) == "env variable pattern"
    assert skip_reason(_item()) is None
