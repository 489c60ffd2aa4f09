"""이 파일은 .py 테스트 설정 모듈로 경로 초기화와 가짜 도구 실행기를 제공합니다."""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import pytest  # noqa: E402

from secgate.adapters.runner import ToolResult, ToolRunner  # noqa: E402


@dataclass
class _Rule:
    program: str
    subcommand: str
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    # 명령의 output_flag 다음 인자 경로에 이 내용을 기록한다.
    write: Optional[str] = None
    output_flag: str = "--output"
    error: Optional[Exception] = None


class FakeRunner(ToolRunner):
    """(프로그램 이름, 첫 번째 인자)로 응답을 고르는 스크립트형 실행기입니다."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[List[str]] = []
        self._rules: List[_Rule] = []

    def when(self, program: str, subcommand: str, **kwargs) -> "FakeRunner":
        self._rules.append(_Rule(program, subcommand, **kwargs))
        return self

    def calls_for(self, program: str, subcommand: str) -> List[List[str]]:
        return [call for call in self.calls if _matches(call, program, subcommand)]

    def run(self, command: List[str], cwd: Optional[str] = None) -> ToolResult:
        self.calls.append(list(command))
        for rule in self._rules:
            if not _matches(command, rule.program, rule.subcommand):
                continue
            if rule.error is not None:
                raise rule.error
            if rule.write is not None:
                target = Path(command[command.index(rule.output_flag) + 1])
                target.write_text(rule.write, encoding="utf-8")
            return ToolResult(rule.exit_code, rule.stdout, rule.stderr)
        return ToolResult(0, "", "")


def _matches(command: List[str], program: str, subcommand: str) -> bool:
    return len(command) > 1 and Path(command[0]).name == program and command[1] == subcommand


class FakeInstaller:
    def __init__(self, path: str, error: Optional[Exception] = None) -> None:
        self.path = Path(path)
        self.error = error
        self.calls = 0

    def install(self) -> Path:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.path


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    target = tmp_path / "project"
    target.mkdir()
    (target / "app.py").write_text("print('hello')\n", encoding="utf-8")
    return target
