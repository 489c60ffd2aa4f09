"""이 파일은 .py 어댑터 패키지 초기화 모듈로 공통 어댑터를 노출합니다."""

from .github import GitHubClient
from .http import HttpClient, HttpResult
from .installer import NpmToolInstaller, ToolInstaller
from .runner import ToolResult, ToolRunner

__all__ = [
    "GitHubClient",
    "HttpClient",
    "HttpResult",
    "NpmToolInstaller",
    "ToolInstaller",
    "ToolResult",
    "ToolRunner",
]
