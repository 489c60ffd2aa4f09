"""이 파일은 .py GitHub 어댑터로 PR 코멘트 작성과 Action 출력 기록을 제공합니다."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import requests

from secgate.core.config import GITHUB_API_URL
from secgate.core.errors import AdapterError

logger = logging.getLogger(__name__)


class GitHubClient:
    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_API_URL,
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.token = token
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.api_url.rstrip('/')}{path}"

    def create_issue_comment(self, repository: str, issue_number: int, body: str) -> Dict[str, Any]:
        url = self._url(f"/repos/{repository}/issues/{issue_number}/comments")
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
        }
        try:
            response = self.session.post(url, json={"body": body}, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise AdapterError(f"GitHub API request failed: {exc}") from exc
        if response.status_code >= 400:
            raise AdapterError(f"GitHub API error {response.status_code}: {response.text[:300]}")
        return response.json() if response.text else {}


def pull_request_number(env: Mapping[str, str]) -> Optional[int]:
    # pull_request 이벤트일 때만 이벤트 페이로드에서 PR 번호를 읽는다.
    if env.get("GITHUB_EVENT_NAME") != "pull_request":
        return None
    event_path = env.get("GITHUB_EVENT_PATH")
    if not event_path or not Path(event_path).exists():
        return None
    try:
        event = json.loads(Path(event_path).read_text())
    except json.JSONDecodeError:
        return None
    number = (event.get("pull_request") or {}).get("number") or event.get("number")
    return int(number) if number else None


def write_outputs(outputs: Mapping[str, Any], env: Mapping[str, str]) -> bool:
    # GITHUB_OUTPUT 파일이 없으면(로컬 실행) 기록하지 않는다.
    output_file = env.get("GITHUB_OUTPUT")
    if not output_file:
        logger.debug("GITHUB_OUTPUT not set, skipping outputs")
        return False
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in outputs.items():
            handle.write(f"{key}={value}\n")
    return True
