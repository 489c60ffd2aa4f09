"""이 파일은 .py HTTP 어댑터로 재시도가 포함된 multipart 업로드를 제공합니다."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
import logging
from pathlib import Path
import time
from typing import Callable, Dict, Mapping, Optional

import requests

from secgate.core.config import (
    UPLOAD_BASE_DELAY_SECONDS,
    UPLOAD_MAX_ATTEMPTS,
    UPLOAD_TIMEOUT_SECONDS,
)
from secgate.core.errors import UploadError

logger = logging.getLogger(__name__)

# 타임아웃, 연결 중단/리셋, DNS 실패만 재시도 대상이다.
RETRYABLE_ERRORS = (requests.Timeout, requests.ConnectionError)


@dataclass
class HttpResult:
    status: int
    body: str
    headers: Dict[str, str]
    attempts: int = 1


class HttpClient:
    def __init__(
        self,
        timeout: float = UPLOAD_TIMEOUT_SECONDS,
        max_attempts: int = UPLOAD_MAX_ATTEMPTS,
        base_delay: float = UPLOAD_BASE_DELAY_SECONDS,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self.session = session or requests.Session()
        self._sleep = sleep

    def post_multipart(
        self,
        url: str,
        fields: Mapping[str, str],
        files: Optional[Mapping[str, Path]] = None,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> HttpResult:
        attempt = 0
        while True:
            attempt += 1
            try:
                response = self._post_once(url, fields, files or {}, headers or {}, params)
            except RETRYABLE_ERRORS as exc:
                if attempt >= self.max_attempts:
                    raise UploadError(f"Upload failed after {attempt} attempts: {exc}") from exc
                # 지연 시간은 base_delay × 시도 횟수로 선형 증가한다.
                delay = self.base_delay * attempt
                logger.warning(
                    "Upload attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    self.max_attempts,
                    exc.__class__.__name__,
                    delay,
                )
                self._sleep(delay)
                continue
            except requests.RequestException as exc:
                raise UploadError(f"Upload request failed: {exc}") from exc

            if response.status_code >= 400:
                # 애플리케이션 오류 응답은 재시도하지 않는다.
                raise UploadError(f"Upload rejected with HTTP {response.status_code}: {response.text[:500]}")
            return HttpResult(response.status_code, response.text, dict(response.headers), attempt)

    def _post_once(
        self,
        url: str,
        fields: Mapping[str, str],
        files: Mapping[str, Path],
        headers: Mapping[str, str],
        params: Optional[Mapping[str, str]],
    ) -> requests.Response:
        # 재시도마다 파일 핸들을 새로 열어야 본문이 처음부터 전송된다.
        with ExitStack() as stack:
            opened = {
                name: (path.name, stack.enter_context(path.open("rb")), "application/json")
                for name, path in files.items()
            }
            return self.session.post(
                url,
                data=dict(fields),
                files=opened or None,
                headers=dict(headers),
                params=dict(params) if params else None,
                timeout=self.timeout,
            )
