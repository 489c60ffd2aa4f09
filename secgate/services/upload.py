"""이 파일은 .py 업로드 모듈로 통합 스캔 결과를 원격 API에 전송합니다."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, Mapping, Optional

from secgate.adapters.http import HttpClient
from secgate.core.errors import UploadError
from secgate.core.inputs import ActionInputs
from secgate.core.schemas import UploadContext
from secgate.core.types import Category

from .aggregator import AggregateResult
from .reporting import build_upload_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadOutcome:
    attempted: bool
    success: bool = False
    status: Optional[int] = None
    message: str = ""


def build_upload_context(env: Mapping[str, str], project_id: str = "") -> UploadContext:
    repository = env.get("GITHUB_REPOSITORY", "")
    return UploadContext(
        display_name=repository.split("/")[-1] if repository else "",
        branch_name=env.get("GITHUB_REF_NAME", ""),
        repo_name=repository,
        job_id=env.get("GITHUB_RUN_ID", ""),
        project_id=project_id or None,
    )


def build_headers(inputs: ActionInputs) -> Dict[str, str]:
    return {
        "x-api-key": inputs.api_key,
        "x-secret-key": inputs.secret_key,
        "x-tenant-key": inputs.tenant_key,
    }


def upload_report(
    aggregate: AggregateResult,
    inputs: ActionInputs,
    client: Optional[HttpClient] = None,
) -> UploadOutcome:
    """SBOM 파일과 통합 결과를 multipart로 업로드합니다.

    엔드포인트나 인증 키가 없으면 시도하지 않습니다. 재시도 소진이나 HTTP 오류는
    경고로 남기고 실패 결과를 반환하며, 실행 자체는 계속됩니다.
    """
    endpoint = inputs.get("api_endpoint")
    if not endpoint:
        logger.info("api_endpoint not set, skipping upload")
        return UploadOutcome(attempted=False, message="no endpoint")
    if not (inputs.api_key and inputs.secret_key):
        logger.warning("Upload credentials are missing, skipping upload")
        return UploadOutcome(attempted=False, message="missing credentials")

    vulnerability = aggregate.find_by_category(Category.VULNERABILITY)
    sbom_path = vulnerability.artifact_path if vulnerability else None
    files = {}
    if sbom_path is not None and sbom_path.exists():
        files["sbomFile"] = sbom_path
    else:
        logger.warning("No SBOM artifact available, uploading without sbomFile")

    context = build_upload_context(inputs.env, inputs.project_id)
    fields = dict(context.form_fields())
    fields["combinedScanRequest"] = build_upload_request(aggregate).to_json()
    params = {"projectId": context.project_id} if context.project_id else None

    client = client or HttpClient()
    logger.info("Uploading scan results to %s", endpoint)
    try:
        response = client.post_multipart(endpoint, fields, files=files, headers=build_headers(inputs), params=params)
    except UploadError as exc:
        logger.warning("Failed to upload scan results: %s", exc)
        return UploadOutcome(attempted=True, success=False, message=str(exc))

    logger.info("Upload completed with HTTP %d after %d attempt(s)", response.status, response.attempts)
    return UploadOutcome(attempted=True, success=True, status=response.status, message=response.body[:500])
