"""이 파일은 .py 업로드 스키마 모듈로 원격 API 요청 모델을 정의합니다."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _ApiModel(BaseModel):
    # 내부에서는 snake_case, 전송 시에는 API 키 이름(alias)을 사용한다.
    model_config = ConfigDict(populate_by_name=True)


class MisconfigurationRecord(_ApiModel):
    id: str = Field("", alias="ID")
    title: str = Field("", alias="Title")
    description: str = Field("", alias="Description")
    severity: str = Field("", alias="Severity")
    primary_url: str = Field("", alias="PrimaryURL")
    query: str = Field("", alias="Query")

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        # 도구가 null을 넣은 필드는 빈 문자열로 보낸다.
        return "" if value is None else value


class ConfigResultRecord(_ApiModel):
    target: str = Field("", alias="Target")
    result_class: str = Field("", alias="Class")
    result_type: str = Field("", alias="Type")
    misconfigurations: List[MisconfigurationRecord] = Field(default_factory=list, alias="Misconfigurations")

    @field_validator("misconfigurations", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return value or []


class ConfigScanResponse(_ApiModel):
    artifact_name: str = Field("", alias="ArtifactName")
    artifact_type: str = Field("", alias="ArtifactType")
    results: List[ConfigResultRecord] = Field(default_factory=list, alias="Results")


class SecretRecord(_ApiModel):
    rule_id: str = Field("", alias="RuleID")
    description: str = Field("", alias="Description")
    file: str = Field("", alias="File")
    match: str = Field("", alias="Match")
    secret: str = Field("", alias="Secret")
    # 라인/컬럼 값은 API 규약상 문자열로 전송한다.
    start_line: str = Field("", alias="StartLine")
    end_line: str = Field("", alias="EndLine")
    start_column: str = Field("", alias="StartColumn")
    end_column: str = Field("", alias="EndColumn")


class CombinedScanRequest(_ApiModel):
    config_scan_response: ConfigScanResponse = Field(
        default_factory=ConfigScanResponse, alias="configScanResponseDto"
    )
    secret_response: List[SecretRecord] = Field(default_factory=list, alias="scannerSecretResponse")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class UploadContext(_ApiModel):
    # CI 컨텍스트에서 채우는 multipart 문자열 필드이다.
    display_name: str = Field("", alias="displayName")
    branch_name: str = Field("", alias="branchName")
    repo_name: str = Field("", alias="repoName")
    source: str = "github"
    job_id: str = Field("", alias="jobId")
    project_id: Optional[str] = None

    def form_fields(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"project_id"})
