"""이 파일은 .py 입력 로딩 모듈로 CI 입력값과 YAML 설정 파일을 결합합니다."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .config import (
    DEFAULT_CONFIG_FILE_NAME,
    DEFAULT_EXIT_CODE,
    DEFAULT_SCAN_TYPE,
    DEFAULT_SEVERITY,
)
from .config_validation import apply_input_schema
from .errors import InputConfigError
from .types import ScanConfig

logger = logging.getLogger(__name__)

INPUT_SCHEMA: Dict[str, Any] = {
    "properties": {
        "scan-type": {"type": "string", "default": DEFAULT_SCAN_TYPE, "enum": ["fs", "repo", "rootfs"]},
        "scan-target": {"type": "string", "default": "."},
        "severity": {"type": "severity_list", "default": DEFAULT_SEVERITY},
        "ignore-unfixed": {"type": "boolean", "default": "false"},
        "format": {"type": "string", "default": "table"},
        "exit-code": {"type": "string", "default": DEFAULT_EXIT_CODE, "pattern": r"^\d+$"},
        "fail-on-vulnerability": {"type": "boolean", "default": "true"},
        "fail-on-misconfiguration": {"type": "boolean", "default": "true"},
        "fail-on-secret": {"type": "boolean", "default": "true"},
        # 마스터 오버라이드는 기존 워크플로 호환을 위해 철자를 그대로 유지한다.
        "fail_on_vulneribility": {"type": "boolean"},
        "github-token": {"type": "string"},
        "api_endpoint": {"type": "string", "pattern": r"^https?://"},
        "clean-node-modules": {"type": "boolean", "default": "false"},
        "secret-rules": {"type": "string"},
    },
}


def input_env_name(name: str) -> str:
    # GitHub Actions 규칙: 공백은 _로, 전체는 대문자로 바꾼다.
    return f"INPUT_{name.replace(' ', '_').upper()}"


@dataclass
class ActionInputs:
    values: Dict[str, str]
    workspace_dir: Path
    env: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str, default: str = "") -> str:
        value = self.values.get(name)
        return value if value else default

    def is_true(self, name: str) -> bool:
        return self.get(name).lower() == "true"

    def env_value(self, *names: str) -> str:
        # 여러 이름 중 처음으로 값이 있는 환경 변수를 사용한다.
        for name in names:
            value = self.env.get(name)
            if value:
                return value
        return ""

    @property
    def api_key(self) -> str:
        return self.env_value("NT_API_KEY", "X_API_KEY")

    @property
    def secret_key(self) -> str:
        return self.env_value("NT_SECRET_KEY", "X_SECRET_KEY")

    @property
    def tenant_key(self) -> str:
        return self.env_value("X_TENANT_KEY")

    @property
    def project_id(self) -> str:
        return self.env_value("PROJECT_ID")

    @property
    def debug(self) -> bool:
        return self.env_value("DEBUG_MODE").lower() == "true"

    def to_scan_config(self) -> ScanConfig:
        rules = self.get("secret-rules")
        return ScanConfig(
            scan_target=self.get("scan-target", "."),
            severity=self.get("severity", DEFAULT_SEVERITY),
            workspace_dir=self.workspace_dir,
            scan_type=self.get("scan-type", DEFAULT_SCAN_TYPE),
            ignore_unfixed=self.is_true("ignore-unfixed"),
            clean_node_modules=self.is_true("clean-node-modules"),
            secret_rules_path=Path(rules) if rules else None,
            debug=self.debug,
        )


def load_inputs(
    env: Optional[Mapping[str, str]] = None,
    config_path: Optional[Path] = None,
) -> ActionInputs:
    env = os.environ if env is None else env
    # GITHUB_WORKSPACE가 호출한 저장소의 디렉터리이다.
    workspace_dir = Path(env.get("GITHUB_WORKSPACE") or os.getcwd())
    logger.info("Workspace directory: %s", workspace_dir)

    # 1) YAML 설정 파일(선택)을 기본값 위에 올린다.
    values: Dict[str, Any] = dict(_load_config_file(env, workspace_dir, config_path))
    # 2) CI 입력 환경 변수가 파일 값보다 우선한다.
    for name in INPUT_SCHEMA["properties"]:
        raw = env.get(input_env_name(name))
        if raw is None:
            raw = env.get(input_env_name(name.replace("-", "_")))
        if raw is not None and raw.strip() != "":
            values[name] = raw

    unknown = sorted(set(values) - set(INPUT_SCHEMA["properties"]))
    if unknown:
        logger.warning("Ignoring unknown inputs: %s", ", ".join(unknown))
        for name in unknown:
            values.pop(name)

    # 3) 스키마로 기본값 주입과 형식 검증을 수행한다.
    validated = apply_input_schema(INPUT_SCHEMA, values)
    return ActionInputs(values=validated, workspace_dir=workspace_dir, env=dict(env))


def _load_config_file(
    env: Mapping[str, str],
    workspace_dir: Path,
    config_path: Optional[Path],
) -> Dict[str, Any]:
    path = config_path or (Path(env["SECGATE_CONFIG"]) if env.get("SECGATE_CONFIG") else None)
    explicit = path is not None
    if path is None:
        path = workspace_dir / DEFAULT_CONFIG_FILE_NAME
    if not path.exists():
        if explicit:
            raise InputConfigError(f"Config file not found: {path}")
        return {}

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise InputConfigError(f"Config file must be a mapping: {path}")
    logger.info("Loaded inputs from %s", path)
    return data
