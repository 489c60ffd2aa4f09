"""이 파일은 .py 입력 설정 스키마 검증 모듈입니다."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from .errors import InputConfigError
from .taxonomy import parse_severity_list

_BOOLEAN_STRINGS = {"true", "false"}


def apply_input_schema(schema: Optional[Dict[str, Any]], values: Optional[Dict[str, Any]]) -> Dict[str, str]:
    # 스키마가 없으면 전달된 입력을 문자열로만 맞춰 반환한다.
    if values is None:
        values = {}
    if not isinstance(values, dict):
        raise InputConfigError("Inputs must be a mapping")
    if not schema:
        return {key: _as_text(value) for key, value in values.items()}

    props = schema.get("properties", {})
    required = schema.get("required", [])
    errors = []
    # CI 입력은 모두 문자열이므로 먼저 문자열로 통일한다.
    result = {key: _as_text(value) for key, value in values.items() if value is not None}

    for key, spec in props.items():
        # 값이 없거나 빈 문자열이면 default를 주입한다.
        if result.get(key, "") == "" and "default" in spec:
            result[key] = spec["default"]

    for key in required:
        if not result.get(key):
            errors.append(f"Missing required input: {key}")

    for key, value in list(result.items()):
        spec = props.get(key)
        if not spec or value == "":
            continue
        expected = spec.get("type", "string")
        if expected == "boolean":
            # GitHub Actions 입력처럼 "true"/"false" 문자열만 허용하고 소문자로 맞춘다.
            if value.lower() not in _BOOLEAN_STRINGS:
                errors.append(f"Input '{key}' must be 'true' or 'false'")
            else:
                result[key] = value.lower()
        elif expected == "severity_list":
            try:
                parse_severity_list(value)
            except ValueError as exc:
                errors.append(f"Input '{key}': {exc}")
        elif expected != "string":
            errors.append(f"Unsupported type in schema: {expected}")
        if "enum" in spec and value not in spec["enum"]:
            errors.append(f"Input '{key}' must be one of {spec['enum']}")
        if "pattern" in spec and not re.search(spec["pattern"], value):
            errors.append(f"Input '{key}' does not match pattern")

    if errors:
        # 누적된 오류를 하나의 예외로 전달한다.
        raise InputConfigError("; ".join(errors))
    return result


def _as_text(value: Any) -> str:
    # YAML에서 읽은 bool/int도 CI 입력과 같은 문자열 형태로 바꾼다.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()
