"""이 파일은 .py 테스트 모듈로 입력 스키마 검증을 확인합니다."""

from secgate.core.config_validation import apply_input_schema
from secgate.core.errors import InputConfigError
from secgate.core.inputs import INPUT_SCHEMA

def test_apply_input_schema_defaults() -> None:
    result = apply_input_schema(INPUT_SCHEMA, {})
    assert result["scan-type"] == "fs"
    assert result["severity"] == "HIGH,CRITICAL"
    assert result["fail-on-secret"] == "true"
    assert result["clean-node-modules"] == "false"
    assert "fail_on_vulneribility" not in result

def test_apply_input_schema_converts_yaml_booleans() -> None:
    result = apply_input_schema(INPUT_SCHEMA, {"ignore-unfixed": True, "fail-on-secret": False})
    assert result["ignore-unfixed"] == "true"
    assert result["fail-on-secret"] == "false"

def test_apply_input_schema_lowercases_booleans() -> None:
    result = apply_input_schema(INPUT_SCHEMA, {"fail-on-secret": "FALSE", "ignore-unfixed": "True"})
    assert result["fail-on-secret"] == "false"
    assert result["ignore-unfixed"] == "true"

def test_apply_input_schema_boolean_error() -> None:
    try:
        apply_input_schema(INPUT_SCHEMA, {"fail-on-vulnerability": "yes"})
    except InputConfigError as exc:
        assert "fail-on-vulnerability" in str(exc)
    else:
        raise AssertionError("InputConfigError not raised")

def test_apply_input_schema_enum_and_pattern_errors_are_combined() -> None:
    try:
        apply_input_schema(INPUT_SCHEMA, {"scan-type": "image", "exit-code": "one"})
    except InputConfigError as exc:
        assert "scan-type" in str(exc)
        assert "exit-code" in str(exc)
    else:
        raise AssertionError("InputConfigError not raised")

def test_apply_input_schema_severity_list_error() -> None:
    try:
        apply_input_schema(INPUT_SCHEMA, {"severity": "HIGH,URGENT"})
    except InputConfigError as exc:
        assert "severity" in str(exc)
    else:
        raise AssertionError("InputConfigError not raised")

def test_apply_input_schema_required() -> None:
    schema = {"properties": {"api_endpoint": {"type": "string"}}, "required": ["api_endpoint"]}
    try:
        apply_input_schema(schema, {})
    except InputConfigError as exc:
        assert "api_endpoint" in str(exc)
    else:
        raise AssertionError("InputConfigError not raised")
