"""이 파일은 .py 공통 예외 모듈로 오류 유형을 표준화합니다."""


class SecgateError(Exception):
    """secgate 예외의 공통 부모입니다."""


class InputConfigError(SecgateError, ValueError):
    """CI 입력값 검증 실패 시 사용합니다."""


class AdapterError(SecgateError, RuntimeError):
    """외부 프로세스/HTTP 어댑터 실행 오류에 사용합니다."""


class ToolInstallError(AdapterError):
    """스캐너 바이너리 준비 실패 시 사용합니다."""


class ScanPreconditionError(SecgateError, RuntimeError):
    """대상 경로나 규칙 파일처럼 스캔 전제 조건이 없을 때 사용합니다."""


class ToolOutputError(SecgateError, RuntimeError):
    """도구 실행 후 결과 파일이 없거나 해석할 수 없을 때 사용합니다."""


class UploadError(AdapterError):
    """원격 API 업로드 실패 시 사용합니다."""
