"""CI 파이프라인용 보안 스캔 오케스트레이터 패키지입니다."""

__version__ = "0.1.0"
