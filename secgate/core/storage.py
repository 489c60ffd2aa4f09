"""이 파일은 .py 저장 경로 모듈로 임시 리포트/산출물 디렉터리를 관리합니다."""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from .config import TEMP_ROOT

logger = logging.getLogger(__name__)


def artifacts_dir(run_id: str, root: Optional[Path] = None) -> Path:
    return (root or TEMP_ROOT) / "secgate" / "artifacts" / run_id


def ensure_artifacts_dir(run_id: str, root: Optional[Path] = None) -> Path:
    # SBOM처럼 업로드가 끝날 때까지 남아 있어야 하는 산출물 경로이다.
    path = artifacts_dir(run_id, root)
    path.mkdir(parents=True, exist_ok=True)
    return path


def temp_report_path(prefix: str, suffix: str = ".json", root: Optional[Path] = None) -> Path:
    # 실행마다 겹치지 않는 도구 출력 파일 경로를 만든다.
    directory = (root or TEMP_ROOT) / "secgate" / "reports"
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"{prefix}-{uuid.uuid4().hex}{suffix}"


def remove_quietly(path: Optional[Path]) -> None:
    # 임시 파일 정리는 실패해도 스캔 결과에 영향을 주지 않는다.
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.debug("Failed to cleanup temp file %s: %s", path, exc)


def remove_tree_quietly(path: Optional[Path]) -> None:
    if path is None or not path.exists():
        return
    try:
        shutil.rmtree(path)
        logger.debug("Removed artifacts directory: %s", path)
    except OSError as exc:
        logger.warning("Failed to remove artifacts directory %s: %s", path, exc)
