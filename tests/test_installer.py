"""이 파일은 .py 테스트 모듈로 도구 설치/캐시 동작을 검증합니다."""

import io
import os
import tarfile
from pathlib import Path

import requests

from secgate.adapters import installer as installer_module
from secgate.adapters.installer import ToolInstaller, gitleaks_download_url, trivy_download_url
from secgate.core.errors import ToolInstallError


class FakeDownload:
    def __init__(self, payload: bytes, status: int = 200) -> None:
        self.payload = payload
        self.status = status

    def __enter__(self) -> "FakeDownload":
        return self

    def __exit__(self, *exc) -> None:
        return None

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def iter_content(self, chunk_size: int = 1024):
        yield self.payload


class FakeSession:
    def __init__(self, payload: bytes = b"", status: int = 200) -> None:
        self.payload = payload
        self.status = status
        self.urls = []

    def get(self, url, stream=False, timeout=None):
        self.urls.append(url)
        return FakeDownload(self.payload, self.status)


def _tarball(name: str) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as handle:
        data = b"#!/bin/sh\necho fake\n"
        info = tarfile.TarInfo(name)
        info.size = len(data)
        info.mode = 0o644
        handle.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def _no_path(monkeypatch) -> None:
    monkeypatch.setattr(installer_module.shutil, "which", lambda name: None)


def test_download_urls_contain_version() -> None:
    assert "v0.66.0/trivy_0.66.0_" in trivy_download_url("0.66.0")
    assert "v8.27.2/gitleaks_8.27.2_" in gitleaks_download_url("8.27.2")


def test_install_downloads_and_caches(tmp_path: Path, monkeypatch) -> None:
    _no_path(monkeypatch)
    session = FakeSession(_tarball("gitleaks"))
    tool = ToolInstaller(
        "gitleaks",
        "8.27.2",
        "gitleaks",
        lambda version: f"https://example.com/gitleaks_{version}.tar.gz",
        cache_dir=tmp_path,
        session=session,
    )

    path = tool.install()

    assert path == tmp_path / "gitleaks" / "8.27.2" / tool.binary_name
    assert os.access(path, os.X_OK)
    # 두 번째 호출은 캐시를 사용한다.
    assert tool.install() == path
    assert session.urls == ["https://example.com/gitleaks_8.27.2.tar.gz"]


def test_install_prefers_binary_on_path(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(installer_module.shutil, "which", lambda name: "/usr/local/bin/trivy")
    session = FakeSession()
    tool = ToolInstaller("trivy", "0.66.0", "trivy", trivy_download_url, cache_dir=tmp_path, session=session)
    assert tool.install() == Path("/usr/local/bin/trivy")
    assert session.urls == []


def test_install_download_failure(tmp_path: Path, monkeypatch) -> None:
    _no_path(monkeypatch)
    session = FakeSession(status=404)
    tool = ToolInstaller("trivy", "0.66.0", "trivy", trivy_download_url, cache_dir=tmp_path, session=session)
    try:
        tool.install()
    except ToolInstallError as exc:
        assert "download" in str(exc)
    else:
        raise AssertionError("ToolInstallError not raised")


def test_install_missing_binary_in_archive(tmp_path: Path, monkeypatch) -> None:
    _no_path(monkeypatch)
    session = FakeSession(_tarball("README.md"))
    tool = ToolInstaller(
        "trivy", "0.66.0", "trivy", lambda version: "https://example.com/t.tar.gz", cache_dir=tmp_path, session=session
    )
    try:
        tool.install()
    except ToolInstallError as exc:
        assert "not found" in str(exc)
    else:
        raise AssertionError("ToolInstallError not raised")
