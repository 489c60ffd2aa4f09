"""이 파일은 .py 도구 설치 어댑터로 스캐너 바이너리 다운로드/캐시를 담당합니다."""

from __future__ import annotations

import logging
import platform
import shutil
import stat
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Optional

import requests

from secgate.core.config import TOOL_CACHE_DIR
from secgate.core.errors import AdapterError, ToolInstallError

from .runner import ToolRunner

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT_SECONDS = 120


def _system() -> str:
    return platform.system().lower()


def _is_x64() -> bool:
    return platform.machine().lower() in {"x86_64", "amd64"}


def trivy_download_url(version: str) -> str:
    # 예: trivy_0.66.0_Linux-64bit.tar.gz
    arch = "64bit" if _is_x64() else "ARM64"
    system = _system()
    base = f"https://github.com/aquasecurity/trivy/releases/download/v{version}/trivy_{version}"
    if system == "linux":
        return f"{base}_Linux-{arch}.tar.gz"
    if system == "darwin":
        return f"{base}_macOS-{arch}.tar.gz"
    if system == "windows":
        return f"{base}_windows-{arch}.zip"
    raise ToolInstallError(f"Unsupported platform: {system}")


def gitleaks_download_url(version: str) -> str:
    arch = "x64" if _is_x64() else "arm64"
    system = _system()
    base = f"https://github.com/gitleaks/gitleaks/releases/download/v{version}/gitleaks_{version}"
    if system in {"linux", "darwin"}:
        return f"{base}_{system}_{arch}.tar.gz"
    if system == "windows":
        return f"{base}_windows_{arch}.zip"
    raise ToolInstallError(f"Unsupported platform: {system}")


class ToolInstaller:
    """릴리스 아카이브를 내려받아 캐시 디렉터리에 바이너리를 준비합니다.

    캐시에 바이너리가 있으면 그대로 쓰고, 없으면 PATH에서 찾은 뒤,
    그래도 없을 때만 다운로드합니다. 여러 번 호출해도 같은 경로를 반환합니다.
    """

    def __init__(
        self,
        tool: str,
        version: str,
        binary: str,
        url_factory: Callable[[str], str],
        cache_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.tool = tool
        self.version = version
        self.binary = binary
        self.url_factory = url_factory
        self.cache_dir = Path(cache_dir or TOOL_CACHE_DIR)
        self.session = session or requests.Session()

    @property
    def binary_name(self) -> str:
        return f"{self.binary}.exe" if _system() == "windows" else self.binary

    @property
    def install_dir(self) -> Path:
        return self.cache_dir / self.tool / self.version

    def cached_binary(self) -> Optional[Path]:
        candidate = self.install_dir / self.binary_name
        return candidate if candidate.exists() else None

    def install(self) -> Path:
        cached = self.cached_binary()
        if cached:
            logger.info("%s %s already cached at %s", self.tool, self.version, cached)
            return cached

        on_path = shutil.which(self.binary)
        if on_path:
            logger.info("Using %s found on PATH: %s", self.tool, on_path)
            return Path(on_path)

        url = self.url_factory(self.version)
        logger.info("Installing %s %s from %s", self.tool, self.version, url)
        with tempfile.TemporaryDirectory(prefix=f"{self.tool}-") as tmp:
            archive = Path(tmp) / url.rsplit("/", 1)[-1]
            self._download(url, archive)
            extracted = Path(tmp) / "extracted"
            self._extract(archive, extracted)
            found = next(extracted.rglob(self.binary_name), None)
            if found is None:
                raise ToolInstallError(f"{self.tool} binary not found in {archive.name}")
            self.install_dir.mkdir(parents=True, exist_ok=True)
            target = self.install_dir / self.binary_name
            shutil.copy2(found, target)

        # Unix 계열에서는 실행 권한을 부여한다.
        target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        logger.info("%s installed successfully at %s", self.tool, target)
        return target

    def _download(self, url: str, dest: Path) -> None:
        try:
            with self.session.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT_SECONDS) as response:
                response.raise_for_status()
                with dest.open("wb") as handle:
                    for chunk in response.iter_content(chunk_size=1024 * 1024):
                        handle.write(chunk)
        except requests.RequestException as exc:
            raise ToolInstallError(f"Failed to download {self.tool}: {exc}") from exc

    def _extract(self, archive: Path, dest: Path) -> None:
        dest.mkdir(parents=True, exist_ok=True)
        try:
            if archive.suffix == ".zip":
                with zipfile.ZipFile(archive) as handle:
                    handle.extractall(dest)
            else:
                with tarfile.open(archive, "r:gz") as handle:
                    handle.extractall(dest, filter="data")
        except (tarfile.TarError, zipfile.BadZipFile, OSError) as exc:
            raise ToolInstallError(f"Failed to unpack {archive.name}: {exc}") from exc


class NpmToolInstaller:
    # cdxgen은 npm 패키지로 배포되므로 캐시 디렉터리에 로컬 설치한다.
    def __init__(
        self,
        package: str,
        version: str,
        binary: str,
        cache_dir: Optional[Path] = None,
        runner: Optional[ToolRunner] = None,
    ) -> None:
        self.package = package
        self.version = version
        self.binary = binary
        self.cache_dir = Path(cache_dir or TOOL_CACHE_DIR)
        self.runner = runner or ToolRunner()

    @property
    def install_dir(self) -> Path:
        return self.cache_dir / self.binary / self.version

    def cached_binary(self) -> Optional[Path]:
        candidate = self.install_dir / "node_modules" / ".bin" / self.binary
        return candidate if candidate.exists() else None

    def install(self) -> Path:
        cached = self.cached_binary()
        if cached:
            logger.info("%s@%s already installed at %s", self.package, self.version, cached)
            return cached
        if not shutil.which("npm"):
            raise ToolInstallError("npm is required to install " + self.package)

        self.install_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Installing %s@%s...", self.package, self.version)
        try:
            result = self.runner.run(
                ["npm", "install", f"{self.package}@{self.version}"],
                cwd=str(self.install_dir),
            )
        except AdapterError as exc:
            raise ToolInstallError(f"Failed to install {self.package}: {exc}") from exc
        if result.exit_code != 0:
            raise ToolInstallError(f"npm install failed with exit code: {result.exit_code}")

        binary = self.cached_binary()
        if binary is None:
            raise ToolInstallError(f"{self.binary} binary not found under {self.install_dir}")
        logger.info("%s installed successfully at %s", self.binary, binary)
        return binary
