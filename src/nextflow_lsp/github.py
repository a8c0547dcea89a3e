"""
Release feed and file downloader backed by GitHub over HTTP.
"""

import gzip
import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests
from overrides import override
from sensai.util.string import ToStringMixin

from nextflow_lsp.host import (
    DownloadedFileType,
    FileDownloader,
    GithubRelease,
    GithubReleaseAsset,
    GithubReleaseOptions,
    ReleaseFeed,
)
from nextflow_lsp.ls_exceptions import DownloadError, ReleaseLookupError

log = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GithubReleaseFeed(ReleaseFeed, ToStringMixin):
    """
    Looks up releases via the GitHub REST API.
    """

    def __init__(self, token: str | None = None, timeout: float = 30.0, api_url: str = GITHUB_API_URL):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/vnd.github+json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _tostring_includes(self) -> list[str]:
        return ["api_url", "timeout"]

    def _fetch_releases(self, repo: str) -> list[dict[str, Any]]:
        url = f"{self.api_url}/repos/{repo}/releases"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            releases = response.json()
        except requests.exceptions.RequestException as e:
            raise ReleaseLookupError(f"Failed to fetch releases of {repo}: {e}", cause=e) from e
        except ValueError as e:
            raise ReleaseLookupError(f"Malformed release list for {repo}: {e}", cause=e) from e
        if not isinstance(releases, list):
            raise ReleaseLookupError(f"Malformed release list for {repo}: expected a list, got {type(releases).__name__}")
        return releases

    @staticmethod
    def _matches(release: dict[str, Any], options: GithubReleaseOptions) -> bool:
        if release.get("draft"):
            return False
        if release.get("prerelease") and not options.pre_release:
            return False
        if options.require_assets and not release.get("assets"):
            return False
        return True

    @staticmethod
    def _to_release(release: dict[str, Any]) -> GithubRelease:
        return GithubRelease(
            version=release["tag_name"],
            assets=[GithubReleaseAsset(name=a["name"], download_url=a["browser_download_url"]) for a in release.get("assets", [])],
        )

    @override
    def latest_release(self, repo: str, options: GithubReleaseOptions) -> GithubRelease:
        # the API lists releases newest first
        for release in self._fetch_releases(repo):
            if not self._matches(release, options):
                continue
            try:
                result = self._to_release(release)
            except (KeyError, TypeError) as e:
                raise ReleaseLookupError(f"Malformed release entry for {repo}: missing {e}", cause=e) from e
            log.info(f"Latest release of {repo}: {result.version} ({len(result.assets)} assets)")
            return result
        raise ReleaseLookupError(f"No release of {repo} matches {options}")


def _is_within_directory(directory: Path, target: Path) -> bool:
    directory = directory.resolve()
    target = target.resolve()
    return target == directory or directory in target.parents


def safe_extract_zip(archive: Path, target_dir: Path) -> None:
    """Extract a zip archive, refusing entries that would end up outside target_dir."""
    with zipfile.ZipFile(archive) as zf:
        for member in zf.namelist():
            if not _is_within_directory(target_dir, target_dir / member):
                raise DownloadError(f"Refusing to extract path-traversal entry: {member}")
        zf.extractall(target_dir)


class HttpFileDownloader(FileDownloader, ToStringMixin):
    """
    Downloads files with requests and unpacks them according to the declared file type.

    Java archives are zip files which are run packed, so a ZIP download whose file name does not end in
    ``.zip`` (e.g. ``language-server-all.jar``) is stored unchanged.
    """

    CHUNK_SIZE = 8192

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout
        self.session = requests.Session()

    def _tostring_includes(self) -> list[str]:
        return ["timeout"]

    @staticmethod
    def _file_name(url: str) -> str:
        name = os.path.basename(urlparse(url).path)
        if not name:
            raise DownloadError(f"Cannot determine a file name from {url}")
        return name

    def _fetch(self, url: str, dest: Path) -> None:
        log.info(f"Downloading {url}")
        with self.session.get(url, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            with open(dest, "wb") as f:
                for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                    f.write(chunk)

    @override
    def download_file(self, url: str, target_dir: str, file_type: DownloadedFileType) -> None:
        target = Path(target_dir)
        file_name = self._file_name(url)
        # files below target which must not survive the download
        tmp_paths: list[Path] = []
        try:
            tmp_path = self._temp_file(target, tmp_paths)
            self._fetch(url, tmp_path)
            match file_type:
                case DownloadedFileType.ZIP if file_name.endswith(".zip"):
                    safe_extract_zip(tmp_path, target)
                case DownloadedFileType.GZIP:
                    out_name = file_name[: -len(".gz")] if file_name.endswith(".gz") else file_name
                    unpacked_path = self._temp_file(target, tmp_paths)
                    with gzip.open(tmp_path, "rb") as f_in, open(unpacked_path, "wb") as f_out:
                        shutil.copyfileobj(f_in, f_out)
                    os.replace(unpacked_path, target / out_name)
                case _:
                    os.replace(tmp_path, target / file_name)
            log.info(f"Downloaded {file_name} to {target}")
        except DownloadError:
            raise
        except (requests.exceptions.RequestException, OSError, EOFError, zipfile.BadZipFile) as e:
            raise DownloadError(f"Failed to download {url}: {e}", cause=e) from e
        finally:
            for path in tmp_paths:
                if path.exists():
                    path.unlink()

    @staticmethod
    def _temp_file(target: Path, created: list[Path]) -> Path:
        fd, name = tempfile.mkstemp(prefix=".download-", dir=target)
        os.close(fd)
        path = Path(name)
        created.append(path)
        return path
