import os
import time

import pytest
from overrides import override

from nextflow_lsp.host import (
    DownloadedFileType,
    FileDownloader,
    GithubRelease,
    GithubReleaseAsset,
    GithubReleaseOptions,
    LanguageServerId,
    LanguageServerInstallationStatus,
    ReleaseFeed,
)
from nextflow_lsp.resolver import ArtifactResolver
from nextflow_lsp.settings import NextflowLSPSettings

JAR_NAME = "language-server-all.jar"


class FakeReleaseFeed(ReleaseFeed):
    def __init__(self, release: GithubRelease | None = None, error: Exception | None = None):
        self.release = release
        self.error = error
        self.calls: list[tuple[str, GithubReleaseOptions]] = []

    @override
    def latest_release(self, repo: str, options: GithubReleaseOptions) -> GithubRelease:
        self.calls.append((repo, options))
        if self.error is not None:
            raise self.error
        assert self.release is not None
        return self.release


class FakeDownloader(FileDownloader):
    """Writes a file named after the last URL segment into the target directory."""

    def __init__(self, error: Exception | None = None, write_file: bool = True, delay: float = 0.0):
        self.error = error
        self.write_file = write_file
        self.delay = delay
        self.calls: list[tuple[str, str, DownloadedFileType]] = []

    @override
    def download_file(self, url: str, target_dir: str, file_type: DownloadedFileType) -> None:
        self.calls.append((url, target_dir, file_type))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.write_file:
            with open(os.path.join(target_dir, url.rsplit("/", 1)[-1]), "wb") as f:
                f.write(b"PK\x03\x04jar")


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[tuple[LanguageServerId, LanguageServerInstallationStatus, str | None]] = []

    def set_installation_status(
        self, server_id: LanguageServerId, status: LanguageServerInstallationStatus, message: str | None = None
    ) -> None:
        self.events.append((server_id, status, message))

    @property
    def statuses(self) -> list[LanguageServerInstallationStatus]:
        return [status for _, status, _ in self.events]


def _make_release(version: str = "v1.2.3", names: tuple[str, ...] = (JAR_NAME,)) -> GithubRelease:
    return GithubRelease(
        version=version,
        assets=[
            GithubReleaseAsset(name=name, download_url=f"https://example.com/{version}/{name}") for name in names
        ],
    )


@pytest.fixture
def settings(tmp_path) -> NextflowLSPSettings:
    return NextflowLSPSettings(cache_root=str(tmp_path / "cache"), github_token=None)


@pytest.fixture
def feed() -> FakeReleaseFeed:
    return FakeReleaseFeed(_make_release())


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def resolver(settings, feed, downloader, notifier) -> ArtifactResolver:
    return ArtifactResolver(settings, feed, downloader, notifier)


@pytest.fixture
def make_release():
    return _make_release
