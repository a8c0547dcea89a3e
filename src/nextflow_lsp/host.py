"""
Types of the contract between the editor host and the extension.

The host constructs the extension once per process and then asks it, serially, for launch commands and
completion labels. Release lookup and file download are collaborators provided to the extension; the
defaults talking to GitHub live in :mod:`nextflow_lsp.github`.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

log = logging.getLogger(__name__)

LanguageServerId = str


class LanguageServerInstallationStatus(str, Enum):
    NONE = "none"
    CHECKING_FOR_UPDATE = "checking-for-update"
    DOWNLOADING = "downloading"
    FAILED = "failed"


class DownloadedFileType(str, Enum):
    ZIP = "zip"
    GZIP = "gzip"
    UNCOMPRESSED = "uncompressed"


@dataclass
class Worktree:
    """
    The project the host wants a language server for.
    """

    root_path: str


@dataclass
class Command:
    """
    A process launch command: executable, arguments and extra environment variables.
    """

    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    def to_list(self) -> list[str]:
        return [self.command, *self.args]


@dataclass
class GithubReleaseOptions:
    require_assets: bool
    pre_release: bool


@dataclass
class GithubReleaseAsset:
    name: str
    download_url: str


@dataclass
class GithubRelease:
    version: str
    assets: list[GithubReleaseAsset] = field(default_factory=list)

    def find_asset(self, name: str) -> GithubReleaseAsset | None:
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


class StatusNotifier(Protocol):
    def set_installation_status(
        self, server_id: LanguageServerId, status: LanguageServerInstallationStatus, message: str | None = None
    ) -> None: ...


class LoggingStatusNotifier:
    """
    Status channel used when no host is attached: logs each transition and remembers the last status per server.
    """

    def __init__(self) -> None:
        self.statuses: dict[LanguageServerId, LanguageServerInstallationStatus] = {}

    def set_installation_status(
        self, server_id: LanguageServerId, status: LanguageServerInstallationStatus, message: str | None = None
    ) -> None:
        self.statuses[server_id] = status
        if status == LanguageServerInstallationStatus.FAILED:
            log.error(f"{server_id}: installation failed: {message}")
        else:
            log.info(f"{server_id}: {status.value}" + (f" ({message})" if message else ""))


class ReleaseFeed(ABC):
    """
    Looks up the latest release of an upstream project.
    """

    @abstractmethod
    def latest_release(self, repo: str, options: GithubReleaseOptions) -> GithubRelease:
        """
        :param repo: the upstream project identifier, e.g. "nextflow-io/language-server"
        :param options: filters applied when selecting the release
        :return: the newest release matching the options
        """


class FileDownloader(ABC):
    """
    Fetches a file and unpacks it into a directory.
    """

    @abstractmethod
    def download_file(self, url: str, target_dir: str, file_type: DownloadedFileType) -> None:
        """
        :param url: the URL of the file to fetch
        :param target_dir: an existing directory receiving the (unpacked) file
        :param file_type: how the fetched file is to be unpacked
        :raises DownloadError: if fetching or unpacking fails; no partial output is left in target_dir
        """
