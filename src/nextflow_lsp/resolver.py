"""
Resolves a runnable Nextflow language server jar on local disk, downloading the latest release if needed.
"""

import logging
import os
import threading

from sensai.util.string import ToStringMixin

from nextflow_lsp.host import (
    DownloadedFileType,
    FileDownloader,
    GithubReleaseOptions,
    LanguageServerId,
    LanguageServerInstallationStatus,
    ReleaseFeed,
    StatusNotifier,
)
from nextflow_lsp.ls_exceptions import (
    AssetNotFoundError,
    CacheDirectoryError,
    DownloadError,
    NextflowLSPException,
    ReleaseLookupError,
)
from nextflow_lsp.settings import NextflowLSPSettings

log = logging.getLogger(__name__)


class ArtifactResolver(ToStringMixin):
    """
    Ensures the language server jar exists locally and remembers its location for the lifetime of the process.

    The remembered path is trusted as long as the file exists; the latest release is only looked up again
    after a cache miss (e.g. after a restart). Versioned directories below the cache root are never removed.
    """

    def __init__(
        self,
        settings: NextflowLSPSettings,
        release_feed: ReleaseFeed,
        downloader: FileDownloader,
        status_notifier: StatusNotifier,
    ):
        self.settings = settings
        self.release_feed = release_feed
        self.downloader = downloader
        self.status_notifier = status_notifier
        self.cached_jar_path: str | None = None
        self._lock = threading.Lock()

    def _tostring_includes(self) -> list[str]:
        return ["cached_jar_path"]

    def resolve(self, server_id: LanguageServerId) -> str:
        """
        :param server_id: the id under which installation status updates are reported to the host
        :return: the path of the language server jar
        """
        with self._lock:
            if self.cached_jar_path is not None and os.path.isfile(self.cached_jar_path):
                log.debug(f"Using cached language server jar {self.cached_jar_path}")
                return self.cached_jar_path

            local_jar = self.settings.local_jar_path
            if local_jar and os.path.isfile(local_jar):
                log.info(f"Using local language server jar {local_jar}")
                self.cached_jar_path = local_jar
                return local_jar

            try:
                jar_path = self._install_latest(server_id)
            except NextflowLSPException as e:
                self.status_notifier.set_installation_status(server_id, LanguageServerInstallationStatus.FAILED, str(e))
                raise
            self.status_notifier.set_installation_status(server_id, LanguageServerInstallationStatus.NONE)
            self.cached_jar_path = jar_path
            return jar_path

    def _install_latest(self, server_id: LanguageServerId) -> str:
        settings = self.settings
        self.status_notifier.set_installation_status(server_id, LanguageServerInstallationStatus.CHECKING_FOR_UPDATE)

        options = GithubReleaseOptions(require_assets=True, pre_release=False)
        try:
            release = self.release_feed.latest_release(settings.github_repo, options)
        except ReleaseLookupError:
            raise
        except Exception as e:
            raise ReleaseLookupError(f"Failed to look up the latest release of {settings.github_repo}: {e}", cause=e) from e

        asset = release.find_asset(settings.asset_name)
        if asset is None:
            raise AssetNotFoundError(f"No {settings.asset_name} asset found in release {release.version} of {settings.github_repo}")

        version_dir = settings.version_dir(release.version)
        try:
            os.makedirs(version_dir, exist_ok=True)
        except OSError as e:
            raise CacheDirectoryError(f"Failed to create directory {version_dir}: {e}", cause=e) from e

        jar_path = os.path.join(version_dir, settings.asset_name)
        if os.path.isfile(jar_path):
            log.info(f"Language server {release.version} already downloaded at {jar_path}")
            return jar_path

        self.status_notifier.set_installation_status(server_id, LanguageServerInstallationStatus.DOWNLOADING)
        try:
            self.downloader.download_file(asset.download_url, version_dir, DownloadedFileType.ZIP)
        except DownloadError:
            raise
        except Exception as e:
            raise DownloadError(f"Failed to download {settings.asset_name}: {e}", cause=e) from e

        if not os.path.isfile(jar_path):
            raise DownloadError(f"Downloaded archive did not contain {settings.asset_name}")
        log.info(f"Installed language server {release.version} at {jar_path}")
        return jar_path
