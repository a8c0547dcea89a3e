"""
The extension handle the editor host talks to: launch commands and completion labels for the Nextflow language server.
"""

import logging

from sensai.util.string import ToStringMixin

from nextflow_lsp.completion import CodeLabel, Completion, label_for_completion
from nextflow_lsp.github import GithubReleaseFeed, HttpFileDownloader
from nextflow_lsp.host import (
    Command,
    FileDownloader,
    LanguageServerId,
    LoggingStatusNotifier,
    ReleaseFeed,
    StatusNotifier,
    Worktree,
)
from nextflow_lsp.resolver import ArtifactResolver
from nextflow_lsp.settings import NextflowLSPSettings

log = logging.getLogger(__name__)


class NextflowExtension(ToStringMixin):
    """
    Constructed once per process by the host. The Nextflow language server is a Java archive run with a
    pre-installed Java runtime, which is not checked here.
    """

    def __init__(self, settings: NextflowLSPSettings, resolver: ArtifactResolver):
        self.settings = settings
        self.resolver = resolver

    def _tostring_includes(self) -> list[str]:
        return ["resolver"]

    @classmethod
    def create(
        cls,
        settings: NextflowLSPSettings | None = None,
        release_feed: ReleaseFeed | None = None,
        downloader: FileDownloader | None = None,
        status_notifier: StatusNotifier | None = None,
    ) -> "NextflowExtension":
        """
        Creates the extension, using the GitHub-backed collaborators for those not given.
        """
        settings = settings or NextflowLSPSettings()
        if release_feed is None:
            release_feed = GithubReleaseFeed(token=settings.github_token, timeout=settings.request_timeout)
        if downloader is None:
            downloader = HttpFileDownloader(timeout=settings.request_timeout)
        if status_notifier is None:
            status_notifier = LoggingStatusNotifier()
        return cls(settings, ArtifactResolver(settings, release_feed, downloader, status_notifier))

    def language_server_command(self, server_id: LanguageServerId, worktree: Worktree) -> Command:
        jar_path = self.resolver.resolve(server_id)
        command = Command(command=self.settings.java_command, args=[*self.settings.java_args, "-jar", jar_path])
        log.info(f"Launch command for {server_id} in {worktree.root_path}: {command.to_list()}")
        return command

    def label_for_completion(self, server_id: LanguageServerId, completion: Completion) -> CodeLabel | None:
        return label_for_completion(completion)
