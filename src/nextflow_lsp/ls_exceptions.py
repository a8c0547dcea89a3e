"""
Errors raised while resolving the Nextflow language server artifact.
"""


class NextflowLSPException(Exception):
    """
    Base class for all errors surfaced to the host. The message is meant to be shown to the user as is.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class CacheDirectoryError(NextflowLSPException):
    """
    Raised when the versioned cache directory cannot be created (e.g. permission denied).
    """


class ReleaseLookupError(NextflowLSPException):
    """
    Raised when the release feed cannot be queried or returns something unusable
    (network failure, rate limit, malformed response, no matching release).
    """


class AssetNotFoundError(NextflowLSPException):
    """
    Raised when the latest release does not provide the expected asset.
    """


class DownloadError(NextflowLSPException):
    """
    Raised when fetching or unpacking the artifact fails.
    """
