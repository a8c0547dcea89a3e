"""
Defines settings for the Nextflow language server extension
"""

import dataclasses
import os
import tempfile
from dataclasses import dataclass, field

import yaml

CACHE_DIR_NAME = "nextflow-lsp"


def _default_cache_root() -> str:
    return os.path.join(tempfile.gettempdir(), CACHE_DIR_NAME)


@dataclass
class NextflowLSPSettings:
    cache_root: str = field(default_factory=_default_cache_root)
    github_repo: str = "nextflow-io/language-server"
    asset_name: str = "language-server-all.jar"
    server_name: str = "nextflow-language-server"
    """
    prefix of the versioned directories below cache_root
    """
    java_command: str = "java"
    java_args: list[str] = field(default_factory=list)
    """
    extra JVM arguments, placed before -jar
    """
    local_jar_path: str | None = None
    """
    a pre-installed language server jar; if it exists, it is used without checking for updates
    """
    github_token: str | None = field(default_factory=lambda: os.environ.get("GITHUB_TOKEN") or None)
    request_timeout: float = 30.0

    def version_dir(self, version: str) -> str:
        """
        :param version: the release version, e.g. "v1.2.3"
        :return: the directory holding the artifact of the given version
        """
        return os.path.join(self.cache_root, f"{self.server_name}-{version}")

    @classmethod
    def from_yaml(cls, path: str) -> "NextflowLSPSettings":
        """
        Loads settings from a YAML file; keys not given in the file keep their defaults.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping at the top level of {path}, got {type(data).__name__}")
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown settings in {path}: {', '.join(unknown)}")
        return cls(**data)
