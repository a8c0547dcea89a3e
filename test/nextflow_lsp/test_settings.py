import os
import tempfile

import pytest

from nextflow_lsp.host import LanguageServerInstallationStatus, LoggingStatusNotifier
from nextflow_lsp.settings import NextflowLSPSettings


class TestNextflowLSPSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        settings = NextflowLSPSettings()

        assert settings.cache_root == os.path.join(tempfile.gettempdir(), "nextflow-lsp")
        assert settings.github_repo == "nextflow-io/language-server"
        assert settings.asset_name == "language-server-all.jar"
        assert settings.java_command == "java"
        assert settings.github_token is None

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "abc")

        assert NextflowLSPSettings().github_token == "abc"

    def test_version_dir(self, tmp_path):
        settings = NextflowLSPSettings(cache_root=str(tmp_path))

        assert settings.version_dir("1.2.3") == os.path.join(str(tmp_path), "nextflow-language-server-1.2.3")
        assert settings.version_dir("1.2.3") != settings.version_dir("1.2.30")

    def test_from_yaml(self, tmp_path):
        config = tmp_path / "settings.yml"
        config.write_text("cache_root: /var/cache/nf\njava_args: [-Xmx1g]\nrequest_timeout: 5\n")

        settings = NextflowLSPSettings.from_yaml(str(config))

        assert settings.cache_root == "/var/cache/nf"
        assert settings.java_args == ["-Xmx1g"]
        assert settings.request_timeout == 5
        assert settings.asset_name == "language-server-all.jar"

    def test_from_empty_yaml(self, tmp_path):
        config = tmp_path / "settings.yml"
        config.write_text("")

        assert NextflowLSPSettings.from_yaml(str(config)).java_command == "java"

    def test_from_yaml_unknown_key(self, tmp_path):
        config = tmp_path / "settings.yml"
        config.write_text("jar: foo.jar\n")

        with pytest.raises(ValueError, match="Unknown settings"):
            NextflowLSPSettings.from_yaml(str(config))


class TestLoggingStatusNotifier:
    def test_records_last_status(self, caplog):
        notifier = LoggingStatusNotifier()

        with caplog.at_level("INFO"):
            notifier.set_installation_status("nextflow", LanguageServerInstallationStatus.CHECKING_FOR_UPDATE)
            notifier.set_installation_status("nextflow", LanguageServerInstallationStatus.FAILED, "boom")

        assert notifier.statuses == {"nextflow": LanguageServerInstallationStatus.FAILED}
        assert "checking-for-update" in caplog.text
        assert "installation failed: boom" in caplog.text
