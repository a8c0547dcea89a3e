import pytest
from click.testing import CliRunner

from nextflow_lsp import cli
from nextflow_lsp.extension import NextflowExtension


@pytest.fixture
def fake_extension(monkeypatch, feed, downloader, notifier):
    def create(settings):
        return NextflowExtension.create(settings, release_feed=feed, downloader=downloader, status_notifier=notifier)

    monkeypatch.setattr(cli, "_create_extension", create)


class TestCli:
    def test_label(self):
        result = CliRunner().invoke(cli.top_level, ["label", "Foo", "--kind", "class", "--detail", "pkg.Foo"])

        assert result.exit_code == 0, result.output
        assert "Foo (import pkg.Foo)" in result.output
        assert "code range: 0..3" in result.output
        assert "filter range: 0..3" in result.output

    def test_label_default_rendering(self):
        result = CliRunner().invoke(cli.top_level, ["label", "if", "--kind", "keyword"])

        assert result.exit_code == 0, result.output
        assert "(default rendering)" in result.output

    def test_command(self, fake_extension, tmp_path):
        cache_root = tmp_path / "cache"
        result = CliRunner().invoke(cli.top_level, ["command", "--cache-root", str(cache_root)])

        assert result.exit_code == 0, result.output
        assert "java -jar " in result.output
        assert str(cache_root) in result.output

    def test_resolve_error(self, fake_extension, feed, make_release, tmp_path):
        feed.release = make_release(names=("other.jar",))

        result = CliRunner().invoke(cli.top_level, ["resolve", "--cache-root", str(tmp_path)])

        assert result.exit_code == 1
        assert "No language-server-all.jar asset found" in result.output

    def test_help(self):
        assert "resolve" in cli.get_help()
