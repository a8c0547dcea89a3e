import shlex
from collections.abc import Callable
from typing import Any

import click
from sensai.util import logging

from nextflow_lsp.completion import Completion, CompletionKind
from nextflow_lsp.extension import NextflowExtension
from nextflow_lsp.host import Worktree
from nextflow_lsp.ls_exceptions import NextflowLSPException
from nextflow_lsp.settings import NextflowLSPSettings

LOG_FORMAT = "%(levelname)-5s %(asctime)-15s %(name)s:%(funcName)s:%(lineno)d - %(message)s"
SERVER_ID = "nextflow"
_MAX_CONTENT_WIDTH = 100


def _configure_logging(log_level: str) -> None:
    lvl = logging.getLevelNamesMapping()[log_level.upper()]
    logging.configure(format=LOG_FORMAT, level=lvl)


def _load_settings(config: str | None, cache_root: str | None) -> NextflowLSPSettings:
    try:
        settings = NextflowLSPSettings.from_yaml(config) if config else NextflowLSPSettings()
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    if cache_root:
        settings.cache_root = cache_root
    return settings


def _create_extension(settings: NextflowLSPSettings) -> NextflowExtension:
    return NextflowExtension.create(settings)


def _settings_options(f: Callable[..., Any]) -> Callable[..., Any]:
    f = click.option(
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
        default="WARNING",
        show_default=True,
        help="Log level.",
    )(f)
    f = click.option("--cache-root", type=click.Path(file_okay=False), default=None, help="Override the download cache directory.")(f)
    f = click.option("--config", type=click.Path(exists=True, dir_okay=False), default=None, help="YAML file with settings.")(f)
    return f


class AutoRegisteringGroup(click.Group):
    """
    A click.Group which registers all click.Command attributes defined on its class.
    """

    def __init__(self, name: str, help: str):
        super().__init__(name=name, help=help)
        for attr in dir(self.__class__):
            cmd = getattr(self.__class__, attr)
            if isinstance(cmd, click.Command):
                self.add_command(cmd)


class TopLevelCommands(AutoRegisteringGroup):
    """Root CLI group of nextflow-lsp."""

    def __init__(self) -> None:
        super().__init__(
            name="nextflow-lsp", help="Nextflow language server helper. You can run `<command> --help` for more info on each command."
        )

    @staticmethod
    @click.command("resolve", help="Resolve (and download if needed) the language server jar and print its path.")
    @_settings_options
    def resolve(config: str | None, cache_root: str | None, log_level: str) -> None:
        _configure_logging(log_level)
        extension = _create_extension(_load_settings(config, cache_root))
        try:
            click.echo(extension.resolver.resolve(SERVER_ID))
        except NextflowLSPException as e:
            raise click.ClickException(str(e))

    @staticmethod
    @click.command(
        "command", help="Print the command launching the language server.", context_settings={"max_content_width": _MAX_CONTENT_WIDTH}
    )
    @click.option("--worktree", type=click.Path(file_okay=False), default=".", show_default=True, help="Project root.")
    @_settings_options
    def launch_command(worktree: str, config: str | None, cache_root: str | None, log_level: str) -> None:
        _configure_logging(log_level)
        extension = _create_extension(_load_settings(config, cache_root))
        try:
            cmd = extension.language_server_command(SERVER_ID, Worktree(root_path=worktree))
        except NextflowLSPException as e:
            raise click.ClickException(str(e))
        click.echo(shlex.join(cmd.to_list()))

    @staticmethod
    @click.command("label", help="Render the label of a completion item.")
    @click.argument("label")
    @click.option(
        "--kind",
        type=click.Choice([k.name.lower() for k in CompletionKind], case_sensitive=False),
        default=None,
        help="Completion item kind.",
    )
    @click.option("--detail", type=str, default=None, help="Completion item detail (e.g. the import path).")
    def label(label: str, kind: str | None, detail: str | None) -> None:
        completion_kind = CompletionKind[kind.upper()] if kind else None
        extension = NextflowExtension.create()
        code_label = extension.label_for_completion(SERVER_ID, Completion(label=label, kind=completion_kind, detail=detail))
        if code_label is None:
            click.echo("(default rendering)")
            return
        click.echo(code_label.text())
        click.echo(f"code: {code_label.code!r}")
        for span in code_label.spans:
            if span.is_literal:
                click.echo(f"literal: {span.literal_text!r}")
            else:
                click.echo(f"code range: {span.code_range[0]}..{span.code_range[1]}")
        click.echo(f"filter range: {code_label.filter_range[0]}..{code_label.filter_range[1]}")


top_level = TopLevelCommands()


def get_help() -> str:
    """Retrieve the help text for the top-level CLI."""
    return top_level.get_help(click.Context(top_level, info_name="nextflow-lsp"))
