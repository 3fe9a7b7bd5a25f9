"""portable-model CLI entrypoint.

Commands select one association by database URL, owner model, owner id and
relationship name, then export it to or import it from a document file.
"""

from __future__ import annotations

import logging

import typer

app = typer.Typer(
    name="portable-model",
    add_completion=False,
    no_args_is_help=True,
    help="Export and import ORM associations as portable YAML/JSON documents.",
)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """portable-model CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("version")
def version() -> None:
    """Print the installed portable-model version."""
    from portable_model import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `portable-model --help` is fast.
    """
    from portable_model.cli.commands import export_assoc as export_assoc_cmd
    from portable_model.cli.commands import import_assoc as import_assoc_cmd

    export_assoc_cmd.register(app)
    import_assoc_cmd.register(app)


_register_commands()
