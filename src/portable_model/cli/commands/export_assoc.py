"""`portable-model export` command.

Writes one association of one owner record to a YAML document (JSON when the
output path ends in `.json`). An empty one-to-one association is written as
`null`.
"""

from __future__ import annotations

from pathlib import Path

import typer

from portable_model.cli.commands._owner import (
    COMMAND_ERRORS,
    DATABASE_ENVVAR,
    coerce_identity,
    load_model,
    open_owner,
)
from portable_model.core import association
from portable_model.io import export_to_file


def register(app: typer.Typer) -> None:
    @app.command("export")
    def export_assoc(
        out: str = typer.Option(..., "--out", help="Output document path (.yml/.yaml or .json)."),
        database: str = typer.Option(..., "--database", "-d", envvar=DATABASE_ENVVAR, help="SQLAlchemy database URL."),
        model: str = typer.Option(..., "--model", help="Owner model reference module:Class."),
        owner_id: str = typer.Option(..., "--id", help="Owner primary key."),
        name: str = typer.Option(..., "--association", help="Relationship name on the owner model."),
    ) -> None:
        """Export an association to a portable document."""
        try:
            owner_model = load_model(model)
            identity = coerce_identity(owner_model, owner_id)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

        try:
            with open_owner(database, owner_model, identity) as (_session, owner):
                out_path = export_to_file(association(owner, name), Path(out))
        except COMMAND_ERRORS as e:
            typer.echo(f"error: {e}", err=True)
            raise typer.Exit(code=1) from e

        typer.echo(str(out_path))
