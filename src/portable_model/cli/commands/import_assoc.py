"""`portable-model import` command.

Reads a portable document and imports it into one association of one owner
record, then commits. Imported records are always bound to that owner.
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
from portable_model.core import Cardinality, association
from portable_model.io import import_from_file


def register(app: typer.Typer) -> None:
    @app.command("import")
    def import_assoc(
        document: str = typer.Argument(..., help="Path to a portable document (.yml/.yaml or .json)."),
        database: str = typer.Option(..., "--database", "-d", envvar=DATABASE_ENVVAR, help="SQLAlchemy database URL."),
        model: str = typer.Option(..., "--model", help="Owner model reference module:Class."),
        owner_id: str = typer.Option(..., "--id", help="Owner primary key."),
        name: str = typer.Option(..., "--association", help="Relationship name on the owner model."),
    ) -> None:
        """Import a portable document into an association."""
        try:
            owner_model = load_model(model)
            identity = coerce_identity(owner_model, owner_id)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

        try:
            with open_owner(database, owner_model, identity) as (session, owner):
                handle = association(owner, name)
                result = import_from_file(handle, Path(document))
                session.commit()
        except COMMAND_ERRORS as e:
            typer.echo(f"error: {e}", err=True)
            raise typer.Exit(code=1) from e

        count = 1 if handle.cardinality is Cardinality.SINGULAR else len(result)
        typer.echo(f"imported {count} record(s) into {name}")
