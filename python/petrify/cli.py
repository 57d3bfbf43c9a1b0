"""CLI commands for petrify."""

import importlib
import json
import logging
from pathlib import Path

import typer

from petrify.exceptions import PetrifyError
from petrify.models.base import Model
from petrify.models.registry import SchemaRegistry
from petrify.models.rows import decode_rows
from petrify.models.runtime import get_type, serialize
from petrify.models.table import Table

app = typer.Typer(
    name="petrify",
    help="petrify - Inspect model schemas and decode packed rows",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def load_models(target: str) -> list[type[Model]]:
    """Resolve "package.module" or "package.module:Name" to model types."""
    module_name, _, attr = target.partition(":")
    if not attr:
        return list(SchemaRegistry.from_module(module_name))
    module = importlib.import_module(module_name)
    try:
        value = getattr(module, attr)
    except AttributeError:
        raise PetrifyError(f"{module_name} has no attribute {attr!r}") from None
    return [get_type(value)]


def describe_model(model: type[Model]) -> list[str]:
    schema = model.__schema__
    table = getattr(model, "__table__", None)
    lines = []
    if table is not None:
        lines.append(f"{model.__name__} (table: {table.table_name})")
        lines.append(f"   primary key: {table.primary_key}")
    else:
        lines.append(model.__name__)

    for name in schema.field_names:
        field = schema.fields[name]
        parts = [f"   {name}", field.kind]
        if field.ref:
            parts.append("ref=" + ".".join(map(str, field.ref_path)))
        elif not field.transient:
            parts.append(f"wire={field.wire_name}")
            if table is not None:
                parts.append(f"column={field.column}")
        if field.flags:
            parts.append("[" + ", ".join(field.flags) + "]")
        lines.append("  ".join(parts))

    if schema.polymorphic_on is not None:
        lines.append(f"   polymorphic on {schema.polymorphic_on}:")
        for value, subtype in schema.polymorphic_map.items():
            lines.append(f"      {value!r} -> {subtype.__name__}")
    return lines


@app.command()
def describe(
    target: str = typer.Argument(..., help="Module, or module:Name of one model"),
):
    """
    Print fields, columns and polymorphic maps of model types.
    """
    try:
        models = load_models(target)
    except (ImportError, PetrifyError) as e:
        typer.secho(f"❌ Error loading {target}: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    if not models:
        typer.secho(f"⚠️  No models found in {target}", fg=typer.colors.YELLOW)
        return

    for index, model in enumerate(models):
        if index:
            typer.echo()
        for line in describe_model(model):
            typer.echo(line)


@app.command()
def decode(
    target: str = typer.Argument(..., help="module:Name of a table type"),
    payload: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="MessagePack rows file"
    ),
    columns: str | None = typer.Option(
        None, help="Comma-separated column order for array rows"
    ),
):
    """
    Decode MessagePack rows into records and print their wire form as JSON.
    """
    try:
        models = load_models(target)
        if len(models) != 1 or not issubclass(models[0], Table):
            raise PetrifyError(f"{target} does not name a single table type")
        column_list = [c.strip() for c in columns.split(",")] if columns else None
        records = decode_rows(models[0], payload.read_bytes(), column_list)
    except (ImportError, PetrifyError, ValueError) as e:
        typer.secho(f"❌ Error decoding {payload}: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.echo(json.dumps([serialize(r) for r in records], indent=2, default=str))


if __name__ == "__main__":
    app()
