"""Command-line utilities for the codec_jsonschema package."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import get_version
from .api import compile_file, dump_schema, write_schema
from .dsl import CodecDocument
from .generation import GenerationOptions, TransformTarget

app = typer.Typer(help="Codec to JSON Schema utilities")
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _compile_or_exit(config: Path, options: GenerationOptions) -> dict[str, Any]:
    if not config.exists():
        raise typer.BadParameter(f"{config} does not exist")
    try:
        return compile_file(config, options)
    # UnsupportedCodecError is a ValueError too.
    except ValueError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _describe(fragment: dict[str, Any]) -> str:
    if "type" in fragment:
        return str(fragment["type"])
    for key in ("anyOf", "$ref", "const", "enum"):
        if key in fragment:
            return key
    return "any"


def _additional(fragment: dict[str, Any]) -> str:
    value = fragment.get("additionalProperties")
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return "schema"


@app.command()
def version() -> None:
    """Print the installed package version."""
    typer.echo(get_version())


@app.command()
def export(
    config: Annotated[Path, typer.Argument(help="Codec document (.yaml/.yml/.json).")],
    out: Annotated[
        Path | None,
        typer.Option(help="Output path; prints to stdout when omitted."),
    ] = None,
    target: Annotated[
        TransformTarget, typer.Option(help="Describe the encoded or decoded shape.")
    ] = TransformTarget.ENCODED,
    allow_additional: Annotated[
        bool, typer.Option(help="Let object schemas accept undeclared properties.")
    ] = False,
    pretty: Annotated[bool, typer.Option(help="Write pretty-printed JSON.")] = True,
    verbose: Annotated[bool, typer.Option(help="Log compilation details.")] = False,
) -> None:
    """Compile a codec document into a JSON Schema document."""
    _configure_logging(verbose)
    options = GenerationOptions(target=target, allow_additional=allow_additional)
    schema = _compile_or_exit(config, options)
    if out is None:
        typer.echo(dump_schema(schema, pretty=pretty))
        return
    write_schema(schema, out, pretty=pretty)
    console.print(f"[bold green]Schema written:[/] {out}")


@app.command()
def definitions(
    config: Annotated[Path, typer.Argument(help="Codec document (.yaml/.yml/.json).")],
    target: Annotated[
        TransformTarget, typer.Option(help="Describe the encoded or decoded shape.")
    ] = TransformTarget.ENCODED,
    allow_additional: Annotated[
        bool, typer.Option(help="Let object schemas accept undeclared properties.")
    ] = False,
) -> None:
    """List the recursive definitions a codec document produces."""
    options = GenerationOptions(target=target, allow_additional=allow_additional)
    schema = _compile_or_exit(config, options)
    defs: dict[str, Any] = schema.get("definitions", {})
    if not defs:
        console.print("No recursive definitions.")
        return
    table = Table(title=f"Definitions ({config})")
    table.add_column("ID")
    table.add_column("Kind")
    table.add_column("Additional")
    table.add_column("Description")
    for ident, fragment in defs.items():
        table.add_row(
            ident,
            _describe(fragment),
            _additional(fragment),
            str(fragment.get("description", "-")),
        )
    console.print(table)


@app.command("document-schema")
def document_schema(
    out: Annotated[
        Path | None,
        typer.Option(help="Output path; prints to stdout when omitted."),
    ] = None,
    pretty: Annotated[bool, typer.Option(help="Write pretty-printed JSON.")] = True,
) -> None:
    """Export the JSON Schema that codec documents are validated against."""
    schema = CodecDocument.model_json_schema()
    if out is None:
        typer.echo(dump_schema(schema, pretty=pretty))
        return
    write_schema(schema, out, pretty=pretty)
    console.print(f"[bold green]Document schema written:[/] {out}")


def main() -> None:
    """Entry point for `python -m codec_jsonschema.cli`."""
    app()


if __name__ == "__main__":
    main()
