"""Public API for downstream modules."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import ujson as json

from .codecs import Codec
from .dsl import load_codec_document
from .generation import GenerationOptions, generate_json_schema

__all__ = [
    "load_codec",
    "compile_file",
    "dump_schema",
    "write_schema",
    "export_schema",
]


def load_codec(path: str | Path) -> Codec:
    """Read a codec document from disk and build its codec tree."""
    return load_codec_document(path).build()


def compile_file(
    path: str | Path,
    options: GenerationOptions | Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Compile the codec document at ``path`` into a JSON Schema document."""
    return generate_json_schema(load_codec(path), options)


def dump_schema(schema: Mapping[str, Any], pretty: bool = True) -> str:
    return json.dumps(schema, indent=2 if pretty else 0, escape_forward_slashes=False)


def write_schema(schema: Mapping[str, Any], path: str | Path, pretty: bool = True) -> None:
    """Persist a schema document as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_schema(schema, pretty=pretty))


def export_schema(
    config_path: str | Path,
    out_path: str | Path,
    options: GenerationOptions | Mapping[str, Any] | None = None,
    pretty: bool = True,
) -> dict[str, Any]:
    """Entry point used by the CLI to compile and write a schema."""
    schema = compile_file(config_path, options)
    write_schema(schema, out_path, pretty=pretty)
    return schema
