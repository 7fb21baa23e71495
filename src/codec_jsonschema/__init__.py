"""
codec_jsonschema
================

Compile tagged codec descriptions into JSON Schema documents.
"""

from importlib.metadata import PackageNotFoundError, version

from .generation import (
    GenerationOptions,
    TransformTarget,
    UnsupportedCodecError,
    generate_json_schema,
)
from .registry import Parser, create_parser


def get_version() -> str:
    """Return the installed package version or '0.0.0' when unavailable."""
    try:
        return version("codec_jsonschema")
    except PackageNotFoundError:
        return "0.0.0"


__all__ = [
    "GenerationOptions",
    "Parser",
    "TransformTarget",
    "UnsupportedCodecError",
    "create_parser",
    "generate_json_schema",
    "get_version",
]
