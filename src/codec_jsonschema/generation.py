"""Compile codec trees into JSON Schema documents."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, InstanceOf

from .codecs import (
    ArrayCodec,
    Codec,
    CodecType,
    EnumCodec,
    IntersectionCodec,
    LiteralCodec,
    ObjectCodec,
    RecordCodec,
    RecursiveCodec,
    TupleCodec,
    UnionCodec,
)
from .merge import merge_object_schemas, shallow_merge
from .registry import Parser, ParserRegistry, create_parser

logger = logging.getLogger(__name__)


class TransformTarget(str, Enum):
    """Which side of a codec the schema describes.

    Accepted for forward compatibility; no built-in parser reads it yet.
    """

    ENCODED = "encoded"
    DECODED = "decoded"


class UnsupportedCodecError(ValueError):
    """Raised when no registered parser handles a codec's tag."""

    def __init__(self, tag: str) -> None:
        self.tag = str(getattr(tag, "value", tag))
        super().__init__(self.tag)

    def __str__(self) -> str:
        return f"No parser configured for codec {self.tag}"


class GenerationOptions(BaseModel):
    """Caller-facing knobs for :func:`generate_json_schema`."""

    target: TransformTarget = TransformTarget.ENCODED
    parsers: list[InstanceOf[Parser]] = Field(default_factory=list)
    allow_additional: bool = Field(default=False, alias="allowAdditional")

    model_config = {"populate_by_name": True, "frozen": True, "extra": "forbid"}


@dataclass(frozen=True)
class GenerationContext:
    """State threaded through a single compilation.

    Only ``cache`` changes during a walk; it maps recursion ids to their
    fragments in first-discovery order.
    """

    parsers: ParserRegistry
    target: TransformTarget = TransformTarget.ENCODED
    allow_additional: bool = False
    cache: dict[str, Any] = field(default_factory=dict)


def _create_primitive_parser(tag: CodecType) -> Parser:
    json_type = tag.value
    return create_parser(tag, lambda codec, context: {"type": json_type})


StringParser = _create_primitive_parser(CodecType.STRING)
NumberParser = _create_primitive_parser(CodecType.NUMBER)
BooleanParser = _create_primitive_parser(CodecType.BOOLEAN)
NullParser = _create_primitive_parser(CodecType.NULL)

AnyParser = create_parser(CodecType.ANY, lambda codec, context: {})


def _parse_enum(codec: EnumCodec, context: GenerationContext) -> dict[str, Any]:
    return {"type": "string", "enum": codec.values()}


def _parse_literal(codec: LiteralCodec, context: GenerationContext) -> dict[str, Any]:
    # Always "string", whatever the literal's own type.
    return {"type": "string", "const": codec.value}


def _parse_object(codec: ObjectCodec, context: GenerationContext) -> dict[str, Any]:
    entries = list(codec.shape.items())
    return {
        "type": "object",
        "properties": {key: root_parser(child, context) for key, child in entries},
        "additionalProperties": bool(context.allow_additional),
        "required": [key for key, child in entries if child.required],
    }


def _parse_record(codec: RecordCodec, context: GenerationContext) -> dict[str, Any]:
    return {
        "type": "object",
        "additionalProperties": root_parser(codec.type, context),
        "properties": {},
        "required": [],
    }


def _parse_array(codec: ArrayCodec, context: GenerationContext) -> dict[str, Any]:
    return {"type": "array", "items": root_parser(codec.type, context)}


def _parse_tuple(codec: TupleCodec, context: GenerationContext) -> dict[str, Any]:
    size = len(codec.codecs)
    return {
        "type": "array",
        "items": [root_parser(child, context) for child in codec.codecs],
        "minItems": size,
        "maxItems": size,
    }


def _parse_intersection(codec: IntersectionCodec, context: GenerationContext) -> dict[str, Any]:
    """Merge intersected object schemas under one ``additionalProperties``.

    With only object members, every member is folded into a single object
    schema. When unions are present, each union branch is merged with every
    plain object member and the results are collected under one ``anyOf``,
    so each alternative carries the full set of properties it admits. Only
    object-shaped members are meaningful here; nothing else is checked.
    """
    schemas = [root_parser(child, context) for child in codec.codecs]

    unions = [schema for schema in schemas if schema.get("anyOf") is not None]
    object_schemas = [schema for schema in schemas if schema.get("type") == "object"]

    if unions:
        merged: list[dict[str, Any]] = []
        for union in unions:
            for branch in union["anyOf"]:
                for object_schema in object_schemas:
                    merged.append(
                        merge_object_schemas(object_schema, branch, context.allow_additional)
                    )
        return {"anyOf": merged}

    properties: dict[str, Any] = {}
    required: list[str] = []
    for schema in schemas:
        properties = shallow_merge(properties, schema.get("properties") or {})
        required.extend(schema.get("required") or [])
    return {
        "type": "object",
        "properties": properties,
        "additionalProperties": bool(context.allow_additional),
        "required": required,
    }


def _parse_union(codec: UnionCodec, context: GenerationContext) -> dict[str, Any]:
    return {"anyOf": [root_parser(child, context) for child in codec.codecs]}


def _parse_recursive(codec: RecursiveCodec, context: GenerationContext) -> dict[str, Any]:
    ref = {"$ref": f"#/definitions/{codec.id}"}
    if codec.id in context.cache:
        return ref

    # Reserve the id before compiling the body so cycles back to it hit the
    # cache instead of recursing.
    context.cache[codec.id] = {}
    logger.debug("Resolving recursive definition %s", codec.id)
    context.cache[codec.id] = root_parser(codec.resolver(), context)
    return ref


EnumParser = create_parser(CodecType.ENUM, _parse_enum)
LiteralParser = create_parser(CodecType.LITERAL, _parse_literal)
ObjectParser = create_parser(CodecType.OBJECT, _parse_object)
RecordParser = create_parser(CodecType.RECORD, _parse_record)
ArrayParser = create_parser(CodecType.ARRAY, _parse_array)
TupleParser = create_parser(CodecType.TUPLE, _parse_tuple)
IntersectionParser = create_parser(CodecType.INTERSECTION, _parse_intersection)
UnionParser = create_parser(CodecType.UNION, _parse_union)
RecursiveParser = create_parser(CodecType.RECURSIVE, _parse_recursive)

BUILTIN_PARSERS: tuple[Parser, ...] = (
    AnyParser,
    StringParser,
    NumberParser,
    BooleanParser,
    NullParser,
    LiteralParser,
    EnumParser,
    ObjectParser,
    RecordParser,
    ArrayParser,
    TupleParser,
    IntersectionParser,
    UnionParser,
    RecursiveParser,
)


def root_parser(codec: Codec, context: GenerationContext) -> dict[str, Any]:
    """Compile ``codec`` with the first matching parser in ``context``."""
    parser = context.parsers.find(codec)
    if parser is None:
        raise UnsupportedCodecError(codec.tag)
    schema = parser.parse(codec, context)

    description = codec.metadata.description if codec.metadata else None
    if description:
        return {"description": description, **schema}
    return schema


def _coerce_options(options: GenerationOptions | Mapping[str, Any] | None) -> GenerationOptions:
    if options is None:
        return GenerationOptions()
    if isinstance(options, GenerationOptions):
        return options
    return GenerationOptions.model_validate(dict(options))


def generate_json_schema(
    codec: Codec,
    options: GenerationOptions | Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Compile ``codec`` into a JSON Schema document.

    Custom parsers in ``options.parsers`` are consulted before the built-ins.
    The returned document holds every recursive definition discovered during
    the walk under ``definitions``, followed by the top-level fragment's keys.
    """
    opts = _coerce_options(options)
    context = GenerationContext(
        parsers=ParserRegistry([*opts.parsers, *BUILTIN_PARSERS]),
        target=opts.target,
        allow_additional=opts.allow_additional,
    )
    logger.debug(
        "Generating schema for %s codec (target=%s, allow_additional=%s)",
        getattr(codec.tag, "value", codec.tag),
        opts.target.value,
        opts.allow_additional,
    )
    schema = root_parser(codec, context)
    return {"definitions": dict(context.cache), **schema}
