"""Immutable codec model read by the schema generator.

Codecs are tagged nodes. The generator only looks at ``tag``, the
variant-specific fields, ``required`` and ``metadata.description``.
"""

from __future__ import annotations

import dataclasses
import enum as _enum
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any


class CodecType(str, _enum.Enum):
    """Built-in codec tags. Primitive values double as JSON type names."""

    ANY = "any"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    LITERAL = "literal"
    ENUM = "enum"
    OBJECT = "object"
    RECORD = "record"
    ARRAY = "array"
    TUPLE = "tuple"
    INTERSECTION = "intersection"
    UNION = "union"
    RECURSIVE = "recursive"


@dataclass(frozen=True)
class Metadata:
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class Codec:
    """Base codec node; custom tags use this class directly."""

    tag: str
    required: bool = True
    metadata: Metadata = field(default_factory=Metadata)


@dataclass(frozen=True, kw_only=True)
class LiteralCodec(Codec):
    tag: str = CodecType.LITERAL
    value: Any


@dataclass(frozen=True, kw_only=True)
class EnumCodec(Codec):
    tag: str = CodecType.ENUM
    enum: Any

    def values(self) -> list[Any]:
        """Return the declared values in declaration order."""
        source = self.enum
        if isinstance(source, type) and issubclass(source, _enum.Enum):
            return [member.value for member in source]
        if isinstance(source, Mapping):
            return list(source.values())
        return list(source)


@dataclass(frozen=True, kw_only=True)
class ObjectCodec(Codec):
    tag: str = CodecType.OBJECT
    shape: Mapping[str, Codec] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class RecordCodec(Codec):
    tag: str = CodecType.RECORD
    type: Codec


@dataclass(frozen=True, kw_only=True)
class ArrayCodec(Codec):
    tag: str = CodecType.ARRAY
    type: Codec


@dataclass(frozen=True, kw_only=True)
class TupleCodec(Codec):
    tag: str = CodecType.TUPLE
    codecs: tuple[Codec, ...] = ()


@dataclass(frozen=True, kw_only=True)
class IntersectionCodec(Codec):
    tag: str = CodecType.INTERSECTION
    codecs: tuple[Codec, ...] = ()


@dataclass(frozen=True, kw_only=True)
class UnionCodec(Codec):
    tag: str = CodecType.UNION
    codecs: tuple[Codec, ...] = ()


@dataclass(frozen=True, kw_only=True)
class RecursiveCodec(Codec):
    """Named, lazily resolved codec used to express cyclic shapes."""

    tag: str = CodecType.RECURSIVE
    id: str
    resolver: Callable[[], Codec]


def _primitive(tag: CodecType) -> Codec:
    return Codec(tag=tag)


def any_() -> Codec:
    return _primitive(CodecType.ANY)


def string() -> Codec:
    return _primitive(CodecType.STRING)


def number() -> Codec:
    return _primitive(CodecType.NUMBER)


def boolean() -> Codec:
    return _primitive(CodecType.BOOLEAN)


def null() -> Codec:
    return _primitive(CodecType.NULL)


def literal(value: Any) -> LiteralCodec:
    return LiteralCodec(value=value)


def enum(values: type[_enum.Enum] | Mapping[str, Any] | Iterable[Any]) -> EnumCodec:
    if not isinstance(values, (type, Mapping)):
        values = tuple(values)
    return EnumCodec(enum=values)


def object_(shape: Mapping[str, Codec]) -> ObjectCodec:
    return ObjectCodec(shape=dict(shape))


def record(value_type: Codec) -> RecordCodec:
    return RecordCodec(type=value_type)


def array(item_type: Codec) -> ArrayCodec:
    return ArrayCodec(type=item_type)


def tuple_(*codecs: Codec) -> TupleCodec:
    return TupleCodec(codecs=tuple(codecs))


def intersection(*codecs: Codec) -> IntersectionCodec:
    return IntersectionCodec(codecs=tuple(codecs))


def union(*codecs: Codec) -> UnionCodec:
    return UnionCodec(codecs=tuple(codecs))


def recursive(ident: str, resolver: Callable[[], Codec]) -> RecursiveCodec:
    """Build a codec whose body is produced on demand by ``resolver``."""
    return RecursiveCodec(id=ident, resolver=resolver)


def optional(codec: Codec) -> Codec:
    """Return a copy of ``codec`` that an enclosing object does not require."""
    return dataclasses.replace(codec, required=False)


def describe(codec: Codec, description: str) -> Codec:
    return dataclasses.replace(codec, metadata=Metadata(description=description))
