"""Typed document format for describing codecs in YAML or JSON."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import ujson as json
import yaml
from pydantic import BaseModel, Field, model_validator

from . import codecs as c
from .codecs import Codec


class NodeBase(BaseModel):
    """Fields every codec node accepts."""

    description: str | None = None
    optional: bool = False

    model_config = {"extra": "forbid"}

    def children(self) -> Iterator[CodecNode]:
        return iter(())

    def decorate(self, codec: Codec) -> Codec:
        if self.description:
            codec = c.describe(codec, self.description)
        if self.optional:
            codec = c.optional(codec)
        return codec


class AnyNode(NodeBase):
    type: Literal["any"]


class StringNode(NodeBase):
    type: Literal["string"]


class NumberNode(NodeBase):
    type: Literal["number"]


class BooleanNode(NodeBase):
    type: Literal["boolean"]


class NullNode(NodeBase):
    type: Literal["null"]


class LiteralNode(NodeBase):
    type: Literal["literal"]
    value: str | int | float | bool | None


class EnumNode(NodeBase):
    type: Literal["enum"]
    values: list[str | int | float | bool] = Field(min_length=1)


class ObjectNode(NodeBase):
    type: Literal["object"]
    shape: dict[str, CodecNode] = Field(default_factory=dict)

    def children(self) -> Iterator[CodecNode]:
        return iter(self.shape.values())


class RecordNode(NodeBase):
    type: Literal["record"]
    values: CodecNode

    def children(self) -> Iterator[CodecNode]:
        return iter((self.values,))


class ArrayNode(NodeBase):
    type: Literal["array"]
    items: CodecNode

    def children(self) -> Iterator[CodecNode]:
        return iter((self.items,))


class TupleNode(NodeBase):
    type: Literal["tuple"]
    items: list[CodecNode] = Field(default_factory=list)

    def children(self) -> Iterator[CodecNode]:
        return iter(self.items)


class IntersectionNode(NodeBase):
    type: Literal["intersection"]
    of: list[CodecNode] = Field(min_length=1)

    def children(self) -> Iterator[CodecNode]:
        return iter(self.of)


class UnionNode(NodeBase):
    type: Literal["union"]
    of: list[CodecNode] = Field(min_length=1)

    def children(self) -> Iterator[CodecNode]:
        return iter(self.of)


class RefNode(NodeBase):
    """Reference to an entry in ``definitions``; compiles to a recursive codec."""

    type: Literal["ref"]
    id: str = Field(min_length=1)


CodecNode = Annotated[
    Union[
        AnyNode,
        StringNode,
        NumberNode,
        BooleanNode,
        NullNode,
        LiteralNode,
        EnumNode,
        ObjectNode,
        RecordNode,
        ArrayNode,
        TupleNode,
        IntersectionNode,
        UnionNode,
        RefNode,
    ],
    Field(discriminator="type"),
]

for _model in (ObjectNode, RecordNode, ArrayNode, TupleNode, IntersectionNode, UnionNode):
    _model.model_rebuild()


def _walk(node: NodeBase) -> Iterator[NodeBase]:
    yield node
    for child in node.children():
        yield from _walk(child)


class CodecDocument(BaseModel):
    """Top-level document entity."""

    codec: CodecNode
    definitions: dict[str, CodecNode] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def validate_refs(self) -> CodecDocument:
        roots = [self.codec, *self.definitions.values()]
        for root in roots:
            for node in _walk(root):
                if isinstance(node, RefNode) and node.id not in self.definitions:
                    raise ValueError(f"ref '{node.id}' has no entry in definitions")
        return self

    def build(self) -> Codec:
        """Convert the document into a codec tree.

        Definitions are built lazily and once each, so references between
        them may form cycles.
        """
        built: dict[str, Codec] = {}

        def resolve(ident: str) -> Codec:
            if ident not in built:
                built[ident] = convert(self.definitions[ident])
            return built[ident]

        def convert(node: NodeBase) -> Codec:
            codec: Codec
            if isinstance(node, AnyNode):
                codec = c.any_()
            elif isinstance(node, StringNode):
                codec = c.string()
            elif isinstance(node, NumberNode):
                codec = c.number()
            elif isinstance(node, BooleanNode):
                codec = c.boolean()
            elif isinstance(node, NullNode):
                codec = c.null()
            elif isinstance(node, LiteralNode):
                codec = c.literal(node.value)
            elif isinstance(node, EnumNode):
                codec = c.enum(node.values)
            elif isinstance(node, ObjectNode):
                codec = c.object_({key: convert(child) for key, child in node.shape.items()})
            elif isinstance(node, RecordNode):
                codec = c.record(convert(node.values))
            elif isinstance(node, ArrayNode):
                codec = c.array(convert(node.items))
            elif isinstance(node, TupleNode):
                codec = c.tuple_(*(convert(child) for child in node.items))
            elif isinstance(node, IntersectionNode):
                codec = c.intersection(*(convert(child) for child in node.of))
            elif isinstance(node, UnionNode):
                codec = c.union(*(convert(child) for child in node.of))
            elif isinstance(node, RefNode):
                ident = node.id
                codec = c.recursive(ident, lambda: resolve(ident))
            else:
                raise TypeError(f"Unhandled codec node {type(node).__name__}")
            return node.decorate(codec)

        return convert(self.codec)


def load_codec_document(path: str | Path) -> CodecDocument:
    """Load a codec document from YAML or JSON."""
    path = Path(path)
    data: Any
    text = path.read_text()
    try:
        if path.suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
        return CodecDocument.model_validate(data)
    # pydantic.ValidationError and ujson decode errors are ValueErrors.
    except (yaml.YAMLError, ValueError) as exc:
        raise ValueError(f"Invalid codec document {path}") from exc
