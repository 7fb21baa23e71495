from typing import Any

from codec_jsonschema import codecs as c
from codec_jsonschema.codecs import Codec
from codec_jsonschema.generation import (
    BUILTIN_PARSERS,
    GenerationContext,
    generate_json_schema,
    root_parser,
)
from codec_jsonschema.registry import ParserRegistry, create_parser

NODE_REF = {"$ref": "#/definitions/Node"}

Node: Codec = c.recursive(
    "Node",
    lambda: c.object_({"value": c.number(), "next": c.optional(Node)}),
)

Tree: Codec = c.recursive("Tree", lambda: c.object_({"children": Forest}))
Forest: Codec = c.recursive("Forest", lambda: c.array(Tree))


def test_self_reference_compiles_to_definition() -> None:
    schema = generate_json_schema(Node)
    assert schema == {
        "definitions": {
            "Node": {
                "type": "object",
                "properties": {"value": {"type": "number"}, "next": NODE_REF},
                "additionalProperties": False,
                "required": ["value"],
            }
        },
        "$ref": "#/definitions/Node",
    }


def test_repeated_references_resolve_once() -> None:
    calls: list[str] = []

    def resolve() -> Codec:
        calls.append("Leaf")
        return c.string()

    leaf = c.recursive("Leaf", resolve)
    schema = generate_json_schema(c.tuple_(leaf, leaf, c.array(leaf)))
    assert calls == ["Leaf"]
    assert schema["items"] == [
        {"$ref": "#/definitions/Leaf"},
        {"$ref": "#/definitions/Leaf"},
        {"type": "array", "items": {"$ref": "#/definitions/Leaf"}},
    ]
    assert schema["definitions"] == {"Leaf": {"type": "string"}}


def test_mutual_recursion_keeps_discovery_order() -> None:
    schema = generate_json_schema(Tree)
    assert list(schema["definitions"]) == ["Tree", "Forest"]
    assert schema["definitions"]["Tree"]["properties"] == {
        "children": {"$ref": "#/definitions/Forest"}
    }
    assert schema["definitions"]["Forest"] == {
        "type": "array",
        "items": {"$ref": "#/definitions/Tree"},
    }


def test_placeholder_is_present_while_body_compiles() -> None:
    seen: list[dict[str, Any]] = []

    def probe(codec: Codec, context: GenerationContext) -> dict[str, Any]:
        seen.append(dict(context.cache))
        return {"type": "string"}

    probed = c.recursive("Probe", lambda: Codec(tag="probe"))
    schema = generate_json_schema(probed, {"parsers": [create_parser("probe", probe)]})
    assert seen == [{"Probe": {}}]
    assert schema["definitions"] == {"Probe": {"type": "string"}}


def test_described_recursive_reference() -> None:
    codec = c.object_({"head": c.describe(Node, "first node")})
    schema = generate_json_schema(codec)
    assert schema["properties"]["head"] == {"description": "first node", **NODE_REF}
    assert "Node" in schema["definitions"]


def test_cache_is_fresh_for_every_call() -> None:
    calls: list[int] = []

    def resolve() -> Codec:
        calls.append(1)
        return c.number()

    codec = c.recursive("Count", resolve)
    first = generate_json_schema(codec)
    second = generate_json_schema(codec)
    assert len(calls) == 2
    assert first == second


def test_root_parser_reuses_context_cache() -> None:
    context = GenerationContext(parsers=ParserRegistry(BUILTIN_PARSERS))
    assert root_parser(Node, context) == NODE_REF
    assert root_parser(Node, context) == NODE_REF
    assert list(context.cache) == ["Node"]
