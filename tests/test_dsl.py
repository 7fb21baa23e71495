from pathlib import Path

import pytest
import ujson as json

from codec_jsonschema import api
from codec_jsonschema.codecs import CodecType, RecursiveCodec
from codec_jsonschema.dsl import CodecDocument, load_codec_document

NODE_REF = {"$ref": "#/definitions/Node"}


def test_document_builds_recursive_codec(linked_list_path: Path) -> None:
    document = load_codec_document(linked_list_path)
    codec = document.build()
    assert codec.tag == CodecType.OBJECT
    head = codec.shape["head"]
    assert isinstance(head, RecursiveCodec)
    assert head.required is False
    assert head.resolver().tag == CodecType.OBJECT


def test_compile_file_matches_expected_schema(linked_list_path: Path) -> None:
    schema = api.compile_file(linked_list_path)
    assert schema == {
        "definitions": {
            "Node": {
                "type": "object",
                "properties": {"value": {"type": "number"}, "next": NODE_REF},
                "additionalProperties": False,
                "required": ["value"],
            }
        },
        "description": "A linked list of numbers",
        "type": "object",
        "properties": {"head": NODE_REF},
        "additionalProperties": False,
        "required": [],
    }


def test_json_documents_cover_every_node_type(tmp_path: Path) -> None:
    doc = {
        "codec": {
            "type": "intersection",
            "of": [
                {
                    "type": "object",
                    "shape": {
                        "tags": {"type": "array", "items": {"type": "string"}},
                        "meta": {"type": "record", "values": {"type": "any"}},
                        "point": {
                            "type": "tuple",
                            "items": [{"type": "number"}, {"type": "number"}],
                        },
                        "flag": {"type": "boolean", "optional": True},
                        "gone": {"type": "null", "optional": True},
                    },
                },
                {
                    "type": "union",
                    "of": [
                        {
                            "type": "object",
                            "shape": {"kind": {"type": "literal", "value": "circle"}},
                        },
                        {
                            "type": "object",
                            "shape": {"mode": {"type": "enum", "values": ["x", "y"]}},
                        },
                    ],
                },
            ],
        }
    }
    path = tmp_path / "shape.json"
    path.write_text(json.dumps(doc))
    schema = api.compile_file(path, {"allowAdditional": True})
    first, second = schema["anyOf"]
    assert first["required"] == ["tags", "meta", "point", "kind"]
    assert first["additionalProperties"] is True
    assert first["properties"]["meta"]["additionalProperties"] == {}
    assert first["properties"]["point"]["minItems"] == 2
    assert second["properties"]["mode"] == {"type": "string", "enum": ["x", "y"]}


def test_unknown_ref_is_rejected() -> None:
    with pytest.raises(ValueError, match="Missing"):
        CodecDocument.model_validate({"codec": {"type": "ref", "id": "Missing"}})


def test_invalid_document_raises_value_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("codec:\n  type: date\n")
    with pytest.raises(ValueError, match="Invalid codec document"):
        load_codec_document(path)


def test_export_schema_writes_json(linked_list_path: Path, tmp_path: Path) -> None:
    out = tmp_path / "out" / "schema.json"
    schema = api.export_schema(linked_list_path, out)
    assert out.exists()
    text = out.read_text()
    assert '"#/definitions/Node"' in text
    assert json.loads(text) == schema


def test_malformed_yaml_raises_value_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("codec: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid codec document"):
        load_codec_document(path)


def test_enum_values_keep_booleans(tmp_path: Path) -> None:
    path = tmp_path / "flags.json"
    path.write_text(json.dumps({"codec": {"type": "enum", "values": [True, 1, 1.5, "x"]}}))
    schema = api.compile_file(path)
    assert schema["enum"] == [True, 1, 1.5, "x"]
    assert schema["enum"][0] is True
    assert schema["enum"][1] is not True
