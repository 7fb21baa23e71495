from pathlib import Path

import pytest

from codec_jsonschema import codecs as c
from codec_jsonschema.codecs import Codec

LINKED_LIST_YAML = """\
codec:
  type: object
  description: A linked list of numbers
  shape:
    head:
      type: ref
      id: Node
      optional: true
definitions:
  Node:
    type: object
    shape:
      value:
        type: number
      next:
        type: ref
        id: Node
        optional: true
"""


@pytest.fixture()
def person_codec() -> Codec:
    return c.object_({"a": c.string(), "b": c.optional(c.number())})


@pytest.fixture()
def linked_list_path(tmp_path: Path) -> Path:
    path = tmp_path / "linked_list.yaml"
    path.write_text(LINKED_LIST_YAML)
    return path
