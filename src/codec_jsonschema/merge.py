"""Schema fragment merging helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def shallow_merge(*fragments: Mapping[str, Any]) -> dict[str, Any]:
    """Merge fragments left to right; later keys overwrite earlier ones."""
    merged: dict[str, Any] = {}
    for fragment in fragments:
        merged.update(fragment)
    return merged


def merge_object_schemas(
    a: Mapping[str, Any],
    b: Mapping[str, Any],
    allow_additional: bool,
) -> dict[str, Any]:
    """Combine two object schemas so one ``additionalProperties`` covers both.

    ``b``'s properties win on name collisions and ``required`` lists are
    concatenated without de-duplication.
    """
    return {
        "type": "object",
        "properties": shallow_merge(a.get("properties", {}), b.get("properties", {})),
        "additionalProperties": bool(allow_additional),
        "required": [*a.get("required", []), *b.get("required", [])],
    }
