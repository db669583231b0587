"""
revpatch.formats — Convert between wire records and patch types.

The interchange format is the "JSON Patch with inverse metadata"
convention:

    {"op": "add",     "path": [...], "value": v}
    {"op": "remove",  "path": [...], "origValue": o}
    {"op": "replace", "path": [...], "value": v, "origValue": o}

`path` is a list of raw segments (int index or str key), NOT a JSON
Pointer string.  to_pointer() builds the RFC 6901 form for bridging
to pointer-based tools.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any, Union

from jsonpointer import JsonPointer

from .core import AddPatch, Patch, RemovePatch, ReplacePatch
from .errors import InvalidPatch


# ═══════════════════════════════════════════════════════════════════
#  DICTS ↔ PATCH RECORDS
# ═══════════════════════════════════════════════════════════════════

def _read_path(obj: Mapping) -> tuple:
    path = obj.get("path")
    if isinstance(path, (str, bytes)) or not isinstance(path, Sequence):
        raise InvalidPatch(f"Patch path must be a list of segments, got {path!r}")
    for segment in path:
        if isinstance(segment, bool) or not isinstance(segment, (int, str)):
            raise InvalidPatch(f"Invalid path segment {segment!r}", tuple(path))
    return tuple(path)


def _require(obj: Mapping, member: str, path: tuple) -> Any:
    if member not in obj:
        raise InvalidPatch(
            f'"{obj["op"]}" patch does not contain a "{member}" member', path
        )
    return obj[member]


def from_dict(obj: Mapping) -> Patch:
    """
    Parse one wire record.

    Raises InvalidPatch for an unknown op, a missing member, or a path
    that is not a list of int/str segments.
    """
    if not isinstance(obj, Mapping):
        raise InvalidPatch(f"Patch must be a mapping, got {type(obj).__name__}")

    op = obj.get("op")
    path = _read_path(obj)

    if op == "add":
        return AddPatch(path, _require(obj, "value", path))
    if op == "remove":
        return RemovePatch(path, _require(obj, "origValue", path))
    if op == "replace":
        return ReplacePatch(path, _require(obj, "value", path),
                            _require(obj, "origValue", path))

    raise InvalidPatch(f"Unknown patch operation {op!r}", path)


def to_dict(patch: Patch) -> dict:
    """Wire record for `patch`, carrying only its variant's members."""
    out: dict[str, Any] = {"op": patch.op, "path": list(patch.path)}
    if isinstance(patch, (AddPatch, ReplacePatch)):
        out["value"] = patch.value
    if isinstance(patch, (RemovePatch, ReplacePatch)):
        out["origValue"] = patch.orig_value
    return out


def coerce_patch(obj: Union[Patch, Mapping]) -> Patch:
    """Records pass through; wire dicts are parsed."""
    if isinstance(obj, Patch):
        return obj
    return from_dict(obj)


# ═══════════════════════════════════════════════════════════════════
#  JSON STRINGS ↔ PATCH RECORDS
# ═══════════════════════════════════════════════════════════════════

def from_json(text: str) -> Union[Patch, list[Patch]]:
    """Parse a JSON record, or a JSON array of records."""
    obj = json.loads(text)
    if isinstance(obj, list):
        return [from_dict(item) for item in obj]
    return from_dict(obj)


def to_json(patches: Union[Patch, list[Patch]], **kwargs) -> str:
    """Serialize one record or a list of records to JSON."""
    if isinstance(patches, Patch):
        return json.dumps(to_dict(patches), **kwargs)
    return json.dumps([to_dict(p) for p in patches], **kwargs)


# ═══════════════════════════════════════════════════════════════════
#  JSON POINTER BRIDGE
# ═══════════════════════════════════════════════════════════════════

def to_pointer(path) -> str:
    """
    RFC 6901 pointer for a segment path.

        to_pointer(("a", 0))   → "/a/0"
        to_pointer(("a/b",))   → "/a~1b"
        to_pointer(())         → ""
    """
    return JsonPointer.from_parts(path).path
