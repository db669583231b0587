"""
revpatch.core — Reversing JSON-Patch-like records
=================================================

MODEL
═════

§1  PATCH RECORDS
─────────────────

A patch record describes ONE structural change at a path:

    AddPatch(path, value)                    a slot was inserted
    RemovePatch(path, orig_value)            a slot was deleted
    ReplacePatch(path, value, orig_value)    a slot was overwritten

`path` is a tuple of segments (int index or str key); () is the root.
Records carry the values needed to go back (`orig_value`), so any
record can be undone without knowing how it was produced.

Records are snapshots.  They never point into the structure they were
derived from, and revpatch does not copy them: if the caller hands in
live aliases that later change, reversal becomes unsound.


§2  THE TARGET
──────────────

A tree of mutable sequences (list) and mutable mappings (dict) with
scalar leaves.  str and bytes are leaves, not sequences.

Sequences are dense and 0-based.  The segment "-" names the slot past
the end (the JSON Patch append marker).


§3  REVERSAL
────────────

Forward JSON Patch semantics on a sequence SHIFT the tail:

    add    at i:  [a, b, c] → [a, X, b, c]     (tail moves right)
    remove at i:  [a, b, c] → [a, c]           (tail moves left)

so the reversal must shift back the other way:

    revert(add    at i) = delete at i          (tail moves left)
    revert(remove at i) = insert orig at i     (tail moves right)
    revert(replace at i) = assign orig at i

Mappings have no positions; reversal is a plain key delete / assign.

Before touching anything the current slot is compared with what the
record claims is there.  A mismatch means the record was made against
a different state, and the revert raises StalePatch instead of
corrupting the structure.


§4  INVERSION
─────────────

    invert(AddPatch(p, v))          = RemovePatch(p, v)
    invert(RemovePatch(p, o))       = AddPatch(p, o)
    invert(ReplacePatch(p, v, o))   = ReplacePatch(p, o, v)

invert is an involution: invert(invert(P)) == P.
"""

import logging
import re
from collections.abc import (
    Iterable, Mapping, MutableMapping, MutableSequence, Sequence,
)
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from .errors import (
    MISSING,
    InvalidPatch,
    StalePatch,
    UnresolvablePath,
    format_path,
)

logger = logging.getLogger(__name__)

# Append marker for sequence paths
APPEND_SEGMENT = "-"

# Synthetic property that no patch may replace on a sequence
LENGTH_SEGMENT = "length"

_INDEX_RE = re.compile(r"-?[0-9]+")

Segment = Union[int, str]


# ═══════════════════════════════════════════════════════════════════
#  PATCH RECORDS
# ═══════════════════════════════════════════════════════════════════

class Patch:
    """Base class for patch records.  Not instantiated directly."""
    __slots__ = ()

    op: ClassVar[str] = ""
    path: tuple[Segment, ...]


@dataclass(frozen=True, slots=True)
class AddPatch(Patch):
    """
    `value` was inserted at `path`.

    Examples:
        AddPatch(("a",), 1)           # {} → {"a": 1}
        AddPatch(("items", "-"), 2)   # [1] → [1, 2]
    """
    op: ClassVar[str] = "add"

    path: tuple[Segment, ...]
    value: Any

    def __post_init__(self):
        object.__setattr__(self, 'path', tuple(self.path))

    def __repr__(self) -> str:
        return f"AddPatch({format_path(self.path)}: {self.value!r})"


@dataclass(frozen=True, slots=True)
class RemovePatch(Patch):
    """`orig_value` was removed from `path`."""
    op: ClassVar[str] = "remove"

    path: tuple[Segment, ...]
    orig_value: Any

    def __post_init__(self):
        object.__setattr__(self, 'path', tuple(self.path))

    def __repr__(self) -> str:
        return f"RemovePatch({format_path(self.path)}: {self.orig_value!r})"


@dataclass(frozen=True, slots=True)
class ReplacePatch(Patch):
    """The value at `path` went from `orig_value` to `value`."""
    op: ClassVar[str] = "replace"

    path: tuple[Segment, ...]
    value: Any
    orig_value: Any

    def __post_init__(self):
        object.__setattr__(self, 'path', tuple(self.path))

    def __repr__(self) -> str:
        return (f"ReplacePatch({format_path(self.path)}: "
                f"{self.orig_value!r} → {self.value!r})")


# ═══════════════════════════════════════════════════════════════════
#  CONTAINER ACCESS
# ═══════════════════════════════════════════════════════════════════

def _is_sequence(obj: Any) -> bool:
    return isinstance(obj, MutableSequence)


def _is_container(obj: Any) -> bool:
    return isinstance(obj, (MutableSequence, MutableMapping))


def _as_index(segment: Segment) -> Optional[int]:
    """
    Read a segment as a sequence index.

    Ints pass through, decimal strings ("0", "12", "-1") are parsed,
    anything else is not an index and gives None.  Range is NOT checked
    here; callers decide what an out-of-range index means.
    """
    # bool is a subclass of int, but True is not index 1
    if isinstance(segment, bool):
        return None
    if isinstance(segment, int):
        return segment
    if isinstance(segment, str) and _INDEX_RE.fullmatch(segment):
        return int(segment)
    return None


def _mapping_key(container: Any, segment: Segment) -> Any:
    """
    Key a segment names in a mapping.

    Mappings are string-keyed, so an int segment names the key
    str(segment), which is also where the forward apply writes it.  A
    mapping that really holds the int key keeps being addressed by it.
    """
    if isinstance(segment, int) and not isinstance(segment, bool):
        key = str(segment)
        if key not in container and segment in container:
            return segment
        return key
    return segment


def _child(container: Any, segment: Segment) -> Any:
    """Value stored under `segment`, or MISSING for an empty slot."""
    if _is_sequence(container):
        index = _as_index(segment)
        if index is not None and 0 <= index < len(container):
            return container[index]
        return MISSING
    key = _mapping_key(container, segment)
    if key in container:
        return container[key]
    return MISSING


def _resolve_parent(base: Any, path: tuple) -> Any:
    """
    Walk all but the last segment; every stop must be a container.

    UnresolvablePath.depth is the index of the segment whose lookup
    gave a non-container (missing, scalar), or -1 when `base` itself
    is not a container.
    """
    if not _is_container(base):
        raise UnresolvablePath(path, -1)
    target = base
    for depth, segment in enumerate(path[:-1]):
        target = _child(target, segment)
        if not _is_container(target):
            raise UnresolvablePath(path, depth)
    return target


def _is_plain_sequence(obj: Any) -> bool:
    return isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray))


def _matches(current: Any, expected: Any) -> bool:
    """
    Does the live value equal what the record claims?

    Identity first, then ==.  Records hold snapshots, so a container
    value is never the same object as the live one and must compare
    by value.  bool vs non-bool never matches (True == 1 in Python),
    at any depth: [True] does not match [1].
    """
    if current is expected:
        return True
    if current is MISSING or expected is MISSING:
        return False
    if isinstance(current, bool) != isinstance(expected, bool):
        return False
    if not current == expected:
        return False
    if isinstance(current, Mapping) and isinstance(expected, Mapping):
        return all(_matches(current[k], expected[k]) for k in current)
    if _is_plain_sequence(current) and _is_plain_sequence(expected):
        return all(_matches(c, e) for c, e in zip(current, expected))
    return True


# ═══════════════════════════════════════════════════════════════════
#  REVERT
# ═══════════════════════════════════════════════════════════════════

def revert_patch(base: Any, patch: Patch) -> Any:
    """
    **Mutate** `base` so it is back in the state before `patch`.

    Returns the root to use from now on.  It is `base` itself except
    for a root-level ReplacePatch (empty path), where the whole value
    was swapped and the previous value is returned instead.

    Raises:
        InvalidPatch:      add/remove with an empty path, or replacing
                           the "length" of a sequence
        UnresolvablePath:  an intermediate segment is not a container
        StalePatch:        the target does not hold what `patch` says
    """
    if not isinstance(patch, Patch):
        raise TypeError(f"Unknown patch type: {type(patch)}")

    path = patch.path
    if not path:
        if isinstance(patch, ReplacePatch):
            logger.debug("revert replace at (root)")
            return patch.orig_value
        raise InvalidPatch(
            f'Invalid patch: path cannot be empty in "{patch.op}" patches',
            path,
        )

    target = _resolve_parent(base, path)
    prop = path[-1]

    if isinstance(patch, AddPatch):
        _revert_add(target, prop, patch)
    elif isinstance(patch, (RemovePatch, ReplacePatch)):
        _revert_assignment(target, prop, patch)
    else:
        raise TypeError(f"Unknown patch type: {type(patch)}")

    logger.debug("revert %s at %s", patch.op, format_path(path))
    return base


def _revert_assignment(target: Any, prop: Segment,
                       patch: Union[RemovePatch, ReplacePatch]) -> None:
    """Undo a "remove" or "replace": put `orig_value` back."""
    path = patch.path
    is_remove = isinstance(patch, RemovePatch)

    if _is_sequence(target):
        if not is_remove and prop == LENGTH_SEGMENT:
            raise InvalidPatch('Patches cannot set "length" of a sequence', path)

        index = _as_index(prop)
        if is_remove and index is not None and 0 <= index <= len(target):
            # Removal shifted the tail left; shift it back right
            if index == 0:
                target.insert(0, patch.orig_value)
            elif index == len(target):
                target.append(patch.orig_value)
            else:
                target.insert(index, patch.orig_value)
            return

        if is_remove:
            # No position to reinsert at, and sequences hold no named slots
            raise StalePatch(
                path, MISSING, MISSING,
                reason=f"sequence of length {len(target)} has no slot {prop!r}",
            )

    current = _child(target, prop)
    if is_remove:
        if current is not MISSING:
            raise StalePatch(path, MISSING, current,
                             reason=f"removed key still holds {current!r}")
    elif not _matches(current, patch.value):
        raise StalePatch(path, patch.value, current)

    if _is_sequence(target):
        # _matches passed, so the index is in range
        target[_as_index(prop)] = patch.orig_value
    else:
        target[_mapping_key(target, prop)] = patch.orig_value


def _revert_add(target: Any, prop: Segment, patch: AddPatch) -> None:
    """Undo an "add": delete what was inserted."""
    index: Optional[int] = None
    if _is_sequence(target):
        index = len(target) - 1 if prop == APPEND_SEGMENT else _as_index(prop)
        if index is not None and not 0 <= index < len(target):
            index = None
        # Outside [0, len) the segment is a plain property lookup, and a
        # Python sequence has no properties: the slot is empty.
        current = target[index] if index is not None else MISSING
    else:
        current = _child(target, prop)

    if not _matches(current, patch.value):
        raise StalePatch(patch.path, patch.value, current)

    # Insertion shifted the tail right; shift it back left
    if index is None:
        del target[_mapping_key(target, prop)]
    elif index == 0:
        target.pop(0)
    elif index == len(target) - 1:
        target.pop()
    else:
        del target[index]


# ═══════════════════════════════════════════════════════════════════
#  INVERT
# ═══════════════════════════════════════════════════════════════════

def invert_patch(patch: Patch) -> Patch:
    """
    The exact opposite of `patch`.

    Forward-applying the result has the same effect as reverting
    `patch`.  Pure: no structure is needed or touched.
    """
    if isinstance(patch, AddPatch):
        return RemovePatch(patch.path, patch.value)
    if isinstance(patch, RemovePatch):
        return AddPatch(patch.path, patch.orig_value)
    if isinstance(patch, ReplacePatch):
        return ReplacePatch(patch.path, patch.orig_value, patch.value)
    raise TypeError(f"Unknown patch type: {type(patch)}")


def invert_patches(patches: Iterable[Patch]) -> list[Patch]:
    """
    Inverse of a whole patch list.

    Newest first, so forward-applying the result in order undoes the
    original list.
    """
    return [invert_patch(p) for p in reversed(list(patches))]
