"""
Reversible Structural Patching
==============================

Undo JSON-Patch-like records on nested dicts and lists.

    revert_patch({"a": 1}, AddPatch(("a",), 1))          → {}
    revert_patch([1, 2], AddPatch(("-",), 2))            → [1]
    invert_patch(RemovePatch(("a",), 1))                 → AddPatch(("a",), 1)

Every record carries what is needed to go back (`orig_value`), so a
single patch can be reverted in place, inverted into its opposite, or
kept in an undo/redo log:

    h = PatchHistory([AddPatch(("a",), 1), RemovePatch(("b",), 1)])
    state = h.undo({"a": 1}, 2)     → {"b": 1}
    state = h.redo(state, 2)        → {"a": 1}

Reverts check the live value against the record first and raise
StalePatch rather than corrupt a structure the record no longer fits.
"""

from revpatch.core import (
    # Types
    Patch,
    AddPatch,
    RemovePatch,
    ReplacePatch,
    # Operations
    revert_patch,
    invert_patch,
    invert_patches,
)
from revpatch.errors import (
    MISSING, PatchError, InvalidPatch, UnresolvablePath, StalePatch,
)
from revpatch.formats import (
    from_dict, to_dict, from_json, to_json, coerce_patch, to_pointer,
)
from revpatch.apply import apply_patch
from revpatch.history import PatchHistory

__version__ = "0.1.0"
__all__ = [
    "Patch", "AddPatch", "RemovePatch", "ReplacePatch",
    "revert_patch", "invert_patch", "invert_patches",
    "MISSING", "PatchError", "InvalidPatch", "UnresolvablePath", "StalePatch",
    "from_dict", "to_dict", "from_json", "to_json", "coerce_patch", "to_pointer",
    "apply_patch",
    "PatchHistory",
]
