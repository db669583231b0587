"""
revpatch.apply — Forward-apply a patch record.

revpatch only knows how to go BACK.  Going forward is RFC 6902 JSON
Patch, which the `jsonpatch` library already implements; this module
translates a record into a one-operation JSON Patch and runs it in
place.

    apply_patch(revert_patch(s, p), p) == s     (for s produced by p)
"""

import logging
from collections.abc import Mapping
from typing import Any, Union

from jsonpatch import JsonPatch

from .core import RemovePatch, Patch
from .formats import coerce_patch, to_pointer

logger = logging.getLogger(__name__)


def apply_patch(base: Any, patch: Union[Patch, Mapping]) -> Any:
    """
    **Mutate** `base` by applying `patch`, return the new root.

    A root-level replace returns the new value instead of mutating.
    Conflicts surface as the library's own errors
    (jsonpatch.JsonPatchConflict, jsonpointer.JsonPointerException).
    """
    patch = coerce_patch(patch)
    operation = {"op": patch.op, "path": to_pointer(patch.path)}
    if not isinstance(patch, RemovePatch):
        operation["value"] = patch.value

    logger.debug("apply %s at %s", patch.op, operation["path"] or "(root)")
    return JsonPatch([operation]).apply(base, in_place=True)
