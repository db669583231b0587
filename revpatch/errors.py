"""
revpatch.errors — Failure modes of patch reversal.

Every error is fatal for the call that raised it.  Nothing in revpatch
catches these; a multi-step undo that fails part way keeps the steps
it already made.

    PatchError
     ├── InvalidPatch       record contradicts its own op
     ├── UnresolvablePath   structure and record disagree on shape
     └── StalePatch         current value is not what the record says
"""

from typing import Any


class _Missing:
    """Marker for an empty slot (absent key, index past the end)."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def format_path(path) -> str:
    """Render a path for messages: ('a', 0) → /a/0, () → (root)."""
    return "/" + "/".join(str(p) for p in path) if path else "(root)"


class PatchError(Exception):
    """Base class for everything revpatch raises."""

    def __init__(self, message: str, path=()):
        super().__init__(message)
        self.path = tuple(path)


class InvalidPatch(PatchError):
    """The record is inconsistent with its own operation kind."""


class UnresolvablePath(PatchError):
    """An intermediate path segment does not lead to a container."""

    def __init__(self, path, depth: int):
        where = "root is not a container" if depth < 0 else f"stopped at segment {depth}"
        super().__init__(
            f"Cannot revert patch. Path does not resolve: {format_path(path)} ({where})",
            path,
        )
        self.depth = depth


class StalePatch(PatchError):
    """
    The target does not hold what the record expects.

    `expected` is the record's claim, `actual` what is really there
    (MISSING for an empty slot).  For a "remove" record the claim is
    that the key is absent, so `expected` is MISSING.
    """

    def __init__(self, path, expected: Any, actual: Any, reason: str = ""):
        if not reason:
            reason = f"target's current value {actual!r} doesn't match {expected!r}"
        super().__init__(
            f"Cannot revert patch at {format_path(path)}: {reason}", path
        )
        self.expected = expected
        self.actual = actual
