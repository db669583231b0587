"""
revpatch.history — Undo/redo log over patch records.

Two stacks, both oldest first:

    history   patches currently applied     (undo pops here)
    undone    patches currently reverted    (redo pops here)

undo moves the newest record from `history` to `undone` and reverts
it; redo moves it back and re-applies it.  A record is always on
exactly one stack, so

    history + reversed(undone)

is every patch ever produced, in production order.

The caller owns both the structure and the arrival of new patches:
to record a change just do `h.history.append(patch)`.  Records may be
patch objects or wire dicts.
"""

import logging
from typing import Any, Callable, Optional

from .apply import apply_patch
from .core import revert_patch
from .formats import coerce_patch

logger = logging.getLogger(__name__)


class PatchHistory:
    """
    Undo/redo over a caller-owned structure.

    Arguments:
        history:  initial applied patches, oldest first.  The list is
                  used by reference, not copied.
        apply:    forward-apply function `(base, patch) -> base'`
                  used by redo.  Defaults to revpatch.apply.apply_patch.

    undo/redo **mutate** the structure passed in and return the root to
    use from now on (it changes only for root-level replaces).
    """

    def __init__(self, history: Optional[list] = None,
                 apply: Optional[Callable[[Any, Any], Any]] = None):
        self.history: list = history if history is not None else []
        self.undone: list = []
        self._apply = apply or apply_patch

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    @property
    def can_redo(self) -> bool:
        return bool(self.undone)

    def undo(self, base: Any, n: int = 1) -> Any:
        """Revert up to `n` of the newest applied patches."""
        while n > 0 and self.history:
            patch = self.history.pop()
            self.undone.append(patch)
            base = revert_patch(base, coerce_patch(patch))
            n -= 1
        logger.debug("undo: %d applied, %d undone",
                     len(self.history), len(self.undone))
        return base

    def redo(self, base: Any, n: int = 1) -> Any:
        """Re-apply up to `n` of the most recently undone patches."""
        while n > 0 and self.undone:
            patch = self.undone.pop()
            self.history.append(patch)
            base = self._apply(base, patch)
            n -= 1
        logger.debug("redo: %d applied, %d undone",
                     len(self.history), len(self.undone))
        return base

    def __len__(self) -> int:
        return len(self.history) + len(self.undone)

    def __repr__(self) -> str:
        return (f"PatchHistory(applied={len(self.history)}, "
                f"undone={len(self.undone)})")
