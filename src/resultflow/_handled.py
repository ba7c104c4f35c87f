"""One-shot flag guarding reactive dispatch on a Result instance.

The flag lives in its own object so the Result around it can stay a frozen
value while reactive calls mutate only this cell.
"""

from __future__ import annotations

import threading


class HandledCell:
    """A boolean that can be claimed exactly once."""

    __slots__ = ("_handled", "_lock")

    def __init__(self) -> None:
        self._handled = False
        self._lock = threading.Lock()

    @property
    def is_set(self) -> bool:
        """Whether the flag has been claimed."""
        return self._handled

    def claim(self) -> bool:
        """Set the flag; return True only for the caller that set it."""
        with self._lock:
            if self._handled:
                return False
            self._handled = True
            return True

    def __repr__(self) -> str:
        return f"HandledCell(handled={self._handled})"
