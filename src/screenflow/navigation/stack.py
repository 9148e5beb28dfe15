"""Navigation history of visited screens."""

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class NavigationStack:
    """Ordered history of visited screen identifiers.

    The current screen is always the top entry. Once a screen has been
    pushed the stack never becomes empty again: popping the last entry is
    a no-op.
    """

    def __init__(self, history: Iterable[str] | None = None) -> None:
        self._stack: list[str] = list(history or [])

    def push(self, screen_id: str) -> None:
        """Push a screen onto the stack."""
        self._stack.append(screen_id)
        logger.debug(f"Pushed screen '{screen_id}' (depth={len(self._stack)})")

    def pop(self) -> str | None:
        """Pop the top screen if more than one entry remains.

        Returns:
            The new current screen id, or None if the stack is empty.
        """
        if len(self._stack) <= 1:
            logger.debug("pop skipped: first activated screen cannot be popped")
            return self.current

        popped = self._stack.pop()
        logger.debug(f"Popped screen '{popped}', back on '{self.current}'")
        return self.current

    def clear(self) -> None:
        """Drop all history (used when a session is re-activated)."""
        self._stack.clear()

    @property
    def current(self) -> str | None:
        """Currently active screen id."""
        return self._stack[-1] if self._stack else None

    @property
    def history(self) -> list[str]:
        """Copy of the stack, bottom first."""
        return list(self._stack)

    @property
    def can_go_back(self) -> bool:
        return len(self._stack) > 1

    def __len__(self) -> int:
        return len(self._stack)

    def __repr__(self) -> str:
        return f"NavigationStack({self._stack!r})"
