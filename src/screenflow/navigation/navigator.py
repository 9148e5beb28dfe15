"""Active-screen tracking on top of the navigation stack."""

import logging

from screenflow.core.errors import SessionError
from screenflow.core.state import StateStore
from screenflow.core.types import StateScope
from screenflow.document.models import ModuleDocument, Screen
from screenflow.navigation.stack import NavigationStack

logger = logging.getLogger(__name__)


class Navigator:
    """Keeps the active screen, the stack and screen state in step.

    Every screen change re-seeds screen scope from the new screen's
    declared initial state. Module scope is never touched.
    """

    def __init__(self, document: ModuleDocument, store: StateStore, stack: NavigationStack):
        self.document = document
        self.store = store
        self.stack = stack
        self.current_screen: Screen | None = None

    def activate(self, screen_id: str | None = None) -> Screen:
        """Start (or restart) on a screen, resetting history.

        Raises:
            SessionError: If the document has no such screen.
        """
        target = screen_id or self.document.start_screen_id
        screen = self.document.get_screen(target) if target else None
        if screen is None:
            raise SessionError("Cannot activate unknown screen", screen=target)

        self.stack.clear()
        self._enter(screen)
        logger.info(f"Activated screen '{screen.id}'")
        return screen

    def navigate_to(self, screen_id: str) -> Screen | None:
        """Push a screen and make it active.

        Returns:
            The new screen, or None (state untouched) if it does not exist.
        """
        screen = self.document.get_screen(screen_id)
        if screen is None:
            return None
        self._enter(screen)
        return screen

    def go_back(self) -> Screen | None:
        """Return to the previous screen, if there is one.

        Returns:
            The screen now active, or None when already on the first screen.
        """
        if not self.stack.can_go_back:
            return None

        previous_id = self.stack.pop()
        screen = self.document.get_screen(previous_id) if previous_id else None
        if screen is None:
            return None
        self.current_screen = screen
        self.store.reset(StateScope.screen, screen.state)
        logger.debug(f"Went back to screen '{screen.id}'")
        return screen

    def _enter(self, screen: Screen) -> None:
        self.stack.push(screen.id)
        self.current_screen = screen
        self.store.reset(StateScope.screen, screen.state)
