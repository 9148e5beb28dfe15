"""Structural validation of loaded screen documents."""

import logging
from collections import Counter

from screenflow.core.errors import DocumentError
from screenflow.document.models import ModuleDocument, Screen

logger = logging.getLogger(__name__)


class DocumentValidator:
    """Checks invariants a pydantic schema cannot express.

    Fatal problems raise DocumentError. Ambiguities that the runtime
    resolves by a fixed rule (duplicate event ids) are returned as
    warnings and logged.
    """

    def __init__(self, document: ModuleDocument):
        self.document = document

    def validate(self) -> list[str]:
        """Validate the document.

        Returns:
            Warning messages (possibly empty).

        Raises:
            DocumentError: If screen ids collide or the initial screen is unknown.
        """
        self._validate_screen_ids()
        self._validate_initial_screen()

        warnings: list[str] = []
        for screen in self.document.screens:
            warnings.extend(self._event_id_warnings(screen))

        for message in warnings:
            logger.warning(message)
        return warnings

    def _validate_screen_ids(self) -> None:
        counts = Counter(screen.id for screen in self.document.screens)
        duplicates = sorted(screen_id for screen_id, count in counts.items() if count > 1)
        if duplicates:
            raise DocumentError(
                "Duplicate screen ids in document",
                module=self.document.id,
                screens=duplicates,
            )

    def _validate_initial_screen(self) -> None:
        initial = self.document.initial_screen
        if initial and self.document.get_screen(initial) is None:
            raise DocumentError(
                f"Initial screen '{initial}' not found in document",
                module=self.document.id,
            )

    def _event_id_warnings(self, screen: Screen) -> list[str]:
        warnings = []
        screen_ids = [event.id for event in screen.events]
        element_ids = [event.id for event in screen.element_events()]

        for label, ids in (("screen", screen_ids), ("element", element_ids)):
            repeated = sorted(i for i, count in Counter(ids).items() if count > 1)
            if repeated:
                warnings.append(
                    f"Screen '{screen.id}': duplicate {label}-level event ids {repeated}; "
                    "the first declared wins"
                )

        shadowed = sorted(set(screen_ids) & set(element_ids))
        if shadowed:
            warnings.append(
                f"Screen '{screen.id}': event ids {shadowed} exist at screen and element "
                "level; screen-level events take precedence"
            )
        return warnings
