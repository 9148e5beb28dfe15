"""Deeplink resolution and placeholder rewriting.

Deeplinks follow ``https://<host>/<moduleId>/<screenId>``; only the final
path segment of a URL is ever used, including host-less forms such as
``app:onboarding/welcome``. Bare strings are taken as screen ids.

The placeholders ``next-screen`` and ``prev-screen`` are resolved only by
:func:`rewrite_placeholder_deeplinks`, which the authoring tool runs after
each structural edit of the screen list. They are never resolved at
navigation time.
"""

import logging
import re
from collections.abc import Sequence
from urllib.parse import urlparse

from screenflow.document.models import (
    EventAction,
    NavigationAction,
    Screen,
    ScreenEvent,
    ServiceCallAction,
)

logger = logging.getLogger(__name__)

NEXT_SCREEN = "next-screen"
PREV_SCREEN = "prev-screen"


# Any "scheme:" prefix makes a URL, with or without a host (app:onboarding/welcome)
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def _is_url(link: str) -> bool:
    return _SCHEME.match(link) is not None


def resolve_deeplink(link: str) -> str | None:
    """Extract the target screen id from a deeplink.

    Examples:
        >>> resolve_deeplink("https://links.example.com/onboarding/welcome")
        'welcome'
        >>> resolve_deeplink("welcome")
        'welcome'
        >>> resolve_deeplink("https://links.example.com/") is None
        True
    """
    if not link:
        return None
    if not _is_url(link):
        return link

    segments = [part for part in urlparse(link).path.split("/") if part]
    return segments[-1] if segments else None


def _placeholder_target(link: str) -> str:
    """Target used for placeholder matching (falls back to the raw link)."""
    return resolve_deeplink(link) or link


def _rewrite_actions(
    actions: list[EventAction], next_id: str | None, prev_id: str | None
) -> int:
    rewritten = 0
    for action in actions:
        if isinstance(action, ServiceCallAction):
            rewritten += _rewrite_actions(action.on_success, next_id, prev_id)
            rewritten += _rewrite_actions(action.on_error, next_id, prev_id)
            continue
        if not isinstance(action, NavigationAction):
            continue

        target = _placeholder_target(action.deeplink)
        if target == NEXT_SCREEN and next_id:
            action.deeplink = next_id
            rewritten += 1
        elif target == PREV_SCREEN and prev_id:
            action.deeplink = prev_id
            rewritten += 1
    return rewritten


def _rewrite_events(events: list[ScreenEvent], next_id: str | None, prev_id: str | None) -> int:
    return sum(_rewrite_actions(event.actions, next_id, prev_id) for event in events)


def rewrite_placeholder_deeplinks(screens: Sequence[Screen]) -> list[Screen]:
    """Replace next/prev placeholders with neighbouring screen ids.

    Walks screen-level and element-level events of every screen. A
    placeholder without a neighbour in that direction is left untouched.
    The input screens are not modified; running the rewrite again on its
    own output changes nothing.

    Args:
        screens: Screens in document order.

    Returns:
        New list of rewritten screens.
    """
    result = [screen.model_copy(deep=True) for screen in screens]
    total = 0

    for index, screen in enumerate(result):
        next_id = result[index + 1].id if index + 1 < len(result) else None
        prev_id = result[index - 1].id if index > 0 else None

        total += _rewrite_events(screen.events, next_id, prev_id)
        for section in screen.sections:
            for element in section.elements:
                total += _rewrite_events(element.events, next_id, prev_id)

    logger.info(f"Rewrote {total} placeholder deeplinks across {len(result)} screens")
    return result
