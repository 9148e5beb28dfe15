"""Navigation history and deeplink handling."""

from screenflow.navigation.deeplinks import (
    NEXT_SCREEN,
    PREV_SCREEN,
    resolve_deeplink,
    rewrite_placeholder_deeplinks,
)
from screenflow.navigation.navigator import Navigator
from screenflow.navigation.stack import NavigationStack

__all__ = [
    "NEXT_SCREEN",
    "PREV_SCREEN",
    "NavigationStack",
    "Navigator",
    "resolve_deeplink",
    "rewrite_placeholder_deeplinks",
]
