"""Declarative screen documents: models, loading and validation."""

from screenflow.document.loader import DocumentLoader
from screenflow.document.models import (
    CloseModuleAction,
    CustomAction,
    Element,
    EventAction,
    EventConditions,
    ModuleDocument,
    NavigationAction,
    ResponseMapping,
    Screen,
    ScreenEvent,
    Section,
    ServiceCallAction,
    StateUpdateAction,
    ToolCallAction,
)
from screenflow.document.validators import DocumentValidator

__all__ = [
    "CloseModuleAction",
    "CustomAction",
    "DocumentLoader",
    "DocumentValidator",
    "Element",
    "EventAction",
    "EventConditions",
    "ModuleDocument",
    "NavigationAction",
    "ResponseMapping",
    "Screen",
    "ScreenEvent",
    "Section",
    "ServiceCallAction",
    "StateUpdateAction",
    "ToolCallAction",
]
