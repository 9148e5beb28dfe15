"""
Diagnostic codes for the screen interaction engine.

These constants identify recoverable conditions reported in a
DispatchResult. None of them are raised to the caller.
"""

# Event identifier not found on the active screen or its elements
DIAG_EVENT_NOT_FOUND = "event_not_found"

# Event-level conditions evaluated to false; no actions ran
DIAG_EVENT_CONDITIONS_FAILED = "event_conditions_failed"

# Trigger arrived before any screen was activated
DIAG_NO_ACTIVE_SCREEN = "no_active_screen"

# Navigation target could not be resolved to a screen
DIAG_NAVIGATION_UNRESOLVED = "navigation_unresolved"

# Service call has no wired handler
DIAG_SERVICE_UNWIRED = "service_unwired"

# Service handler raised
DIAG_SERVICE_FAILED = "service_failed"

# Gesture-sensitive tool published without a direct callback
DIAG_GESTURE_FALLBACK = "gesture_fallback"

# Action type not handled by the executor
DIAG_UNKNOWN_ACTION = "unknown_action"

# Any other action failure
DIAG_ACTION_FAILED = "action_failed"

# Trigger dropped or queued because a dispatch was in flight
DIAG_TRIGGER_DROPPED = "trigger_dropped"
DIAG_TRIGGER_QUEUED = "trigger_queued"

# Voice-layer tool call the session does not understand
DIAG_UNKNOWN_TOOL_CALL = "unknown_tool_call"
