"""Dispatch results, diagnostics and host signals."""

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

logger = logging.getLogger(__name__)

# Where a trigger came from
TriggerSource = Literal["ui", "voice"]

# Kinds of signal the host must act on
SignalKind = Literal["closeModule", "custom", "serviceCall"]


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem met during dispatch."""

    code: str
    message: str
    event_id: str | None = None
    action_index: int | None = None


@dataclass(frozen=True)
class HostSignal:
    """A terminal request surfaced to the host application."""

    kind: SignalKind
    name: str | None = None
    flow_completed: bool = False
    parameters: dict[str, Any] = field(default_factory=dict)
    event_id: str | None = None


@dataclass
class DispatchResult:
    """Outcome of one trigger."""

    event_id: str
    source: TriggerSource = "ui"
    screen_id: str | None = None
    found: bool = False
    scope: Literal["screen", "element"] | None = None
    queued: bool = False
    executed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    signals: list[HostSignal] = field(default_factory=list)

    def diagnose(self, code: str, message: str, action_index: int | None = None) -> None:
        """Record and log a diagnostic."""
        logger.warning(f"[{self.event_id}] {message}")
        self.diagnostics.append(
            Diagnostic(
                code=code, message=message, event_id=self.event_id, action_index=action_index
            )
        )

    def has_diagnostic(self, code: str) -> bool:
        return any(d.code == code for d in self.diagnostics)

    @property
    def ran(self) -> bool:
        """True if the event was found and at least one action executed."""
        return self.found and bool(self.executed)
