"""Event dispatch and failure recovery for repository-automation bots."""

from __future__ import annotations

from .config import ActionSettings, LoopGuardConfig
from .context import EventContext, EventPayload
from .errors import (
    ActionConfigError,
    EventPayloadError,
    HandlerNotImplementedError,
    TriageActionError,
    UnexpectedActionError,
)
from .handlers import HANDLER_NAMES, IssueHandlers
from .identity import UNKNOWN_ACTOR, IdentityResolver
from .lifecycle import RunLifecycle, run_action
from .reporter import ErrorReport, ErrorReporter
from .router import EventRouter
from .telemetry import LoggingTelemetrySink, Metric, TelemetryEmitter, TelemetrySink
from .workflow import RunOutcome, safe_log

__all__ = [
    "HANDLER_NAMES",
    "UNKNOWN_ACTOR",
    "ActionConfigError",
    "ActionSettings",
    "ErrorReport",
    "ErrorReporter",
    "EventContext",
    "EventPayload",
    "EventPayloadError",
    "EventRouter",
    "HandlerNotImplementedError",
    "IdentityResolver",
    "IssueHandlers",
    "LoggingTelemetrySink",
    "LoopGuardConfig",
    "Metric",
    "RunLifecycle",
    "RunOutcome",
    "TelemetryEmitter",
    "TelemetrySink",
    "TriageActionError",
    "UnexpectedActionError",
    "run_action",
    "safe_log",
]
