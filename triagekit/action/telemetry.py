"""Optional metric and exception telemetry for a run.

Metrics are tagged with the repository, issue, run id and acting user so
every figure from one run can be correlated with its error report. Without a
sink, tracking is a no-op; with one, sink failures are logged and dropped.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import enum
import typing as typ

from triagekit.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from .context import EventContext
    from .identity import IdentityResolver

logger = get_logger(__name__)

NO_ISSUE = "none"


class TelemetryEventType(enum.StrEnum):
    """Structured log event types written by :class:`LoggingTelemetrySink`."""

    METRIC = "telemetry.metric"
    EXCEPTION = "telemetry.exception"


@dataclasses.dataclass(frozen=True, slots=True)
class Metric:
    """A named numeric measurement with its correlation properties."""

    name: str
    value: float
    properties: cabc.Mapping[str, str] = dataclasses.field(default_factory=dict)


class TelemetrySink(typ.Protocol):
    """Backend that receives metrics and exceptions."""

    def track_metric(self, metric: Metric) -> None:
        """Record ``metric``."""
        ...

    def track_exception(
        self, error: BaseException, properties: cabc.Mapping[str, str]
    ) -> None:
        """Record ``error``."""
        ...


def _render_properties(properties: cabc.Mapping[str, str]) -> str:
    return " ".join(f"{key}={value}" for key, value in sorted(properties.items()))


class LoggingTelemetrySink:
    """Write telemetry as structured log events for log aggregators."""

    def track_metric(self, metric: Metric) -> None:
        """Log ``metric`` at INFO."""
        log_info(
            logger,
            "[%s] name=%s value=%s %s",
            TelemetryEventType.METRIC,
            metric.name,
            metric.value,
            _render_properties(metric.properties),
        )

    def track_exception(
        self, error: BaseException, properties: cabc.Mapping[str, str]
    ) -> None:
        """Log ``error`` at ERROR with its traceback attached."""
        log_error(
            logger,
            "[%s] error_type=%s error_message=%s %s",
            TelemetryEventType.EXCEPTION,
            type(error).__name__,
            error,
            _render_properties(properties),
            exc_info=error,
        )


class TelemetryEmitter:
    """Tag and forward telemetry for one run."""

    def __init__(
        self,
        sink: TelemetrySink | None,
        *,
        context: EventContext,
        run_id: str,
        identity: IdentityResolver,
    ) -> None:
        """Attribute telemetry to ``context``, ``run_id`` and ``identity``."""
        self._sink = sink
        self._context = context
        self._run_id = run_id
        self._identity = identity

    @property
    def enabled(self) -> bool:
        """Return whether a sink is configured."""
        return self._sink is not None

    async def properties(self) -> dict[str, str]:
        """Return the correlation properties attached to every record."""
        issue = self._context.issue_number
        return {
            "repo": self._context.slug,
            "issue": NO_ISSUE if issue is None else str(issue),
            "id": self._run_id,
            "user": await self._identity.get(),
        }

    async def track(self, name: str, value: float) -> None:
        """Record metric ``name``; never raises."""
        if self._sink is None:
            return
        metric = Metric(name=name, value=value, properties=await self.properties())
        try:
            self._sink.track_metric(metric)
        except Exception as exc:  # noqa: BLE001 - telemetry is best-effort
            log_warning(logger, "telemetry sink rejected metric %s: %s", name, exc)

    async def track_exception(self, error: BaseException) -> None:
        """Record ``error``; never raises."""
        if self._sink is None:
            return
        properties = await self.properties()
        try:
            self._sink.track_exception(error, properties)
        except Exception as exc:  # noqa: BLE001 - telemetry is best-effort
            log_warning(logger, "telemetry sink rejected exception: %s", exc)
