"""Run one action invocation from guard check to usage metrics.

Usage
-----
A bot's entry point hands its handler set to :func:`run_action`:

>>> class Greeter(IssueHandlers):
...     async def on_opened(self, issue):
...         await issue.post_comment("Thanks for the report!")
>>> outcome = asyncio.run(run_action(Greeter()))

"""

from __future__ import annotations

import enum
import typing as typ
import uuid

import httpx

from triagekit.github import (
    GitHubAPIError,
    GitHubClientConfig,
    GitHubRepoClient,
    GitHubResponseShapeError,
    GitHubTransport,
)
from triagekit.logging import get_logger, log_info, log_warning

from .config import ActionSettings
from .context import EventContext
from .identity import IdentityResolver
from .reporter import ErrorReporter, describe_error, failure_message
from .router import EventRouter
from .telemetry import LoggingTelemetrySink, TelemetryEmitter, TelemetrySink
from .workflow import RunOutcome, safe_log, stop_commands

if typ.TYPE_CHECKING:
    from .config import LoopGuardConfig

logger = get_logger(__name__)

REFUSAL_MESSAGE = "refusing to run on error logging issue to prevent cascading errors"
REQUEST_COUNT_METRIC = "octokit_request_count"
USAGE_METRICS = ("usage_core", "usage_graphql", "usage_search")


class LifecycleEventType(enum.StrEnum):
    """Structured log event types for a run."""

    RUN_REFUSED = "action.run.refused"
    RUN_COMPLETED = "action.run.completed"
    REPORT_FAILED = "action.report.failed"
    USAGE_UNAVAILABLE = "action.usage.unavailable"


class RunLifecycle:
    """Orchestrate a single run of a bot.

    Parameters
    ----------
    handlers
        The bot's handler set, usually an ``IssueHandlers`` subclass.
    context
        The event being handled.
    client
        Repository-scoped client for the event's repository; its request
        counter is read once the run's work is done.
    error_issue
        Where errors are reported; events on this issue are refused.
    telemetry_sink
        Optional telemetry backend.
    identity
        Override the name lookup; defaults to resolving ``client``'s account.

    """

    def __init__(  # noqa: PLR0913
        self,
        handlers: object,
        *,
        context: EventContext,
        client: GitHubRepoClient,
        error_issue: LoopGuardConfig | None = None,
        telemetry_sink: TelemetrySink | None = None,
        identity: IdentityResolver | None = None,
    ) -> None:
        """Prepare the run; the identity lookup starts immediately."""
        self.run_id = uuid.uuid4().hex
        self.outcome = RunOutcome()
        self._context = context
        self._client = client
        self._error_issue = error_issue
        self.identity = identity or IdentityResolver.from_client(client)
        self.telemetry = TelemetryEmitter(
            telemetry_sink, context=context, run_id=self.run_id, identity=self.identity
        )
        self.router = EventRouter(handlers, client)
        self.reporter = ErrorReporter(
            client=client,
            destination=error_issue,
            context=context,
            run_id=self.run_id,
            identity=self.identity,
            telemetry=self.telemetry,
            outcome=self.outcome,
        )

    def _targets_error_issue(self) -> bool:
        guard = self._error_issue
        return guard is not None and guard.matches(
            self._context.owner, self._context.repo, self._context.issue_number
        )

    async def run(self) -> RunOutcome:
        """Dispatch the event, report any failure, then emit usage metrics."""
        if self._targets_error_issue():
            self.identity.cancel()
            safe_log(REFUSAL_MESSAGE)
            log_info(
                logger,
                "[%s] run_id=%s issue=%s",
                LifecycleEventType.RUN_REFUSED,
                self.run_id,
                self._error_issue,
            )
            return self.outcome

        try:
            await self.router.dispatch(self._context)
        except Exception as exc:  # noqa: BLE001 - every handler failure is reported
            await self._recover(exc)

        await self._emit_usage()
        log_info(
            logger,
            "[%s] run_id=%s repo=%s failed=%s",
            LifecycleEventType.RUN_COMPLETED,
            self.run_id,
            self._context.slug,
            self.outcome.failed,
        )
        return self.outcome

    async def _recover(self, error: Exception) -> None:
        try:
            await self.reporter.report(error)
        except Exception as report_error:  # noqa: BLE001 - no further escalation path
            log_warning(
                logger,
                "[%s] run_id=%s error_type=%s error_message=%s",
                LifecycleEventType.REPORT_FAILED,
                self.run_id,
                type(report_error).__name__,
                report_error,
            )
            safe_log(describe_error(error))
            self.outcome.set_failed(failure_message(error))

    async def _emit_usage(self) -> None:
        # The identity lookup shares the counted transport; settle it first.
        await self.identity.get()
        await self.telemetry.track(REQUEST_COUNT_METRIC, self._client.counter.count)
        try:
            usage = await self._client.get_rate_limit()
        except (GitHubAPIError, GitHubResponseShapeError, httpx.HTTPError) as exc:
            log_warning(
                logger,
                "[%s] run_id=%s error_type=%s error_message=%s",
                LifecycleEventType.USAGE_UNAVAILABLE,
                self.run_id,
                type(exc).__name__,
                exc,
            )
            return
        categories = (usage.core, usage.graphql, usage.search)
        for name, category in zip(USAGE_METRICS, categories, strict=True):
            await self.telemetry.track(name, category.remaining)


async def run_action(
    handlers: object,
    *,
    settings: ActionSettings | None = None,
    context: EventContext | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> RunOutcome:
    """Run ``handlers`` against the event described by the environment.

    Workflow commands are stopped before the payload is read. Settings and
    context default to :meth:`ActionSettings.from_env` and
    :meth:`EventContext.from_env`; configuration errors propagate.
    """
    stop_commands()
    settings = settings or ActionSettings.from_env()
    context = context or EventContext.from_env()

    transport = GitHubTransport(
        GitHubClientConfig.from_env(settings.token), http_client=http_client
    )
    client = GitHubRepoClient(
        transport, context.owner, context.repo, readonly=settings.readonly
    )
    sink = LoggingTelemetrySink() if settings.telemetry else None
    try:
        lifecycle = RunLifecycle(
            handlers,
            context=context,
            client=client,
            error_issue=settings.error_issue,
            telemetry_sink=sink,
        )
        return await lifecycle.run()
    finally:
        await transport.aclose()
