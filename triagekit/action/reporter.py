"""Turn a failed run into a comment on the error-logging issue."""

from __future__ import annotations

import dataclasses
import traceback
import typing as typ

from triagekit.common.slug import issue_reference

from .workflow import safe_log

if typ.TYPE_CHECKING:
    from triagekit.github import GitHubRepoClient

    from .config import LoopGuardConfig
    from .context import EventContext
    from .identity import IdentityResolver
    from .telemetry import TelemetryEmitter
    from .workflow import RunOutcome

_REPORT_TEMPLATE = """
Message: {message}

Actor: {user}

ID: {run_id}
"""

NO_DESTINATION_MESSAGE = "no error logging repo defined. swallowing error."


def describe_error(error: BaseException) -> str:
    """Return the most detailed text available for ``error``.

    Prefers the formatted traceback, then the message, then the repr.
    """
    if error.__traceback__ is not None:
        return "".join(traceback.format_exception(error)).rstrip()
    return str(error) or repr(error)


def failure_message(error: BaseException) -> str:
    """Return the one-line message used for the run's failed outcome."""
    return str(error) or type(error).__name__


@dataclasses.dataclass(frozen=True, slots=True)
class ErrorReport:
    """Rendered details of the error that ended a run."""

    message: str
    run_id: str
    user: str
    issue: int | None = None

    @classmethod
    def from_error(
        cls, error: BaseException, *, run_id: str, user: str, issue: int | None
    ) -> ErrorReport:
        """Capture ``error``'s message and traceback."""
        trace = "".join(traceback.format_exception(error)).rstrip()
        return cls(
            message=f"{failure_message(error)}\n{trace}",
            run_id=run_id,
            user=user,
            issue=issue,
        )

    def render(self) -> str:
        """Render the fixed report template."""
        return _REPORT_TEMPLATE.format(
            message=self.message, user=self.user, run_id=self.run_id
        )


def render_comment(report: ErrorReport, context: EventContext) -> str:
    """Render the comment posted to the error-logging issue."""
    lines = [f"Workflow: {context.workflow or 'unknown'}", ""]
    if report.issue is not None:
        lines += [f"Issue: {issue_reference(context.owner, context.repo, report.issue)}", ""]
    else:
        lines += [f"Repository: {context.slug}", ""]
    lines.append(f"Error: {report.render()}")
    return "\n".join(lines)


class ErrorReporter:
    """Post, forward and record the error that ended a run."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        client: GitHubRepoClient,
        destination: LoopGuardConfig | None,
        context: EventContext,
        run_id: str,
        identity: IdentityResolver,
        telemetry: TelemetryEmitter,
        outcome: RunOutcome,
    ) -> None:
        """Report errors for the run identified by ``run_id``."""
        self._client = client
        self._destination = destination
        self._context = context
        self._run_id = run_id
        self._identity = identity
        self._telemetry = telemetry
        self._outcome = outcome

    async def report(self, error: BaseException) -> ErrorReport:
        """Report ``error`` and mark the run failed.

        Failures while posting propagate so the caller can fall back to a log
        line; in that case telemetry and the failed outcome are left to the
        caller.
        """
        report = ErrorReport.from_error(
            error,
            run_id=self._run_id,
            user=await self._identity.get(),
            issue=self._context.issue_number,
        )
        await self._post(report)
        await self._telemetry.track_exception(error)
        self._outcome.set_failed(failure_message(error))
        return report

    async def _post(self, report: ErrorReport) -> None:
        destination = self._destination
        if destination is None:
            safe_log(NO_DESTINATION_MESSAGE)
            return
        issue = self._client.with_repository(destination.owner, destination.repo).issue(
            destination.issue
        )
        await issue.post_comment(render_comment(report, self._context))
