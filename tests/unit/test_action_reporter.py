"""Unit tests for error reporting."""

from __future__ import annotations

import pytest

from triagekit.action import (
    ErrorReport,
    ErrorReporter,
    EventContext,
    IdentityResolver,
    LoopGuardConfig,
    RunOutcome,
    TelemetryEmitter,
)
from triagekit.action.reporter import (
    NO_DESTINATION_MESSAGE,
    describe_error,
    failure_message,
    render_comment,
)
from triagekit.github import GitHubAPIError
from tests.helpers.fakes import FakeGitHub, FakeRepoClient, RecordingSink
from tests.helpers.femtologging_capture import capture_femto_logs

DESTINATION = LoopGuardConfig(owner="octo", repo="triage", issue=12)


def _raised(message: str) -> RuntimeError:
    try:
        raise RuntimeError(message)
    except RuntimeError as exc:
        return exc


def _context(issue: int | None = 42) -> EventContext:
    payload = {"action": "opened", "issue": {"number": issue}} if issue else {}
    return EventContext.from_payload(
        "issues", "octo/reef", payload, actor="mona", workflow="Triage"
    )


def _reporter(
    repo_client: FakeRepoClient,
    *,
    destination: LoopGuardConfig | None = DESTINATION,
    sink: RecordingSink | None = None,
    context: EventContext | None = None,
) -> tuple[ErrorReporter, RunOutcome]:
    context = context or _context()
    identity = IdentityResolver.from_client(repo_client)
    outcome = RunOutcome()
    reporter = ErrorReporter(
        client=repo_client,  # type: ignore[arg-type]
        destination=destination,
        context=context,
        run_id="run-1",
        identity=identity,
        telemetry=TelemetryEmitter(
            sink, context=context, run_id="run-1", identity=identity
        ),
        outcome=outcome,
    )
    return reporter, outcome


def test_report_renders_fixed_template() -> None:
    """The template carries message, actor and run id."""
    report = ErrorReport(message="boom", run_id="abc", user="Octo Bot")

    assert report.render() == "\nMessage: boom\n\nActor: Octo Bot\n\nID: abc\n"


def test_report_message_includes_traceback() -> None:
    """The message starts with the error text followed by its traceback."""
    report = ErrorReport.from_error(_raised("boom"), run_id="abc", user="x", issue=None)

    first, _, rest = report.message.partition("\n")
    assert first == "boom"
    assert rest.startswith("Traceback (most recent call last)")
    assert rest.endswith("RuntimeError: boom")


def test_comment_names_issue_or_repository() -> None:
    """Issue events cite the issue; others cite the repository."""
    report = ErrorReport(message="boom", run_id="abc", user="Octo Bot", issue=42)

    with_issue = render_comment(report, _context())
    without_issue = render_comment(
        ErrorReport(message="boom", run_id="abc", user="Octo Bot"), _context(None)
    )

    assert with_issue.startswith("Workflow: Triage\n\nIssue: octo/reef#42\n\nError: ")
    assert "Repository: octo/reef" in without_issue
    assert without_issue.endswith(report.render())


def test_describe_error_prefers_traceback() -> None:
    """Traceback beats message, message beats repr."""
    assert describe_error(_raised("boom")).startswith("Traceback")
    assert describe_error(ValueError("plain")) == "plain"
    assert describe_error(ValueError()) == "ValueError()"
    assert failure_message(ValueError()) == "ValueError"


@pytest.mark.asyncio
async def test_report_posts_to_destination_and_fails_run(
    github: FakeGitHub, repo_client: FakeRepoClient, sink: RecordingSink
) -> None:
    """A report is posted, tracked and marks the run failed."""
    reporter, outcome = _reporter(repo_client, sink=sink)
    error = _raised("handler exploded")

    report = await reporter.report(error)

    [(owner, repo, number, body)] = github.comments
    assert (owner, repo, number) == ("octo", "triage", 12)
    assert "Issue: octo/reef#42" in body
    assert "Message: handler exploded" in body
    assert "Actor: Octo Bot" in body
    assert "ID: run-1" in body
    assert report.issue == 42
    assert sink.exceptions[0][0] is error
    assert outcome.failed is True
    assert outcome.message == "handler exploded"


@pytest.mark.asyncio
async def test_report_without_destination_logs_and_fails(
    github: FakeGitHub, repo_client: FakeRepoClient
) -> None:
    """Without an error issue, the report is dropped with a log line."""
    reporter, outcome = _reporter(repo_client, destination=None)

    with capture_femto_logs("triagekit.action.workflow") as capture:
        await reporter.report(_raised("boom"))
        record = capture.wait_for_message("swallowing error")

    assert github.comments == []
    assert record.message == NO_DESTINATION_MESSAGE.replace(":", "")
    assert outcome.failed is True


@pytest.mark.asyncio
async def test_post_failure_propagates(
    github: FakeGitHub, repo_client: FakeRepoClient, sink: RecordingSink
) -> None:
    """Posting errors escape before telemetry and the failed outcome."""
    github.comment_error = GitHubAPIError.http_error(
        "POST", "/repos/octo/triage/issues/12/comments", 403
    )
    reporter, outcome = _reporter(repo_client, sink=sink)

    with pytest.raises(GitHubAPIError):
        await reporter.report(_raised("boom"))

    assert sink.exceptions == []
    assert outcome.failed is False


@pytest.mark.asyncio
async def test_report_uses_unknown_actor_when_lookup_fails(
    github: FakeGitHub, repo_client: FakeRepoClient
) -> None:
    """An unresolvable identity is reported as unknown."""
    github.user = None
    reporter, _ = _reporter(repo_client)

    await reporter.report(_raised("boom"))

    assert "Actor: unknown" in github.comments[0][3]
