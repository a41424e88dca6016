"""The handler capability set a bot implements.

A bot subclasses :class:`IssueHandlers` and overrides the coroutines for the
events it reacts to. Every other handler raises
:class:`~triagekit.action.errors.HandlerNotImplementedError`, so an event the
bot was not written for is reported as a failed run rather than ignored.

The router looks handlers up by name, so an object that merely defines some
of these coroutines works too; absent ones behave like the defaults.
"""

from __future__ import annotations

import typing as typ

from .errors import HandlerNotImplementedError

if typ.TYPE_CHECKING:
    from triagekit.github import GitHubIssueClient, GitHubRepoClient

HANDLER_NAMES: tuple[str, ...] = (
    "on_triggered",
    "on_commented",
    "on_opened",
    "on_reopened",
    "on_closed",
    "on_labeled",
    "on_assigned",
    "on_unassigned",
    "on_edited",
    "on_milestoned",
)


class IssueHandlers:
    """Default handlers; override the ones the bot needs."""

    async def on_triggered(self, client: GitHubRepoClient) -> None:
        """Handle a scheduled or manually triggered run."""
        del client
        raise HandlerNotImplementedError("on_triggered")

    async def on_commented(
        self, issue: GitHubIssueClient, comment: str, actor: str
    ) -> None:
        """Handle a new comment by ``actor``."""
        del issue, comment, actor
        raise HandlerNotImplementedError("on_commented")

    async def on_opened(self, issue: GitHubIssueClient) -> None:
        del issue
        raise HandlerNotImplementedError("on_opened")

    async def on_reopened(self, issue: GitHubIssueClient) -> None:
        del issue
        raise HandlerNotImplementedError("on_reopened")

    async def on_closed(self, issue: GitHubIssueClient) -> None:
        del issue
        raise HandlerNotImplementedError("on_closed")

    async def on_labeled(self, issue: GitHubIssueClient, label: str) -> None:
        """Handle ``label`` being added."""
        del issue, label
        raise HandlerNotImplementedError("on_labeled")

    async def on_assigned(self, issue: GitHubIssueClient, assignee: str) -> None:
        """Handle ``assignee`` being assigned."""
        del issue, assignee
        raise HandlerNotImplementedError("on_assigned")

    async def on_unassigned(self, issue: GitHubIssueClient, assignee: str) -> None:
        """Handle ``assignee`` being unassigned."""
        del issue, assignee
        raise HandlerNotImplementedError("on_unassigned")

    async def on_edited(self, issue: GitHubIssueClient) -> None:
        del issue
        raise HandlerNotImplementedError("on_edited")

    async def on_milestoned(self, issue: GitHubIssueClient) -> None:
        del issue
        raise HandlerNotImplementedError("on_milestoned")
