"""Route an event to exactly one handler."""

from __future__ import annotations

import collections.abc as cabc
import enum
import typing as typ

from triagekit.logging import get_logger, log_info

from .errors import HandlerNotImplementedError, UnexpectedActionError

if typ.TYPE_CHECKING:
    from triagekit.github import GitHubRepoClient

    from .context import EventContext

logger = get_logger(__name__)

ArgumentsFor = cabc.Callable[["EventContext"], tuple[str, ...]]


class RoutingEventType(enum.StrEnum):
    """Structured log event types emitted by the router."""

    DISPATCHED = "action.dispatch"
    UNROUTED = "action.unrouted"


def _no_arguments(context: EventContext) -> tuple[str, ...]:
    del context
    return ()


# ``issues`` actions map 1:1 onto handlers; the callable extracts the
# event-specific arguments passed after the issue client.
_ISSUE_ACTIONS: dict[str, tuple[str, ArgumentsFor]] = {
    "opened": ("on_opened", _no_arguments),
    "reopened": ("on_reopened", _no_arguments),
    "closed": ("on_closed", _no_arguments),
    "labeled": ("on_labeled", lambda context: (context.label_name,)),
    "assigned": ("on_assigned", lambda context: (context.assignee_login,)),
    "unassigned": ("on_unassigned", lambda context: (context.assignee_login,)),
    "edited": ("on_edited", _no_arguments),
    "milestoned": ("on_milestoned", _no_arguments),
}


class EventRouter:
    """Select and invoke the handler for an event.

    The router creates the client the handler receives and has no other side
    effects: all mutation happens inside handlers.
    """

    def __init__(self, handlers: object, client: GitHubRepoClient) -> None:
        """Route to ``handlers`` using ``client`` for the run's repository."""
        self._handlers = handlers
        self._client = client

    async def dispatch(self, context: EventContext) -> str | None:
        """Invoke the handler for ``context`` and return its name.

        Returns ``None`` for an issue-bearing event that is neither ``issues``
        nor ``issue_comment``.

        Raises
        ------
        UnexpectedActionError
            If an ``issues`` event has an action with no handler.
        HandlerNotImplementedError
            If the bot does not provide the selected handler.

        """
        number = context.issue_number
        if number is None:
            return await self._invoke(context, "on_triggered", self._client)

        issue = self._client.issue(number)
        if context.event_name == "issue_comment":
            return await self._invoke(
                context, "on_commented", issue, context.comment_body, context.actor
            )
        if context.event_name == "issues":
            route = _ISSUE_ACTIONS.get(context.action or "")
            if route is None:
                raise UnexpectedActionError(context.action)
            name, arguments_for = route
            return await self._invoke(context, name, issue, *arguments_for(context))

        log_info(
            logger,
            "[%s] event=%s issue=%s",
            RoutingEventType.UNROUTED,
            context.event_name,
            number,
        )
        return None

    async def _invoke(self, context: EventContext, name: str, *args: object) -> str:
        handler = getattr(self._handlers, name, None)
        if handler is None:
            raise HandlerNotImplementedError(name)
        log_info(
            logger,
            "[%s] event=%s action=%s issue=%s handler=%s",
            RoutingEventType.DISPATCHED,
            context.event_name,
            context.action,
            context.issue_number,
            name,
        )
        await handler(*args)
        return name
