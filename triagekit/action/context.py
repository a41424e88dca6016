"""The inbound event, as the runner describes it.

The runner exports the event name and repository as environment variables and
writes the webhook payload to the file named by ``GITHUB_EVENT_PATH``. Only
the payload fields handlers need are decoded; everything else is ignored.
"""

from __future__ import annotations

import dataclasses
import os
import typing as typ
from pathlib import Path

import msgspec

from triagekit.common.slug import parse_repo_slug, repo_slug

from .errors import ActionConfigError, EventPayloadError


class _Numbered(msgspec.Struct):
    number: int


class _Login(msgspec.Struct):
    login: str


class _Named(msgspec.Struct):
    name: str


class _Comment(msgspec.Struct):
    body: str | None = None


class EventPayload(msgspec.Struct, kw_only=True):
    """The webhook payload fields the router reads."""

    action: str | None = None
    issue: _Numbered | None = None
    pull_request: _Numbered | None = None
    number: int | None = None
    comment: _Comment | None = None
    label: _Named | None = None
    assignee: _Login | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class EventContext:
    """Classification of the event that triggered the run."""

    event_name: str
    owner: str
    repo: str
    actor: str = ""
    workflow: str = ""
    payload: EventPayload = dataclasses.field(default_factory=EventPayload)

    @classmethod
    def from_payload(  # noqa: PLR0913
        cls,
        event_name: str,
        repository: str,
        payload: dict[str, typ.Any] | None = None,
        *,
        actor: str = "",
        workflow: str = "",
    ) -> EventContext:
        """Build a context from an already-parsed payload mapping.

        Raises
        ------
        ActionConfigError
            If ``repository`` is not ``owner/name`` or the payload does not
            match the expected field types.

        """
        owner, repo = _split_repository(repository)
        try:
            decoded = msgspec.convert(payload or {}, type=EventPayload)
        except msgspec.ValidationError as exc:
            raise ActionConfigError.unreadable_event("<payload>", exc) from exc
        return cls(
            event_name=event_name,
            owner=owner,
            repo=repo,
            actor=actor,
            workflow=workflow,
            payload=decoded,
        )

    @classmethod
    def from_env(cls) -> EventContext:
        """Build a context from the runner's ``GITHUB_*`` variables.

        Reads ``GITHUB_EVENT_NAME`` and ``GITHUB_REPOSITORY`` (required),
        ``GITHUB_EVENT_PATH``, ``GITHUB_ACTOR`` and ``GITHUB_WORKFLOW``.
        A missing event path yields an empty payload, which routes the run to
        ``on_triggered``.
        """
        event_name = _required_env("GITHUB_EVENT_NAME")
        owner, repo = _split_repository(_required_env("GITHUB_REPOSITORY"))
        event_path = os.environ.get("GITHUB_EVENT_PATH", "").strip()
        payload = _read_payload(Path(event_path)) if event_path else EventPayload()
        return cls(
            event_name=event_name,
            owner=owner,
            repo=repo,
            actor=os.environ.get("GITHUB_ACTOR", ""),
            workflow=os.environ.get("GITHUB_WORKFLOW", ""),
            payload=payload,
        )

    @property
    def slug(self) -> str:
        """Return ``owner/repo``."""
        return repo_slug(self.owner, self.repo)

    @property
    def action(self) -> str | None:
        """Return the action sub-type, if the event has one."""
        return self.payload.action

    @property
    def issue_number(self) -> int | None:
        """Return the issue or pull request number the event refers to."""
        if self.payload.issue is not None:
            return self.payload.issue.number
        if self.payload.pull_request is not None:
            return self.payload.pull_request.number
        return self.payload.number

    @property
    def comment_body(self) -> str:
        """Return the comment text of an ``issue_comment`` event."""
        if self.payload.comment is None:
            raise EventPayloadError.missing("comment", self.event_name)
        return self.payload.comment.body or ""

    @property
    def label_name(self) -> str:
        """Return the label of a ``labeled`` event."""
        if self.payload.label is None:
            raise EventPayloadError.missing("label", self.event_name)
        return self.payload.label.name

    @property
    def assignee_login(self) -> str:
        """Return the assignee of an ``assigned``/``unassigned`` event."""
        if self.payload.assignee is None:
            raise EventPayloadError.missing("assignee", self.event_name)
        return self.payload.assignee.login


def _required_env(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ActionConfigError.missing_env(name)
    return value


def _split_repository(value: str) -> tuple[str, str]:
    try:
        return parse_repo_slug(value)
    except ValueError as exc:
        raise ActionConfigError.invalid_repository(value) from exc


def _read_payload(path: Path) -> EventPayload:
    try:
        return msgspec.json.decode(path.read_bytes(), type=EventPayload)
    except (OSError, msgspec.DecodeError) as exc:
        raise ActionConfigError.unreadable_event(str(path), exc) from exc
