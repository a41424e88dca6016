"""Error taxonomy for the action harness."""

from __future__ import annotations


class TriageActionError(Exception):
    """Base class for errors raised by the harness itself."""


class ActionConfigError(TriageActionError):
    """Raised when action inputs or the runner environment are unusable."""

    @classmethod
    def missing_input(cls, name: str) -> ActionConfigError:
        """Return an error for an empty required action input."""
        return cls(f"Input required and not supplied: {name}")

    @classmethod
    def missing_env(cls, name: str) -> ActionConfigError:
        """Return an error for a runner variable that is not set."""
        return cls(f"{name} is not set; is this running inside a workflow?")

    @classmethod
    def invalid_repository(cls, value: str) -> ActionConfigError:
        """Return an error for a malformed ``GITHUB_REPOSITORY``."""
        return cls(f"GITHUB_REPOSITORY must be 'owner/name', got {value!r}")

    @classmethod
    def invalid_error_issue(cls, value: str) -> ActionConfigError:
        """Return an error for a malformed ``TRIAGEKIT_ERROR_ISSUE``."""
        return cls(f"TRIAGEKIT_ERROR_ISSUE must be 'owner/name#number', got {value!r}")

    @classmethod
    def unreadable_event(cls, path: str, detail: object) -> ActionConfigError:
        """Return an error when the event payload file cannot be decoded."""
        return cls(f"Cannot read event payload {path}: {detail}")

    @classmethod
    def invalid_bot(cls, reference: str, detail: object) -> ActionConfigError:
        """Return an error when a bot reference does not resolve."""
        return cls(f"Cannot load bot {reference!r}: {detail}")


class UnexpectedActionError(TriageActionError):
    """Raised when an ``issues`` event carries an action no handler covers."""

    def __init__(self, action: str | None) -> None:
        """Record the unrecognised action."""
        self.action = action
        super().__init__(f"Unexpected action: {action}")


class HandlerNotImplementedError(TriageActionError, NotImplementedError):
    """Raised when a bot does not provide the handler an event needs."""

    def __init__(self, handler: str) -> None:
        """Record which handler was missing."""
        self.handler = handler
        super().__init__(f"{handler}: not implemented")


class EventPayloadError(TriageActionError):
    """Raised when the event payload lacks a field the handler needs."""

    @classmethod
    def missing(cls, field: str, event_name: str) -> EventPayloadError:
        """Return an error naming the missing payload field."""
        return cls(f"{event_name} payload has no {field}")
