"""Settings for one action run, read from the runner environment.

Usage
-----
>>> import os
>>> os.environ["INPUT_TOKEN"] = "ghs_example"
>>> os.environ["TRIAGEKIT_ERROR_ISSUE"] = "octo/triage#12"
>>> settings = ActionSettings.from_env()
>>> settings.error_issue
LoopGuardConfig(owner='octo', repo='triage', issue=12)

"""

from __future__ import annotations

import dataclasses as dc
import os

from triagekit.common.slug import issue_reference, parse_issue_reference

from .errors import ActionConfigError
from .workflow import get_flag_input, get_required_input

_TELEMETRY_LOG = "log"


@dc.dataclass(frozen=True, slots=True)
class LoopGuardConfig:
    """The issue that receives error reports.

    Events on this issue are refused so a failing report cannot trigger
    another report on the same issue.
    """

    owner: str
    repo: str
    issue: int

    @classmethod
    def parse(cls, raw: str) -> LoopGuardConfig:
        """Parse ``owner/repo#number``.

        Raises
        ------
        ActionConfigError
            If ``raw`` is not a valid issue reference.

        """
        try:
            owner, repo, issue = parse_issue_reference(raw)
        except ValueError as exc:
            raise ActionConfigError.invalid_error_issue(raw) from exc
        return cls(owner=owner, repo=repo, issue=issue)

    def matches(self, owner: str, repo: str, issue: int | None) -> bool:
        """Return True when the coordinates name this issue."""
        return (self.owner, self.repo, self.issue) == (owner, repo, issue)

    def __str__(self) -> str:
        """Render as ``owner/repo#issue``."""
        return issue_reference(self.owner, self.repo, self.issue)


@dc.dataclass(frozen=True, slots=True)
class ActionSettings:
    """Inputs and harness options for one run.

    Attributes
    ----------
    token
        Token used for every API call (``token`` input).
    readonly
        Suppress mutating API calls (``readonly`` input, any non-empty value).
    error_issue
        Destination for error reports and the loop guard
        (``TRIAGEKIT_ERROR_ISSUE``); ``None`` disables both.
    telemetry
        Emit metrics as structured log events (``TRIAGEKIT_TELEMETRY=log``).

    """

    token: str
    readonly: bool = False
    error_issue: LoopGuardConfig | None = None
    telemetry: bool = False

    @classmethod
    def from_env(cls) -> ActionSettings:
        """Build settings from action inputs and ``TRIAGEKIT_*`` variables.

        Raises
        ------
        ActionConfigError
            If the token input is missing, ``TRIAGEKIT_ERROR_ISSUE`` is
            malformed, or ``TRIAGEKIT_TELEMETRY`` names an unknown sink.

        """
        token = get_required_input("token")
        readonly = get_flag_input("readonly")

        raw_issue = os.environ.get("TRIAGEKIT_ERROR_ISSUE", "").strip()
        error_issue = LoopGuardConfig.parse(raw_issue) if raw_issue else None

        raw_telemetry = os.environ.get("TRIAGEKIT_TELEMETRY", "").strip().lower()
        if raw_telemetry not in {"", _TELEMETRY_LOG}:
            msg = f"TRIAGEKIT_TELEMETRY must be empty or {_TELEMETRY_LOG!r}, got {raw_telemetry!r}"
            raise ActionConfigError(msg)

        return cls(
            token=token,
            readonly=readonly,
            error_issue=error_issue,
            telemetry=raw_telemetry == _TELEMETRY_LOG,
        )
