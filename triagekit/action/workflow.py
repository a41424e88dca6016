"""The GitHub Actions runner surface: inputs, workflow commands, outcome.

Workflow commands are lines of the form ``::command::value`` on stdout. Any
text derived from the event payload could smuggle such a line, so the harness
disables command processing at startup and logs untrusted text through
:func:`safe_log`.
"""

from __future__ import annotations

import dataclasses
import os
import uuid

from triagekit.logging import get_logger, log_info

from .errors import ActionConfigError

logger = get_logger(__name__)


def _input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str) -> str:
    """Return the stripped value of action input ``name`` or ``""``."""
    return os.environ.get(_input_env_name(name), "").strip()


def get_required_input(name: str) -> str:
    """Return action input ``name``.

    Raises
    ------
    ActionConfigError
        If the input is missing or blank.

    """
    value = get_input(name)
    if not value:
        raise ActionConfigError.missing_input(name)
    return value


def get_flag_input(name: str) -> bool:
    """Return True when input ``name`` holds any non-empty value."""
    return bool(get_input(name))


def escape_data(value: str) -> str:
    """Escape a workflow command value."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _neutralize(value: object) -> str:
    return str(value).replace(":", "").replace("#", "")


def safe_log(message: object, *args: object) -> None:
    """Log ``message`` and ``args`` with command delimiters removed."""
    parts = [_neutralize(message), *(_neutralize(arg) for arg in args)]
    log_info(logger, "%s", " ".join(parts))


def stop_commands(token: str | None = None) -> str:
    """Stop workflow command processing for the rest of the job step.

    Returns the token that would resume processing.
    """
    resume_token = token or uuid.uuid4().hex
    print(f"::stop-commands::{resume_token}", flush=True)
    return resume_token


@dataclasses.dataclass(slots=True)
class RunOutcome:
    """Host-visible result of a run."""

    failed: bool = False
    message: str | None = None

    def set_failed(self, message: str) -> None:
        """Mark the run failed and emit an ``::error::`` annotation."""
        self.failed = True
        self.message = message
        print(f"::error::{escape_data(message)}", flush=True)

    @property
    def exit_code(self) -> int:
        """Return the process exit status for this outcome."""
        return 1 if self.failed else 0
