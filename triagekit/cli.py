"""Command-line entry point that runs a bot inside a workflow step.

Usage:
    triagekit run mybots.locker:LockerBot

The reference names a ``module:attribute`` whose value is called with no
arguments to build the handler set, mirroring ASGI ``module:factory`` strings.
"""

from __future__ import annotations

import asyncio
import importlib
import sys
import typing as typ

from cyclopts import App, Parameter

from triagekit import __version__
from triagekit.action import ActionConfigError, RunOutcome, run_action
from triagekit.github import GitHubConfigError
from triagekit.logging import configure_logging, get_logger, log_error, log_warning

app = App(
    name="triagekit",
    help="Run a repository-automation bot for one workflow event",
    version=__version__,
)

logger = get_logger(__name__)


def load_bot(reference: str) -> object:
    """Import ``module:attribute`` and call it to build the handler set.

    Raises
    ------
    ActionConfigError
        If the reference is malformed, cannot be imported, or is not callable.

    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ActionConfigError.invalid_bot(reference, "expected 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ActionConfigError.invalid_bot(reference, exc) from exc

    target: object = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ActionConfigError.invalid_bot(reference, exc) from exc
    if not callable(target):
        raise ActionConfigError.invalid_bot(reference, "not callable")
    return target()


@app.command
def run(
    bot: str,
    *,
    log_level: typ.Annotated[
        str, Parameter(env_var="TRIAGEKIT_LOG_LEVEL")
    ] = "INFO",
) -> int:
    """Handle the current workflow event with BOT.

    Parameters
    ----------
    bot
        ``module:attribute`` reference to the bot's handler set factory.
    log_level
        femtologging level name.

    """
    normalized, invalid = configure_logging(log_level)
    if invalid:
        log_warning(
            logger,
            "Invalid TRIAGEKIT_LOG_LEVEL %r, falling back to %s",
            log_level,
            normalized,
        )

    try:
        handlers = load_bot(bot)
        outcome = asyncio.run(run_action(handlers))
    except (ActionConfigError, GitHubConfigError) as exc:
        log_error(logger, "Action configuration error: %s", exc)
        outcome = RunOutcome()
        outcome.set_failed(str(exc))
    return outcome.exit_code


def main() -> int:
    """Run the CLI application."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
