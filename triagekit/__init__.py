"""triagekit: the harness shared by repository-automation bots."""

from __future__ import annotations

from .action import IssueHandlers, RunLifecycle, run_action

__version__ = "0.1.0"

__all__ = ["IssueHandlers", "RunLifecycle", "__version__", "run_action"]
