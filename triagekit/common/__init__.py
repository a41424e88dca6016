"""Small helpers shared across triagekit packages."""

from __future__ import annotations

from .slug import issue_reference, parse_issue_reference, parse_repo_slug, repo_slug

__all__ = ["issue_reference", "parse_issue_reference", "parse_repo_slug", "repo_slug"]
