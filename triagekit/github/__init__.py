"""GitHub REST client collaborator for triagekit bots."""

from __future__ import annotations

from .client import (
    GitHubClientConfig,
    GitHubIssueClient,
    GitHubRepoClient,
    GitHubTransport,
    RequestCounter,
)
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import AuthenticatedUser, Issue, Label, RateLimitCategory, RateLimitUsage

__all__ = [
    "AuthenticatedUser",
    "GitHubAPIError",
    "GitHubClientConfig",
    "GitHubConfigError",
    "GitHubIssueClient",
    "GitHubRepoClient",
    "GitHubResponseShapeError",
    "GitHubTransport",
    "Issue",
    "Label",
    "RateLimitCategory",
    "RateLimitUsage",
    "RequestCounter",
]
