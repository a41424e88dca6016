"""Typed views of the GitHub REST responses the harness reads."""

from __future__ import annotations

import dataclasses

import msgspec


class AuthenticatedUser(msgspec.Struct, kw_only=True):
    """The account behind the action token (``GET /user``)."""

    login: str
    name: str | None = None

    @property
    def display_name(self) -> str:
        """Return the profile name, or the login when no name is set."""
        return self.name or self.login


class Label(msgspec.Struct, kw_only=True):
    """Issue label."""

    name: str


class Issue(msgspec.Struct, kw_only=True):
    """Issue fields exposed to handlers."""

    number: int
    title: str
    state: str
    body: str | None = None
    labels: list[Label] = msgspec.field(default_factory=list)

    @property
    def label_names(self) -> list[str]:
        """Return the label names in API order."""
        return [label.name for label in self.labels]


class RateLimitCategory(msgspec.Struct, kw_only=True):
    """Quota figures for one API category."""

    limit: int
    remaining: int


class _RateLimitResources(msgspec.Struct, kw_only=True):
    core: RateLimitCategory
    graphql: RateLimitCategory
    search: RateLimitCategory


class RateLimitResponse(msgspec.Struct, kw_only=True):
    """Body of ``GET /rate_limit``; only the categories the harness reports."""

    resources: _RateLimitResources


@dataclasses.dataclass(frozen=True, slots=True)
class RateLimitUsage:
    """Remaining quota for the core, GraphQL and search APIs."""

    core: RateLimitCategory
    graphql: RateLimitCategory
    search: RateLimitCategory

    @classmethod
    def from_response(cls, response: RateLimitResponse) -> RateLimitUsage:
        """Build usage figures from a decoded ``/rate_limit`` body."""
        resources = response.resources
        return cls(core=resources.core, graphql=resources.graphql, search=resources.search)
