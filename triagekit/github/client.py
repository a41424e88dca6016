"""Asynchronous GitHub REST client used by bots and the run lifecycle.

The client issues one request per call. It does not retry, paginate or cache;
every request passes through a :class:`RequestCounter` so the lifecycle can
report how many calls a run made.
"""

from __future__ import annotations

import dataclasses
import os
import typing as typ
from urllib.parse import quote

import httpx
import msgspec

from triagekit.common.slug import repo_slug
from triagekit.logging import get_logger, log_info

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import AuthenticatedUser, Issue, RateLimitResponse, RateLimitUsage

logger = get_logger(__name__)

_DEFAULT_API_URL = "https://api.github.com"
_HTTP_ERROR_STATUS_THRESHOLD = 400
_API_VERSION = "2022-11-28"

_T = typ.TypeVar("_T")


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubClientConfig:
    """Connection settings for the GitHub REST API."""

    token: str
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = 20.0
    user_agent: str = "triagekit/0.1"

    @classmethod
    def from_env(cls, token: str) -> GitHubClientConfig:
        """Build configuration for ``token``, honouring ``GITHUB_API_URL``.

        GitHub Enterprise runners export ``GITHUB_API_URL``; on github.com it
        points at the public API.
        """
        api_url = os.environ.get("GITHUB_API_URL", "").strip() or _DEFAULT_API_URL
        if not api_url.startswith(("http://", "https://")):
            raise GitHubConfigError.invalid_api_url(api_url)
        return cls(token=token, api_url=api_url.rstrip("/"))


class RequestCounter:
    """Count outbound requests made through the clients sharing it."""

    def __init__(self) -> None:
        """Start at zero."""
        self._count = 0

    @property
    def count(self) -> int:
        """Return the number of requests issued so far."""
        return self._count

    async def on_request(self, request: httpx.Request) -> None:
        """httpx ``request`` event hook."""
        del request
        self._count += 1


def _install_counter(client: httpx.AsyncClient, counter: RequestCounter) -> None:
    hooks = client.event_hooks
    request_hooks = list(hooks.get("request", []))
    if counter.on_request not in request_hooks:
        request_hooks.append(counter.on_request)
    client.event_hooks = {**hooks, "request": request_hooks}


def _remove_counter(client: httpx.AsyncClient, counter: RequestCounter) -> None:
    hooks = client.event_hooks
    request_hooks = [
        hook for hook in hooks.get("request", []) if hook != counter.on_request
    ]
    client.event_hooks = {**hooks, "request": request_hooks}


class GitHubTransport:
    """Connection shared by every client derived from one token."""

    def __init__(
        self,
        config: GitHubClientConfig,
        *,
        counter: RequestCounter | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Prepare headers and attach the request counter.

        An injected ``http_client`` stays owned by the caller.
        """
        if not config.token.strip():
            raise GitHubConfigError.empty_token()
        self.config = config
        self.counter = counter or RequestCounter()
        self.owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self.headers = {
            "Authorization": f"Bearer {config.token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": config.user_agent,
            "X-GitHub-Api-Version": _API_VERSION,
        }
        _install_counter(self.client, self.counter)

    async def aclose(self) -> None:
        """Close the HTTP client when it was created here.

        An injected client is left open, with the request counter detached.
        """
        if self.owns_client:
            await self.client.aclose()
        else:
            _remove_counter(self.client, self.counter)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, typ.Any] | None = None,
    ) -> httpx.Response:
        response = await self.client.request(
            method,
            f"{self.config.api_url}{path}",
            json=json,
            headers=self.headers,
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(method, path, response.status_code)
        return response

    async def get_json(self, path: str, type_: type[_T]) -> _T:
        response = await self.request("GET", path)
        try:
            return msgspec.json.decode(response.content, type=type_)
        except msgspec.DecodeError as exc:
            raise GitHubResponseShapeError.invalid(path, exc) from exc


class GitHubRepoClient:
    """Repository-scoped client handed to ``on_triggered`` handlers."""

    def __init__(
        self,
        transport: GitHubTransport,
        owner: str,
        repo: str,
        *,
        readonly: bool = False,
    ) -> None:
        """Bind ``transport`` to ``owner/repo``.

        Parameters
        ----------
        transport
            Connection, credentials and request counter.
        owner, repo
            Repository coordinates.
        readonly
            When set, mutating calls are logged and skipped.

        """
        self._transport = transport
        self.owner = owner
        self.repo = repo
        self.readonly = readonly

    @property
    def slug(self) -> str:
        """Return ``owner/repo``."""
        return repo_slug(self.owner, self.repo)

    @property
    def counter(self) -> RequestCounter:
        """Return the request counter shared by this client family."""
        return self._transport.counter

    def with_repository(self, owner: str, repo: str) -> GitHubRepoClient:
        """Return a client for another repository on the same connection."""
        return GitHubRepoClient(self._transport, owner, repo, readonly=self.readonly)

    def issue(self, number: int) -> GitHubIssueClient:
        """Return an issue-scoped client for ``number`` in this repository."""
        return GitHubIssueClient(self, number)

    async def get_authenticated_user(self) -> AuthenticatedUser:
        """Return the account the token authenticates as."""
        return await self._transport.get_json("/user", AuthenticatedUser)

    async def get_rate_limit(self) -> RateLimitUsage:
        """Return remaining quota for the core, GraphQL and search APIs."""
        response = await self._transport.get_json("/rate_limit", RateLimitResponse)
        return RateLimitUsage.from_response(response)

    def _issue_path(self, number: int, suffix: str = "") -> str:
        return f"/repos/{self.owner}/{self.repo}/issues/{number}{suffix}"

    async def get_issue(self, number: int) -> Issue:
        """Fetch issue ``number``."""
        return await self._transport.get_json(self._issue_path(number), Issue)

    async def _write(
        self, method: str, path: str, json: dict[str, typ.Any] | None = None
    ) -> None:
        if self.readonly:
            log_info(logger, "readonly: skipping %s %s", method, path)
            return
        await self._transport.request(method, path, json=json)

    async def create_issue_comment(self, number: int, body: str) -> None:
        """Post ``body`` as a comment on issue ``number``."""
        await self._write("POST", self._issue_path(number, "/comments"), {"body": body})

    async def add_issue_label(self, number: int, name: str) -> None:
        """Add label ``name`` to issue ``number``."""
        await self._write(
            "POST", self._issue_path(number, "/labels"), {"labels": [name]}
        )

    async def remove_issue_label(self, number: int, name: str) -> None:
        """Remove label ``name`` from issue ``number``."""
        await self._write(
            "DELETE", self._issue_path(number, f"/labels/{quote(name, safe='')}")
        )

    async def close_issue(self, number: int) -> None:
        """Close issue ``number``."""
        await self._write("PATCH", self._issue_path(number), {"state": "closed"})


class GitHubIssueClient:
    """Issue-scoped client handed to issue and comment handlers."""

    def __init__(self, repository: GitHubRepoClient, number: int) -> None:
        """Bind ``repository``'s connection to issue ``number``."""
        self.repository = repository
        self.number = number

    @property
    def readonly(self) -> bool:
        """Return whether writes are suppressed."""
        return self.repository.readonly

    async def get_issue(self) -> Issue:
        """Fetch the bound issue."""
        return await self.repository.get_issue(self.number)

    async def post_comment(self, body: str) -> None:
        """Comment on the bound issue."""
        await self.repository.create_issue_comment(self.number, body)

    async def add_label(self, name: str) -> None:
        """Label the bound issue."""
        await self.repository.add_issue_label(self.number, name)

    async def remove_label(self, name: str) -> None:
        """Unlabel the bound issue."""
        await self.repository.remove_issue_label(self.number, name)

    async def close_issue(self) -> None:
        """Close the bound issue."""
        await self.repository.close_issue(self.number)
