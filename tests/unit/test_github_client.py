"""Unit tests for the GitHub REST client."""

from __future__ import annotations

import json
import secrets
import typing as typ

import httpx
import pytest

from triagekit.github import (
    GitHubAPIError,
    GitHubClientConfig,
    GitHubConfigError,
    GitHubRepoClient,
    GitHubResponseShapeError,
    GitHubTransport,
    RequestCounter,
)

_TOKEN = secrets.token_hex(8)
_API = "https://example.test/api"

_RATE_LIMIT_BODY = {
    "resources": {
        "core": {"limit": 5000, "remaining": 4000, "reset": 0, "used": 1000},
        "graphql": {"limit": 5000, "remaining": 5000, "reset": 0, "used": 0},
        "search": {"limit": 30, "remaining": 12, "reset": 0, "used": 18},
    },
    "rate": {"limit": 5000, "remaining": 4000, "reset": 0, "used": 1000},
}


class _Recorded(typ.NamedTuple):
    method: str
    path: str
    body: object
    headers: httpx.Headers


def _make_client(
    responses: dict[tuple[str, str], tuple[int, object]],
    *,
    readonly: bool = False,
) -> tuple[GitHubRepoClient, list[_Recorded]]:
    calls: list[_Recorded] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode().removeprefix("/api")
        body = json.loads(request.content) if request.content else None
        calls.append(_Recorded(request.method, path, body, request.headers))
        status, payload = responses.get((request.method, path), (200, {}))
        return httpx.Response(status_code=status, json=payload)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    transport = GitHubTransport(
        GitHubClientConfig(token=_TOKEN, api_url=_API), http_client=http_client
    )
    return GitHubRepoClient(transport, "octo", "reef", readonly=readonly), calls


@pytest.mark.asyncio
async def test_get_rate_limit_decodes_categories() -> None:
    """The three reported categories are decoded from /rate_limit."""
    client, calls = _make_client({("GET", "/rate_limit"): (200, _RATE_LIMIT_BODY)})

    usage = await client.get_rate_limit()

    assert (usage.core.remaining, usage.graphql.remaining, usage.search.remaining) == (
        4000,
        5000,
        12,
    )
    assert usage.search.limit == 30
    assert calls[0].headers["Authorization"] == f"Bearer {_TOKEN}"


@pytest.mark.asyncio
async def test_authenticated_user_falls_back_to_login() -> None:
    """Accounts without a profile name are displayed by login."""
    client, _ = _make_client(
        {("GET", "/user"): (200, {"login": "octobot", "name": None, "id": 1})}
    )

    user = await client.get_authenticated_user()

    assert user.display_name == "octobot"


@pytest.mark.asyncio
async def test_issue_client_writes_to_bound_issue() -> None:
    """Issue-scoped calls target the bound issue number."""
    client, calls = _make_client({})
    issue = client.issue(42)

    await issue.post_comment("hello")
    await issue.add_label("needs more info")
    await issue.remove_label("needs more info")
    await issue.close_issue()

    assert [(call.method, call.path, call.body) for call in calls] == [
        ("POST", "/repos/octo/reef/issues/42/comments", {"body": "hello"}),
        ("POST", "/repos/octo/reef/issues/42/labels", {"labels": ["needs more info"]}),
        ("DELETE", "/repos/octo/reef/issues/42/labels/needs%20more%20info", None),
        ("PATCH", "/repos/octo/reef/issues/42", {"state": "closed"}),
    ]


@pytest.mark.asyncio
async def test_get_issue_decodes_labels() -> None:
    """Issue lookups expose label names."""
    client, _ = _make_client(
        {
            ("GET", "/repos/octo/reef/issues/7"): (
                200,
                {
                    "number": 7,
                    "title": "Crash on start",
                    "state": "open",
                    "labels": [{"name": "bug", "color": "f00"}],
                },
            )
        }
    )

    issue = await client.issue(7).get_issue()

    assert issue.label_names == ["bug"]


@pytest.mark.asyncio
async def test_readonly_client_skips_writes() -> None:
    """Read-only clients never send mutating requests."""
    client, calls = _make_client({}, readonly=True)

    await client.issue(3).post_comment("ignored")
    await client.close_issue(3)

    assert calls == []


@pytest.mark.asyncio
async def test_with_repository_shares_counter() -> None:
    """Clients for other repositories count against the same counter."""
    client, calls = _make_client({})

    await client.with_repository("octo", "triage").issue(12).post_comment("report")
    await client.issue(1).post_comment("local")

    assert calls[0].path == "/repos/octo/triage/issues/12/comments"
    assert client.counter.count == 2


@pytest.mark.asyncio
async def test_http_errors_raise_api_error() -> None:
    """Error statuses surface as GitHubAPIError with the status code."""
    client, _ = _make_client({("POST", "/repos/octo/reef/issues/9/comments"): (403, {})})

    with pytest.raises(GitHubAPIError) as excinfo:
        await client.issue(9).post_comment("denied")

    assert excinfo.value.status_code == 403


@pytest.mark.asyncio
async def test_unexpected_shape_raises_shape_error() -> None:
    """Bodies that do not match the model raise GitHubResponseShapeError."""
    client, _ = _make_client({("GET", "/rate_limit"): (200, {"resources": {}})})

    with pytest.raises(GitHubResponseShapeError, match="/rate_limit"):
        await client.get_rate_limit()


@pytest.mark.asyncio
async def test_request_counter_counts_every_request() -> None:
    """The counter hook fires once per outbound request, errors included."""
    counter = RequestCounter()
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda _: httpx.Response(500, json={}))
    )
    transport = GitHubTransport(
        GitHubClientConfig(token=_TOKEN, api_url=_API),
        counter=counter,
        http_client=http_client,
    )
    client = GitHubRepoClient(transport, "octo", "reef")

    for _ in range(3):
        with pytest.raises(GitHubAPIError):
            await client.get_authenticated_user()

    assert counter.count == 3


def test_empty_token_is_rejected() -> None:
    """A blank token fails before any request is made."""
    with pytest.raises(GitHubConfigError, match="non-empty"):
        GitHubTransport(GitHubClientConfig(token="  "))


def test_config_from_env_honours_api_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """GITHUB_API_URL overrides the public endpoint."""
    monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.test/api/v3/")

    config = GitHubClientConfig.from_env(_TOKEN)

    assert config.api_url == "https://ghe.example.test/api/v3"


def test_config_from_env_rejects_non_http_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Non-HTTP API URLs are configuration errors."""
    monkeypatch.setenv("GITHUB_API_URL", "ftp://example.test")

    with pytest.raises(GitHubConfigError, match="GITHUB_API_URL"):
        GitHubClientConfig.from_env(_TOKEN)


@pytest.mark.asyncio
async def test_aclose_detaches_counter_from_injected_client() -> None:
    """An injected client stays open but stops counting after close."""
    counter = RequestCounter()
    existing_hook_calls: list[str] = []

    async def _existing_hook(request: httpx.Request) -> None:
        existing_hook_calls.append(request.url.path)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(lambda _: httpx.Response(200, json={})),
        event_hooks={"request": [_existing_hook]},
    ) as http_client:
        transport = GitHubTransport(
            GitHubClientConfig(token=_TOKEN, api_url=_API),
            counter=counter,
            http_client=http_client,
        )
        await transport.request("GET", "/user")
        await transport.aclose()

        assert http_client.is_closed is False
        assert http_client.event_hooks["request"] == [_existing_hook]
        await http_client.get(f"{_API}/user")

    assert counter.count == 1
    assert existing_hook_calls == ["/api/user", "/api/user"]
