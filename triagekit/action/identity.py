"""Resolve the acting account's display name once per run."""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import typing as typ

if typ.TYPE_CHECKING:
    from triagekit.github import GitHubRepoClient

UNKNOWN_ACTOR = "unknown"


class IdentityResolver:
    """Memoized, never-failing lookup of the token's display name.

    The lookup starts as a task when the resolver is created, so it must be
    created inside a running event loop. Every :meth:`get` awaits that same
    task; a failed lookup yields :data:`UNKNOWN_ACTOR` and is not retried.
    """

    def __init__(self, fetch: cabc.Callable[[], cabc.Awaitable[str]]) -> None:
        """Start resolving with ``fetch``."""
        self._task = asyncio.get_running_loop().create_task(self._resolve(fetch))

    @classmethod
    def from_client(cls, client: GitHubRepoClient) -> IdentityResolver:
        """Resolve the account ``client`` authenticates as."""

        async def _fetch() -> str:
            user = await client.get_authenticated_user()
            return user.display_name

        return cls(_fetch)

    @staticmethod
    async def _resolve(fetch: cabc.Callable[[], cabc.Awaitable[str]]) -> str:
        try:
            return await fetch()
        except Exception:  # noqa: BLE001 - any failure resolves to the fallback name
            return UNKNOWN_ACTOR

    def cancel(self) -> None:
        """Abandon the lookup; :meth:`get` must not be called afterwards."""
        self._task.cancel()

    async def get(self) -> str:
        """Return the resolved name, waiting for the lookup if needed."""
        return await asyncio.shield(self._task)
