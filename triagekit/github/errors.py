"""Errors raised by the GitHub REST client."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when GitHub answers a request with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and the HTTP status, when known."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, method: str, path: str, status_code: int) -> GitHubAPIError:
        """Return an error for a non-2xx response."""
        return cls(f"GitHub {method} {path} returned HTTP {status_code}", status_code=status_code)


class GitHubResponseShapeError(RuntimeError):
    """Raised when a GitHub response does not decode into the expected shape."""

    @classmethod
    def invalid(cls, path: str, detail: object) -> GitHubResponseShapeError:
        """Return an error describing why the body of ``path`` was rejected."""
        return cls(f"GitHub response for {path} has unexpected shape: {detail}")


class GitHubConfigError(RuntimeError):
    """Raised when the GitHub client is misconfigured."""

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")

    @classmethod
    def invalid_api_url(cls, url: str) -> GitHubConfigError:
        """Return an error for an API URL without an http(s) scheme."""
        return cls(f"GITHUB_API_URL must be an http(s) URL, got {url!r}")
