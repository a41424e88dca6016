"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os

import pytest

from tests.helpers.fakes import FakeGitHub, FakeRepoClient, RecordingSink

_RUNNER_PREFIXES = ("GITHUB_", "INPUT_", "TRIAGEKIT_")


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide runner variables from the host so tests start from nothing."""
    for name in list(os.environ):
        if name.startswith(_RUNNER_PREFIXES):
            monkeypatch.delenv(name)


@pytest.fixture
def github() -> FakeGitHub:
    """Return fresh fake GitHub state."""
    return FakeGitHub()


@pytest.fixture
def repo_client(github: FakeGitHub) -> FakeRepoClient:
    """Return a fake client bound to octo/reef."""
    return FakeRepoClient(github)


@pytest.fixture
def sink() -> RecordingSink:
    """Return a recording telemetry sink."""
    return RecordingSink()
