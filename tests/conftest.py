"""
Global pytest configuration and fixtures.

Every test talks to a FakeGitHubClient; nothing here performs network I/O.
"""

import os
from unittest.mock import patch

import pytest

from fixtures.github_responses import (
    FakeGitHubClient,
    GitHubResponseFactory,
    RemoteRepository,
    make_config,
)
from mcp_server_github.core.handlers import ToolDispatcher
from mcp_server_github.core.tools import ToolRegistry, build_default_registry


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def fake_client() -> FakeGitHubClient:
    """Fake client with acme/widgets seeded on ``main``."""
    client = FakeGitHubClient()
    client.seed_repository("acme", "widgets")
    return client


@pytest.fixture
def remote(fake_client) -> RemoteRepository:
    return fake_client.repositories[("acme", "widgets")]


@pytest.fixture
def registry() -> ToolRegistry:
    return build_default_registry()


@pytest.fixture
def dispatcher(registry, fake_client) -> ToolDispatcher:
    return ToolDispatcher(registry, fake_client)


@pytest.fixture
def github_response_factory():
    """Provide access to GitHubResponseFactory."""
    return GitHubResponseFactory


@pytest.fixture
def clean_github_env():
    """Environment with no GitHub settings; restored afterwards."""
    names = (
        "GITHUB_PERSONAL_ACCESS_TOKEN",
        "GITHUB_TOKEN",
        "GITHUB_API_URL",
        "GITHUB_API_VERSION",
        "GITHUB_REQUEST_TIMEOUT",
    )
    with patch.dict(os.environ, {}, clear=False):
        for name in names:
            os.environ.pop(name, None)
        yield
