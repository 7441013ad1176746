"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Iterator
from unittest.mock import AsyncMock

import pytest
import structlog

from forge_scout.config.settings import ProviderSettings

PROVIDER_ENV_VARS = [
    "GITHUB_API_URL",
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "GITLAB_URL",
    "GITLAB_TOKEN",
    "BITBUCKET_API_URL",
    "BITBUCKET_TOKEN",
    "AZURE_DEVOPS_URL",
    "AZURE_DEVOPS_TOKEN",
    "AZURE_DEVOPS_EXT_PAT",
    "GITEA_URL",
    "GITEA_TOKEN",
    "FORGEJO_URL",
    "FORGEJO_TOKEN",
    "FORGE_SCOUT_CLI_TIMEOUT",
    "FORGE_SCOUT_HTTP_TIMEOUT",
    "FORGE_SCOUT_PROBE_TIMEOUT",
    "FORGE_SCOUT_GIT_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's real tokens and URLs out of every test."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo configure_logging() calls made by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_settings(monkeypatch: pytest.MonkeyPatch) -> Callable[..., ProviderSettings]:
    """Build ProviderSettings from environment variables.

    Usage: ``make_settings(GITEA_URL="https://gitea.local", GITEA_TOKEN="t")``
    """

    def _make(**env: str) -> ProviderSettings:
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return ProviderSettings()

    return _make


@pytest.fixture
def mock_run_command(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Replace the subprocess runner used by the CLI tier.

    Defaults to "binary not installed" so tests opt in to CLI success.
    """
    mock = AsyncMock(side_effect=FileNotFoundError("not installed"))
    monkeypatch.setattr("forge_scout.providers.base.run_command", mock)
    return mock


@pytest.fixture
def mock_get_json(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Replace the HTTP GET used by the REST tier."""
    mock = AsyncMock()
    monkeypatch.setattr("forge_scout.providers.base.get_json", mock)
    return mock
