"""Provider registry.

Maps each ProviderName to its adapter instance. The registry is an
ordinary object: the top-level caller constructs it and passes it to
whatever needs provider lookup. The adapter map is built on first use and
reused for the life of the registry.

Example:
    >>> from forge_scout.providers.registry import ProviderRegistry
    >>> registry = ProviderRegistry()
    >>> provider = registry.get_provider("gitlab")
    >>> provider.pr_terminology
    <PRTerminology.MR: 'MR'>
    >>> registry.get_provider("unknown") is None
    True

Thread Safety:
    The first build is guarded by a lock; afterwards the map is read-only.
"""

import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

import structlog

from forge_scout.config.settings import ProviderSettings
from forge_scout.enums import ProviderName
from forge_scout.git.discovery import DEFAULT_GIT_TIMEOUT, detect_provider_from_cwd
from forge_scout.git.parser import detect_provider
from forge_scout.providers.azure_devops import AzureDevOpsProvider
from forge_scout.providers.base import GitProvider
from forge_scout.providers.bitbucket import BitbucketProvider
from forge_scout.providers.gitea import GiteaProvider
from forge_scout.providers.github import GitHubProvider
from forge_scout.providers.gitlab import GitLabProvider

log = structlog.get_logger(__name__)


class ProviderRegistry:
    """Lazily built map from provider name to adapter.

    Args:
        settings: Settings injected into every adapter. If None, adapters
            read the environment on each call.
        git_timeout: Seconds allowed for the local git remote lookup in
            get_provider_from_cwd.
    """

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        git_timeout: float = DEFAULT_GIT_TIMEOUT,
    ) -> None:
        self._settings = settings
        self.git_timeout = git_timeout
        self._providers: Mapping[ProviderName, GitProvider] | None = None
        self._lock = threading.Lock()

    @property
    def providers(self) -> Mapping[ProviderName, GitProvider]:
        """The adapter map, built on first access. Always the same object."""
        if self._providers is None:
            with self._lock:
                if self._providers is None:
                    self._providers = self._build()
        return self._providers

    def _build(self) -> Mapping[ProviderName, GitProvider]:
        settings = self._settings
        providers: dict[ProviderName, GitProvider] = {
            ProviderName.GITHUB: GitHubProvider(settings),
            ProviderName.GITLAB: GitLabProvider(settings),
            ProviderName.BITBUCKET: BitbucketProvider(settings),
            ProviderName.AZURE_DEVOPS: AzureDevOpsProvider(settings),
            # Same class, separate instances
            ProviderName.GITEA: GiteaProvider(settings, name=ProviderName.GITEA),
            ProviderName.FORGEJO: GiteaProvider(settings, name=ProviderName.FORGEJO),
        }
        log.debug("provider_registry_built", providers=[name.value for name in providers])
        return MappingProxyType(providers)

    def names(self) -> list[ProviderName]:
        return list(self.providers)

    def get_provider(self, name: ProviderName | str) -> GitProvider | None:
        """Look up the adapter for a provider name.

        Returns:
            The registered adapter, or None for ``unknown`` and for strings
            that are not provider names.
        """
        try:
            key = ProviderName(name)
        except ValueError:
            return None
        return self.providers.get(key)

    def get_provider_for_url(self, url: str) -> GitProvider | None:
        """Adapter for the provider detected from a remote URL, or None."""
        return self.get_provider(detect_provider(url))

    def get_provider_from_cwd(self, cwd: str | Path | None = None) -> GitProvider | None:
        """Adapter for the ``origin`` remote of a working directory, or None.

        Any failure along the way (no repository, no remote, git missing,
        timeout, unknown provider) gives None.
        """
        name = detect_provider_from_cwd(cwd, timeout=self.git_timeout)
        if name == ProviderName.UNKNOWN:
            return None
        return self.get_provider(name)
