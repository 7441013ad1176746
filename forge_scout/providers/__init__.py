"""Hosting provider adapters.

Key Components:
    - GitProvider: Abstract capability contract (view_pr, view_issue,
      check_auth, detect_from_remote, detect_from_api, get_required_cli)
    - GitHubProvider: gh CLI, then PyGithub
    - GitLabProvider: glab CLI, then REST API v4
    - BitbucketProvider: REST API 2.0 only
    - AzureDevOpsProvider: az CLI, then REST API
    - GiteaProvider: tea CLI, then REST API v1 (Gitea and Forgejo)
    - ProviderRegistry: Name to adapter lookup

Example:
    >>> from forge_scout.providers import ProviderRegistry
    >>> registry = ProviderRegistry()
    >>> provider = registry.get_provider_for_url("git@github.com:user/repo.git")
    >>> pr = await provider.view_pr(42, "user", "repo")
    >>> print(pr.head_branch if pr else "could not retrieve")
"""

from forge_scout.providers.azure_devops import AzureDevOpsProvider
from forge_scout.providers.base import GitProvider, Tier, run_tiers
from forge_scout.providers.bitbucket import BitbucketProvider
from forge_scout.providers.gitea import GiteaProvider
from forge_scout.providers.github import GitHubProvider
from forge_scout.providers.gitlab import GitLabProvider
from forge_scout.providers.registry import ProviderRegistry

__all__ = [
    "GitProvider",
    "Tier",
    "run_tiers",
    "GitHubProvider",
    "GitLabProvider",
    "BitbucketProvider",
    "AzureDevOpsProvider",
    "GiteaProvider",
    "ProviderRegistry",
]
