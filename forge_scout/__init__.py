"""forge-scout: identify a repository's hosting provider and query it.

Example:
    >>> from forge_scout import ProviderRegistry, parse_remote_url
    >>> info = parse_remote_url("git@gitlab.com:group/subgroup/repo.git")
    >>> info.provider, info.owner, info.repo
    (<ProviderName.GITLAB: 'gitlab'>, 'group/subgroup', 'repo')
    >>> provider = ProviderRegistry().get_provider(info.provider)
    >>> mr = await provider.view_pr(7, info.owner, info.repo)
"""

from forge_scout.enums import PRTerminology, ProviderName
from forge_scout.git.models import RemoteUrlInfo
from forge_scout.git.parser import detect_provider, parse_remote_url
from forge_scout.models.domain import IssueInfo, PRInfo
from forge_scout.providers.base import GitProvider
from forge_scout.providers.registry import ProviderRegistry

__version__ = "0.1.0"

__all__ = [
    "ProviderName",
    "PRTerminology",
    "RemoteUrlInfo",
    "PRInfo",
    "IssueInfo",
    "GitProvider",
    "ProviderRegistry",
    "detect_provider",
    "parse_remote_url",
]
