"""Value types produced by remote discovery and URL parsing.

Example:
    >>> from forge_scout.enums import ProviderName
    >>> from forge_scout.git.models import RemoteUrlInfo
    >>> info = RemoteUrlInfo(
    ...     provider=ProviderName.GITLAB,
    ...     host="gitlab.com",
    ...     owner="group/subgroup",
    ...     repo="repo",
    ... )
    >>> info.full_name
    'group/subgroup/repo'
"""

from dataclasses import dataclass
from typing import Literal

from forge_scout.enums import ProviderName


@dataclass(frozen=True)
class GitRemote:
    """A configured remote as read from the repository.

    ``url_type`` is classified from the URL prefix alone: ``git@`` and
    ``ssh://`` URLs are "ssh", ``http(s)://`` are "https".
    """

    name: str
    url: str
    url_type: Literal["ssh", "https", "unknown"]


@dataclass(frozen=True)
class RemoteUrlInfo:
    """Structured coordinates parsed from a remote URL.

    Instances only exist for successfully parsed URLs, so ``owner`` and
    ``repo`` are never empty.

    Attributes:
        provider: Hosting service detected from the URL
        host: Hostname (with port for HTTPS URLs that carry one)
        owner: Slash-joined namespace path. May have several segments, e.g.
            a GitLab group chain ``group/subgroup`` or an Azure DevOps
            ``org/project`` pair.
        repo: Repository name, never ending in ``.git``
    """

    provider: ProviderName
    host: str
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        """``owner/repo``, with every namespace segment kept."""
        return f"{self.owner}/{self.repo}"

    def to_dict(self) -> dict[str, str]:
        return {
            "provider": self.provider.value,
            "host": self.host,
            "owner": self.owner,
            "repo": self.repo,
        }
