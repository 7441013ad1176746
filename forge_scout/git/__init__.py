"""Remote URL parsing, provider detection and local remote discovery.

Example:
    >>> from forge_scout.git import detect_provider, parse_remote_url
    >>> detect_provider("https://dev.azure.com/org/project/_git/repo")
    <ProviderName.AZURE_DEVOPS: 'azure-devops'>
    >>> parse_remote_url("git@github.com:user/repo.git").full_name
    'user/repo'

Error Handling:
    Parsing and detection never raise. GitDiscovery raises subclasses of
    GitDiscoveryError, each with a hint:

    >>> from forge_scout.git import GitDiscovery, NoRemotesError
    >>> try:
    ...     GitDiscovery().get_remote()
    ... except NoRemotesError as e:
    ...     print(e)
    No Git remotes configured in this repository

    Hint: Add a remote with: git remote add origin <url>
"""

from forge_scout.git.discovery import (
    GitDiscovery,
    detect_provider_from_cwd,
    get_remote_url_from_cwd,
    parse_remote_from_cwd,
)
from forge_scout.git.exceptions import (
    GitDiscoveryError,
    NoRemotesError,
    NotGitRepositoryError,
    RemoteNotFoundError,
)
from forge_scout.git.models import GitRemote, RemoteUrlInfo
from forge_scout.git.parser import detect_provider, parse_remote_url

__all__ = [
    # Parsing and detection
    "detect_provider",
    "parse_remote_url",
    # Working directory
    "GitDiscovery",
    "get_remote_url_from_cwd",
    "detect_provider_from_cwd",
    "parse_remote_from_cwd",
    # Models
    "GitRemote",
    "RemoteUrlInfo",
    # Exceptions
    "GitDiscoveryError",
    "NotGitRepositoryError",
    "NoRemotesError",
    "RemoteNotFoundError",
]
