"""Local repository remote discovery.

Reads the configured remotes of the repository containing a working
directory, and offers the working-directory wrappers that combine a local
remote URL with URL parsing and provider detection.

Key Exports:
    GitDiscovery: Remote listing and selection for one repository.
    get_remote_url_from_cwd: Remote URL of a directory, or None.
    detect_provider_from_cwd: Provider of a directory's remote.
    parse_remote_from_cwd: Parsed remote of a directory, or None.

Example:
    >>> from forge_scout.git.discovery import GitDiscovery, parse_remote_from_cwd
    >>> GitDiscovery().get_remote().name
    'origin'
    >>> info = parse_remote_from_cwd()
    >>> print(info.provider if info else "no remote")
    github

Dependencies:
    Requires GitPython (gitpython) package for repository access.
"""

from pathlib import Path
from typing import Literal

import git
import structlog
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from forge_scout.enums import ProviderName
from forge_scout.git.exceptions import (
    GitDiscoveryError,
    NoRemotesError,
    NotGitRepositoryError,
    RemoteNotFoundError,
)
from forge_scout.git.models import GitRemote, RemoteUrlInfo
from forge_scout.git.parser import detect_provider, parse_remote_url

log = structlog.get_logger(__name__)

DEFAULT_GIT_TIMEOUT = 3.0


class GitDiscovery:
    """Discovers remote configuration of a local Git repository.

    The git.Repo object is opened lazily on first use, so an instance can
    be created for any path; validation happens when data is requested.

    Attributes:
        repo_path: Resolved absolute path to inspect.
        timeout: Seconds before a spawned git process is killed.
        PREFERRED_REMOTES: Remote names tried in order when none is given.
    """

    PREFERRED_REMOTES = ["origin", "upstream"]

    def __init__(self, repo_path: str | Path = ".", timeout: float = DEFAULT_GIT_TIMEOUT) -> None:
        self.repo_path = Path(repo_path).resolve()
        self.timeout = timeout
        self._repo: git.Repo | None = None

    def _get_repo(self) -> git.Repo:
        """Get the Git repository object, opening it on first access.

        Raises:
            NotGitRepositoryError: If the path is not within a Git repository.
        """
        if self._repo is None:
            try:
                self._repo = git.Repo(self.repo_path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise NotGitRepositoryError(str(self.repo_path)) from e

        return self._repo

    def list_remotes(self) -> list[GitRemote]:
        """List all configured Git remotes.

        Raises:
            NotGitRepositoryError: If not within a Git repository.
        """
        repo = self._get_repo()

        remotes = []
        for remote in repo.remotes:
            url = remote.url

            url_type: Literal["ssh", "https", "unknown"] = "unknown"
            if url.startswith(("git@", "ssh://")):
                url_type = "ssh"
            elif url.startswith(("http://", "https://")):
                url_type = "https"

            remotes.append(GitRemote(name=remote.name, url=url, url_type=url_type))

        return remotes

    def get_remote(self, remote_name: str | None = None) -> GitRemote:
        """Get a remote by name, or pick one automatically.

        Selection when remote_name is None:
            1. The only remote, if there is exactly one
            2. 'origin', then 'upstream'
            3. The first configured remote

        Raises:
            NotGitRepositoryError: If not within a Git repository.
            NoRemotesError: If no remotes are configured.
            RemoteNotFoundError: If remote_name is given but does not exist.
        """
        remotes = self.list_remotes()

        if not remotes:
            raise NoRemotesError()

        if remote_name:
            for remote in remotes:
                if remote.name == remote_name:
                    return remote
            raise RemoteNotFoundError(remote_name, [r.name for r in remotes])

        if len(remotes) == 1:
            return remotes[0]

        for preferred in self.PREFERRED_REMOTES:
            for remote in remotes:
                if remote.name == preferred:
                    return remote

        return remotes[0]

    def get_remote_url(self, remote_name: str = "origin") -> str:
        """Resolve the effective URL of a remote via ``git remote get-url``.

        Unlike GitRemote.url this applies ``url.<base>.insteadOf`` rewrites.
        The git process is killed after ``timeout`` seconds.

        Raises:
            NotGitRepositoryError: If not within a Git repository.
            RemoteNotFoundError: If git cannot resolve the remote.
        """
        repo = self._get_repo()

        try:
            output = repo.git.remote("get-url", remote_name, kill_after_timeout=self.timeout)
        except GitCommandError as e:
            raise RemoteNotFoundError(remote_name, [r.name for r in repo.remotes]) from e

        return str(output).strip()


def get_remote_url_from_cwd(
    cwd: str | Path | None = None,
    remote_name: str | None = "origin",
    timeout: float = DEFAULT_GIT_TIMEOUT,
) -> str | None:
    """Return the remote URL for a working directory, or None on any failure.

    Args:
        cwd: Directory inside the repository (default: current directory).
        remote_name: Remote to resolve. None picks one with
            GitDiscovery.get_remote (single remote, then origin, upstream).
        timeout: Seconds before the git process is killed.
    """
    try:
        discovery = GitDiscovery(cwd or ".", timeout=timeout)
        if remote_name is None:
            remote_name = discovery.get_remote().name
        url = discovery.get_remote_url(remote_name)
    except GitDiscoveryError as e:
        log.debug("remote_lookup_failed", cwd=str(cwd or "."), remote=remote_name, error=e.message)
        return None
    except (GitCommandError, OSError) as e:
        # git binary missing or killed by the timeout
        log.debug("remote_lookup_failed", cwd=str(cwd or "."), remote=remote_name, error=str(e))
        return None

    return url or None


def detect_provider_from_cwd(
    cwd: str | Path | None = None,
    timeout: float = DEFAULT_GIT_TIMEOUT,
    remote_name: str | None = "origin",
) -> ProviderName:
    """Detect the provider of a working directory's remote (``origin`` by default).

    Returns:
        The detected provider, or ProviderName.UNKNOWN if there is no
        readable remote.
    """
    url = get_remote_url_from_cwd(cwd, remote_name=remote_name, timeout=timeout)
    if not url:
        return ProviderName.UNKNOWN
    return detect_provider(url)


def parse_remote_from_cwd(
    cwd: str | Path | None = None,
    timeout: float = DEFAULT_GIT_TIMEOUT,
    remote_name: str | None = "origin",
) -> RemoteUrlInfo | None:
    """Parse a working directory's remote (``origin`` by default).

    Returns:
        RemoteUrlInfo, or None if there is no readable or parseable remote.
    """
    url = get_remote_url_from_cwd(cwd, remote_name=remote_name, timeout=timeout)
    if not url:
        return None
    return parse_remote_url(url)
