"""Remote URL classification and parsing.

Two independent operations live here:

    detect_provider: decides which hosting service a URL belongs to, using
        an ordered cascade of substring checks. Pure and total.
    parse_remote_url: decomposes a URL into host, owner path and repository
        name. The provider field of the result is filled by re-running
        detect_provider, so a host can be parsed structurally even when its
        provider is ``unknown``.

Supported URL formats:
    Azure DevOps:
        - https://dev.azure.com/org/project/_git/repo
        - https://org@dev.azure.com/org/project/_git/repo
        - git@ssh.dev.azure.com:v3/org/project/repo
        - https://org.visualstudio.com/project/_git/repo
        - org@vs-ssh.visualstudio.com:v3/org/project/repo

    HTTPS:
        - https://github.com/owner/repo.git
        - https://gitlab.com/group/subgroup/repo
        - http://gitea.local:3000/owner/repo.git

    SSH:
        - git@github.com:owner/repo.git
        - git@gitlab.com:group/subgroup/repo.git
        - ssh://git@gitlab.com/group/subgroup/repo.git
        - ssh://git@gitea.local:2222/owner/repo.git

Example:
    >>> from forge_scout.git.parser import detect_provider, parse_remote_url
    >>> detect_provider("git@bitbucket.org:workspace/repo.git")
    <ProviderName.BITBUCKET: 'bitbucket'>
    >>> info = parse_remote_url("https://gitlab.com/group/subgroup/repo.git")
    >>> info.owner, info.repo
    ('group/subgroup', 'repo')
    >>> parse_remote_url("not-a-url") is None
    True

Known Limitations:
    Self-hosted instances are only recognised when "gitlab", "gitea" or
    "forgejo" appears somewhere in the URL. A GitLab server at
    code.example.com is reported as ``unknown``; use
    GitProvider.detect_from_api for those.
"""

import re

from forge_scout.enums import ProviderName
from forge_scout.git.models import RemoteUrlInfo

# Checked top to bottom, first hit wins. Azure must precede the generic
# hosts: its SSH host contains no other provider name but the order is
# part of the contract.
_HOST_CASCADE: tuple[tuple[tuple[str, ...], ProviderName], ...] = (
    (("dev.azure.com", "ssh.dev.azure.com", "visualstudio.com"), ProviderName.AZURE_DEVOPS),
    (("github.com",), ProviderName.GITHUB),
    (("gitlab.com",), ProviderName.GITLAB),
    (("bitbucket.org",), ProviderName.BITBUCKET),
    # Self-hosted heuristics (less reliable)
    (("gitlab",), ProviderName.GITLAB),
    (("gitea",), ProviderName.GITEA),
    (("forgejo",), ProviderName.FORGEJO),
)

# https://dev.azure.com/{org}/{project}/_git/{repo}, optionally with the
# org@ userinfo Azure puts in its clone URLs
AZURE_HTTPS_PATTERN = re.compile(
    r"^https?://(?:[^@/\s]+@)?dev\.azure\.com/(?P<org>[^/\s]+)/(?P<project>[^/\s]+)/_git/(?P<repo>[^/\s]+?)(?:\.git)?$",
    re.IGNORECASE,
)

# git@ssh.dev.azure.com:v3/{org}/{project}/{repo}
AZURE_SSH_PATTERN = re.compile(
    r"^git@ssh\.dev\.azure\.com:v3/(?P<org>[^/\s]+)/(?P<project>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?$",
    re.IGNORECASE,
)

# Legacy hosts, same org/project/repo layout:
#   https://{org}.visualstudio.com[/DefaultCollection]/{project}/_git/{repo}
#   {org}@vs-ssh.visualstudio.com:v3/{org}/{project}/{repo}
VISUALSTUDIO_HTTPS_PATTERN = re.compile(
    r"^https?://(?:[^@/\s]+@)?(?P<host>(?P<org>[^./@\s]+)\.visualstudio\.com)/(?:DefaultCollection/)?(?P<project>[^/\s]+)/_git/(?P<repo>[^/\s]+?)(?:\.git)?$",
    re.IGNORECASE,
)
VISUALSTUDIO_SSH_PATTERN = re.compile(
    r"^[\w.-]+@(?P<host>vs-ssh\.visualstudio\.com):v3/(?P<org>[^/\s]+)/(?P<project>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?$",
    re.IGNORECASE,
)

# https://host/owner-path/repo.git; the lazy owner group ends up holding
# every segment but the last
HTTPS_PATTERN = re.compile(
    r"^https?://(?:[^@/\s]+@)?(?P<host>[^/\s]+)/(?P<owner>.+?)/(?P<repo>[^/\s]+?)(?:\.git)?$"
)

# git@host:owner-path/repo.git. Requires user@ and forbids "/" in the host
# so ssh:// URLs never land here.
SCP_PATTERN = re.compile(
    r"^[\w.-]+@(?P<host>[^:/\s]+):(?P<owner>.+?)/(?P<repo>[^/\s]+?)(?:\.git)?$"
)

# ssh://git@host[:port]/owner-path/repo.git
SSH_URL_PATTERN = re.compile(
    r"^ssh://(?:[^@/\s]+@)?(?P<host>[^/:\s]+)(?::\d+)?/(?P<owner>.+?)/(?P<repo>[^/\s]+?)(?:\.git)?$"
)

_GIT_SUFFIX = re.compile(r"(?:\.git)+$")


def detect_provider(url: str) -> ProviderName:
    """Classify a remote URL by hosting service.

    Args:
        url: Any string. Case does not matter.

    Returns:
        The first provider whose marker substring occurs in the URL, or
        ProviderName.UNKNOWN. Never raises.
    """
    lowered = (url or "").lower()

    for markers, provider in _HOST_CASCADE:
        if any(marker in lowered for marker in markers):
            return provider

    return ProviderName.UNKNOWN


def parse_remote_url(url: str) -> RemoteUrlInfo | None:
    """Parse a remote URL into provider, host, owner path and repository.

    Surrounding whitespace, newlines and trailing slashes are ignored. The
    formats are tried in a fixed order: Azure DevOps HTTPS and SSH (current
    and legacy visualstudio.com hosts), generic HTTPS, SCP-style SSH, ssh:// URL.

    Args:
        url: Raw remote URL, e.g. the output of ``git remote get-url``.

    Returns:
        RemoteUrlInfo, or None when the URL matches no supported grammar.
    """
    trimmed = (url or "").strip().rstrip("/")
    if not trimmed:
        return None

    for pattern in (AZURE_HTTPS_PATTERN, AZURE_SSH_PATTERN, VISUALSTUDIO_HTTPS_PATTERN, VISUALSTUDIO_SSH_PATTERN):
        match = pattern.match(trimmed)
        if match:
            return _build(
                ProviderName.AZURE_DEVOPS,
                match.groupdict().get("host") or "dev.azure.com",
                f"{match.group('org')}/{match.group('project')}",
                match.group("repo"),
            )

    for pattern in (HTTPS_PATTERN, SCP_PATTERN, SSH_URL_PATTERN):
        match = pattern.match(trimmed)
        if match:
            return _build(
                detect_provider(trimmed),
                match.group("host"),
                match.group("owner"),
                match.group("repo"),
            )

    return None


def _build(provider: ProviderName, host: str, owner: str, repo: str) -> RemoteUrlInfo | None:
    """Normalise the captured groups; None if owner or repo ends up empty."""
    owner = "/".join(segment for segment in owner.split("/") if segment)
    repo = _GIT_SUFFIX.sub("", repo)

    if not owner or not repo:
        return None

    return RemoteUrlInfo(provider=provider, host=host, owner=owner, repo=repo)
