"""Enumerations for hosting providers and their vocabulary."""

from enum import Enum


class ProviderName(str, Enum):
    """Git hosting services recognised by forge-scout.

    The set is closed. ``UNKNOWN`` is returned when a remote URL matches no
    known host; it never has an adapter registered for it.
    """

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"
    AZURE_DEVOPS = "azure-devops"
    GITEA = "gitea"
    FORGEJO = "forgejo"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @property
    def is_self_hosted(self) -> bool:
        """Check if this provider has no SaaS default and needs a base URL."""
        return self in (ProviderName.GITEA, ProviderName.FORGEJO)


class PRTerminology(str, Enum):
    """What a provider calls a change request in its own UI."""

    PR = "PR"
    MR = "MR"
    PULL_REQUEST = "pull request"

    def __str__(self) -> str:
        return self.value
