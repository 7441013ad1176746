"""
Domain models for retrieved hosting-service entities.

PRInfo and IssueInfo are read-only snapshots: each retrieval builds a fresh
instance from provider data, and nothing caches or mutates them afterwards.
FetchResult is the internal diagnostic wrapper that lets callers and tests
tell "tool missing" from "tool ran but found nothing"; the public adapter
methods flatten it back to ``value or None``.

Example:
    Normalising a GitLab merge request::

        pr = PRInfo(
            title="Add caching layer",
            head_branch="feature/cache",
            base_branch="main",
            url="https://gitlab.com/group/app/-/merge_requests/7",
            body="Closes #3",
            author="jdoe",
        )
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PRInfo:
    """Pull request (or merge request) metadata in provider-neutral form."""

    title: str
    head_branch: str
    base_branch: str
    url: str
    body: str
    author: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IssueInfo:
    """Issue (or Azure DevOps work item) metadata in provider-neutral form."""

    title: str
    body: str
    url: str
    labels: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.labels is not None:
            data["labels"] = list(self.labels)
        return data


class FailureReason(str, Enum):
    """Why a retrieval produced no value.

    Only visible through the fetch_* diagnostics; view_* callers just see
    None for all of them.
    """

    INVALID_INPUT = "invalid-input"
    """Number was not a positive integer; no I/O was attempted."""

    MISSING_CONFIG = "missing-config"
    """Owner, repo or base URL was not available for the tier."""

    NOT_FOUND_OR_ERROR = "not-found-or-error"
    """The tool or API answered, but not with a usable resource."""

    UNAUTHENTICATED = "unauthenticated"
    """The API rejected the credentials (HTTP 401/403)."""

    UNREACHABLE = "unreachable"
    """CLI binary missing, timed out, or the host could not be reached."""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of one tier, or of a whole tier chain.

    Attributes:
        value: The retrieved entity on success, else None
        reason: Failure reason, None on success
        tier: Name of the tier that produced this result
        detail: Free-form diagnostic text for logs
    """

    value: T | None = None
    reason: FailureReason | None = None
    tier: str | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    @classmethod
    def success(cls, value: T, tier: str | None = None) -> "FetchResult[T]":
        return cls(value=value, tier=tier)

    @classmethod
    def failure(
        cls,
        reason: FailureReason,
        detail: str | None = None,
        tier: str | None = None,
    ) -> "FetchResult[T]":
        return cls(reason=reason, tier=tier, detail=detail)
