"""Data models for forge-scout."""

from forge_scout.models.domain import FailureReason, FetchResult, IssueInfo, PRInfo

__all__ = ["FailureReason", "FetchResult", "IssueInfo", "PRInfo"]
