"""Bitbucket Cloud provider adapter.

Bitbucket has no first-party CLI, so the only tier is the 2.0 REST API
under BITBUCKET_API_URL (api.bitbucket.org by default), authenticated with
a bearer token (repository, project or workspace access token).
"""

from typing import Any

from forge_scout.enums import PRTerminology, ProviderName
from forge_scout.models.domain import IssueInfo, PRInfo
from forge_scout.providers.base import GitProvider


class BitbucketProvider(GitProvider):
    """Bitbucket Cloud adapter (REST only)."""

    name = ProviderName.BITBUCKET
    display_name = "Bitbucket"
    pr_terminology = PRTerminology.PR
    api_probe_paths = (
        # Bitbucket Server / Data Center
        "/rest/api/1.0/application-properties",
        "/2.0/repositories",
    )

    def pr_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str:
        return f"{base_url}/2.0/repositories/{owner}/{repo}/pullrequests/{number}"

    def issue_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str:
        return f"{base_url}/2.0/repositories/{owner}/{repo}/issues/{number}"

    def parse_api_pr(self, data: Any) -> PRInfo:
        author = data.get("author") or {}
        return PRInfo(
            title=data["title"],
            head_branch=data["source"]["branch"]["name"],
            base_branch=data["destination"]["branch"]["name"],
            url=self._html_link(data),
            body=data.get("description") or "",
            author=author.get("display_name") or author.get("nickname"),
        )

    def parse_api_issue(self, data: Any) -> IssueInfo:
        # Bitbucket issues have a kind and priority but no labels
        return IssueInfo(
            title=data["title"],
            body=(data.get("content") or {}).get("raw") or "",
            url=self._html_link(data),
        )

    @staticmethod
    def _html_link(data: dict[str, Any]) -> str:
        return ((data.get("links") or {}).get("html") or {}).get("href") or ""
