"""GitLab provider adapter.

Tiers:
    cli:  ``glab mr view N --output json`` / ``glab issue view N --output json``
    rest: REST API v4 under GITLAB_URL (gitlab.com by default)

GitLab API differences from GitHub/Gitea:
    - Merge requests, not pull requests ('MR' terminology)
    - 'description' instead of 'body'; 'web_url' instead of 'html_url'
    - 'source_branch'/'target_branch' instead of head/base refs
    - Labels are plain strings
    - The project path (which may contain nested groups) is URL-encoded
      into a single path segment
"""

import urllib.parse
from typing import Any

from forge_scout.enums import PRTerminology, ProviderName
from forge_scout.models.domain import IssueInfo, PRInfo
from forge_scout.providers.base import GitProvider, label_names


class GitLabProvider(GitProvider):
    """GitLab adapter using the glab CLI and the v4 REST API."""

    name = ProviderName.GITLAB
    display_name = "GitLab"
    pr_terminology = PRTerminology.MR
    pr_refspec = "merge-requests/{number}/head:{branch}"
    required_cli = "glab"
    api_probe_paths = (
        "/api/v4/metadata",
        "/api/v4/version",
    )

    def pr_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str]:
        return ["mr", "view", str(number), "--output", "json", *self._repo_flag(owner, repo)]

    def issue_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str]:
        return ["issue", "view", str(number), "--output", "json", *self._repo_flag(owner, repo)]

    def auth_cli_args(self) -> list[str]:
        return ["auth", "status"]

    def pr_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str:
        return f"{base_url}/api/v4/projects/{self._project_path(owner, repo)}/merge_requests/{number}"

    def issue_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str:
        return f"{base_url}/api/v4/projects/{self._project_path(owner, repo)}/issues/{number}"

    def rest_headers(self, token: str | None) -> dict[str, str]:
        if token:
            return {"PRIVATE-TOKEN": token}
        return {}

    def parse_api_pr(self, data: Any) -> PRInfo:
        return PRInfo(
            title=data["title"],
            head_branch=data["source_branch"],
            base_branch=data["target_branch"],
            url=data.get("web_url") or "",
            body=data.get("description") or "",
            author=(data.get("author") or {}).get("username"),
        )

    def parse_api_issue(self, data: Any) -> IssueInfo:
        return IssueInfo(
            title=data["title"],
            body=data.get("description") or "",
            url=data.get("web_url") or "",
            labels=label_names(data.get("labels")),
        )

    @staticmethod
    def _project_path(owner: str, repo: str) -> str:
        return urllib.parse.quote(f"{owner}/{repo}", safe="")

    @staticmethod
    def _repo_flag(owner: str | None, repo: str | None) -> list[str]:
        if owner and repo:
            return ["--repo", f"{owner}/{repo}"]
        return []
