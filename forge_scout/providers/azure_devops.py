"""Azure DevOps provider adapter.

The owner is the ``org/project`` pair produced by parse_remote_url. Issues
are Azure Boards work items.

Tiers:
    cli:  ``az repos pr show`` / ``az boards work-item show`` (azure-devops
          extension), scoped with ``--organization``
    rest: ``{AZURE_DEVOPS_URL}/{org}/{project}/_apis/...`` with the PAT as
          the basic-auth password
"""

import urllib.parse
from typing import Any

from forge_scout.enums import PRTerminology, ProviderName
from forge_scout.models.domain import IssueInfo, PRInfo
from forge_scout.providers.base import GitProvider

API_VERSION = "7.1"
BRANCH_PREFIX = "refs/heads/"


def split_owner(owner: str | None) -> tuple[str, str] | None:
    """Split an ``org/project`` owner; None unless there are exactly two parts."""
    if not owner:
        return None
    parts = [part for part in owner.split("/") if part]
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def _path_segment(value: str) -> str:
    """Percent-encode one URL path segment exactly once.

    Remote URLs already carry encoded names (``My%20Project``), while owner
    and repo typed on the command line are plain, so decode first.
    """
    return urllib.parse.quote(urllib.parse.unquote(value), safe="")


class AzureDevOpsProvider(GitProvider):
    """Azure DevOps adapter using the az CLI and the REST API."""

    name = ProviderName.AZURE_DEVOPS
    display_name = "Azure DevOps"
    pr_terminology = PRTerminology.PULL_REQUEST
    pr_refspec = "pull/{number}/merge:{branch}"
    required_cli = "az"
    api_probe_paths = (
        "/_apis/connectionData",
        "/_apis/projects",
    )

    def pr_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str]:
        return ["repos", "pr", "show", "--id", str(number), "--output", "json", *self._org_flag(owner)]

    def issue_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str]:
        return ["boards", "work-item", "show", "--id", str(number), "--output", "json", *self._org_flag(owner)]

    def auth_cli_args(self) -> list[str]:
        return ["account", "show", "--output", "none"]

    def pr_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str | None:
        scope = self._project_scope(base_url, owner)
        if scope is None:
            return None
        return f"{scope}/_apis/git/repositories/{_path_segment(repo)}/pullrequests/{number}"

    def issue_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str | None:
        scope = self._project_scope(base_url, owner)
        if scope is None:
            return None
        return f"{scope}/_apis/wit/workitems/{number}"

    def rest_headers(self, token: str | None) -> dict[str, str]:
        return {}

    def rest_auth(self, token: str | None) -> tuple[str, str] | None:
        if token:
            return ("", token)
        return None

    def rest_params(self) -> dict[str, str]:
        return {"api-version": API_VERSION}

    def parse_api_pr(self, data: Any) -> PRInfo:
        return PRInfo(
            title=data["title"],
            head_branch=data["sourceRefName"].removeprefix(BRANCH_PREFIX),
            base_branch=data["targetRefName"].removeprefix(BRANCH_PREFIX),
            url=self._pr_web_url(data),
            body=data.get("description") or "",
            author=(data.get("createdBy") or {}).get("displayName"),
        )

    def parse_api_issue(self, data: Any) -> IssueInfo:
        fields = data["fields"]
        tags = fields.get("System.Tags")
        return IssueInfo(
            title=fields["System.Title"],
            body=fields.get("System.Description") or "",
            url=((data.get("_links") or {}).get("html") or {}).get("href") or data.get("url") or "",
            labels=tuple(tag.strip() for tag in tags.split(";") if tag.strip()) if tags else None,
        )

    @staticmethod
    def _pr_web_url(data: dict[str, Any]) -> str:
        # The top-level 'url' is the API resource; the web page hangs off the repository
        web_url = (data.get("repository") or {}).get("webUrl")
        if web_url and data.get("pullRequestId"):
            return f"{web_url}/pullrequest/{data['pullRequestId']}"
        return data.get("url") or ""

    @staticmethod
    def _project_scope(base_url: str, owner: str) -> str | None:
        split = split_owner(owner)
        if split is None:
            return None
        org, project = split
        return f"{base_url}/{_path_segment(org)}/{_path_segment(project)}"

    def _org_flag(self, owner: str | None) -> list[str]:
        split = split_owner(owner)
        if split is None:
            return []
        base_url = self.settings.base_url_for(self.name) or "https://dev.azure.com"
        return ["--organization", f"{base_url}/{split[0]}"]
