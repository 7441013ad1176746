"""Gitea and Forgejo provider adapter.

Forgejo is a Gitea fork whose API is a superset of Gitea's, so one adapter
class serves both; the registry creates one instance per name.

Tiers:
    cli:  ``tea pr view N`` / ``tea issues view N``
    rest: ``{GITEA_URL}/api/v1/repos/{owner}/{repo}/pulls/N`` (and
          ``/issues/N``), authenticated with ``Authorization: token ...``

Both instances are self-hosted only: without GITEA_URL (or FORGEJO_URL for
the forgejo instance) the REST tier is skipped.
"""

from typing import Any

from forge_scout.config.settings import ProviderSettings
from forge_scout.enums import ProviderName
from forge_scout.models.domain import IssueInfo, PRInfo
from forge_scout.providers.base import GitProvider, label_names


class GiteaProvider(GitProvider):
    """Gitea/Forgejo adapter using the tea CLI and the v1 REST API."""

    required_cli = "tea"
    api_probe_paths = (
        # Forgejo serves its own version endpoint next to the Gitea one
        "/api/forgejo/v1/version",
        "/api/v1/version",
    )

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        name: ProviderName = ProviderName.GITEA,
    ) -> None:
        if name not in (ProviderName.GITEA, ProviderName.FORGEJO):
            raise ValueError(f"GiteaProvider serves gitea or forgejo, not {name}")
        super().__init__(settings)
        self.name = name
        self.display_name = "Forgejo" if name == ProviderName.FORGEJO else "Gitea"

    def detect_from_remote(self, url: str) -> bool:
        # Self-hosted: a hostname cannot prove a server runs Gitea
        return False

    def pr_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str]:
        return ["pr", "view", str(number), *self._repo_flag(owner, repo)]

    def issue_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str]:
        return ["issues", "view", str(number), *self._repo_flag(owner, repo)]

    def auth_cli_args(self) -> list[str]:
        return ["login", "list"]

    def pr_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str:
        return f"{base_url}/api/v1/repos/{owner}/{repo}/pulls/{number}"

    def issue_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str:
        return f"{base_url}/api/v1/repos/{owner}/{repo}/issues/{number}"

    def rest_headers(self, token: str | None) -> dict[str, str]:
        if token:
            return {"Authorization": f"token {token}"}
        return {}

    def parse_api_pr(self, data: Any) -> PRInfo:
        head = data.get("head") or {}
        base = data.get("base") or {}
        return PRInfo(
            title=data["title"],
            head_branch=head.get("ref") or data.get("head_branch") or "",
            base_branch=base.get("ref") or data.get("base_branch") or "",
            url=data.get("html_url") or "",
            body=data.get("body") or "",
            author=(data.get("user") or {}).get("login"),
        )

    def parse_api_issue(self, data: Any) -> IssueInfo:
        return IssueInfo(
            title=data["title"],
            body=data.get("body") or "",
            url=data.get("html_url") or "",
            labels=label_names(data.get("labels")),
        )

    @staticmethod
    def _repo_flag(owner: str | None, repo: str | None) -> list[str]:
        if owner and repo:
            return ["--repo", f"{owner}/{repo}"]
        return []
