"""GitHub provider adapter.

Tiers:
    cli:  ``gh pr view N --json ...`` / ``gh issue view N --json ...``
    rest: PyGithub against GITHUB_API_URL (api.github.com by default, or a
          GitHub Enterprise ``https://host/api/v3``), run in a worker
          thread because PyGithub is synchronous
"""

import asyncio
import math
from collections.abc import Callable
from typing import Any

import structlog
from github import Auth, Github, GithubException  # type: ignore[import-not-found]
from github.Repository import Repository as GHRepository  # type: ignore[import-not-found]

from forge_scout.config.settings import ProviderSettings
from forge_scout.enums import PRTerminology, ProviderName
from forge_scout.models.domain import FailureReason, FetchResult, IssueInfo, PRInfo
from forge_scout.providers.base import PARSE_ERRORS, GitProvider, label_names

log = structlog.get_logger(__name__)

PR_JSON_FIELDS = "title,headRefName,baseRefName,url,body,author"
ISSUE_JSON_FIELDS = "title,body,url,labels"


class GitHubProvider(GitProvider):
    """GitHub adapter using the gh CLI and PyGithub."""

    name = ProviderName.GITHUB
    display_name = "GitHub"
    pr_terminology = PRTerminology.PR
    pr_refspec = "pull/{number}/head:{branch}"
    required_cli = "gh"
    api_probe_paths = (
        # GitHub Enterprise Server nests the API under /api/v3
        "/api/v3/meta",
        "/meta",
    )

    def pr_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str]:
        return ["pr", "view", str(number), "--json", PR_JSON_FIELDS, *self._repo_flag(owner, repo)]

    def issue_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str]:
        return ["issue", "view", str(number), "--json", ISSUE_JSON_FIELDS, *self._repo_flag(owner, repo)]

    def auth_cli_args(self) -> list[str]:
        return ["auth", "status"]

    def parse_cli_pr(self, data: Any) -> PRInfo:
        return PRInfo(
            title=data["title"],
            head_branch=data.get("headRefName") or "",
            base_branch=data.get("baseRefName") or "",
            url=data.get("url") or "",
            body=data.get("body") or "",
            author=(data.get("author") or {}).get("login"),
        )

    def parse_cli_issue(self, data: Any) -> IssueInfo:
        return IssueInfo(
            title=data["title"],
            body=data.get("body") or "",
            url=data.get("url") or "",
            labels=label_names(data.get("labels")),
        )

    def parse_api_pr(self, data: Any) -> PRInfo:
        return PRInfo(
            title=data["title"],
            head_branch=data["head"]["ref"],
            base_branch=data["base"]["ref"],
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

    async def pr_via_rest(self, number: int, owner: str | None, repo: str | None) -> FetchResult[PRInfo]:
        result = await self._with_repo(owner, repo, lambda gh_repo: gh_repo.get_pull(number).raw_data)
        return self._convert(result, self.parse_api_pr)

    async def issue_via_rest(self, number: int, owner: str | None, repo: str | None) -> FetchResult[IssueInfo]:
        result = await self._with_repo(owner, repo, lambda gh_repo: gh_repo.get_issue(number).raw_data)
        return self._convert(result, self.parse_api_issue)

    async def _with_repo(
        self,
        owner: str | None,
        repo: str | None,
        action: Callable[[GHRepository], dict[str, Any]],
    ) -> FetchResult[dict[str, Any]]:
        """Run ``action`` against a lazily loaded repository in a thread."""
        if not owner or not repo:
            return FetchResult.failure(FailureReason.MISSING_CONFIG, "owner and repo are required")

        settings = self.settings

        def _run() -> dict[str, Any]:
            client = self._client(settings)
            try:
                return action(client.get_repo(f"{owner}/{repo}", lazy=True))
            finally:
                client.close()

        try:
            data = await asyncio.to_thread(_run)
        except GithubException as e:
            reason = (
                FailureReason.UNAUTHENTICATED if e.status in (401, 403) else FailureReason.NOT_FOUND_OR_ERROR
            )
            return FetchResult.failure(reason, f"HTTP {e.status} from GitHub")
        except OSError as e:
            # requests' ConnectionError and Timeout are OSErrors
            return FetchResult.failure(FailureReason.UNREACHABLE, f"{type(e).__name__}: {e}")
        except PARSE_ERRORS as e:
            return FetchResult.failure(FailureReason.NOT_FOUND_OR_ERROR, f"unexpected payload: {e!r}")

        return FetchResult.success(data)

    def _client(self, settings: ProviderSettings) -> Github:
        token = settings.token_for(self.name)
        return Github(
            auth=Auth.Token(token) if token else None,
            base_url=settings.base_url_for(self.name) or "https://api.github.com",
            timeout=math.ceil(settings.http_timeout),
            retry=None,
        )

    @staticmethod
    def _repo_flag(owner: str | None, repo: str | None) -> list[str]:
        if owner and repo:
            return ["--repo", f"{owner}/{repo}"]
        return []
