"""Tests for forge_scout/providers/azure_devops.py - Azure DevOps adapter."""

import json
from typing import Any
from unittest.mock import AsyncMock

import pytest

from forge_scout.enums import PRTerminology, ProviderName
from forge_scout.git.parser import parse_remote_url
from forge_scout.models.domain import FailureReason
from forge_scout.providers.azure_devops import AzureDevOpsProvider, split_owner


@pytest.fixture
def provider() -> AzureDevOpsProvider:
    return AzureDevOpsProvider()


@pytest.fixture
def sample_pr_data() -> dict[str, Any]:
    return {
        "pullRequestId": 21,
        "title": "Hotfix login",
        "description": "Fixes the redirect loop",
        "sourceRefName": "refs/heads/hotfix/login",
        "targetRefName": "refs/heads/main",
        "createdBy": {"displayName": "Ana Lima", "uniqueName": "ana@example.com"},
        "url": "https://dev.azure.com/org/_apis/git/repositories/abc/pullRequests/21",
        "repository": {"webUrl": "https://dev.azure.com/org/Project/_git/app"},
    }


@pytest.fixture
def sample_work_item() -> dict[str, Any]:
    return {
        "id": 88,
        "fields": {
            "System.Title": "Login loops",
            "System.Description": "<div>Steps</div>",
            "System.Tags": "bug; auth ;",
        },
        "_links": {"html": {"href": "https://dev.azure.com/org/Project/_workitems/edit/88"}},
        "url": "https://dev.azure.com/org/_apis/wit/workItems/88",
    }


class TestSplitOwner:
    @pytest.mark.parametrize(
        "owner,expected",
        [
            ("org/project", ("org", "project")),
            ("org", None),
            ("org/project/extra", None),
            ("", None),
            (None, None),
        ],
    )
    def test_split(self, owner: str | None, expected: tuple[str, str] | None) -> None:
        assert split_owner(owner) == expected


class TestIdentity:
    def test_fields(self, provider: AzureDevOpsProvider) -> None:
        assert provider.name == ProviderName.AZURE_DEVOPS
        assert provider.display_name == "Azure DevOps"
        assert provider.pr_terminology == PRTerminology.PULL_REQUEST
        assert provider.get_required_cli() == "az"

    def test_refspec(self, provider: AzureDevOpsProvider) -> None:
        assert provider.format_pr_refspec(21, "pr-21") == "pull/21/merge:pr-21"

    def test_detect_from_remote(self, provider: AzureDevOpsProvider) -> None:
        assert provider.detect_from_remote("git@ssh.dev.azure.com:v3/org/project/repo")
        assert provider.detect_from_remote("https://org.visualstudio.com/project/_git/repo")


class TestCliArgs:
    def test_pr_args_scoped_to_organization(self, provider: AzureDevOpsProvider) -> None:
        assert provider.pr_cli_args(21, "org/Project", "app") == [
            "repos",
            "pr",
            "show",
            "--id",
            "21",
            "--output",
            "json",
            "--organization",
            "https://dev.azure.com/org",
        ]

    def test_issue_args_without_owner(self, provider: AzureDevOpsProvider) -> None:
        assert provider.issue_cli_args(88, None, None) == [
            "boards",
            "work-item",
            "show",
            "--id",
            "88",
            "--output",
            "json",
        ]


class TestUrls:
    def test_pr_url(self, provider: AzureDevOpsProvider) -> None:
        url = provider.pr_api_url("https://dev.azure.com", 21, "org/My Project", "app")
        assert url == "https://dev.azure.com/org/My%20Project/_apis/git/repositories/app/pullrequests/21"

    def test_work_item_url(self, provider: AzureDevOpsProvider) -> None:
        url = provider.issue_api_url("https://dev.azure.com", 88, "org/Project", "app")
        assert url == "https://dev.azure.com/org/Project/_apis/wit/workitems/88"

    def test_encoded_names_are_not_encoded_twice(self, provider: AzureDevOpsProvider) -> None:
        url = provider.pr_api_url("https://dev.azure.com", 3, "org/My%20Project", "My%20Repo")
        assert url == "https://dev.azure.com/org/My%20Project/_apis/git/repositories/My%20Repo/pullrequests/3"

    def test_slash_in_name_is_escaped(self, provider: AzureDevOpsProvider) -> None:
        url = provider.issue_api_url("https://dev.azure.com", 4, "org/a%2Fb", "app")
        assert url == "https://dev.azure.com/org/a%2Fb/_apis/wit/workitems/4"

    def test_owner_without_project(self, provider: AzureDevOpsProvider) -> None:
        assert provider.pr_api_url("https://dev.azure.com", 21, "org", "app") is None


class TestRetrieval:
    @pytest.mark.asyncio
    async def test_pr_from_cli(
        self,
        provider: AzureDevOpsProvider,
        mock_run_command: AsyncMock,
        sample_pr_data: dict[str, Any],
    ) -> None:
        mock_run_command.side_effect = None
        mock_run_command.return_value = (json.dumps(sample_pr_data), "", 0)

        pr = await provider.view_pr(21, "org/Project", "app")

        assert pr is not None
        assert pr.head_branch == "hotfix/login"
        assert pr.base_branch == "main"
        assert pr.url == "https://dev.azure.com/org/Project/_git/app/pullrequest/21"
        assert pr.author == "Ana Lima"

    @pytest.mark.asyncio
    async def test_pr_from_rest_with_pat(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_run_command: AsyncMock,
        mock_get_json: AsyncMock,
        sample_pr_data: dict[str, Any],
    ) -> None:
        monkeypatch.setenv("AZURE_DEVOPS_EXT_PAT", "pat-123")
        mock_get_json.return_value = sample_pr_data

        pr = await AzureDevOpsProvider().view_pr(21, "org/Project", "app")

        assert pr is not None
        kwargs = mock_get_json.await_args.kwargs
        assert kwargs["auth"] == ("", "pat-123")
        assert kwargs["headers"] == {}
        assert kwargs["params"] == {"api-version": "7.1"}

    @pytest.mark.asyncio
    async def test_work_item(
        self,
        provider: AzureDevOpsProvider,
        mock_run_command: AsyncMock,
        mock_get_json: AsyncMock,
        sample_work_item: dict[str, Any],
    ) -> None:
        mock_get_json.return_value = sample_work_item

        issue = await provider.view_issue(88, "org/Project", "app")

        assert issue is not None
        assert issue.title == "Login loops"
        assert issue.labels == ("bug", "auth")
        assert issue.url == "https://dev.azure.com/org/Project/_workitems/edit/88"

    def test_work_item_without_tags(self, provider: AzureDevOpsProvider) -> None:
        issue = provider.parse_api_issue({"fields": {"System.Title": "t"}, "url": "https://api/88"})

        assert issue.labels is None
        assert issue.body == ""
        assert issue.url == "https://api/88"

    @pytest.mark.asyncio
    async def test_owner_without_project_skips_rest(
        self, provider: AzureDevOpsProvider, mock_run_command: AsyncMock, mock_get_json: AsyncMock
    ) -> None:
        result = await provider.fetch_pr(21, "org", "app")

        assert result.reason == FailureReason.MISSING_CONFIG
        mock_get_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_auth_via_az(self, provider: AzureDevOpsProvider, mock_run_command: AsyncMock) -> None:
        mock_run_command.side_effect = None
        mock_run_command.return_value = ("", "Please run 'az login'", 1)

        assert await provider.check_auth() is False
        assert mock_run_command.await_args.args == ("az", "account", "show", "--output", "none")


class TestParsedRemotes:
    """Owner and repo taken straight from parse_remote_url."""

    @pytest.mark.asyncio
    async def test_project_with_space(
        self,
        provider: AzureDevOpsProvider,
        mock_run_command: AsyncMock,
        mock_get_json: AsyncMock,
        sample_pr_data: dict[str, Any],
    ) -> None:
        info = parse_remote_url("https://myorg@dev.azure.com/myorg/My%20Project/_git/My%20Repo")
        assert info is not None
        mock_get_json.return_value = sample_pr_data

        pr = await provider.view_pr(1, info.owner, info.repo)

        assert pr is not None
        url = mock_get_json.await_args.args[0]
        assert url == "https://dev.azure.com/myorg/My%20Project/_apis/git/repositories/My%20Repo/pullrequests/1"
        assert "%2520" not in url

    @pytest.mark.asyncio
    async def test_legacy_visualstudio_host(
        self,
        provider: AzureDevOpsProvider,
        mock_run_command: AsyncMock,
        mock_get_json: AsyncMock,
        sample_work_item: dict[str, Any],
    ) -> None:
        info = parse_remote_url("https://contoso.visualstudio.com/Web%20Shop/_git/storefront")
        assert info is not None
        mock_get_json.return_value = sample_work_item

        issue = await provider.view_issue(88, info.owner, info.repo)

        assert issue is not None
        assert mock_get_json.await_args.args[0] == "https://dev.azure.com/contoso/Web%20Shop/_apis/wit/workitems/88"
