"""Tests for data models and enumerations."""

from dataclasses import FrozenInstanceError

import pytest

from forge_scout.enums import PRTerminology, ProviderName
from forge_scout.git.models import GitRemote, RemoteUrlInfo
from forge_scout.models.domain import FailureReason, FetchResult, IssueInfo, PRInfo


class TestProviderName:
    """Tests for the ProviderName enumeration."""

    def test_values(self) -> None:
        """The set of names is closed."""
        assert [p.value for p in ProviderName] == [
            "github",
            "gitlab",
            "bitbucket",
            "azure-devops",
            "gitea",
            "forgejo",
            "unknown",
        ]

    def test_str_is_value(self) -> None:
        assert str(ProviderName.AZURE_DEVOPS) == "azure-devops"

    def test_lookup_by_value(self) -> None:
        assert ProviderName("forgejo") is ProviderName.FORGEJO

    def test_self_hosted(self) -> None:
        assert ProviderName.GITEA.is_self_hosted
        assert ProviderName.FORGEJO.is_self_hosted
        assert not ProviderName.GITHUB.is_self_hosted


class TestPRTerminology:
    def test_values(self) -> None:
        assert str(PRTerminology.PR) == "PR"
        assert str(PRTerminology.MR) == "MR"
        assert str(PRTerminology.PULL_REQUEST) == "pull request"


class TestRemoteUrlInfo:
    """Tests for RemoteUrlInfo."""

    def test_full_name(self) -> None:
        info = RemoteUrlInfo(ProviderName.GITLAB, "gitlab.com", "group/subgroup", "repo")
        assert info.full_name == "group/subgroup/repo"

    def test_to_dict_uses_plain_strings(self) -> None:
        info = RemoteUrlInfo(ProviderName.AZURE_DEVOPS, "dev.azure.com", "org/project", "repo")

        assert info.to_dict() == {
            "provider": "azure-devops",
            "host": "dev.azure.com",
            "owner": "org/project",
            "repo": "repo",
        }
        assert type(info.to_dict()["provider"]) is str

    def test_frozen(self) -> None:
        info = RemoteUrlInfo(ProviderName.GITHUB, "github.com", "user", "repo")

        with pytest.raises(FrozenInstanceError):
            info.repo = "other"  # type: ignore[misc]

    def test_git_remote_equality(self) -> None:
        assert GitRemote("origin", "git@x:o/r.git", "ssh") == GitRemote("origin", "git@x:o/r.git", "ssh")


class TestPRInfo:
    def test_author_optional(self) -> None:
        pr = PRInfo(title="t", head_branch="feat", base_branch="main", url="u", body="")
        assert pr.author is None

    def test_to_dict(self) -> None:
        pr = PRInfo(title="t", head_branch="feat", base_branch="main", url="u", body="b", author="alice")

        assert pr.to_dict() == {
            "title": "t",
            "head_branch": "feat",
            "base_branch": "main",
            "url": "u",
            "body": "b",
            "author": "alice",
        }


class TestIssueInfo:
    def test_labels_become_list(self) -> None:
        issue = IssueInfo(title="t", body="b", url="u", labels=("bug", "ui"))
        assert issue.to_dict()["labels"] == ["bug", "ui"]

    def test_labels_absent(self) -> None:
        issue = IssueInfo(title="t", body="b", url="u")
        assert issue.to_dict()["labels"] is None


class TestFetchResult:
    """Tests for FetchResult."""

    def test_success(self) -> None:
        result = FetchResult.success("value", tier="cli")

        assert result.ok
        assert result.value == "value"
        assert result.reason is None
        assert result.tier == "cli"

    def test_failure(self) -> None:
        result: FetchResult[str] = FetchResult.failure(FailureReason.UNREACHABLE, "gh not installed", tier="cli")

        assert not result.ok
        assert result.value is None
        assert result.reason == FailureReason.UNREACHABLE
        assert result.detail == "gh not installed"

    def test_reason_str(self) -> None:
        assert str(FailureReason.NOT_FOUND_OR_ERROR) == "not-found-or-error"
