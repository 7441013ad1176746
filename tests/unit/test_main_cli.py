"""Tests for the forge-scout command line interface."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from forge_scout.enums import ProviderName
from forge_scout.git.models import RemoteUrlInfo
from forge_scout.main import _print_check, cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestPrintCheck:
    def test_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        _print_check("GitHub", True)
        assert "[OK]" in capsys.readouterr().out

    def test_failure_with_detail(self, capsys: pytest.CaptureFixture[str]) -> None:
        _print_check("GitLab", False, "CLI: glab")

        out = capsys.readouterr().out
        assert "[FAIL]" in out
        assert "CLI: glab" in out


class TestUrlCommands:
    """Tests for detect and parse."""

    def test_detect(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["detect", "git@ssh.dev.azure.com:v3/org/project/repo"])

        assert result.exit_code == 0
        assert result.output.strip() == "azure-devops"

    def test_detect_unknown(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["detect", "not-a-url"])

        assert result.exit_code == 0
        assert result.output.strip() == "unknown"

    def test_parse(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["parse", "https://gitlab.com/group/subgroup/repo.git"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "provider": "gitlab",
            "host": "gitlab.com",
            "owner": "group/subgroup",
            "repo": "repo",
        }

    def test_parse_failure(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["parse", "not-a-url"])

        assert result.exit_code == 1
        assert "not a recognised remote URL" in result.output

    def test_url_commands_ignore_bad_settings(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FORGE_SCOUT_CLI_TIMEOUT", "zero")

        result = runner.invoke(cli, ["detect", "https://github.com/a/b"])

        assert result.exit_code == 0


class TestSettingsErrors:
    def test_invalid_settings(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_URL", "gitlab.example.com")

        result = runner.invoke(cli, ["providers"])

        assert result.exit_code == 1
        assert "Invalid provider settings" in result.output


class TestPrCommand:
    """Tests for pr and issue."""

    def test_pr_with_explicit_target(
        self, runner: CliRunner, mock_run_command: AsyncMock, mock_get_json: AsyncMock
    ) -> None:
        mock_get_json.return_value = {
            "title": "Add caching",
            "source_branch": "feature/cache",
            "target_branch": "main",
            "web_url": "https://gitlab.com/group/app/-/merge_requests/7",
            "description": "",
            "author": {"username": "jdoe"},
        }

        result = runner.invoke(cli, ["pr", "7", "--provider", "gitlab", "--owner", "group", "--repo", "app"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["head_branch"] == "feature/cache"
        assert data["author"] == "jdoe"

    @patch("forge_scout.main.parse_remote_from_cwd")
    def test_issue_target_from_remote(
        self,
        mock_parse,
        runner: CliRunner,
        mock_run_command: AsyncMock,
        mock_get_json: AsyncMock,
    ) -> None:
        mock_parse.return_value = RemoteUrlInfo(ProviderName.BITBUCKET, "bitbucket.org", "team", "app")
        mock_get_json.return_value = {
            "title": "Crash",
            "content": {"raw": "trace"},
            "links": {"html": {"href": "https://bitbucket.org/team/app/issues/2"}},
        }

        result = runner.invoke(cli, ["issue", "2"])

        assert result.exit_code == 0
        assert json.loads(result.output)["title"] == "Crash"
        assert mock_get_json.await_args.args == ("https://api.bitbucket.org/2.0/repositories/team/app/issues/2",)

    @patch("forge_scout.main.parse_remote_from_cwd", return_value=None)
    def test_remote_option_is_forwarded(self, mock_parse, runner: CliRunner) -> None:
        runner.invoke(cli, ["pr", "1", "--cwd", "/work/app", "--remote", "upstream"])

        mock_parse.assert_called_once_with("/work/app", timeout=3.0, remote_name="upstream")

    @patch("forge_scout.main.parse_remote_from_cwd", return_value=None)
    def test_remote_defaults_to_auto_selection(self, mock_parse, runner: CliRunner) -> None:
        runner.invoke(cli, ["issue", "1"])

        assert mock_parse.call_args.kwargs["remote_name"] is None

    @patch("forge_scout.main.parse_remote_from_cwd", return_value=None)
    def test_no_provider(self, mock_parse, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["pr", "1"])

        assert result.exit_code == 1
        assert "Could not determine the hosting provider" in result.output

    @patch("forge_scout.main.parse_remote_from_cwd", return_value=None)
    def test_not_retrievable(self, mock_parse, runner: CliRunner, mock_run_command: AsyncMock) -> None:
        """gh is missing and PyGithub cannot run without owner and repo."""
        result = runner.invoke(cli, ["issue", "3", "--provider", "github", "--verbose"], catch_exceptions=False)

        assert result.exit_code == 1
        assert "could not retrieve" in result.output
        assert "reason: missing-config" in result.output

    def test_invalid_number(self, runner: CliRunner, mock_run_command: AsyncMock) -> None:
        result = runner.invoke(
            cli, ["pr", "0", "--provider", "gitlab", "--owner", "g", "--repo", "r", "-v"]
        )

        assert result.exit_code == 1
        assert "reason: invalid-input" in result.output
        mock_run_command.assert_not_awaited()


class TestAuthCommand:
    def test_single_provider_with_token(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_TOKEN", "glpat")

        result = runner.invoke(cli, ["auth", "--provider", "gitlab"])

        assert result.exit_code == 0
        assert "[OK]" in result.output
        assert "GitLab" in result.output
        assert "CLI: glab" in result.output

    def test_single_provider_unauthenticated(self, runner: CliRunner, mock_run_command: AsyncMock) -> None:
        result = runner.invoke(cli, ["auth", "--provider", "bitbucket"])

        assert result.exit_code == 1
        assert "[FAIL]" in result.output
        assert "token only" in result.output

    def test_all_providers(self, runner: CliRunner, mock_run_command: AsyncMock) -> None:
        result = runner.invoke(cli, ["auth"])

        assert result.exit_code == 0
        for name in ("GitHub", "GitLab", "Bitbucket", "Azure DevOps", "Gitea", "Forgejo"):
            assert name in result.output


class TestProbeCommand:
    def test_match(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        async def fake_probe(url: str, *, timeout: float = 5.0) -> bool:
            return url.endswith("/api/v4/version")

        monkeypatch.setattr("forge_scout.providers.base.probe", fake_probe)

        result = runner.invoke(cli, ["probe", "https://code.example.com"])

        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if "[OK]" in line]
        assert len(lines) == 1
        assert "GitLab" in lines[0]

    def test_no_match(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("forge_scout.providers.base.probe", AsyncMock(return_value=False))

        result = runner.invoke(cli, ["probe", "https://code.example.com", "--provider", "gitea"])

        assert result.exit_code == 1
        assert "[FAIL]" in result.output


class TestProvidersCommand:
    def test_lists_vocabulary(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["providers"])

        assert result.exit_code == 0
        rows = {row["name"]: row for row in json.loads(result.output)}
        assert set(rows) == {"github", "gitlab", "bitbucket", "azure-devops", "gitea", "forgejo"}
        assert rows["gitlab"]["pr_terminology"] == "MR"
        assert rows["azure-devops"]["pr_terminology"] == "pull request"
        assert rows["bitbucket"]["required_cli"] is None
        assert rows["github"]["pr_refspec"] == "pull/{number}/head:{branch}"
        assert rows["forgejo"]["self_hosted"] is True
        assert rows["github"]["self_hosted"] is False
