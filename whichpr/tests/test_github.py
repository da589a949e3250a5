"""Unit tests for GitHub module."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from whichpr.config import Config, default_config
from whichpr.github import (
    GitHubClient, GitHubRepository, PyGithubProtocol, api_base_url, find_github_token,
    repository_from_config,
)
from whichpr.github.adapters import PyGithubAdapter, create_pygithub_client
from whichpr.tests.fakes import FakeGithub
from whichpr.typing import ConfigError, GitHubAuthError, PullRequestNotFoundError


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty home directory without any GitHub token around."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return tmp_path


def config_with_credentials(path: Path) -> Config:
    return Config({'user': {'credentials_path': str(path)}})


class TestGitHubRepository:
    """Tests for the repository reference."""

    def test_names_and_urls(self) -> None:
        repo = GitHubRepository(owner="octo", name="hello")
        assert repo.full_name == "octo/hello"
        assert str(repo) == "octo/hello"
        assert repo.web_url() == "https://github.com/octo/hello"
        assert repo.pull_request_url(42) == "https://github.com/octo/hello/pull/42"

    def test_enterprise_host(self) -> None:
        repo = GitHubRepository(owner="octo", name="hello", host="git.example.com")
        assert repo.pull_request_url(7) == "https://git.example.com/octo/hello/pull/7"
        assert api_base_url(repo.host) == "https://git.example.com/api/v3"
        assert api_base_url("github.com") == "https://api.github.com"

    def test_from_config(self) -> None:
        config = Config({'repo': {'github_repo_owner': 'octo', 'github_repo_name': 'hello',
                                  'github_host': 'github.com'}})
        assert repository_from_config(config) == GitHubRepository("octo", "hello")

    def test_from_config_missing(self) -> None:
        with pytest.raises(ConfigError):
            repository_from_config(default_config())


class TestFindGithubToken:
    """Tests for token lookup order."""

    def test_env_var_wins(self, home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        creds = home / "whichpr"
        creds.write_text(yaml.safe_dump({"github.com": [{"user": "octo", "oauth_token": "file-token"}]}))
        assert find_github_token(config_with_credentials(creds)) == "env-token"

    def test_hub_style_credentials_file(self, home: Path) -> None:
        creds = home / "whichpr"
        creds.write_text(yaml.safe_dump({
            "github.com": [{"user": "octo", "oauth_token": "file-token", "protocol": "https"}],
            "git.example.com": [{"user": "octo", "oauth_token": "ghe-token"}],
        }))
        config = config_with_credentials(creds)
        assert find_github_token(config) == "file-token"
        assert find_github_token(config, "git.example.com") == "ghe-token"

    def test_gh_hosts_file(self, home: Path) -> None:
        gh_dir = home / ".config" / "gh"
        gh_dir.mkdir(parents=True)
        (gh_dir / "hosts.yml").write_text(yaml.safe_dump({"github.com": {"oauth_token": "gh-token"}}))
        assert find_github_token(config_with_credentials(home / "missing")) == "gh-token"

    def test_no_token(self, home: Path) -> None:
        assert find_github_token(config_with_credentials(home / "missing")) is None

    def test_malformed_file_is_ignored(self, home: Path) -> None:
        creds = home / "whichpr"
        creds.write_text("github.com: [unclosed")
        assert find_github_token(config_with_credentials(creds)) is None

    def test_environment_is_not_modified(self, home: Path) -> None:
        import os
        before = dict(os.environ)
        find_github_token(config_with_credentials(home / "missing"))
        assert dict(os.environ) == before


class TestGitHubClient:
    """Tests for the merged pull request search."""

    def test_query_and_first_result(self) -> None:
        github = FakeGithub()
        github.add_pull_request("octo/hello", 12, "Fix", body="abc1234")
        client = GitHubClient(default_config(), github_client=github)
        assert client.search_merged_pull_request("abc1234", "octo/hello") == 12
        assert github.queries == ["abc1234 is:merged repo:octo/hello"]

    def test_empty_result(self) -> None:
        client = GitHubClient(default_config(), github_client=FakeGithub())
        with pytest.raises(PullRequestNotFoundError):
            client.search_merged_pull_request("abc1234", "octo/hello")

    def test_results_are_consumed_lazily(self) -> None:
        consumed = []

        def results():
            for number in (3, 4):
                consumed.append(number)
                yield MagicMock(number=number)

        fake = MagicMock()
        fake.search_issues.return_value = results()
        client = GitHubClient(default_config(), github_client=fake)
        assert client.search_merged_pull_request("abc1234", "octo/hello") == 3
        assert consumed == [3]

    def test_client_created_on_first_use(self) -> None:
        with patch("whichpr.github.adapters.create_pygithub_client") as create:
            client = GitHubClient(default_config())
            create.assert_not_called()
            assert client.client is create.return_value
            create.assert_called_once()


class TestAdapters:
    """Tests for the PyGithub adapter."""

    def test_search_issues_wraps_results(self) -> None:
        github = MagicMock()
        github.search_issues.return_value = iter([MagicMock(number=5), MagicMock(number=6)])
        adapter = PyGithubAdapter(github)
        assert isinstance(adapter, PyGithubProtocol)
        assert [issue.number for issue in adapter.search_issues("q")] == [5, 6]
        github.search_issues.assert_called_once_with("q")

    def test_create_without_token(self, home: Path) -> None:
        with pytest.raises(GitHubAuthError):
            create_pygithub_client(config_with_credentials(home / "missing"), "github.com")

    def test_create_with_token(self, home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        with patch("whichpr.github.adapters.Github") as github_cls:
            adapter = create_pygithub_client(default_config(), "git.example.com")
        assert isinstance(adapter, PyGithubAdapter)
        _, kwargs = github_cls.call_args
        assert kwargs["base_url"] == "https://git.example.com/api/v3"
