"""Adapter classes to wrap PyGithub objects with our protocol interfaces."""

from typing import Iterator
import logging

from github import Auth, Github
from github.Issue import Issue

from . import GitHubIssueProtocol, PyGithubProtocol, api_base_url, find_github_token
from ..config.models import WhichprConfig
from ..typing import GitHubAuthError

logger = logging.getLogger(__name__)


class PyGithubIssueAdapter(GitHubIssueProtocol):
    """Adapter for PyGithub Issue objects returned by search."""

    def __init__(self, issue: Issue) -> None:
        self._issue = issue

    @property
    def number(self) -> int:
        return self._issue.number


class PyGithubAdapter(PyGithubProtocol):
    """Adapter for the main PyGithub object."""

    def __init__(self, github: Github) -> None:
        self._github = github

    def search_issues(self, query: str) -> Iterator[GitHubIssueProtocol]:
        """Search issues, fetching result pages only as they are consumed."""
        for issue in self._github.search_issues(query):
            yield PyGithubIssueAdapter(issue)


def create_pygithub_client(config: WhichprConfig, host: str) -> PyGithubAdapter:
    """Create a real PyGithub client for host wrapped in our adapter."""
    token = find_github_token(config, host)
    if not token:
        raise GitHubAuthError(
            "No GitHub token found. Try one of:\n"
            "1. Set GITHUB_TOKEN env var\n"
            f"2. Add an oauth_token for {host} to {config.user.credentials_path}\n"
            "3. Log in with 'gh auth login'")
    base_url = api_base_url(host)
    logger.debug(f"Creating PyGithub client for {base_url}")
    return PyGithubAdapter(Github(auth=Auth.Token(token), base_url=base_url))
