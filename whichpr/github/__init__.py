"""GitHub interfaces and implementation."""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, runtime_checkable

import yaml

from ..config.models import WhichprConfig
from ..typing import ConfigError, PullRequestNotFoundError
from .types import parse_gh_host, parse_hub_hosts

# Get module logger
logger = logging.getLogger(__name__)

DEFAULT_HOST = "github.com"

@dataclass(frozen=True)
class GitHubRepository:
    """GitHub repository the local checkout belongs to."""
    owner: str
    name: str
    host: str = DEFAULT_HOST

    @property
    def full_name(self) -> str:
        """owner/name, as used in search qualifiers."""
        return f"{self.owner}/{self.name}"

    def web_url(self, path: str = "") -> str:
        """URL of a page of this repository on the web."""
        url = f"https://{self.host}/{self.full_name}"
        if path:
            url = f"{url}/{path.lstrip('/')}"
        return url

    def pull_request_url(self, number: int) -> str:
        """URL of a pull request's page."""
        return self.web_url(f"pull/{number}")

    def __str__(self) -> str:
        return self.full_name

def api_base_url(host: str) -> str:
    """REST API root for github.com or a GitHub Enterprise host."""
    if host == DEFAULT_HOST:
        return "https://api.github.com"
    return f"https://{host}/api/v3"

def repository_from_config(config: WhichprConfig) -> GitHubRepository:
    """Get the repository reference resolved by parse_config."""
    owner = config.repo.github_repo_owner
    name = config.repo.github_repo_name
    if not owner or not name:
        raise ConfigError(
            "Could not determine the GitHub repository. Add a GitHub remote "
            "or set repo.github_repo_owner and repo.github_repo_name in .whichpr.yaml")
    return GitHubRepository(owner=owner, name=name, host=config.repo.github_host)

# Define protocols for GitHub objects
@runtime_checkable
class GitHubIssueProtocol(Protocol):
    """Protocol for GitHub issue search results (real or fake)."""
    @property
    def number(self) -> int:
        """Get the issue or pull request number."""
        ...

@runtime_checkable
class PyGithubProtocol(Protocol):
    """Protocol for PyGithub implementations (real or fake).

    Only issue search is needed; results are consumed lazily.
    """
    def search_issues(self, query: str) -> Iterable[GitHubIssueProtocol]:
        """Search issues and pull requests."""
        ...

def _load_yaml(path: Path) -> Optional[Dict[str, object]]:
    """Load a YAML mapping, None if missing or unreadable."""
    if not path.exists():
        return None
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error reading {path}: {e}")
        return None
    return data if isinstance(data, dict) else None

def find_github_token(config: WhichprConfig, host: str = DEFAULT_HOST) -> Optional[str]:
    """Find GitHub token from env var, whichpr credentials file, or gh CLI config."""
    # First try environment variable
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    # Then the hub-style whichpr credentials file
    hub_config = _load_yaml(Path(config.user.credentials_path).expanduser())
    if hub_config:
        for entry in parse_hub_hosts(hub_config, host):
            if entry.oauth_token:
                logger.debug(f"Using token for {entry.user or 'unknown user'} from {config.user.credentials_path}")
                return entry.oauth_token

    # Finally the gh CLI config at ~/.config/gh/hosts.yml
    gh_config = _load_yaml(Path.home() / ".config" / "gh" / "hosts.yml")
    if gh_config:
        gh_entry = parse_gh_host(gh_config, host)
        if gh_entry and gh_entry.oauth_token:
            return gh_entry.oauth_token

    return None

class GitHubClient:
    """GitHub client implementation."""
    def __init__(self, config: WhichprConfig, github_client: Optional[PyGithubProtocol] = None):
        """Initialize with config and GitHub client implementation.

        Args:
            config: The configuration
            github_client: GitHub client implementation (real or fake).
                           If None, a PyGithub client is created on first use.
        """
        self.config = config
        self._client = github_client

    @property
    def client(self) -> PyGithubProtocol:
        """GitHub API client, created on first access."""
        if self._client is None:
            from .adapters import create_pygithub_client
            self._client = create_pygithub_client(self.config, self.config.repo.github_host)
        return self._client

    def search_merged_pull_request(self, commit: str, repository: str) -> int:
        """Find a merged pull request in repository mentioning commit.

        The first search result is used as returned by the API, without
        ranking. API errors propagate unchanged.
        """
        query = f"{commit} is:merged repo:{repository}"
        logger.info(f"> GitHub search issues: {query}")
        first = next(iter(self.client.search_issues(query)), None)
        if first is None:
            raise PullRequestNotFoundError(f"Pull Request is not found for {commit} in {repository}")
        logger.debug(f"Search returned #{first.number} for {commit}")
        return first.number
