"""Common types used across the codebase."""

from typing import List, NewType, Optional, Protocol, runtime_checkable

# Commit hash as typed by the user, full or abbreviated
CommitSHA = NewType('CommitSHA', str)

class WhichprError(Exception):
    """Base class for errors reported to the user."""

class InvalidCommitError(WhichprError):
    """Commit identifier is too short to be looked up safely."""

class PullRequestNotFoundError(WhichprError):
    """No pull request could be found for a commit."""

class ExternalToolError(WhichprError):
    """The git executable failed."""

class ConfigError(WhichprError):
    """The GitHub repository for the local checkout could not be determined."""

class GitHubAuthError(WhichprError):
    """No GitHub token is available for the search API."""

class GitInterface(Protocol):
    """Protocol for running git commands."""
    def run_cmd(self, command: str) -> str:
        """Run git command and return its output."""
        ...

    def must_git(self, command: str) -> str:
        """Run git command, failing on error."""
        ...

@runtime_checkable
class LocalHistory(Protocol):
    """The three history queries the resolvers need.

    Every method raises ExternalToolError when git fails, for example
    when a revision does not exist.
    """
    def subject(self, commit: str) -> str:
        """Subject line of a single commit."""
        ...

    def merge_log(self, commit: str) -> List[str]:
        """Merge commits between commit and HEAD on the ancestry path.

        One "<parents> <subject>" line per merge, oldest first.
        """
        ...

    def ancestry_path(self, ancestor: str, descendant: str, max_count: Optional[int] = None) -> List[str]:
        """Commits on the ancestry path ancestor..descendant, at most max_count."""
        ...

class PullRequestSearch(Protocol):
    """Protocol for the remote search fallback."""
    def search_merged_pull_request(self, commit: str, repository: str) -> int:
        """Number of a merged pull request in repository (owner/name) mentioning commit."""
        ...
