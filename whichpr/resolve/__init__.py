"""Pull request resolution for a commit.

Three tiers are tried in order, the first hit wins:

1. squash: the commit subject ends with "(#N)", as GitHub writes it for
   squash merges.
2. merge: the first "Merge pull request #N from ..." merge on the ancestry
   path from the commit to HEAD, accepted only if the commit is an ancestor
   of that merge's second parent.
3. search: the GitHub issue search for merged pull requests mentioning the
   commit in the repository.

The two local tiers return None when they cannot answer, including when git
fails. Only the search tier's errors reach the caller.
"""

import re
import logging
from typing import Optional

from ..git import parse_merge_log
from ..typing import (
    CommitSHA, ExternalToolError, InvalidCommitError, LocalHistory, PullRequestSearch,
)

# Get module logger
logger = logging.getLogger(__name__)

MIN_COMMIT_LENGTH = 7

SQUASH_SUBJECT = re.compile(r'\(#(\d+)\)$')
MERGE_PR_SUBJECT = re.compile(r'^Merge pull request #(\d+) from ')

def is_ancestor(history: LocalHistory, ancestor: str, descendant: str) -> bool:
    """Check whether ancestor is in the history of descendant.

    A prefix match counts as the same commit, so an abbreviated hash is an
    ancestor of its full form. Unknown revisions give False, never an error.
    """
    if descendant.startswith(ancestor):
        return True
    try:
        return len(history.ancestry_path(ancestor, descendant, max_count=1)) > 0
    except ExternalToolError as e:
        logger.debug(f"Ancestry check {ancestor}..{descendant} failed: {e}")
        return False

def resolve_squash(history: LocalHistory, commit: CommitSHA) -> Optional[int]:
    """PR number from a squash-merge subject like "Fix bug (#42)"."""
    try:
        subject = history.subject(commit)
    except ExternalToolError as e:
        logger.debug(f"Squash lookup for {commit} failed: {e}")
        return None

    match = SQUASH_SUBJECT.search(subject)
    if not match:
        logger.debug(f"Subject of {commit} has no squash marker: '{subject}'")
        return None
    return int(match.group(1))

def resolve_merge(history: LocalHistory, commit: CommitSHA) -> Optional[int]:
    """PR number from the earliest pull request merge containing commit."""
    try:
        lines = history.merge_log(commit)
    except ExternalToolError as e:
        logger.debug(f"Merge log for {commit} failed: {e}")
        return None

    for record in parse_merge_log(lines):
        if len(record.parents) != 2:
            continue
        match = MERGE_PR_SUBJECT.match(record.subject)
        if not match:
            continue

        number = int(match.group(1))
        branch_tip = record.second_parent
        if is_ancestor(history, commit, branch_tip):
            return number
        # Only the first pull request merge is considered
        logger.debug(f"{commit} is not an ancestor of {branch_tip[:8]}, rejecting #{number}")
        return None

    logger.debug(f"No pull request merge found after {commit}")
    return None

class PullRequestResolver:
    """Finds the pull request that introduced a commit."""
    def __init__(self, history: LocalHistory, search: PullRequestSearch, repository: str,
                 min_commit_length: int = MIN_COMMIT_LENGTH):
        """Initialize with history queries, remote search and owner/name of the repository."""
        self.history = history
        self.search = search
        self.repository = repository
        self.min_commit_length = min_commit_length

    def resolve(self, commit: str) -> int:
        """Get the pull request number for commit.

        Raises:
            InvalidCommitError: commit is shorter than min_commit_length
                or starts with a dash
            PullRequestNotFoundError: no tier found a pull request
        """
        if len(commit) < self.min_commit_length:
            raise InvalidCommitError(f"SHA1 must be at least {self.min_commit_length} characters")
        if commit.startswith("-"):
            raise InvalidCommitError(f"Invalid commit {commit!r}: must not start with '-'")
        sha = CommitSHA(commit)

        number = resolve_squash(self.history, sha)
        if number is not None:
            logger.info(f"{sha} was squash merged in #{number}")
            return number

        number = resolve_merge(self.history, sha)
        if number is not None:
            logger.info(f"{sha} was merged in #{number}")
            return number

        logger.info(f"No local match for {sha}, searching {self.repository}")
        return self.search.search_merged_pull_request(sha, self.repository)
