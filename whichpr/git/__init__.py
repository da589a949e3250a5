"""Git interfaces and implementation."""

import os
import re
import shlex
import logging
from dataclasses import dataclass, field
from typing import List, Optional
import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from ..typing import ExternalToolError, GitInterface
from ..config.models import WhichprConfig

# Get module logger
logger = logging.getLogger(__name__)

# Format of one merge log line: "<parent> <parent> <subject>"
MERGE_LOG_FORMAT = "%P %s"

_HASH_TOKEN = re.compile(r'[0-9a-f]{7,64}')

@dataclass
class MergeCommitRecord:
    """A merge commit as listed by merge_log: its parents and subject."""
    parents: List[str] = field(default_factory=list)
    subject: str = ""

    @property
    def second_parent(self) -> Optional[str]:
        """Tip of the branch that was merged in."""
        return self.parents[1] if len(self.parents) > 1 else None

def parse_merge_line(line: str) -> Optional[MergeCommitRecord]:
    """Parse a "%P %s" log line. Returns None when it has no parent hashes."""
    tokens = line.strip().split(' ')
    parents: List[str] = []
    while tokens and _HASH_TOKEN.fullmatch(tokens[0]):
        parents.append(tokens.pop(0))
    if not parents:
        return None
    return MergeCommitRecord(parents=parents, subject=' '.join(tokens))

def parse_merge_log(lines: List[str]) -> List[MergeCommitRecord]:
    """Parse merge log lines, skipping blank or malformed ones."""
    records: List[MergeCommitRecord] = []
    for line in lines:
        record = parse_merge_line(line)
        if record is None:
            if line.strip():
                logger.debug(f"Skipping unparseable merge log line: {line!r}")
            continue
        records.append(record)
    return records

def check_revision(rev: str) -> str:
    """Refuse revisions git would read as an option."""
    if rev.startswith('-'):
        raise ExternalToolError(f"Refusing revision that looks like an option: {rev!r}")
    return rev

class GitHistory:
    """LocalHistory backed by git log queries."""
    def __init__(self, git_cmd: GitInterface):
        self.git_cmd = git_cmd

    def subject(self, commit: str) -> str:
        """Subject line of a single commit."""
        out = self.git_cmd.must_git(f"log --pretty=format:%s -n 1 {shlex.quote(check_revision(commit))}")
        lines = out.splitlines()
        return lines[0] if lines else ""

    def merge_log(self, commit: str) -> List[str]:
        """Merge commits on the ancestry path commit..HEAD, oldest first."""
        revs = shlex.quote(f"{check_revision(commit)}..@")
        out = self.git_cmd.must_git(
            f"log --merges {shlex.quote('--pretty=format:' + MERGE_LOG_FORMAT)} "
            f"--reverse --ancestry-path {revs}")
        return out.splitlines()

    def ancestry_path(self, ancestor: str, descendant: str, max_count: Optional[int] = None) -> List[str]:
        """Commits on the ancestry path ancestor..descendant, newest first."""
        revs = shlex.quote(f"{check_revision(ancestor)}..{descendant}")
        limit = f" -n {max_count}" if max_count is not None else ""
        out = self.git_cmd.must_git(f"log --ancestry-path --pretty=format:%H{limit} {revs}")
        return [line for line in out.splitlines() if line.strip()]

class RealGit:
    """Real Git implementation."""
    def __init__(self, config: WhichprConfig, repo_dir: Optional[str] = None):
        """Initialize with config and optional repository directory."""
        self.config: WhichprConfig = config
        self.repo_dir = repo_dir
        self._repo: Optional[git.Repo] = None

    @property
    def repo(self) -> git.Repo:
        """GitPython repository for repo_dir or the current directory."""
        if self._repo is None:
            try:
                self._repo = git.Repo(self.repo_dir or os.getcwd(), search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise ExternalToolError("Not in a git repository") from e
        return self._repo

    def run_cmd(self, command: str) -> str:
        """Run git command."""
        cmd_str = command.strip()

        # Always log git commands
        logger.info(f"> git {cmd_str}")
        cmd_parts = shlex.split(cmd_str)
        git_command = cmd_parts[0]
        git_args = cmd_parts[1:]
        try:
            # Convert command to method call
            method = getattr(self.repo.git, git_command.replace('-', '_'))
            result = method(*git_args)
            return result if isinstance(result, str) else str(result)
        except GitCommandError as e:
            raise ExternalToolError(f"Git command failed: {e}") from e

    def must_git(self, command: str) -> str:
        """Run git command, failing on error."""
        return self.run_cmd(command)
