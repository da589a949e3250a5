"""Config parser logic."""

import os
import re
from typing import Dict, List, Optional, Tuple, Any
from urllib.parse import urlparse
import logging
import yaml

from ...typing import GitInterface

# Get module logger
logger = logging.getLogger(__name__)

RepoConfig = Dict[str, Any]  # Use Any since yaml can return various types
Config = Dict[str, RepoConfig]

REPO_CONFIG_FILE = '.whichpr.yaml'

# Remotes tried in order when github_remote is not configured
PREFERRED_REMOTES = ('upstream', 'github', 'origin')

# scp-like syntax: [user@]host:path
_SCP_LIKE_URL = re.compile(r'^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$')

def parse_remote_url(url: str) -> Optional[Tuple[str, str, str]]:
    """Split a git remote URL into (host, owner, name).

    Handles git@host:owner/name.git, ssh://, git:// and https:// forms.
    Returns None for anything that does not look like a hosted repository.
    """
    url = url.strip()
    if not url:
        return None

    if '://' in url:
        parsed = urlparse(url)
        if parsed.scheme == 'file' or not parsed.hostname:
            return None
        host = parsed.hostname
        path = parsed.path
    else:
        match = _SCP_LIKE_URL.match(url)
        if not match:
            return None
        host = match.group('host')
        path = match.group('path')

    path = path.strip('/')
    if path.endswith('.git'):
        path = path[:-len('.git')]
    parts = [p for p in path.split('/') if p]
    if len(parts) < 2:
        return None
    return host, parts[-2], parts[-1]

def choose_remote(remotes: List[str], configured: Optional[str] = None) -> Optional[str]:
    """Pick the remote that identifies the GitHub repository."""
    if configured:
        return configured if configured in remotes else None
    for name in PREFERRED_REMOTES:
        if name in remotes:
            return name
    return remotes[0] if remotes else None

def load_repo_config_file(path: str) -> Dict[str, Any]:
    """Load .whichpr.yaml overrides, empty dict if the file is absent."""
    try:
        with open(path, 'r') as f:
            logger.info(f"Found {path}, loading...")
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.debug(f"No {path} found, using defaults")
        return {}
    if data and not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: expected a mapping, got {type(data).__name__}")
        return {}
    return data or {}

def parse_config(git_cmd: GitInterface) -> Config:
    """Parse config from the repository config file and git remotes."""
    config: Config = {
        'repo': {
            'github_remote': None,
        },
        'user': {},
        'tool': {
            'whichpr': {
                'min_commit_length': 7,
            }
        }
    }

    top_level = git_cmd.must_git("rev-parse --show-toplevel").strip()
    repo_config = load_repo_config_file(os.path.join(top_level, REPO_CONFIG_FILE))
    for section in ('repo', 'user'):
        if isinstance(repo_config.get(section), dict):
            logger.debug(f"Config {section} from {REPO_CONFIG_FILE}: {repo_config[section]}")
            config[section].update(repo_config[section])

    # Extract host/owner/name from the remote if not in config
    if not config['repo'].get('github_repo_owner') or not config['repo'].get('github_repo_name'):
        remotes = [r.strip() for r in git_cmd.must_git("remote").splitlines() if r.strip()]
        remote = choose_remote(remotes, config['repo'].get('github_remote'))
        if remote is None:
            logger.warning(f"No usable git remote found among {remotes}")
            return config
        remote_url = git_cmd.must_git(f"remote get-url {remote}").strip()
        parsed = parse_remote_url(remote_url)
        if parsed is None:
            logger.warning(f"Remote {remote} ({remote_url}) is not a GitHub repository URL")
            return config
        host, owner, name = parsed
        logger.info(f"Using remote {remote}: {host}/{owner}/{name}")
        config['repo']['github_remote'] = remote
        if not config['repo'].get('github_host'):
            config['repo']['github_host'] = host
        if not config['repo'].get('github_repo_owner'):
            config['repo']['github_repo_owner'] = owner
        if not config['repo'].get('github_repo_name'):
            config['repo']['github_repo_name'] = name

    return config
