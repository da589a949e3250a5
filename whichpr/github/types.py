"""Type definitions for GitHub credential files."""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, ValidationError

class HubHostEntry(BaseModel):
    """One account entry of a hub-style config file.

    github.com:
    - user: octocat
      oauth_token: <token>
      protocol: https
    """
    model_config = ConfigDict(extra="ignore")

    user: Optional[str] = None
    oauth_token: Optional[str] = None
    protocol: str = "https"

class GhHostEntry(BaseModel):
    """Host entry of the gh CLI hosts.yml file."""
    model_config = ConfigDict(extra="ignore")

    user: Optional[str] = None
    oauth_token: Optional[str] = None
    git_protocol: Optional[str] = None

def parse_hub_hosts(data: Dict[str, object], host: str) -> List[HubHostEntry]:
    """Entries for host in a parsed hub config, skipping malformed ones."""
    raw = data.get(host)
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    entries: List[HubHostEntry] = []
    for item in raw:
        try:
            entries.append(HubHostEntry.model_validate(item))
        except ValidationError:
            continue
    return entries

def parse_gh_host(data: Dict[str, object], host: str) -> Optional[GhHostEntry]:
    """Entry for host in a parsed gh hosts.yml."""
    raw = data.get(host)
    if not isinstance(raw, dict):
        return None
    try:
        return GhHostEntry.model_validate(raw)
    except ValidationError:
        return None
