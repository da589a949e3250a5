"""Pydantic models for config types."""

from typing import Optional
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field

def default_credentials_path() -> str:
    """Path of the hub-style whichpr credentials file."""
    return str(Path.home() / ".config" / "whichpr")

class RepoConfig(BaseModel):
    """Repository configuration."""
    model_config = ConfigDict(extra="allow")

    github_remote: Optional[str] = None  # None means pick upstream/github/origin
    github_host: str = "github.com"
    github_repo_owner: Optional[str] = None
    github_repo_name: Optional[str] = None

class UserConfig(BaseModel):
    """User configuration."""
    model_config = ConfigDict(extra="allow")

    credentials_path: str = Field(default_factory=default_credentials_path)

class ToolConfig(BaseModel):
    """Tool configuration."""
    model_config = ConfigDict(extra="allow")

    min_commit_length: int = Field(default=7, ge=7)

class WhichprConfig(BaseModel):
    """Full whichpr configuration."""
    model_config = ConfigDict(extra="allow")

    repo: RepoConfig = Field(default_factory=RepoConfig)
    user: UserConfig = Field(default_factory=UserConfig)
    tool: ToolConfig = Field(default_factory=ToolConfig)
