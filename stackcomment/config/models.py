"""Pydantic models for config types."""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field

from ..util import ensure

class RepoConfig(BaseModel):
    """Repository configuration."""
    github_remote: str = "origin"
    github_branch: str = "main"
    github_host: str = "github.com"
    github_repo_owner: Optional[str] = None
    github_repo_name: Optional[str] = None

    class Config:
        """Pydantic config."""
        extra = "allow"  # Allow extra fields for forward compatibility

    def get_repo_owner(self) -> str:
        return ensure(self.github_repo_owner, "github_repo_owner")

    def get_repo_name(self) -> str:
        return ensure(self.github_repo_name, "github_repo_name")

class UserConfig(BaseModel):
    """User configuration."""
    log_git_commands: bool = False

    class Config:
        """Pydantic config."""
        extra = "allow"

class CommentConfig(BaseModel):
    """Stack comment configuration."""
    # Skip a child when its parent already lists a child with the same branch
    dedupe_siblings: bool = False
    post_comments: bool = True

    class Config:
        """Pydantic config."""
        extra = "allow"

class ToolConfig(BaseModel):
    """Tool configuration."""
    pretend: bool = False

    class Config:
        """Pydantic config."""
        extra = "allow"

class StackCommentConfig(BaseModel):
    """Full stackcomment configuration."""
    repo: RepoConfig = Field(default_factory=RepoConfig)
    user: UserConfig = Field(default_factory=UserConfig)
    comment: CommentConfig = Field(default_factory=CommentConfig)
    tool: ToolConfig = Field(default_factory=ToolConfig)
    state: Optional[Dict[str, Any]] = None

    class Config:
        """Pydantic config."""
        extra = "allow"
