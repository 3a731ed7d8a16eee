"""Common types used across the codebase."""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel


class StackCommentError(Exception):
    """Base error for git and GitHub failures outside the comment core."""


class GitCommandFailed(StackCommentError):
    """A git command exited with an error."""


class NotAGitRepository(StackCommentError):
    """The working directory is not inside a git repository."""


class PRInfo(BaseModel):
    """PR info recorded for a branch. Either field may be missing."""
    number: Optional[int] = None
    base: Optional[str] = None


class GitInterface(Protocol):
    """Protocol for running git commands."""
    def run_cmd(self, command: str) -> str:
        ...

    def must_git(self, command: str) -> str:
        ...


@runtime_checkable
class StackLookupProtocol(Protocol):
    """What the comment builder needs to resolve a branch's route to trunk."""
    trunk: str

    def get_pr_info(self, branch: str) -> Optional[PRInfo]:
        """Get the recorded PR for a branch, if any."""
        ...

    def get_parent(self, branch: str) -> Optional[str]:
        """Get the parent of a branch that has no PR, if known."""
        ...


@runtime_checkable
class RepoInfoProtocol(Protocol):
    """Repository owner/name, used to build compare URLs."""
    def get_repo_owner(self) -> str:
        ...

    def get_repo_name(self) -> str:
        ...


@dataclass
class StackCommentContext:
    """Collaborators for building a stack comment."""
    engine: StackLookupProtocol
    repo_config: RepoInfoProtocol
    dedupe_siblings: bool = False
