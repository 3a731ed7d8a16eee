"""Git implementation."""

import os
import shlex
import logging
import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..typing import GitCommandFailed, NotAGitRepository
from ..config.models import StackCommentConfig

# Get module logger
logger = logging.getLogger(__name__)

class RealGit:
    """Real Git implementation."""
    def __init__(self, config: StackCommentConfig, path: str = ""):
        """Initialize with config and repository path (default: cwd)."""
        self.config: StackCommentConfig = config
        self.path = path

    def _repo(self) -> git.Repo:
        try:
            return git.Repo(self.path or os.getcwd(), search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise NotAGitRepository(f"Not in a git repository: {self.path or os.getcwd()}")

    def run_cmd(self, command: str) -> str:
        """Run git command."""
        cmd_str = command.strip()
        if self.config.user.log_git_commands:
            logger.info(f"> git {cmd_str}")
        else:
            logger.debug(f"> git {cmd_str}")

        cmd_parts = shlex.split(cmd_str)
        method = getattr(self._repo().git, cmd_parts[0].replace('-', '_'))
        try:
            result = method(*cmd_parts[1:])
        except GitCommandError as e:
            raise GitCommandFailed(f"Git command failed: {e}")
        return result if isinstance(result, str) else str(result)

    def must_git(self, command: str) -> str:
        """Run git command, failing on error."""
        return self.run_cmd(command)
