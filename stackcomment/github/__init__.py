"""GitHub interfaces and implementation."""

import os
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, Sequence, runtime_checkable

import yaml

from ..comment import COMMENT_HEADER, PullRequestRef, StackCommentBody
from ..config.models import StackCommentConfig

# Get module logger
logger = logging.getLogger(__name__)

# Define protocols for GitHub objects
@runtime_checkable
class GitHubIssueCommentProtocol(Protocol):
    """Protocol for GitHub issue comment objects (real or fake)."""
    @property
    def id(self) -> int:
        """Get the comment id."""
        ...

    @property
    def body(self) -> str:
        """Get the comment body."""
        ...

    def edit(self, body: str) -> None:
        """Replace the comment body."""
        ...

@runtime_checkable
class GitHubPullRequestProtocol(Protocol):
    """Protocol for GitHub pull request objects (real or fake)."""
    @property
    def number(self) -> int:
        """Get the PR number."""
        ...

    def get_issue_comments(self) -> Iterable[GitHubIssueCommentProtocol]:
        """Get the conversation comments on the pull request."""
        ...

    def create_issue_comment(self, body: str) -> GitHubIssueCommentProtocol:
        """Add a comment to the pull request."""
        ...

@runtime_checkable
class GitHubRepoProtocol(Protocol):
    """Protocol for GitHub repository objects (real or fake)."""
    def get_pull(self, number: int) -> GitHubPullRequestProtocol:
        """Get a pull request by number."""
        ...

@runtime_checkable
class PyGithubProtocol(Protocol):
    """Protocol for PyGithub implementations (real or fake)."""
    def get_repo(self, full_name_or_id: str) -> GitHubRepoProtocol:
        """Get a repository by full name or ID."""
        ...

def find_github_token(host: str = "github.com") -> Optional[str]:
    """Find GitHub token for ``host`` from env var or gh CLI config."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        gh_config_path = Path.home() / ".config" / "gh" / "hosts.yml"
        if gh_config_path.exists():
            with open(gh_config_path, "r") as f:
                gh_config = yaml.safe_load(f)
            if isinstance(gh_config, dict) and isinstance(gh_config.get(host), dict):
                github_config: Dict[str, object] = gh_config[host]
                token = github_config.get("oauth_token")
                if isinstance(token, str) and token:
                    return token
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error reading gh CLI config: {e}")
    return None

class GitHubClient:
    """Posts stack comments to pull requests."""
    def __init__(self, config: StackCommentConfig, github_client: PyGithubProtocol):
        self.config = config
        self.client = github_client
        self._repo: Optional[GitHubRepoProtocol] = None

    @property
    def repo(self) -> GitHubRepoProtocol:
        """Get GitHub repository."""
        if self._repo is None:
            owner = self.config.repo.get_repo_owner()
            name = self.config.repo.get_repo_name()
            logger.info(f"> github get repo {owner}/{name}")
            self._repo = self.client.get_repo(f"{owner}/{name}")
        return self._repo

    @repo.setter
    def repo(self, value: GitHubRepoProtocol) -> None:
        """Set the GitHub repository."""
        self._repo = value

    def upsert_stack_comment(self, number: int, body: str) -> None:
        """Create or update the stack comment on PR ``number``."""
        if self.config.tool.pretend:
            logger.info(f"[PRETEND] Would post stack comment on PR #{number}:\n{body}")
            return

        pr = self.repo.get_pull(number)
        for comment in pr.get_issue_comments():
            if comment.body and comment.body.startswith(COMMENT_HEADER):
                if comment.body == body:
                    logger.info(f"Stack comment on PR #{number} is up to date")
                else:
                    logger.info(f"> github update stack comment on PR #{number}")
                    comment.edit(body)
                return

        logger.info(f"> github create stack comment on PR #{number}")
        pr.create_issue_comment(body)

    def post_stack_comments(self, body: StackCommentBody, prs: Sequence[PullRequestRef]) -> None:
        """Post ``body`` to every PR in ``prs``, marked for that PR."""
        if not self.config.comment.post_comments:
            logger.info("Posting stack comments is disabled")
            return
        for pr in prs:
            if not body.contains_pr(pr):
                logger.warning(f"PR #{pr.number} has no route to {body.trunk}, not commenting on it")
                continue
            self.upsert_stack_comment(pr.number, body.for_pr(pr))
