"""Branch metadata stored in git refs.

Each tracked branch has a ref ``refs/branch-metadata/<branch>`` pointing at a
JSON blob that records its parent branch and, once a PR is opened, the PR's
number and base.
"""

import logging
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from ..comment import PullRequestRef
from ..config.models import StackCommentConfig
from ..typing import GitInterface, GitCommandFailed, PRInfo

# Get module logger
logger = logging.getLogger(__name__)

METADATA_REF_PREFIX = "refs/branch-metadata/"

class BranchPRInfo(BaseModel):
    """PR info recorded in branch metadata."""
    number: Optional[int] = None
    base: Optional[str] = None
    title: Optional[str] = None
    state: Optional[str] = None

    class Config:
        """Pydantic config."""
        extra = "allow"

class BranchMetadata(BaseModel):
    """Metadata blob for one branch."""
    parentBranchName: Optional[str] = None
    parentBranchRevision: Optional[str] = None
    prInfo: Optional[BranchPRInfo] = None

    class Config:
        """Pydantic config."""
        extra = "allow"

class MetadataEngine:
    """Resolves branch parents and PR info from metadata refs."""
    def __init__(self, config: StackCommentConfig, git_cmd: GitInterface):
        self.config = config
        self.git_cmd = git_cmd
        self.trunk: str = config.repo.github_branch
        self._cache: Dict[str, Optional[BranchMetadata]] = {}

    def read_metadata(self, branch: str) -> Optional[BranchMetadata]:
        """Read and parse the metadata for ``branch``. Misses are cached too."""
        if branch in self._cache:
            return self._cache[branch]

        meta: Optional[BranchMetadata] = None
        try:
            raw = self.git_cmd.run_cmd(f"cat-file -p {METADATA_REF_PREFIX}{branch}")
        except GitCommandFailed:
            logger.debug(f"No metadata for {branch}")
        else:
            try:
                meta = BranchMetadata.model_validate_json(raw)
            except ValidationError as e:
                logger.warning(f"Ignoring malformed metadata for {branch}: {e}")

        self._cache[branch] = meta
        return meta

    def get_pr_info(self, branch: str) -> Optional[PRInfo]:
        meta = self.read_metadata(branch)
        if meta is None or meta.prInfo is None:
            return None
        return PRInfo(number=meta.prInfo.number, base=meta.prInfo.base)

    def get_parent(self, branch: str) -> Optional[str]:
        meta = self.read_metadata(branch)
        return meta.parentBranchName if meta else None

    def tracked_branches(self) -> List[str]:
        """List the branches that have metadata refs."""
        output = self.git_cmd.must_git(f"for-each-ref --format=%(refname) {METADATA_REF_PREFIX}")
        return [line.strip()[len(METADATA_REF_PREFIX):]
                for line in output.splitlines()
                if line.strip().startswith(METADATA_REF_PREFIX)]

    def pull_requests(self, branches: Sequence[str]) -> List[PullRequestRef]:
        """Get a PullRequestRef for each branch with a recorded PR number and base."""
        prs: List[PullRequestRef] = []
        for branch in branches:
            info = self.get_pr_info(branch)
            if info and info.number and info.base:
                prs.append(PullRequestRef(number=info.number, base=info.base, ref=branch))
            else:
                logger.debug(f"Branch {branch} has no PR")
        return prs
