"""Stack comment generation.

Builds a tree of branches from a list of pull requests, fills in each branch's
route to trunk from recorded PR info or branch parents, and renders the tree as
a nested markdown list:

    body = StackCommentBody.generate(context, prs)
    str(body)           # the full comment
    body.for_pr(pr)     # the comment with a marker next to ``pr``
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Literal, Optional, Sequence, Set, Tuple, Union

from pydantic import BaseModel

from ..typing import StackCommentContext, StackLookupProtocol

# Get module logger
logger = logging.getLogger(__name__)

COMMENT_HEADER = 'Current dependencies on/for this PR:\n\n'
MARKER = ' 👈'


class PullRequestRef(BaseModel):
    """A branch with an open pull request."""
    kind: Literal['pr'] = 'pr'
    number: int
    base: str
    ref: str


class BranchRef(BaseModel):
    """A branch known only by its parent, with no pull request yet."""
    kind: Literal['branch'] = 'branch'
    base: str
    ref: str


EdgeEntry = Union[PullRequestRef, BranchRef]


class StackTree:
    """Forward and reverse maps of the branches in a stack.

    ``tree`` maps each node to the entries based on it, in insertion order.
    ``reverse`` maps each non-trunk node to its parent and doubles as the set
    of nodes whose parent is already known.
    """

    def __init__(self, trunk: str, lookup: StackLookupProtocol, dedupe_siblings: bool = False):
        self.trunk = trunk
        self.lookup = lookup
        self.dedupe_siblings = dedupe_siblings
        self.tree: Dict[str, List[EdgeEntry]] = {}
        self.reverse: Dict[str, str] = {}
        self._pending: Deque[str] = deque()
        # Nodes whose whole route to trunk is in ``reverse``
        self._rooted: Set[str] = set()
        # Nodes whose route ends at a dead end or a cycle
        self._dead_ends: Set[str] = set()
        self._ensure_node(trunk)

    def _ensure_node(self, node: str) -> List[EdgeEntry]:
        if node not in self.tree:
            self.tree[node] = []
            self._pending.append(node)
        return self.tree[node]

    def build(self, prs: Sequence[PullRequestRef]) -> None:
        """Populate the tree from ``prs`` and complete every route to trunk."""
        for pr in prs:
            self.add_edge(pr)
        self.complete_routes()

    def add_edge(self, entry: EdgeEntry) -> None:
        """Record ``entry`` as a child of its base."""
        deps = self._ensure_node(entry.base)
        if self.dedupe_siblings and any(d.ref == entry.ref for d in deps):
            logger.debug(f"Skipping duplicate child {entry.ref} of {entry.base}")
        else:
            deps.append(entry)
        self._ensure_node(entry.ref)
        self.reverse[entry.ref] = entry.base

    def complete_route(self, node: str) -> None:
        """Walk from ``node`` towards trunk, looking up any missing parents."""
        seen: Set[str] = set()
        while node != self.trunk and node not in self._rooted:
            if node in self._dead_ends:
                logger.debug(f"Route from {node} is already known to end before {self.trunk}")
                break
            if node in seen:
                logger.warning(f"Cycle in branch ancestry at {node}, not following it further")
                break
            seen.add(node)

            if node in self.reverse:
                node = self.reverse[node]
                continue

            pr = self.lookup.get_pr_info(node)
            if pr and pr.base and pr.number:
                logger.debug(f"Found PR #{pr.number} for {node} based on {pr.base}")
                self.add_edge(PullRequestRef(number=pr.number, base=pr.base, ref=node))
            else:
                parent = self.lookup.get_parent(node)
                if not parent:
                    logger.debug(f"No parent known for {node}, route to {self.trunk} ends here")
                    break
                logger.debug(f"Found parent {parent} for {node}")
                self.add_edge(BranchRef(base=parent, ref=node))

            node = self.reverse[node]
        else:
            self._rooted.update(seen)
            return

        self._dead_ends.update(seen)

    def complete_routes(self) -> None:
        """Complete the route of every node, including nodes added on the way."""
        while self._pending:
            self.complete_route(self._pending.popleft())

    def children(self, node: str) -> List[EdgeEntry]:
        return self.tree.get(node, [])


class StackCommentBody:
    """A rendered stack comment.

    The comment is built once when the object is created and never changes
    afterwards. ``for_pr`` returns a marked copy.
    """

    def __init__(self, context: StackCommentContext, prs: Sequence[PullRequestRef]):
        self.context = context
        self.trunk = context.engine.trunk
        self.stack = StackTree(self.trunk, context.engine, context.dedupe_siblings)
        self.stack.build(prs)
        self.comment = self.build()

    @classmethod
    def generate(cls, context: StackCommentContext, prs: Sequence[PullRequestRef]) -> 'StackCommentBody':
        """Build the comment for ``prs``."""
        return cls(context, prs)

    def build(self) -> str:
        return COMMENT_HEADER + self.build_tree_comment(None)

    def build_pr_string(self, pr: PullRequestRef) -> str:
        return f"**PR #{pr.number}**"

    def build_branch_ref_string(self, ref: BranchRef) -> str:
        owner = self.context.repo_config.get_repo_owner()
        repo = self.context.repo_config.get_repo_name()
        return (f"Branch _{ref.ref}_ - [Create Pull Request]"
                f"(https://github.com/{owner}/{repo}/compare/{ref.base}...{ref.ref})")

    def build_line(self, entry: Optional[EdgeEntry], level: int) -> str:
        line = ' ' * (level * 2) + '* '
        if entry is None:
            return line + f"{self.trunk}:\n"
        if entry.kind == 'pr':
            return line + self.build_pr_string(entry) + '\n'
        return line + self.build_branch_ref_string(entry) + '\n'

    def build_tree_comment(self, entry: Optional[EdgeEntry], level: int = 0) -> str:
        """Render ``entry`` and everything below it, depth first."""
        parts: List[str] = []
        # Nodes between the root and the entry being rendered
        path: Set[str] = set()
        # (leaving, entry, level); children are pushed in reverse to pop in stored order
        frames: List[Tuple[bool, Optional[EdgeEntry], int]] = [(False, entry, level)]
        while frames:
            leaving, current, depth = frames.pop()
            node = self.trunk if current is None else current.ref
            if leaving:
                path.discard(node)
                continue
            if node in path:
                logger.warning(f"Branch {node} is its own ancestor, not rendering it again")
                continue

            parts.append(self.build_line(current, depth))
            path.add(node)
            frames.append((True, current, depth))
            for child in reversed(self.stack.children(node)):
                frames.append((False, child, depth + 1))
        return ''.join(parts)

    def contains_pr(self, pr: PullRequestRef) -> bool:
        """Whether ``pr`` has a line in the comment."""
        return self.build_pr_string(pr) in self.comment

    def for_pr(self, pr: PullRequestRef) -> str:
        """Return the comment with a marker after ``pr``'s line.

        If ``pr`` is not in the comment, ``find`` returns -1 and the marker ends
        up ``len(token) - 1`` characters into the comment.
        """
        line = self.build_pr_string(pr)
        index = self.comment.find(line)
        if index == -1:
            logger.debug(f"PR #{pr.number} is not in the stack comment")
        split = index + len(line)
        return self.comment[:split] + MARKER + self.comment[split:]

    def __str__(self) -> str:
        return self.comment
