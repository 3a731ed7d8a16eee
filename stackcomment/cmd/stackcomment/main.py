"""CLI entry point."""

import os
import sys
import click
import logging
from typing import List, Optional, Tuple, Dict, Any
from click import Context

from ...comment import PullRequestRef, StackCommentBody
from ...config import Config, default_config
from ...config.config_parser import parse_config
from ...engine import MetadataEngine
from ...git import RealGit
from ...github import GitHubClient, find_github_token
from ...typing import StackCommentContext, StackCommentError

# Get module logger
logger = logging.getLogger(__name__)

class AliasedGroup(click.Group):
    """Command group with support for aliases."""

    def __init__(self, name: Optional[str] = None, commands: Optional[Dict[str, click.Command]] = None, **attrs: Any) -> None:
        """Initialize with aliases map."""
        super().__init__(name, commands, **attrs)
        self.aliases: Dict[str, str] = {}

    def add_alias(self, alias: str, command: str) -> None:
        """Add an alias for a command."""
        self.aliases[alias] = command

    def get_command(self, ctx: Context, cmd_name: str) -> Optional[click.Command]:
        """Get a command by name, supporting aliases."""
        if cmd_name in self.aliases:
            cmd_name = self.aliases[cmd_name]
        return super().get_command(ctx, cmd_name)

@click.group(cls=AliasedGroup)
@click.pass_context
def cli(ctx: Context) -> None:
    """Stack comments for stacked pull requests on GitHub."""
    ctx.obj = {}

cli.add_alias('sh', 'show')
cli.add_alias('sub', 'submit')

def setup_git(directory: Optional[str] = None) -> Tuple[Config, RealGit]:
    """Setup Git command and config."""
    if directory:
        os.chdir(directory)

    git_cmd = RealGit(default_config())
    try:
        git_cmd.run_cmd("rev-parse --git-dir")
    except StackCommentError as e:
        logger.error(f"{e}")
        sys.exit(2)

    config = Config(parse_config(git_cmd))
    return config, RealGit(config)

def build_comment(config: Config, git_cmd: RealGit, branches: List[str]) -> Tuple[StackCommentBody, List[PullRequestRef]]:
    """Build the stack comment for ``branches`` (default: all tracked branches)."""
    engine = MetadataEngine(config, git_cmd)
    if not branches:
        branches = engine.tracked_branches()
        logger.debug(f"Using tracked branches: {branches}")
    prs = engine.pull_requests(branches)
    context = StackCommentContext(
        engine=engine,
        repo_config=config.repo,
        dedupe_siblings=config.comment.dedupe_siblings,
    )
    return StackCommentBody.generate(context, prs), prs

@cli.command(name="show", help="Print the stack comment")
@click.option('-C', '--directory', type=click.Path(exists=True, file_okay=False, dir_okay=True),
              help='Run as if stackcomment was started in DIRECTORY instead of the current working directory')
@click.option('--branch', '-b', multiple=True,
              help="Include the specified branch (default: all tracked branches)")
@click.option('--pr', 'pr_number', type=int,
              help="Mark the specified pull request in the output")
@click.option('-v', '--verbose', count=True, help="Increase verbosity (can be used multiple times for more verbosity)")
@click.pass_context
def show(ctx: Context, directory: Optional[str], branch: Tuple[str, ...], pr_number: Optional[int], verbose: int) -> None:
    """Show command."""
    from ... import setup_logging
    setup_logging(verbose)

    config, git_cmd = setup_git(directory)
    try:
        body, prs = build_comment(config, git_cmd, list(branch))
    except (StackCommentError, RuntimeError) as e:
        logger.error(f"Error building stack comment: {e}")
        sys.exit(1)

    if pr_number is None:
        click.echo(str(body), nl=False)
        return

    matching = [pr for pr in prs if pr.number == pr_number]
    if not matching:
        logger.error(f"PR #{pr_number} is not one of the selected branches' pull requests")
        sys.exit(1)
    if not body.contains_pr(matching[0]):
        logger.error(f"PR #{pr_number} has no route to {body.trunk}")
        sys.exit(1)
    click.echo(body.for_pr(matching[0]), nl=False)

@cli.command(name="submit", help="Post the stack comment to every pull request in the stack")
@click.option('-C', '--directory', type=click.Path(exists=True, file_okay=False, dir_okay=True),
              help='Run as if stackcomment was started in DIRECTORY instead of the current working directory')
@click.option('--branch', '-b', multiple=True,
              help="Include the specified branch (default: all tracked branches)")
@click.option('--pretend', is_flag=True, help="Don't actually post comments, just show what would happen")
@click.option('-v', '--verbose', count=True, help="Increase verbosity (can be used multiple times for more verbosity)")
@click.pass_context
def submit(ctx: Context, directory: Optional[str], branch: Tuple[str, ...], pretend: bool, verbose: int) -> None:
    """Submit command."""
    from ... import setup_logging
    setup_logging(verbose)

    config, git_cmd = setup_git(directory)
    config.tool.pretend = config.tool.pretend or pretend

    try:
        body, prs = build_comment(config, git_cmd, list(branch))
    except (StackCommentError, RuntimeError) as e:
        logger.error(f"Error building stack comment: {e}")
        sys.exit(1)

    if not prs:
        logger.info("No pull requests to comment on")
        return

    token = find_github_token(config.repo.github_host)
    if not token and not config.tool.pretend:
        logger.error("No GitHub token found. Set GITHUB_TOKEN or log in with 'gh auth login'")
        sys.exit(1)

    from github import Auth, Github, GithubException
    github_kwargs: Dict[str, Any] = {}
    if config.repo.github_host != "github.com":
        github_kwargs["base_url"] = f"https://{config.repo.github_host}/api/v3"
    if token:
        github_kwargs["auth"] = Auth.Token(token)
    github = GitHubClient(config, Github(**github_kwargs))
    try:
        github.post_stack_comments(body, prs)
    except (GithubException, RuntimeError) as e:
        logger.error(f"Error posting stack comments: {e}")
        sys.exit(1)

def main() -> None:
    """Main entry point."""
    cli(obj={})

if __name__ == "__main__":
    main()
