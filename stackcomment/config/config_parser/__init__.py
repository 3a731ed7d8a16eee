"""Config parser logic."""

from typing import Dict, Optional, Tuple, Any
import logging
import yaml

from ...typing import GitInterface, StackCommentError

# Get module logger
logger = logging.getLogger(__name__)

RepoConfig = Dict[str, Any]  # Use Any since yaml can return various types
Config = Dict[str, RepoConfig]

CONFIG_FILE = '.stackcomment.yaml'

def parse_remote_url(remote_url: str) -> Optional[Tuple[str, str]]:
    """Get (owner, name) from an SSH or HTTPS GitHub remote url."""
    remote_url = remote_url.strip()
    if "://" in remote_url:
        # HTTPS format: https://github.com/owner/repo.git
        repo_part = remote_url.split("://", 1)[1].split("/", 1)[-1]
    elif "@" in remote_url:
        # SSH format: git@github.com:owner/repo.git
        repo_part = remote_url.split(":")[-1]
    else:
        return None

    if repo_part.endswith(".git"):
        repo_part = repo_part[:-len(".git")]
    parts = repo_part.strip("/").split("/")
    if len(parts) >= 2 and parts[-2] and parts[-1]:
        return parts[-2], parts[-1]
    return None

def parse_config(git_cmd: GitInterface, path: str = CONFIG_FILE) -> Config:
    """Parse config from defaults, the repository config file and the git remote."""
    config: Config = {
        'repo': {
            'github_remote': 'origin',
            'github_branch': 'main',
            'github_host': 'github.com',
        },
        'user': {},
        'comment': {
            'dedupe_siblings': False,
            'post_comments': True,
        },
        'tool': {
            'stackcomment': {
                'pretend': False
            }
        }
    }

    try:
        with open(path, 'r') as f:
            logger.info(f"Found {path}, loading...")
            file_config = yaml.safe_load(f)
            logger.debug(f"Config from {path}: {file_config}")
            if isinstance(file_config, dict):
                for section in ('repo', 'user', 'comment'):
                    if isinstance(file_config.get(section), dict):
                        config[section].update(file_config[section])
    except FileNotFoundError:
        logger.debug(f"No {path} found, using defaults")

    repo = config['repo']
    if not repo.get('github_repo_owner') or not repo.get('github_repo_name'):
        remote = repo['github_remote']
        try:
            parsed = parse_remote_url(git_cmd.run_cmd(f"remote get-url {remote}"))
        except StackCommentError as e:
            logger.error(f"Failed to read git remote {remote}: {e}")
            parsed = None
        if parsed:
            owner, name = parsed
            if not repo.get('github_repo_owner'):
                repo['github_repo_owner'] = owner
            if not repo.get('github_repo_name'):
                repo['github_repo_name'] = name
        else:
            logger.warning(f"Could not determine repository owner/name from remote {remote}")

    return config
