"""Config module."""

from typing import Dict, Any
from .models import RepoConfig, UserConfig, CommentConfig, ToolConfig, StackCommentConfig

class Config(StackCommentConfig):
    """Config object holding repository, user and comment config."""
    def __init__(self, config: Dict[str, Dict[str, Any]]):
        """Initialize with parsed config dict."""
        super().__init__(
            repo=RepoConfig.model_validate(config.get('repo', {})),
            user=UserConfig.model_validate(config.get('user', {})),
            comment=CommentConfig.model_validate(config.get('comment', {})),
            tool=ToolConfig.model_validate(config.get('tool', {}).get('stackcomment', {})),
            state=None
        )

def default_config() -> Config:
    """Get default config without parsing git."""
    return Config({
        'repo': {
            'github_remote': 'origin',
            'github_branch': 'main',
        },
        'user': {},
        'comment': {},
        'tool': {
            'stackcomment': {
                'pretend': False
            }
        }
    })
