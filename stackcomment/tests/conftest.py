"""Configuration for pytest."""

import pytest

from stackcomment.config import Config
from stackcomment.typing import StackCommentContext
from stackcomment.tests.fakes import FakeLookup, FakeRepoInfo

@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup()

@pytest.fixture
def context(lookup: FakeLookup) -> StackCommentContext:
    return StackCommentContext(engine=lookup, repo_config=FakeRepoInfo())

@pytest.fixture
def config() -> Config:
    return Config({
        'repo': {
            'github_branch': 'main',
            'github_repo_owner': 'acme',
            'github_repo_name': 'widgets',
        },
    })
