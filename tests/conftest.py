from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from signoff_checker.main import app
from signoff_checker.schemas.github import Repository
from signoff_checker.utils.github import GitHubAPIClient


async def async_iter(items: list[Any], error: Exception | None = None):
    """Stand-in for a paginated listing; raises ``error`` once items run out."""
    for item in items:
        yield item
    if error is not None:
        raise error


def make_repository(name: str = "test-repo", owner: str = "test-org", **kwargs):
    data = {
        "owner": owner,
        "name": name,
        "full_name": f"{owner}/{name}",
        "default_branch": "main",
        "html_url": f"https://github.com/{owner}/{name}",
        "contents_url": f"https://api.github.com/repos/{owner}/{name}/contents/{{+path}}",
    }
    data.update(kwargs)
    return Repository(**data)


def repository_payload(name: str = "test-repo", owner: str = "test-org") -> dict:
    return {
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner},
        "default_branch": "main",
        "html_url": f"https://github.com/{owner}/{name}",
        "contents_url": f"https://api.github.com/repos/{owner}/{name}/contents/{{+path}}",
    }


@pytest.fixture
def mock_github_client():
    """A GitHubAPIClient double; listing methods must be given async iterators."""
    return AsyncMock(spec=GitHubAPIClient)


@pytest.fixture
def repository():
    return make_repository()


@pytest.fixture
def client():
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
