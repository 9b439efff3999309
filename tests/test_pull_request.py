from unittest.mock import AsyncMock

import pytest

from signoff_checker.exceptions import RemoteError
from signoff_checker.schemas.github import PullRequestEvent
from signoff_checker.services.pull_request import PullRequestHandler
from signoff_checker.services.status_publisher import CommitStatusPublisher
from tests.conftest import async_iter


def commit_payload(sha: str, message: str) -> dict:
    return {"sha": sha, "commit": {"message": message}}


@pytest.fixture
def event():
    return PullRequestEvent(owner="owner", repo="repo", number=7, action="synchronize")


@pytest.fixture
def publisher():
    mock = AsyncMock(spec=CommitStatusPublisher)
    mock.publish.return_value = 0
    return mock


@pytest.mark.asyncio
async def test_handle_marks_every_commit_failed_when_one_is_unsigned(
    mock_github_client, publisher, event
):
    mock_github_client.list_pull_request_commits.return_value = async_iter(
        [
            commit_payload("aaa", "fix bug\n\nSigned-off-by: A <a@x.com>"),
            commit_payload("bbb", "typo"),
        ]
    )
    handler = PullRequestHandler(mock_github_client, publisher)

    verdict = await handler.handle(event)

    assert verdict.state == "failure"
    assert verdict.description == "A commit in PR is missing Signed-off-by"
    mock_github_client.list_pull_request_commits.assert_called_once_with(
        "owner", "repo", 7
    )
    publisher.publish.assert_awaited_once_with("owner", "repo", ["aaa", "bbb"], verdict)


@pytest.mark.asyncio
async def test_handle_succeeds_when_all_commits_signed(
    mock_github_client, publisher, event
):
    mock_github_client.list_pull_request_commits.return_value = async_iter(
        [
            commit_payload("aaa", "one\n\nSigned-off-by: A <a@x.com>"),
            commit_payload("bbb", "two\n\nSigned-off-by: B <b@x.com>"),
        ]
    )
    handler = PullRequestHandler(mock_github_client, publisher)

    verdict = await handler.handle(event)

    assert verdict.state == "success"
    publisher.publish.assert_awaited_once()


@pytest.mark.asyncio
async def test_handle_abandons_event_when_listing_fails(
    mock_github_client, publisher, event
):
    mock_github_client.list_pull_request_commits.return_value = async_iter(
        [commit_payload("aaa", "Signed-off-by: A <a@x.com>")],
        error=RemoteError("page 2 failed", status_code=502),
    )
    handler = PullRequestHandler(mock_github_client, publisher)

    verdict = await handler.handle(event)

    assert verdict is None
    publisher.publish.assert_not_awaited()
