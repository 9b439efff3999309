import pytest

from signoff_checker.exceptions import RemoteError, RemoteNotFound
from signoff_checker.services.hooks import WebhookReconciler
from tests.conftest import async_iter

HOOK_URL = "https://signoff.example.com/webhook"


def hook(url: str) -> dict:
    return {"id": 1, "name": "web", "config": {"url": url, "content_type": "json"}}


@pytest.mark.asyncio
async def test_has_hook_false_without_hooks(mock_github_client, repository):
    mock_github_client.list_hooks.return_value = async_iter([])
    reconciler = WebhookReconciler(mock_github_client)

    assert await reconciler.has_hook("test-org", repository, HOOK_URL) is False
    mock_github_client.list_hooks.assert_called_once_with("test-org", "test-repo")


@pytest.mark.asyncio
async def test_has_hook_false_on_404(mock_github_client, repository):
    mock_github_client.list_hooks.return_value = async_iter(
        [], error=RemoteNotFound("404")
    )
    reconciler = WebhookReconciler(mock_github_client)

    assert await reconciler.has_hook("test-org", repository, HOOK_URL) is False


@pytest.mark.asyncio
async def test_has_hook_true_on_exact_url_match(mock_github_client, repository):
    mock_github_client.list_hooks.return_value = async_iter(
        [
            hook("https://ci.example.com/hook"),
            hook(HOOK_URL),
            {"id": 3, "name": "email", "config": {}},
        ]
    )
    reconciler = WebhookReconciler(mock_github_client)

    assert await reconciler.has_hook("test-org", repository, HOOK_URL) is True


@pytest.mark.asyncio
async def test_has_hook_ignores_similar_urls(mock_github_client, repository):
    mock_github_client.list_hooks.return_value = async_iter(
        [hook(HOOK_URL + "/"), hook(HOOK_URL.replace("https", "http"))]
    )
    reconciler = WebhookReconciler(mock_github_client)

    assert await reconciler.has_hook("test-org", repository, HOOK_URL) is False


@pytest.mark.asyncio
async def test_has_hook_propagates_other_errors(mock_github_client, repository):
    mock_github_client.list_hooks.return_value = async_iter(
        [], error=RemoteError("server error", status_code=500)
    )
    reconciler = WebhookReconciler(mock_github_client)

    with pytest.raises(RemoteError):
        await reconciler.has_hook("test-org", repository, HOOK_URL)


@pytest.mark.asyncio
async def test_add_hook_creates_pull_request_web_hook(mock_github_client, repository):
    reconciler = WebhookReconciler(mock_github_client)

    await reconciler.add_hook("test-org", repository, HOOK_URL, "s3cret")

    mock_github_client.create_hook.assert_awaited_once_with(
        "test-org",
        "test-repo",
        {
            "name": "web",
            "events": ["pull_request"],
            "active": True,
            "config": {
                "url": HOOK_URL,
                "secret": "s3cret",
                "content_type": "json",
            },
        },
    )
