import structlog

from signoff_checker.exceptions import RemoteNotFound
from signoff_checker.schemas.github import Repository, WebhookConfig
from signoff_checker.utils.github import GitHubAPIClient

logger = structlog.get_logger(__name__)


class WebhookReconciler:
    def __init__(self, client: GitHubAPIClient):
        self.client = client

    async def has_hook(self, org: str, repo: Repository, url: str) -> bool:
        try:
            async for hook in self.client.list_hooks(org, repo.name):
                if (hook.get("config") or {}).get("url") == url:
                    return True
        except RemoteNotFound:
            # 404 just means there are no hooks for this repo
            return False
        return False

    async def add_hook(self, org: str, repo: Repository, url: str, secret: str) -> None:
        """Create the pull_request webhook. Callers must check has_hook first."""
        config = WebhookConfig(url=url, secret=secret)
        await self.client.create_hook(org, repo.name, config.to_request())
        logger.info("Registered webhook", org=org, repo=repo.name, url=url)
