import structlog

from signoff_checker.constants import CONTRIBUTING_FILE, DCO_MARKER
from signoff_checker.exceptions import RemoteNotFound
from signoff_checker.schemas.github import Repository
from signoff_checker.utils.github import GitHubAPIClient

logger = structlog.get_logger(__name__)


def is_dco(contributing: str) -> bool:
    return DCO_MARKER in contributing


class RepositoryDiscovery:
    def __init__(self, client: GitHubAPIClient):
        self.client = client

    async def get_contributing(self, repo: Repository) -> str:
        """Return the repository's CONTRIBUTING.md, or "" if it has none."""
        try:
            return await self.client.get_file_content(
                repo.contents_url, CONTRIBUTING_FILE
            )
        except RemoteNotFound:
            return ""

    async def discover(self, org: str) -> list[Repository]:
        matching: list[Repository] = []
        async for data in self.client.list_org_repositories(org):
            repo = Repository.from_api(data)
            if is_dco(await self.get_contributing(repo)):
                logger.debug("Repository uses the DCO", repo=repo.full_name)
                matching.append(repo)
        return matching
