import structlog

from signoff_checker.constants import SIGN_OFF_CONTEXT
from signoff_checker.exceptions import RemoteNotFound
from signoff_checker.schemas.github import BranchProtectionConfig, Repository
from signoff_checker.utils.github import GitHubAPIClient

logger = structlog.get_logger(__name__)


def merge_protection(
    existing: BranchProtectionConfig | None, context: str
) -> BranchProtectionConfig:
    """Add ``context`` to the required checks, keeping everything else as is."""
    if existing is None:
        return BranchProtectionConfig(
            enforce_admins=True, strict=False, contexts=[context]
        )

    return existing.add_context(context)


class BranchProtectionReconciler:
    """Keeps the sign-off status check required on a repository's default branch.

    Updating protection is a read-modify-write against GitHub. A change made
    by someone else between the read and the write is lost.
    """

    def __init__(self, client: GitHubAPIClient, context: str = SIGN_OFF_CONTEXT):
        self.client = client
        self.context = context

    async def has_protection(self, org: str, repo: Repository) -> bool:
        try:
            contexts = await self.client.list_required_status_check_contexts(
                org, repo.name, repo.default_branch
            )
        except RemoteNotFound:
            return False
        return self.context in contexts

    async def get_protection(
        self, org: str, repo: Repository
    ) -> BranchProtectionConfig | None:
        try:
            data = await self.client.get_branch_protection(
                org, repo.name, repo.default_branch
            )
        except RemoteNotFound:
            return None
        return BranchProtectionConfig.from_api(data)

    async def add_protection(self, org: str, repo: Repository) -> None:
        existing = await self.get_protection(org, repo)
        protection = merge_protection(existing, self.context)
        await self.client.update_branch_protection(
            org, repo.name, repo.default_branch, protection.to_request()
        )
        logger.info(
            "Updated branch protection",
            org=org,
            repo=repo.name,
            branch=repo.default_branch,
            created=existing is None,
            contexts=protection.contexts,
        )
