from typing import Iterable

import structlog

from signoff_checker.constants import SIGN_OFF_CONTEXT
from signoff_checker.exceptions import RemoteError
from signoff_checker.schemas.github import Verdict
from signoff_checker.utils.github import GitHubAPIClient

logger = structlog.get_logger(__name__)


class CommitStatusPublisher:
    def __init__(self, client: GitHubAPIClient, context: str = SIGN_OFF_CONTEXT):
        self.client = client
        self.context = context

    async def publish(
        self, owner: str, repo: str, shas: Iterable[str], verdict: Verdict
    ) -> int:
        """Post the verdict on every commit, carrying on past individual failures."""
        published = 0
        for sha in shas:
            try:
                await self.client.create_commit_status(
                    owner,
                    repo,
                    sha,
                    state=verdict.state,
                    context=self.context,
                    description=verdict.description,
                    target_url=verdict.target_url,
                )
            except RemoteError as e:
                logger.error(
                    "Error setting commit status",
                    owner=owner,
                    repo=repo,
                    sha=sha,
                    error=str(e),
                )
                continue

            published += 1
            logger.info(
                "Updated commit status",
                owner=owner,
                repo=repo,
                sha=sha,
                state=verdict.state,
            )
        return published
