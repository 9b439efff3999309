import structlog

from signoff_checker.exceptions import RemoteError
from signoff_checker.schemas.github import CommitRecord, PullRequestEvent, Verdict
from signoff_checker.services.status_publisher import CommitStatusPublisher
from signoff_checker.services.verdict import compute_verdict
from signoff_checker.utils.github import GitHubAPIClient

logger = structlog.get_logger(__name__)


class PullRequestHandler:
    def __init__(self, client: GitHubAPIClient, publisher: CommitStatusPublisher):
        self.client = client
        self.publisher = publisher

    async def list_commits(self, event: PullRequestEvent) -> list[CommitRecord]:
        return [
            CommitRecord.from_api(commit)
            async for commit in self.client.list_pull_request_commits(
                event.owner, event.repo, event.number
            )
        ]

    async def handle(self, event: PullRequestEvent) -> Verdict | None:
        try:
            commits = await self.list_commits(event)
        except RemoteError as e:
            logger.error(
                "Error getting commits for PR",
                owner=event.owner,
                repo=event.repo,
                pr_number=event.number,
                error=str(e),
            )
            return None

        verdict = compute_verdict(event.owner, event.repo, commits)
        logger.info(
            "Computed sign-off verdict",
            owner=event.owner,
            repo=event.repo,
            pr_number=event.number,
            action=event.action,
            commits=len(commits),
            state=verdict.state,
        )

        await self.publisher.publish(
            event.owner, event.repo, [commit.sha for commit in commits], verdict
        )
        return verdict
