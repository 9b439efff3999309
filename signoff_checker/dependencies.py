from functools import lru_cache

from signoff_checker.config import RegistrationConfig, settings
from signoff_checker.services import (
    BranchProtectionReconciler,
    CommitStatusPublisher,
    PullRequestHandler,
    RepositoryDiscovery,
    SweepOrchestrator,
    WebhookReconciler,
    WebhookValidator,
)
from signoff_checker.utils.github import GitHubAPIClient


@lru_cache
def get_github_client() -> GitHubAPIClient:
    return GitHubAPIClient(settings.github_token, base_url=settings.github_api_url)


def get_webhook_validator() -> WebhookValidator:
    return WebhookValidator(settings.secret)


def get_pull_request_handler() -> PullRequestHandler:
    client = get_github_client()
    return PullRequestHandler(client, CommitStatusPublisher(client))


def build_orchestrator(
    client: GitHubAPIClient, registration: RegistrationConfig
) -> SweepOrchestrator:
    return SweepOrchestrator(
        discovery=RepositoryDiscovery(client),
        hooks=WebhookReconciler(client),
        protection=BranchProtectionReconciler(client),
        config=registration,
    )
