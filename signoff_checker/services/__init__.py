from .discovery import RepositoryDiscovery
from .hooks import WebhookReconciler
from .protection import BranchProtectionReconciler
from .pull_request import PullRequestHandler
from .status_publisher import CommitStatusPublisher
from .sweep import SweepOrchestrator, SweepScheduler, SweepSummary
from .validator import WebhookValidator

__all__ = [
    "BranchProtectionReconciler",
    "CommitStatusPublisher",
    "PullRequestHandler",
    "RepositoryDiscovery",
    "SweepOrchestrator",
    "SweepScheduler",
    "SweepSummary",
    "WebhookReconciler",
    "WebhookValidator",
]
