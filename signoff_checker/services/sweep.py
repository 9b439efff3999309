import asyncio
import time
from dataclasses import dataclass, field

import structlog

from signoff_checker.config import RegistrationConfig
from signoff_checker.exceptions import SweepError
from signoff_checker.services.discovery import RepositoryDiscovery
from signoff_checker.services.hooks import WebhookReconciler
from signoff_checker.services.protection import BranchProtectionReconciler

logger = structlog.get_logger(__name__)


@dataclass
class SweepSummary:
    dry_run: bool
    organizations: list[str] = field(default_factory=list)
    repositories: list[str] = field(default_factory=list)
    hooks_added: list[str] = field(default_factory=list)
    protections_added: list[str] = field(default_factory=list)
    duration: float = 0.0


class SweepOrchestrator:
    """Walks every configured organization and registers the sign-off check.

    For each repository whose CONTRIBUTING.md mentions the Developer
    Certificate of Origin, the webhook and the required status check are
    added when missing. In dry-run mode the same checks run but nothing is
    written; the would-be changes are logged and listed in the summary.

    The first error aborts the whole sweep.
    """

    def __init__(
        self,
        discovery: RepositoryDiscovery,
        hooks: WebhookReconciler,
        protection: BranchProtectionReconciler,
        config: RegistrationConfig,
    ):
        self.discovery = discovery
        self.hooks = hooks
        self.protection = protection
        self.config = config

    async def run(self) -> SweepSummary:
        start_time = time.monotonic()
        summary = SweepSummary(dry_run=self.config.dry_run)

        try:
            for org in self.config.organizations:
                await self._sweep_organization(org, summary)
        except Exception as e:
            duration = time.monotonic() - start_time
            logger.error(
                "Sweep aborted",
                error=str(e),
                error_type=type(e).__name__,
                duration=round(duration, 3),
            )
            raise SweepError(f"sweep aborted: {e}", duration=duration) from e

        summary.duration = time.monotonic() - start_time
        return summary

    async def _sweep_organization(self, org: str, summary: SweepSummary) -> None:
        dry_run = self.config.dry_run
        suffix = " (DRY RUN)" if dry_run else ""

        logger.info("Checking all repos in organization", org=org)
        summary.organizations.append(org)

        for repo in await self.discovery.discover(org):
            summary.repositories.append(repo.full_name)

            if not await self.hooks.has_hook(org, repo, self.config.webhook_url):
                logger.info(
                    f"Installing webhook{suffix}", repo=repo.html_url, dry_run=dry_run
                )
                if not dry_run:
                    await self.hooks.add_hook(
                        org, repo, self.config.webhook_url, self.config.webhook_secret
                    )
                summary.hooks_added.append(repo.full_name)

            if not await self.protection.has_protection(org, repo):
                logger.info(
                    f"Configuring branch protection{suffix}",
                    repo=repo.html_url,
                    dry_run=dry_run,
                )
                if not dry_run:
                    await self.protection.add_protection(org, repo)
                summary.protections_added.append(repo.full_name)


class SweepScheduler:
    """Runs a sweep on start and then every ``interval`` seconds.

    At most one sweep is in flight; a tick that fires while the previous
    sweep is still running is skipped.
    """

    def __init__(self, orchestrator: SweepOrchestrator, interval: float):
        self.orchestrator = orchestrator
        self.interval = interval
        self._lock = asyncio.Lock()
        self._loop_task: asyncio.Task | None = None
        self._sweeps: set[asyncio.Task] = set()

    async def tick(self) -> SweepSummary | None:
        if self._lock.locked():
            logger.warning("Previous sweep still running, skipping tick")
            return None

        async with self._lock:
            try:
                summary = await self.orchestrator.run()
            except SweepError as e:
                logger.error(
                    "Error registering webhooks",
                    error=str(e),
                    duration=round(e.duration, 3),
                )
                return None

        logger.info(
            "Sweep finished",
            organizations=len(summary.organizations),
            repositories=len(summary.repositories),
            hooks_added=len(summary.hooks_added),
            protections_added=len(summary.protections_added),
            dry_run=summary.dry_run,
            duration=round(summary.duration, 3),
        )
        return summary

    async def _run_forever(self) -> None:
        while True:
            task = asyncio.create_task(self.tick())
            self._sweeps.add(task)
            task.add_done_callback(self._sweeps.discard)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._loop_task is None:
            logger.info("Starting sweep scheduler", interval=self.interval)
            self._loop_task = asyncio.create_task(self._run_forever())

    async def stop(self) -> None:
        tasks = [t for t in (self._loop_task, *self._sweeps) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loop_task = None
