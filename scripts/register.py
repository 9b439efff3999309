#!/usr/bin/env python3

import argparse
import asyncio
import dataclasses
import json
import sys

from signoff_checker.config import RegistrationConfig, settings
from signoff_checker.dependencies import build_orchestrator, get_github_client
from signoff_checker.exceptions import SweepError
from signoff_checker.logger import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Register the sign-off webhook and branch protection on DCO repositories"
    )
    parser.add_argument(
        "--org",
        dest="organizations",
        action="append",
        help="Organization to sweep (repeatable, defaults to ORGANIZATIONS)",
    )
    parser.add_argument(
        "--webhook-url",
        help="Public HTTPS URL of the webhook endpoint (defaults to WEBHOOK_URL)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Log what would change without modifying any repository",
    )
    return parser.parse_args(argv)


def registration_from_args(args: argparse.Namespace) -> RegistrationConfig:
    webhook_url = args.webhook_url or settings.webhook_url or ""
    if not webhook_url.startswith("https://"):
        raise ValueError(f"webhook URL must use https://, got {webhook_url!r}")

    return RegistrationConfig(
        organizations=args.organizations or list(settings.organizations),
        webhook_url=webhook_url,
        webhook_secret=settings.shared_secret,
        dry_run=settings.dry_run if args.dry_run is None else args.dry_run,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(settings.debug)

    try:
        registration = registration_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    orchestrator = build_orchestrator(get_github_client(), registration)
    try:
        summary = asyncio.run(orchestrator.run())
    except SweepError as e:
        print(f"Error after {e.duration:.1f}s: {e}", file=sys.stderr)
        return 1

    print(json.dumps(dataclasses.asdict(summary), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
