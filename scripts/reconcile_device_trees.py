"""Reconcile local device-tree directories against the hosting account.

Each subdirectory of ROOT becomes one repository of the same name, with
the directory's files written to BRANCH.

Usage:
    python -m scripts.reconcile_device_trees device-trees --branch lineage-23.0
    python -m scripts.reconcile_device_trees device-trees --branch lineage-23.0 \
        android_device_xiaomi_daisy android_vendor_xiaomi_daisy

Ctrl-C stops at the next file boundary; remaining work is reported as failed.
Exits 1 unless every repository reconciled.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from dtforge.config import settings
from dtforge.services.github import AuthError, build_hosting_client, close_hosting_http_client
from dtforge.services.reconcile import BatchOrchestrator, BatchReport, Target, build_target

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("root", type=Path, help="Directory holding one subdirectory per repository")
    parser.add_argument("--branch", help="Branch to write to (default: repository default branch)")
    parser.add_argument(
        "--visibility",
        default=settings.repository_visibility,
        choices=["public", "private"],
    )
    parser.add_argument("repositories", nargs="*", help="Subdirectory names (default: all)")
    return parser.parse_args(argv)


def discover_targets(
    root: Path,
    branch: str | None,
    names: list[str],
    visibility: str,
) -> list[Target]:
    if not names:
        names = sorted(p.name for p in root.iterdir() if p.is_dir() and not p.name.startswith("."))
    return [
        build_target(name, root / name, branch, visibility=visibility)
        for name in names
    ]


def print_report(report: BatchReport) -> None:
    for outcome in report.outcomes:
        line = f"{outcome.status.value:<16} {outcome.repository_name}"
        if outcome.reason:
            line += f"  ({outcome.reason})"
        print(line)
        for failure in outcome.failures:
            print(f"{'':<16}   {failure.path}: {failure.reason}")
    print(report.summary)


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        targets = discover_targets(args.root, args.branch, args.repositories, args.visibility)
    except (FileNotFoundError, NotADirectoryError) as e:
        logger.error(str(e))
        return 1
    if not targets:
        logger.error(f"No repositories found under {args.root}")
        return 1

    try:
        client = build_hosting_client(settings)
    except AuthError as e:
        logger.error(e.message)
        return 1

    orchestrator = BatchOrchestrator.from_settings(client, settings)
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, orchestrator.cancel.cancel)

    try:
        report = await orchestrator.run(targets)
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        await close_hosting_http_client()

    print_report(report)
    return 0 if report.success else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
