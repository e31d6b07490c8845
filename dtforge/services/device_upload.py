"""
Device repository upload.

Turns a device's repository records into reconciliation Targets, runs the
batch and serializes the report for the API.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from dtforge.models.device import DeviceConfig
from dtforge.models.repository import DeviceRepository
from dtforge.schemas.upload import DeviceSummary, RepositoryUploadResult, UploadResponse
from dtforge.services.reconcile import (
    BatchOrchestrator,
    BatchReport,
    OutcomeStatus,
    ReconciliationOutcome,
    Target,
    build_target,
)

logger = logging.getLogger(__name__)


def repository_description(device: DeviceConfig, record: DeviceRepository) -> str:
    return (
        f"Device tree for {device.name} ({device.codename}) - {record.category} - "
        f"LineageOS {device.lineage_version}"
    )


def resolve_tree_directory(root: Path, record: DeviceRepository) -> Path | None:
    """
    Find the local tree for a repository record.

    Looks for `root/<record.name>` first, then `root/<record.path>`.
    Candidates that resolve outside `root` are ignored. Returns None when
    nothing usable exists, in which case only the repository and branch are
    reconciled.
    """
    base = root.resolve()
    for candidate in (root / record.name, root / record.path):
        resolved = candidate.resolve()
        if resolved == base or not resolved.is_relative_to(base):
            logger.warning(f"Ignoring tree {candidate} for {record.name}: outside {root}")
            continue
        if candidate.is_dir():
            return candidate
    return None


def build_device_targets(
    device: DeviceConfig,
    records: Sequence[DeviceRepository],
    root: Path,
    visibility: str = "public",
) -> list[Target]:
    """One Target per repository record, in declaration order."""
    targets = []
    for record in records:
        local_dir = resolve_tree_directory(root, record)
        if local_dir is None:
            logger.info(f"No local tree for {record.name} under {root}; reconciling branch only")
        targets.append(
            build_target(
                record.name,
                local_dir,
                record.branch,
                description=repository_description(device, record),
                visibility=visibility,
            )
        )
    return targets


def _result_for(outcome: ReconciliationOutcome) -> RepositoryUploadResult:
    if outcome.status == OutcomeStatus.CREATED:
        if outcome.repository_created:
            message = "Repository created successfully"
        else:
            message = (
                f"Reconciled {outcome.files_written} file(s) on {outcome.branch}"
                + (" (branch created)" if outcome.branch_created else "")
            )
        return RepositoryUploadResult(
            name=outcome.repository_name, status="created", url=outcome.url, message=message
        )

    if outcome.status == OutcomeStatus.ALREADY_PRESENT:
        return RepositoryUploadResult(
            name=outcome.repository_name,
            status="exists",
            url=outcome.url,
            message="Repository already exists and is up to date",
        )

    if outcome.status == OutcomeStatus.PARTIAL_FAILURE:
        details = "; ".join(f"{f.path}: {f.reason}" for f in outcome.failures)
        return RepositoryUploadResult(
            name=outcome.repository_name,
            status="error",
            url=outcome.url,
            message=f"{outcome.files_written} file(s) written, {len(outcome.failures)} failed",
            error=details,
        )

    return RepositoryUploadResult(
        name=outcome.repository_name,
        status="error",
        url=outcome.url,
        error=outcome.reason,
    )


def serialize_report(report: BatchReport, device: DeviceConfig) -> UploadResponse:
    """Serialize a BatchReport into the upload API response."""
    return UploadResponse(
        success=report.success,
        message=report.summary,
        repositories=[_result_for(outcome) for outcome in report.outcomes],
        device=DeviceSummary(name=device.name, codename=device.codename),
    )


async def upload_device_repositories(
    device: DeviceConfig,
    records: Sequence[DeviceRepository],
    orchestrator: BatchOrchestrator,
    root: Path,
    visibility: str = "public",
) -> UploadResponse:
    """Reconcile every repository declared for a device and report."""
    targets = build_device_targets(device, records, root, visibility)
    report = await orchestrator.run(targets)
    return serialize_report(report, device)
