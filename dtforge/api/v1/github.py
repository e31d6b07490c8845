"""
GitHub upload endpoint: reconcile a device's declared repositories.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dtforge.api.deps import OrchestratorFactory, get_orchestrator_factory
from dtforge.config import settings
from dtforge.core.database import get_db
from dtforge.core.exceptions import NotFoundError, UpstreamAuthError, ValidationError
from dtforge.domain import device_ops, device_repository_ops
from dtforge.schemas.upload import UploadRequest, UploadResponse
from dtforge.services.device_upload import upload_device_repositories
from dtforge.services.github import AuthError

router = APIRouter(prefix="/github", tags=["github"])
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=UploadResponse)
async def upload_device_trees(
    data: UploadRequest,
    db: AsyncSession = Depends(get_db),
    make_orchestrator: OrchestratorFactory = Depends(get_orchestrator_factory),
) -> UploadResponse:
    """
    Ensure every repository declared for a device exists on GitHub with its
    branch and local tree contents.

    Always processes every repository; per-repository failures are reported
    in the response body, not as an HTTP error.
    """
    device = await device_ops.get(db, data.device_id)
    if not device:
        raise NotFoundError("Device")

    records = await device_repository_ops.get_by_device(db, device.id)
    if not records:
        raise ValidationError("No repositories configured for this device")

    orchestrator = make_orchestrator()

    logger.info(f"Uploading {len(records)} repositories for {device.codename}")
    try:
        return await upload_device_repositories(
            device,
            records,
            orchestrator,
            Path(settings.device_trees_root),
            visibility=settings.repository_visibility,
        )
    except AuthError as e:
        raise UpstreamAuthError(e.message) from e
