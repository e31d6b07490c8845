"""
Build script endpoints: render a device's clone recipe and persist it.
"""

import logging
import uuid as uuid_pkg

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dtforge.config import settings
from dtforge.core.database import get_db
from dtforge.core.exceptions import NotFoundError
from dtforge.domain import build_script_ops, device_ops, device_repository_ops
from dtforge.schemas.build_script import BuildScriptRead, GenerateScriptRequest
from dtforge.services.build_script import (
    BuildScriptOptions,
    recipe_name,
    recovery_patches,
    render_build_script,
)

router = APIRouter(prefix="/build-scripts", tags=["build-scripts"])
logger = logging.getLogger(__name__)


@router.post("/generate", response_model=BuildScriptRead)
async def generate_build_script(
    data: GenerateScriptRequest,
    db: AsyncSession = Depends(get_db),
) -> BuildScriptRead:
    """Render the clone recipe for a device and store it as a named artifact."""
    device = await device_ops.get(db, data.device_id)
    if not device:
        raise NotFoundError("Device")

    repositories = await device_repository_ops.get_by_device(db, device.id)
    options = BuildScriptOptions(
        manifest=data.manifest or settings.default_manifest_url,
        kernel_branch=data.kernel_branch or settings.default_kernel_branch,
        kernel_clang=data.kernel_clang or settings.default_kernel_clang,
        owner=settings.github_owner,
        web_url=settings.github_web_url,
    )
    content = render_build_script(device, repositories, options)

    script = await build_script_ops.create(
        db,
        obj_in={
            "device_id": device.id,
            "name": recipe_name(device),
            "content": content,
            "manifest": options.manifest,
            "kernel_config": {"branch": options.kernel_branch, "clang": options.kernel_clang},
            "recovery_patches": recovery_patches(options),
            "notes": data.notes,
        },
    )
    logger.info(f"Generated build script {script.name} ({len(repositories)} repositories)")
    return BuildScriptRead.model_validate(script)


@router.get("/{script_id}", response_model=BuildScriptRead)
async def get_build_script(
    script_id: uuid_pkg.UUID,
    db: AsyncSession = Depends(get_db),
) -> BuildScriptRead:
    """Fetch a persisted build script."""
    script = await build_script_ops.get(db, script_id)
    if not script:
        raise NotFoundError("Build script")
    return BuildScriptRead.model_validate(script)
