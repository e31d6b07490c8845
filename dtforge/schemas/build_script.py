"""Pydantic schemas for build script generation."""

import uuid as uuid_pkg
from datetime import datetime
from typing import Any

from pydantic import BaseModel


class GenerateScriptRequest(BaseModel):
    """Request to render and persist a build script for a device."""

    device_id: uuid_pkg.UUID
    manifest: str | None = None
    kernel_branch: str | None = None
    kernel_clang: str | None = None
    notes: str | None = None


class BuildScriptRead(BaseModel):
    """A persisted build script."""

    id: uuid_pkg.UUID
    device_id: uuid_pkg.UUID
    name: str
    content: str
    manifest: str | None
    kernel_config: dict[str, Any] | None
    recovery_patches: list[str] | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
