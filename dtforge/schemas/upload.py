"""Pydantic schemas for the device repository upload endpoint."""

import uuid as uuid_pkg
from typing import Literal

from pydantic import BaseModel


class UploadRequest(BaseModel):
    """Request to reconcile every repository declared for a device."""

    device_id: uuid_pkg.UUID


class RepositoryUploadResult(BaseModel):
    """Per-repository entry of the batch report."""

    name: str
    status: Literal["created", "exists", "error"]
    url: str | None = None
    message: str | None = None
    error: str | None = None


class DeviceSummary(BaseModel):
    name: str
    codename: str


class UploadResponse(BaseModel):
    """Serialized batch report."""

    success: bool
    message: str  # "Processed N repositories: S successful, E errors"
    repositories: list[RepositoryUploadResult]
    device: DeviceSummary
