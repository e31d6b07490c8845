import uuid as uuid_pkg
from typing import Any

from sqlalchemy import Column, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, SQLModel

from dtforge.models.base import TimestampMixin, UUIDMixin


class BuildScriptBase(SQLModel):
    """Base fields for a generated build script."""

    name: str = Field(max_length=255)
    content: str
    manifest: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None)


class BuildScript(BuildScriptBase, UUIDMixin, TimestampMixin, table=True):
    """Build script text persisted verbatim with its generation inputs."""

    __tablename__ = "build_scripts"

    device_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("devices.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    # {"branch": ..., "clang": ...}
    kernel_config: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSONB, nullable=True)
    )
    recovery_patches: list[str] | None = Field(
        default=None, sa_column=Column(JSONB, nullable=True)
    )
