import uuid as uuid_pkg

from sqlalchemy import Column, ForeignKey
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, SQLModel

from dtforge.models.base import CreatedAtMixin, UUIDMixin


class DeviceRepositoryBase(SQLModel):
    """Base fields for a repository declared for a device."""

    name: str = Field(max_length=255, index=True)  # e.g. "android_device_xiaomi_daisy"
    url: str = Field(max_length=500)
    branch: str = Field(max_length=100)
    path: str = Field(max_length=500)  # checkout path in the source tree
    depth: str = Field(default="1", max_length=10)
    category: str = Field(max_length=50)  # device / vendor / kernel / hardware
    status: str = Field(default="pending", max_length=20)


class DeviceRepository(DeviceRepositoryBase, UUIDMixin, CreatedAtMixin, table=True):
    """Repository record belonging to a device, in declaration order."""

    __tablename__ = "device_repositories"

    device_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("devices.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
