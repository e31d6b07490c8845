from sqlmodel import Field, SQLModel

from dtforge.models.base import TimestampMixin, UUIDMixin


class DeviceConfigBase(SQLModel):
    """Base fields for a device configuration."""

    name: str = Field(max_length=255)  # e.g. "Xiaomi Mi A2 Lite"
    codename: str = Field(max_length=100, index=True)  # e.g. "daisy"
    manufacturer: str = Field(max_length=100)
    platform: str = Field(max_length=100)  # SoC platform, e.g. "msm8953"
    android_version: str = Field(max_length=50)
    lineage_version: str = Field(max_length=50)  # e.g. "lineage-23.0"
    description: str | None = Field(default=None, max_length=2000)


class DeviceConfig(DeviceConfigBase, UUIDMixin, TimestampMixin, table=True):
    """A device whose source trees are published and built."""

    __tablename__ = "devices"
