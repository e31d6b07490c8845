import uuid as uuid_pkg

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dtforge.models.device import DeviceConfig


class DeviceOperations:
    """Read operations for DeviceConfig records."""

    def __init__(self):
        self.model = DeviceConfig

    async def get(self, db: AsyncSession, id: uuid_pkg.UUID) -> DeviceConfig | None:
        """Get a device by ID."""
        statement = select(DeviceConfig).where(DeviceConfig.id == id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()


device_ops = DeviceOperations()
