"""Repository records declared for a device.

Declaration order (created_at ascending) is the order repositories are
reconciled and listed in build scripts.
"""

import uuid as uuid_pkg

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dtforge.models.repository import DeviceRepository


class DeviceRepositoryOperations:
    """Read operations for DeviceRepository records."""

    def __init__(self):
        self.model = DeviceRepository

    async def get_by_device(
        self,
        db: AsyncSession,
        device_id: uuid_pkg.UUID,
    ) -> list[DeviceRepository]:
        """Get all repositories for a device in declaration order."""
        statement = (
            select(DeviceRepository)
            .where(DeviceRepository.device_id == device_id)
            .order_by(DeviceRepository.created_at.asc(), DeviceRepository.id.asc())
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


device_repository_ops = DeviceRepositoryOperations()
