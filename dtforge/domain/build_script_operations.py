import uuid as uuid_pkg

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dtforge.models.build_script import BuildScript


class BuildScriptOperations:
    """Persistence for generated build scripts."""

    def __init__(self):
        self.model = BuildScript

    async def get(self, db: AsyncSession, id: uuid_pkg.UUID) -> BuildScript | None:
        """Get a build script by ID."""
        statement = select(BuildScript).where(BuildScript.id == id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, obj_in: dict) -> BuildScript:
        """Persist a new build script."""
        db_obj = BuildScript(**obj_in)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj


build_script_ops = BuildScriptOperations()
