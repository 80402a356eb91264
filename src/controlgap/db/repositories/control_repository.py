"""As-is and to-be control repositories for database operations."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from controlgap.db.models import AsIsControlDB, ToBeControlDB


class AsIsControlRepository:
    """Repository for AsIsControl operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        process_id: str,
        control_name: str,
        status: str = "exists",
        mapped_std_control_id: str | None = None,
        **fields: Any,
    ) -> AsIsControlDB:
        """Record a control the process currently has."""
        control = AsIsControlDB(
            process_id=process_id,
            control_name=control_name,
            status=status,
            mapped_std_control_id=mapped_std_control_id,
            **fields,
        )
        self.session.add(control)
        await self.session.flush()
        await self.session.refresh(control, attribute_names=["mapped_std_control"])
        return control

    async def get_by_id(self, control_id: str) -> AsIsControlDB | None:
        """Get an as-is control by ID."""
        result = await self.session.execute(
            select(AsIsControlDB)
            .options(selectinload(AsIsControlDB.mapped_std_control))
            .where(AsIsControlDB.id == control_id)
        )
        return result.scalar_one_or_none()

    async def list_for_process(self, process_id: str) -> list[AsIsControlDB]:
        """List as-is controls of a process with their mapped catalog entry."""
        result = await self.session.execute(
            select(AsIsControlDB)
            .options(selectinload(AsIsControlDB.mapped_std_control))
            .where(AsIsControlDB.process_id == process_id)
            .order_by(AsIsControlDB.created_at)
        )
        return list(result.scalars().all())

    async def update(self, control: AsIsControlDB, **kwargs) -> AsIsControlDB:
        """Update an as-is control's attributes."""
        for key, value in kwargs.items():
            if hasattr(control, key):
                setattr(control, key, value)
        await self.session.flush()
        await self.session.refresh(control, attribute_names=["mapped_std_control"])
        return control


class ToBeControlRepository:
    """Repository for ToBeControl operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, process_id: str, **fields: Any) -> ToBeControlDB:
        """Create a recommended control."""
        control = ToBeControlDB(process_id=process_id, **fields)
        self.session.add(control)
        await self.session.flush()
        return control

    async def get_by_id(self, control_id: str) -> ToBeControlDB | None:
        """Get a to-be control by ID."""
        result = await self.session.execute(
            select(ToBeControlDB).where(ToBeControlDB.id == control_id)
        )
        return result.scalar_one_or_none()

    async def list_for_process(self, process_id: str) -> list[ToBeControlDB]:
        """List to-be controls of a process."""
        result = await self.session.execute(
            select(ToBeControlDB)
            .where(ToBeControlDB.process_id == process_id)
            .order_by(ToBeControlDB.created_at)
        )
        return list(result.scalars().all())

    async def update(self, control: ToBeControlDB, **kwargs) -> ToBeControlDB:
        """Update a to-be control's attributes."""
        for key, value in kwargs.items():
            if hasattr(control, key):
                setattr(control, key, value)
        await self.session.flush()
        return control

    async def delete(self, control: ToBeControlDB) -> None:
        """Delete a to-be control."""
        await self.session.delete(control)
        await self.session.flush()
