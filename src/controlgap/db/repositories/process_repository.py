"""Process repository for database operations."""

import json

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from controlgap.db.models import ProcessDB


class ProcessRepository:
    """Repository for Process operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        process_name: str,
        process_scope: str | None = None,
        process_owner: str | None = None,
        systems_in_scope: list[str] | None = None,
        regulated: bool = False,
        inventory_heavy: bool = False,
        data_intensive: bool = False,
        high_risk_impact: bool = False,
    ) -> ProcessDB:
        """Create a new process."""
        process = ProcessDB(
            process_name=process_name,
            process_scope=process_scope,
            process_owner=process_owner,
            systems_in_scope=json.dumps(systems_in_scope or []),
            regulated=regulated,
            inventory_heavy=inventory_heavy,
            data_intensive=data_intensive,
            high_risk_impact=high_risk_impact,
        )
        self.session.add(process)
        await self.session.flush()
        return process

    async def get_by_id(
        self,
        process_id: str,
        load_relations: bool = False,
    ) -> ProcessDB | None:
        """Get a process by ID."""
        query = select(ProcessDB).where(ProcessDB.id == process_id)

        if load_relations:
            query = query.options(
                selectinload(ProcessDB.maturity_assessments),
                selectinload(ProcessDB.as_is_controls),
                selectinload(ProcessDB.gaps),
                selectinload(ProcessDB.to_be_controls),
            )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_all(self, skip: int = 0, limit: int = 100) -> list[ProcessDB]:
        """List processes ordered by name."""
        result = await self.session.execute(
            select(ProcessDB).order_by(ProcessDB.process_name).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def update(self, process: ProcessDB, **kwargs) -> ProcessDB:
        """Update a process's attributes."""
        if "systems_in_scope" in kwargs and kwargs["systems_in_scope"] is not None:
            kwargs["systems_in_scope"] = json.dumps(kwargs["systems_in_scope"])
        for key, value in kwargs.items():
            if hasattr(process, key):
                setattr(process, key, value)
        await self.session.flush()
        return process
