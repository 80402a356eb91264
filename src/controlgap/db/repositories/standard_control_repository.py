"""Standard control catalog repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.db.models import StandardControlDB
from controlgap.models.controls import StandardControlSpec
from controlgap.models.rules import dump_rule


class StandardControlRepository:
    """Repository for StandardControl operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, spec: StandardControlSpec) -> StandardControlDB:
        """Add a catalog entry."""
        control = StandardControlDB(
            control_name=spec.control_name,
            control_objective=spec.control_objective,
            control_type=spec.control_type.value,
            domain_tag=spec.domain_tag.value,
            typical_frequency=spec.typical_frequency,
            typical_evidence=spec.typical_evidence,
            applicability_rules=dump_rule(spec.rule),
        )
        self.session.add(control)
        await self.session.flush()
        return control

    async def get_by_id(self, control_id: str) -> StandardControlDB | None:
        """Get a catalog entry by ID."""
        result = await self.session.execute(
            select(StandardControlDB).where(StandardControlDB.id == control_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, control_name: str) -> StandardControlDB | None:
        """Get a catalog entry by control name."""
        result = await self.session.execute(
            select(StandardControlDB).where(StandardControlDB.control_name == control_name)
        )
        return result.scalars().first()

    async def list_all(self, domain_tag: str | None = None) -> list[StandardControlDB]:
        """List the catalog in insertion order, optionally for one domain."""
        query = select(StandardControlDB)
        if domain_tag:
            query = query.where(StandardControlDB.domain_tag == domain_tag)
        query = query.order_by(StandardControlDB.created_at, StandardControlDB.control_name)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_specs(self) -> list[StandardControlSpec]:
        """List the catalog as engine models with parsed rules."""
        return [control.to_spec() for control in await self.list_all()]
