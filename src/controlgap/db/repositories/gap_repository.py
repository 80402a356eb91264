"""Gap repository for database operations."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from controlgap.db.models import GapDB, generate_uuid


class GapRepository:
    """Repository for Gap operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_control(
        self,
        process_id: str,
        risk_id: str,
        std_control_id: str,
    ) -> GapDB | None:
        """Get the gap recorded for a standard control of a process/risk pair."""
        result = await self.session.execute(
            select(GapDB)
            .where(
                GapDB.process_id == process_id,
                GapDB.risk_id == risk_id,
                GapDB.std_control_id == std_control_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        process_id: str,
        risk_id: str,
        std_control_id: str,
        gap_type: str,
    ) -> tuple[GapDB, bool]:
        """Create the gap unless it is already recorded.

        The insert is skipped on conflict with the (process, risk, standard
        control) key, so concurrent runs never duplicate a gap.

        Returns:
            The gap and whether it was newly created. An existing gap keeps
            its recommendation link; only its gap type is refreshed.
        """
        dialect = self.session.get_bind().dialect.name
        insert = pg_insert if dialect == "postgresql" else sqlite_insert

        now = datetime.utcnow()
        stmt = (
            insert(GapDB)
            .values(
                id=generate_uuid(),
                process_id=process_id,
                risk_id=risk_id,
                std_control_id=std_control_id,
                gap_type=gap_type,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(
                index_elements=[GapDB.process_id, GapDB.risk_id, GapDB.std_control_id]
            )
            .returning(GapDB.id)
        )
        created = (await self.session.execute(stmt)).scalar_one_or_none() is not None

        if not created:
            await self.session.execute(
                update(GapDB)
                .where(
                    GapDB.process_id == process_id,
                    GapDB.risk_id == risk_id,
                    GapDB.std_control_id == std_control_id,
                    GapDB.gap_type != gap_type,
                )
                .values(gap_type=gap_type, updated_at=now)
                .execution_options(synchronize_session=False)
            )

        gap = await self.get_for_control(process_id, risk_id, std_control_id)
        return gap, created

    async def list_for_process(
        self,
        process_id: str,
        risk_id: str | None = None,
    ) -> list[GapDB]:
        """List gaps of a process (optionally one risk) with resolved controls."""
        query = (
            select(GapDB)
            .options(selectinload(GapDB.std_control), selectinload(GapDB.to_be_control))
            .where(GapDB.process_id == process_id)
        )
        if risk_id is not None:
            query = query.where(GapDB.risk_id == risk_id)
        query = query.order_by(GapDB.created_at).execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def claim_recommendation(self, gap: GapDB, to_be_control_id: str) -> bool:
        """Link a gap to a recommendation unless another one got there first.

        Returns:
            True when this call set the link, False when the gap already
            points at a recommendation.
        """
        result = await self.session.execute(
            update(GapDB)
            .where(GapDB.id == gap.id, GapDB.recommended_to_be_control_id.is_(None))
            .values(recommended_to_be_control_id=to_be_control_id, updated_at=datetime.utcnow())
            .returning(GapDB.id)
            .execution_options(synchronize_session=False)
        )
        claimed = result.scalar_one_or_none() is not None
        await self.session.refresh(
            gap, attribute_names=["recommended_to_be_control_id", "updated_at"]
        )
        return claimed
