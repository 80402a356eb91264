"""Per-risk maturity selection, gap snapshot and concrete control storage."""

import json
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.db.models import (
    GapAnalysisSnapshot,
    MaturitySelection,
    Section2Control,
    generate_uuid,
)

# Columns holding JSON-encoded lists
_SNAPSHOT_JSON_FIELDS = ("missing_controls", "suggested_controls", "defaulted_fields")


class Section2Repository:
    """Repository for risk-keyed maturity and control records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _upsert_by_risk(self, model, risk_id: str, values: dict[str, Any]) -> None:
        """Atomic insert-or-update on the unique ``risk_id`` column."""
        dialect = self.session.get_bind().dialect.name
        insert = pg_insert if dialect == "postgresql" else sqlite_insert

        now = datetime.utcnow()
        stmt = insert(model).values(
            id=generate_uuid(),
            risk_id=risk_id,
            created_at=now,
            updated_at=now,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[model.risk_id],
            set_={**values, "updated_at": now},
        )
        await self.session.execute(stmt)

    async def _get_by_risk(self, model, risk_id: str):
        result = await self.session.execute(
            select(model)
            .where(model.risk_id == risk_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    # Maturity selection

    async def upsert_maturity_selection(
        self,
        risk_id: str,
        selected_level: float,
        target_level: float,
        current_maturity_score: float | None = None,
        target_maturity_score: float | None = None,
    ) -> MaturitySelection:
        """Create or overwrite the selection of a risk (last write wins)."""
        await self._upsert_by_risk(
            MaturitySelection,
            risk_id,
            {
                "selected_level": selected_level,
                "target_level": target_level,
                "current_maturity_score": current_maturity_score,
                "target_maturity_score": target_maturity_score,
            },
        )
        return await self.get_maturity_selection(risk_id)

    async def get_maturity_selection(self, risk_id: str) -> MaturitySelection | None:
        """Get the selection of a risk."""
        return await self._get_by_risk(MaturitySelection, risk_id)

    # Gap analysis snapshot

    async def upsert_snapshot(self, risk_id: str, fields: dict[str, Any]) -> GapAnalysisSnapshot:
        """Create or overwrite the snapshot of a risk."""
        values = dict(fields)
        for name in _SNAPSHOT_JSON_FIELDS:
            values[name] = json.dumps(values.get(name) or [])
        await self._upsert_by_risk(GapAnalysisSnapshot, risk_id, values)
        return await self.get_snapshot(risk_id)

    async def get_snapshot(self, risk_id: str) -> GapAnalysisSnapshot | None:
        """Get the snapshot of a risk."""
        return await self._get_by_risk(GapAnalysisSnapshot, risk_id)

    # Concrete controls

    async def create_control(self, risk_id: str, **fields: Any) -> Section2Control:
        """Create a concrete control bound to a risk."""
        fields["objectives"] = json.dumps(fields.get("objectives") or [])
        control = Section2Control(risk_id=risk_id, **fields)
        self.session.add(control)
        await self.session.flush()
        return control

    async def list_controls(self, risk_id: str) -> list[Section2Control]:
        """List concrete controls of a risk, oldest first."""
        result = await self.session.execute(
            select(Section2Control)
            .where(Section2Control.risk_id == risk_id)
            .order_by(Section2Control.created_at)
        )
        return list(result.scalars().all())
