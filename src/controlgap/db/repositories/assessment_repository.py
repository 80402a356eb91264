"""Maturity assessment repository for database operations."""

import json
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.db.models import MaturityAssessmentDB
from controlgap.models.profile import ProfileTag


class MaturityAssessmentRepository:
    """Repository for MaturityAssessment operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        process_id: str,
        answers: dict[str, Any],
        profile: list[ProfileTag],
    ) -> MaturityAssessmentDB:
        """Store a submission; the version increments per process."""
        result = await self.session.execute(
            select(func.max(MaturityAssessmentDB.assessment_version)).where(
                MaturityAssessmentDB.process_id == process_id
            )
        )
        latest_version = result.scalar() or 0

        assessment = MaturityAssessmentDB(
            process_id=process_id,
            assessment_version=latest_version + 1,
            answers=json.dumps(answers),
            maturity_profile=json.dumps([tag.value for tag in profile]),
        )
        self.session.add(assessment)
        await self.session.flush()
        return assessment

    async def get_latest(self, process_id: str) -> MaturityAssessmentDB | None:
        """Get the authoritative (most recent) assessment of a process."""
        result = await self.session.execute(
            select(MaturityAssessmentDB)
            .where(MaturityAssessmentDB.process_id == process_id)
            .order_by(
                MaturityAssessmentDB.assessment_date.desc(),
                MaturityAssessmentDB.assessment_version.desc(),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_for_process(self, process_id: str) -> list[MaturityAssessmentDB]:
        """List assessments of a process, most recent first."""
        result = await self.session.execute(
            select(MaturityAssessmentDB)
            .where(MaturityAssessmentDB.process_id == process_id)
            .order_by(
                MaturityAssessmentDB.assessment_date.desc(),
                MaturityAssessmentDB.assessment_version.desc(),
            )
        )
        return list(result.scalars().all())
