"""Maturity assessment submission."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.db.models import MaturityAssessmentDB
from controlgap.db.repositories import MaturityAssessmentRepository, ProcessRepository
from controlgap.engine.profile import derive_profile
from controlgap.errors import NotFound, require_fields
from controlgap.models.profile import MaturityAnswers
from controlgap.services.base import storage_errors

logger = logging.getLogger(__name__)


@storage_errors
async def submit_assessment(
    session: AsyncSession,
    process_id: str | None,
    answers: MaturityAnswers | dict[str, Any] | None,
) -> MaturityAssessmentDB:
    """Store a questionnaire submission together with its derived profile."""
    require_fields(process_id=process_id, answers=answers)

    if await ProcessRepository(session).get_by_id(process_id) is None:
        raise NotFound(f"Process {process_id} not found")

    if not isinstance(answers, MaturityAnswers):
        answers = MaturityAnswers.model_validate(answers)
    profile = derive_profile(answers)

    assessment = await MaturityAssessmentRepository(session).create(
        process_id=process_id,
        answers=answers.to_dict(),
        profile=profile,
    )
    logger.info(
        "Stored maturity assessment v%d for process %s: %s",
        assessment.assessment_version,
        process_id,
        ",".join(profile),
    )
    return assessment


@storage_errors
async def list_assessments(session: AsyncSession, process_id: str) -> list[MaturityAssessmentDB]:
    """List assessments of a process, most recent first."""
    return await MaturityAssessmentRepository(session).list_for_process(process_id)
