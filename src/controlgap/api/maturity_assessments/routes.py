"""Maturity assessments API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.api.maturity_assessments.schemas import AssessmentCreate, AssessmentResponse
from controlgap.db import MaturityAssessmentDB, get_db
from controlgap.services import list_assessments, submit_assessment

router = APIRouter(prefix="/maturity-assessments", tags=["Maturity Assessments"])


def _assessment_to_response(assessment: MaturityAssessmentDB) -> AssessmentResponse:
    """Convert a MaturityAssessment model to AssessmentResponse."""
    return AssessmentResponse(
        id=assessment.id,
        process_id=assessment.process_id,
        assessment_version=assessment.assessment_version,
        assessment_date=assessment.assessment_date,
        answers=assessment.answers_dict,
        maturity_profile=assessment.profile,
    )


@router.post("/", response_model=AssessmentResponse)
async def create_assessment(
    assessment_data: AssessmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssessmentResponse:
    """Submit questionnaire answers; the derived profile is stored alongside."""
    assessment = await submit_assessment(
        db, assessment_data.process_id, assessment_data.answers
    )
    return _assessment_to_response(assessment)


@router.get("/process/{process_id}", response_model=list[AssessmentResponse])
async def list_process_assessments(
    process_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[AssessmentResponse]:
    """List assessments of a process, most recent first."""
    assessments = await list_assessments(db, process_id)
    return [_assessment_to_response(a) for a in assessments]
