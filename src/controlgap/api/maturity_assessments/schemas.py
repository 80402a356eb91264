"""Pydantic schemas for Maturity Assessments API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from controlgap.models.profile import MaturityAnswers, ProfileTag


class AssessmentCreate(BaseModel):
    """Schema for submitting a maturity questionnaire."""

    process_id: str | None = None
    answers: MaturityAnswers | None = None


class AssessmentResponse(BaseModel):
    """Response schema for a stored assessment."""

    id: str
    process_id: str
    assessment_version: int
    assessment_date: datetime
    answers: dict[str, Any]
    maturity_profile: list[ProfileTag]
