"""Pydantic schemas for Section 2 API.

Required fields are declared optional here so that missing values are
reported by the service layer together, in a single validation error.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class MaturitySelectionRequest(BaseModel):
    """Schema for saving the current/target maturity of a risk."""

    risk_id: str | None = None
    selected_level: float | None = None
    target_level: float | None = None
    current_maturity_score: float | None = None
    target_maturity_score: float | None = None


class MaturitySelectionResponse(BaseModel):
    """Response schema for a maturity selection."""

    id: str
    risk_id: str
    selected_level: float
    target_level: float
    current_maturity_score: float | None
    target_maturity_score: float | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GapAnalysisRequest(BaseModel):
    """Schema for saving a gap analysis snapshot."""

    risk_id: str | None = None
    current_level: float | None = None
    target_level: float | None = None
    current_score: float | None = None
    target_score: float | None = None
    missing_controls: list[Any] | None = None
    suggested_controls: list[Any] | None = None
    gap_count: int | None = Field(None, ge=0)
    effort_estimate: str | None = Field(None, max_length=50)
    timeline_estimate: str | None = Field(None, max_length=50)


class GapAnalysisResponse(BaseModel):
    """Response schema for a gap analysis snapshot."""

    id: str
    risk_id: str
    current_level: float
    target_level: float
    current_score: float
    target_score: float
    missing_controls: list[Any]
    suggested_controls: list[Any]
    gap_count: int
    effort_estimate: str
    timeline_estimate: str
    defaulted_fields: list[str] = Field(
        default_factory=list,
        description="Fields holding placeholder values instead of caller input",
    )
    created_at: datetime
    updated_at: datetime


class AcceptControlRequest(BaseModel):
    """Schema for accepting a suggested control."""

    risk_id: str | None = None
    template_id: str | None = None
    customizations: dict[str, Any] | None = None


class Section2ControlCreate(BaseModel):
    """Schema for recording a concrete control of a risk."""

    risk_id: str | None = None
    title: str | None = Field(None, max_length=500)
    control_type: str | None = None
    description: str | None = None
    objectives: list[str] | None = None
    owner: str | None = Field(None, max_length=255)
    reviewer: str | None = Field(None, max_length=255)
    frequency: str | None = Field(None, max_length=100)
    evidence: str | None = None
    evidence_location: str | None = Field(None, max_length=500)
    status: str | None = Field(None, max_length=20)
    maturity_level: int | None = None
    source: str | None = Field(None, max_length=50)


class Section2ControlResponse(BaseModel):
    """Response schema for a concrete control."""

    id: str
    risk_id: str
    title: str
    description: str
    control_type: str
    objectives: list[str]
    owner: str
    reviewer: str | None
    frequency: str
    evidence: str
    evidence_location: str | None
    status: str
    maturity_level: int
    source: str
    template_id: str | None
    implementation_phase: str | None
    implementation_effort: str | None
    implementation_timeline: str | None
    created_at: datetime
    updated_at: datetime
