"""Pydantic schemas for To-Be Controls API."""

from datetime import datetime

from pydantic import BaseModel, Field

from controlgap.models.controls import ImplementationStatus


class GenerateRequest(BaseModel):
    """Schema for synthesizing to-be controls from recorded gaps."""

    process_id: str | None = None
    risk_id: str | None = None


class ToBeControlUpdate(BaseModel):
    """Schema for the owner workflow on a to-be control."""

    control_objective: str | None = Field(None, min_length=1)
    owner_role: str | None = Field(None, min_length=1, max_length=255)
    frequency: str | None = Field(None, max_length=100)
    evidence_type: str | None = None
    implementation_guidance: str | None = None
    implementation_status: ImplementationStatus | None = None


class ToBeControlResponse(BaseModel):
    """Response schema for a to-be control."""

    id: str
    process_id: str
    control_objective: str
    owner_role: str
    frequency: str | None
    evidence_type: str | None
    control_type: str
    domain_tag: str
    implementation_guidance: str | None
    implementation_status: ImplementationStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GenerateResponse(BaseModel):
    """Response schema for a synthesis run."""

    controls: list[ToBeControlResponse]
    count: int
    skipped: int = Field(0, description="Gaps that already had a recommendation")
