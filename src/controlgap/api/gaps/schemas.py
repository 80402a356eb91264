"""Pydantic schemas for Gaps API."""

from datetime import datetime

from pydantic import BaseModel, Field

from controlgap.models.controls import GapType, ImplementationStatus
from controlgap.models.profile import ProfileTag
from controlgap.models.rules import OrgFlag


class GapAnalyzeRequest(BaseModel):
    """Schema for running gap detection."""

    process_id: str | None = None
    risk_id: str | None = None


class GapStandardControl(BaseModel):
    """Standard control a gap refers to."""

    id: str
    control_name: str
    control_objective: str
    control_type: str
    domain_tag: str
    typical_frequency: str | None
    typical_evidence: str | None


class GapToBeControl(BaseModel):
    """To-be control recommended for a gap."""

    id: str
    control_objective: str
    owner_role: str
    control_type: str
    domain_tag: str
    implementation_status: ImplementationStatus


class GapResponse(BaseModel):
    """Response schema for a gap."""

    id: str
    process_id: str
    risk_id: str
    std_control_id: str | None
    gap_type: GapType
    recommended_to_be_control_id: str | None
    std_control: GapStandardControl | None = None
    to_be_control: GapToBeControl | None = None
    created_at: datetime


class GapAnalyzeResponse(BaseModel):
    """Response schema for a gap detection run."""

    gaps: list[GapResponse]
    count: int
    created: int = Field(..., description="Gaps recorded for the first time by this run")
    applicable_count: int
    covered_count: int
    coverage_percentage: float
    maturity_profile: list[ProfileTag]
    org_flags: list[OrgFlag]
