"""Pydantic schemas for As-Is Controls API."""

from datetime import datetime

from pydantic import BaseModel, Field

from controlgap.models.controls import ControlType, CoverageStatus, DomainTag


class AsIsControlCreate(BaseModel):
    """Schema for recording a control a process currently has."""

    process_id: str = Field(..., min_length=1)
    control_name: str = Field(..., min_length=1, max_length=255)
    control_objective: str | None = None
    control_type: ControlType | None = None
    domain_tag: DomainTag | None = None
    frequency: str | None = Field(None, max_length=100)
    evidence_source: str | None = None
    owner: str | None = Field(None, max_length=255)
    status: CoverageStatus = CoverageStatus.EXISTS
    mapped_std_control_id: str | None = None


class AsIsControlUpdate(BaseModel):
    """Schema for updating coverage status or mapping of an as-is control."""

    control_name: str | None = Field(None, min_length=1, max_length=255)
    control_objective: str | None = None
    control_type: ControlType | None = None
    domain_tag: DomainTag | None = None
    frequency: str | None = Field(None, max_length=100)
    evidence_source: str | None = None
    owner: str | None = Field(None, max_length=255)
    status: CoverageStatus | None = None
    mapped_std_control_id: str | None = None


class MappedStandardControl(BaseModel):
    """Catalog entry an as-is control is mapped to."""

    id: str
    control_name: str
    control_type: str
    domain_tag: str


class AsIsControlResponse(BaseModel):
    """Response schema for an as-is control."""

    id: str
    process_id: str
    control_name: str
    control_objective: str | None
    control_type: str | None
    domain_tag: str | None
    frequency: str | None
    evidence_source: str | None
    owner: str | None
    status: CoverageStatus
    mapped_std_control_id: str | None
    mapped_std_control: MappedStandardControl | None = None
    created_at: datetime
    updated_at: datetime
