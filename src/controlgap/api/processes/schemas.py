"""Pydantic schemas for Processes API."""

from datetime import datetime

from pydantic import BaseModel, Field


class ProcessCreate(BaseModel):
    """Schema for creating a new process."""

    process_name: str = Field(..., min_length=1, max_length=255)
    process_scope: str | None = None
    process_owner: str | None = Field(None, max_length=255)
    systems_in_scope: list[str] = Field(default_factory=list)
    regulated: bool = False
    inventory_heavy: bool = False
    data_intensive: bool = False
    high_risk_impact: bool = False


class ProcessUpdate(BaseModel):
    """Schema for updating a process."""

    process_name: str | None = Field(None, min_length=1, max_length=255)
    process_scope: str | None = None
    process_owner: str | None = Field(None, max_length=255)
    systems_in_scope: list[str] | None = None
    regulated: bool | None = None
    inventory_heavy: bool | None = None
    data_intensive: bool | None = None
    high_risk_impact: bool | None = None


class ProcessResponse(BaseModel):
    """Response schema for a process."""

    id: str
    process_name: str
    process_scope: str | None
    process_owner: str | None
    systems_in_scope: list[str]
    regulated: bool
    inventory_heavy: bool
    data_intensive: bool
    high_risk_impact: bool
    created_at: datetime
    updated_at: datetime


class ProcessDetailResponse(ProcessResponse):
    """Process with the sizes of its related collections."""

    assessment_count: int = 0
    as_is_control_count: int = 0
    gap_count: int = 0
    to_be_control_count: int = 0
