"""Pydantic schemas for Standard Controls API."""

from datetime import datetime

from pydantic import BaseModel, Field

from controlgap.models.controls import ControlType, DomainTag, StandardControlSpec
from controlgap.models.rules import ALWAYS, ApplicabilityRule


class StandardControlCreate(BaseModel):
    """Schema for adding a catalog entry."""

    control_name: str = Field(..., min_length=1, max_length=255)
    control_objective: str = Field(..., min_length=1)
    control_type: ControlType
    domain_tag: DomainTag
    typical_frequency: str | None = Field(None, max_length=100)
    typical_evidence: str | None = None
    applicability_rule: ApplicabilityRule = Field(default=ALWAYS)

    def to_spec(self) -> StandardControlSpec:
        return StandardControlSpec(
            control_name=self.control_name,
            control_objective=self.control_objective,
            control_type=self.control_type,
            domain_tag=self.domain_tag,
            typical_frequency=self.typical_frequency,
            typical_evidence=self.typical_evidence,
            rule=self.applicability_rule,
        )


class StandardControlResponse(BaseModel):
    """Response schema for a catalog entry."""

    id: str
    control_name: str
    control_objective: str
    control_type: ControlType
    domain_tag: DomainTag
    typical_frequency: str | None
    typical_evidence: str | None
    applicability_rule: ApplicabilityRule
    created_at: datetime
