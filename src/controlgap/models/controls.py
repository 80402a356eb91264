"""Control vocabularies and the catalog entry model used by the engine."""

from enum import StrEnum

from pydantic import BaseModel, Field

from controlgap.models.rules import ALWAYS, ApplicabilityRule


class ControlType(StrEnum):
    """How a control acts on a risk."""

    PREVENTIVE = "preventive"
    DETECTIVE = "detective"
    CORRECTIVE = "corrective"


class DomainTag(StrEnum):
    """Control domain."""

    OPS = "ops"
    REPORTING = "reporting"
    FINANCIAL = "financial"
    COMPLIANCE = "compliance"


class CoverageStatus(StrEnum):
    """Coverage status of an as-is control."""

    EXISTS = "exists"
    PARTIAL = "partial"
    NOT_EXIST = "not_exist"


class GapType(StrEnum):
    """Why a standard control counts as a gap."""

    MISSING = "missing"
    WEAK_DESIGN = "weak_design"
    WEAK_OPERATION = "weak_operation"
    NO_OWNER = "no_owner"
    NO_EVIDENCE = "no_evidence"


class ImplementationStatus(StrEnum):
    """Lifecycle of a to-be control."""

    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    LIVE = "live"


class ControlSource(StrEnum):
    """Where a concrete (section 2) control came from."""

    EXISTING_DOCUMENTED = "existing_documented"
    AI_SUGGESTED = "ai_suggested"
    TEMPLATE = "template"
    CUSTOM = "custom"


class StandardControlSpec(BaseModel):
    """A catalog entry as seen by the applicability and gap engines."""

    id: str | None = Field(None, description="Database id, unset for seed data")
    control_name: str = Field(..., min_length=1)
    control_objective: str = Field(..., min_length=1)
    control_type: ControlType
    domain_tag: DomainTag
    typical_frequency: str | None = None
    typical_evidence: str | None = None
    rule: ApplicabilityRule = Field(default=ALWAYS)
