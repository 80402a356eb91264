"""ControlGap - maturity-driven control gap analysis and to-be control synthesis."""

__version__ = "0.1.0"

from controlgap.models.controls import (
    ControlType,
    CoverageStatus,
    DomainTag,
    GapType,
    ImplementationStatus,
)
from controlgap.models.profile import MaturityAnswers, ProfileTag
from controlgap.models.rules import ApplicabilityRule, OrgFlag

__all__ = [
    "ApplicabilityRule",
    "ControlType",
    "CoverageStatus",
    "DomainTag",
    "GapType",
    "ImplementationStatus",
    "MaturityAnswers",
    "OrgFlag",
    "ProfileTag",
]
