"""Domain models for ControlGap."""

from controlgap.models.controls import (
    ControlSource,
    ControlType,
    CoverageStatus,
    DomainTag,
    GapType,
    ImplementationStatus,
    StandardControlSpec,
)
from controlgap.models.profile import MaturityAnswers, ProfileTag, parse_profile
from controlgap.models.rules import (
    AlwaysRule,
    ApplicabilityRule,
    MaturityProfileRule,
    OrgFlag,
    OrgFlagRule,
    dump_rule,
    parse_rule,
)

__all__ = [
    "AlwaysRule",
    "ApplicabilityRule",
    "ControlSource",
    "ControlType",
    "CoverageStatus",
    "DomainTag",
    "GapType",
    "ImplementationStatus",
    "MaturityAnswers",
    "MaturityProfileRule",
    "OrgFlag",
    "OrgFlagRule",
    "ProfileTag",
    "StandardControlSpec",
    "dump_rule",
    "parse_profile",
    "parse_rule",
]
