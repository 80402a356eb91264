"""ControlGap decision engine."""

from controlgap.engine.applicability import applies, filter_applicable
from controlgap.engine.gap_analysis import CoverageFinding, CoverageReport, assess_coverage
from controlgap.engine.profile import derive_profile
from controlgap.engine.synthesis import (
    DEFAULT_OWNER_ROLE,
    build_to_be_fields,
    implementation_guidance,
)
from controlgap.engine.targets import materialize_accepted_control, resolve_snapshot_fields

__all__ = [
    "CoverageFinding",
    "CoverageReport",
    "DEFAULT_OWNER_ROLE",
    "applies",
    "assess_coverage",
    "build_to_be_fields",
    "derive_profile",
    "filter_applicable",
    "implementation_guidance",
    "materialize_accepted_control",
    "resolve_snapshot_fields",
]
