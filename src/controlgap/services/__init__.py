"""Async operations tying the decision engine to storage.

Every operation takes an ``AsyncSession`` as first argument; the caller owns
the transaction.
"""

from controlgap.services.assessments import list_assessments, submit_assessment
from controlgap.services.catalog import (
    create_standard_control,
    list_applicable,
    list_catalog,
    seed_catalog,
)
from controlgap.services.gaps import (
    GapDetectionResult,
    detect_gaps,
    evaluate_coverage,
    list_gaps,
    resolve_org_flags,
)
from controlgap.services.section2 import (
    accept_suggested_control,
    get_gap_analysis_snapshot,
    get_maturity_selection,
    list_controls,
    record_control,
    upsert_gap_analysis_snapshot,
    upsert_maturity_selection,
)
from controlgap.services.to_be import (
    SynthesisResult,
    generate_to_be_controls,
    list_to_be_controls,
    update_to_be_control,
)

__all__ = [
    "GapDetectionResult",
    "SynthesisResult",
    "accept_suggested_control",
    "create_standard_control",
    "detect_gaps",
    "evaluate_coverage",
    "generate_to_be_controls",
    "get_gap_analysis_snapshot",
    "get_maturity_selection",
    "list_applicable",
    "list_assessments",
    "list_catalog",
    "list_controls",
    "list_gaps",
    "list_to_be_controls",
    "record_control",
    "resolve_org_flags",
    "seed_catalog",
    "submit_assessment",
    "update_to_be_control",
    "upsert_gap_analysis_snapshot",
    "upsert_maturity_selection",
]
