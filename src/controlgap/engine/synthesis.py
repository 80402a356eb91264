"""To-be control synthesis from uncovered standard controls."""

from typing import Any

from controlgap.models.controls import GapType, ImplementationStatus

DEFAULT_OWNER_ROLE = "Process Owner"


def implementation_guidance(control_name: str, gap_type: GapType | str) -> str:
    """Templated guidance text for a synthesized control."""
    gap_value = gap_type.value if hasattr(gap_type, "value") else gap_type
    return f"Implement {control_name} to address {gap_value} gap"


def build_to_be_fields(std_control: Any, gap_type: GapType | str) -> dict[str, Any]:
    """Field values of a to-be control recommended for a gap.

    Objective, frequency, evidence, control type and domain are copied from
    the standard control so the recommendation keeps its tags.
    """
    return {
        "control_objective": std_control.control_objective,
        "owner_role": DEFAULT_OWNER_ROLE,
        "frequency": std_control.typical_frequency,
        "evidence_type": std_control.typical_evidence,
        "control_type": std_control.control_type,
        "domain_tag": std_control.domain_tag,
        "implementation_guidance": implementation_guidance(std_control.control_name, gap_type),
        "implementation_status": ImplementationStatus.PLANNED.value,
    }
