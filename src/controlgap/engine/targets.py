"""Field resolution for per-risk maturity targets, snapshots and accepted controls.

The snapshot defaults below are placeholders standing in for a real scoring
model. Every field filled from them is reported in ``defaulted_fields`` so
downstream reporting can tell a stored estimate from a computed result.
"""

from typing import Any

from controlgap.models.controls import ControlSource, ControlType

# Placeholder estimates used when a snapshot caller omits computed fields
CURRENT_SCORE_OFFSET = 0.2
TARGET_SCORE_OFFSET = 0.5
DEFAULT_GAP_COUNT = 0
DEFAULT_EFFORT_ESTIMATE = "medium"
DEFAULT_TIMELINE_ESTIMATE = "6-12 months"

# Defaults of a control materialized from an accepted suggestion
ACCEPTED_CONTROL_DEFAULTS: dict[str, Any] = {
    "description": "",
    "control_type": ControlType.DETECTIVE.value,
    "objectives": ["operations"],
    "owner": "",
    "frequency": "monthly",
    "evidence": "",
    "maturity_level": 3,
}

# Defaults of a control recorded directly through section 2
RECORDED_CONTROL_DEFAULTS: dict[str, Any] = {
    "description": "",
    "objectives": [],
    "owner": "",
    "frequency": "monthly",
    "evidence": "",
    "status": "existing",
    "maturity_level": 1,
    "source": ControlSource.EXISTING_DOCUMENTED.value,
}

_CUSTOMIZABLE_FIELDS = (
    "title",
    "description",
    "objectives",
    "owner",
    "reviewer",
    "frequency",
    "evidence",
    "evidence_location",
    "maturity_level",
    "implementation_phase",
    "implementation_effort",
    "implementation_timeline",
)


def resolve_snapshot_fields(
    current_level: float,
    target_level: float,
    current_score: float | None = None,
    target_score: float | None = None,
    missing_controls: list[Any] | None = None,
    suggested_controls: list[Any] | None = None,
    gap_count: int | None = None,
    effort_estimate: str | None = None,
    timeline_estimate: str | None = None,
) -> dict[str, Any]:
    """Fill omitted snapshot fields with placeholder estimates.

    Returns:
        Column values for the snapshot, including ``defaulted_fields``.
    """
    defaulted: list[str] = []

    def pick(name: str, value: Any, default: Any) -> Any:
        if value is None:
            defaulted.append(name)
            return default
        return value

    fields = {
        "current_level": current_level,
        "target_level": target_level,
        "current_score": pick("current_score", current_score, current_level + CURRENT_SCORE_OFFSET),
        "target_score": pick("target_score", target_score, target_level + TARGET_SCORE_OFFSET),
        "missing_controls": missing_controls or [],
        "suggested_controls": suggested_controls or [],
        "gap_count": pick("gap_count", gap_count, DEFAULT_GAP_COUNT),
        "effort_estimate": pick("effort_estimate", effort_estimate, DEFAULT_EFFORT_ESTIMATE),
        "timeline_estimate": pick(
            "timeline_estimate", timeline_estimate, DEFAULT_TIMELINE_ESTIMATE
        ),
    }
    fields["defaulted_fields"] = defaulted
    return fields


def materialize_accepted_control(
    risk_id: str,
    template_id: str,
    customizations: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Column values of a control created from an accepted suggestion.

    Customization keys follow the control's field names; ``type`` is
    accepted as an alias of ``control_type``. Empty values fall back to the
    defaults.
    """
    customizations = customizations or {}

    fields: dict[str, Any] = {
        "risk_id": risk_id,
        "template_id": template_id,
        "title": f"Control from template {template_id}",
        "reviewer": None,
        "evidence_location": None,
        "implementation_phase": None,
        "implementation_effort": None,
        "implementation_timeline": None,
        **ACCEPTED_CONTROL_DEFAULTS,
    }
    for name in _CUSTOMIZABLE_FIELDS:
        value = customizations.get(name)
        if value not in (None, "", []):
            fields[name] = value

    control_type = customizations.get("control_type") or customizations.get("type")
    if control_type:
        fields["control_type"] = ControlType(control_type).value

    fields["status"] = "planned"
    fields["source"] = ControlSource.AI_SUGGESTED.value
    return fields
