"""Per-risk maturity targets, gap analysis snapshots and control acceptance."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.db.models import GapAnalysisSnapshot, MaturitySelection, Section2Control
from controlgap.db.repositories import Section2Repository
from controlgap.engine.targets import (
    RECORDED_CONTROL_DEFAULTS,
    materialize_accepted_control,
    resolve_snapshot_fields,
)
from controlgap.errors import NotFound, ValidationError, require_fields
from controlgap.models.controls import ControlType
from controlgap.services.base import storage_errors

logger = logging.getLogger(__name__)


@storage_errors
async def upsert_maturity_selection(
    session: AsyncSession,
    risk_id: str | None,
    selected_level: float | None,
    target_level: float | None,
    current_score: float | None = None,
    target_score: float | None = None,
) -> MaturitySelection:
    """Save the chosen current/target maturity of a risk.

    Repeated calls overwrite every field of the single row for the risk;
    omitted scores are stored as empty.
    """
    require_fields(risk_id=risk_id, selected_level=selected_level, target_level=target_level)

    selection = await Section2Repository(session).upsert_maturity_selection(
        risk_id=risk_id,
        selected_level=selected_level,
        target_level=target_level,
        current_maturity_score=current_score,
        target_maturity_score=target_score,
    )
    logger.info(
        "Saved maturity selection for risk %s: %s -> %s", risk_id, selected_level, target_level
    )
    return selection


@storage_errors
async def get_maturity_selection(session: AsyncSession, risk_id: str) -> MaturitySelection:
    """Get the maturity selection of a risk."""
    selection = await Section2Repository(session).get_maturity_selection(risk_id)
    if selection is None:
        raise NotFound(f"No maturity selection found for risk {risk_id}")
    return selection


@storage_errors
async def upsert_gap_analysis_snapshot(
    session: AsyncSession,
    risk_id: str | None,
    current_level: float | None,
    target_level: float | None,
    current_score: float | None = None,
    target_score: float | None = None,
    missing_controls: list[Any] | None = None,
    suggested_controls: list[Any] | None = None,
    gap_count: int | None = None,
    effort_estimate: str | None = None,
    timeline_estimate: str | None = None,
) -> GapAnalysisSnapshot:
    """Persist the summary of a gap analysis for a risk.

    Omitted scores and estimates are filled with placeholder values and
    listed in the snapshot's ``defaulted_fields``.
    """
    require_fields(risk_id=risk_id, current_level=current_level, target_level=target_level)

    fields = resolve_snapshot_fields(
        current_level=current_level,
        target_level=target_level,
        current_score=current_score,
        target_score=target_score,
        missing_controls=missing_controls,
        suggested_controls=suggested_controls,
        gap_count=gap_count,
        effort_estimate=effort_estimate,
        timeline_estimate=timeline_estimate,
    )
    snapshot = await Section2Repository(session).upsert_snapshot(risk_id, fields)
    if fields["defaulted_fields"]:
        logger.info(
            "Gap analysis snapshot for risk %s uses placeholder values for: %s",
            risk_id,
            ", ".join(fields["defaulted_fields"]),
        )
    return snapshot


@storage_errors
async def get_gap_analysis_snapshot(session: AsyncSession, risk_id: str) -> GapAnalysisSnapshot:
    """Get the gap analysis snapshot of a risk."""
    snapshot = await Section2Repository(session).get_snapshot(risk_id)
    if snapshot is None:
        raise NotFound(f"No gap analysis found for risk {risk_id}")
    return snapshot


@storage_errors
async def accept_suggested_control(
    session: AsyncSession,
    risk_id: str | None,
    template_id: str | None,
    customizations: dict[str, Any] | None = None,
) -> Section2Control:
    """Turn an accepted suggestion into a planned control bound to the risk."""
    require_fields(risk_id=risk_id, template_id=template_id)

    try:
        fields = materialize_accepted_control(risk_id, template_id, customizations)
    except ValueError as e:
        raise ValidationError(["customizations.type"], f"Invalid control type: {e}") from None

    fields.pop("risk_id")
    control = await Section2Repository(session).create_control(risk_id, **fields)
    logger.info("Accepted template %s as control %s for risk %s", template_id, control.id, risk_id)
    return control


@storage_errors
async def record_control(
    session: AsyncSession,
    risk_id: str | None,
    title: str | None,
    control_type: str | None,
    **fields: Any,
) -> Section2Control:
    """Record a concrete control for a risk directly."""
    require_fields(risk_id=risk_id, title=title, control_type=control_type)
    if control_type not in ControlType._value2member_map_:
        raise ValidationError(["control_type"], f"Invalid control type: {control_type}")

    values = dict(RECORDED_CONTROL_DEFAULTS)
    values.update({k: v for k, v in fields.items() if v is not None})
    return await Section2Repository(session).create_control(
        risk_id, title=title, control_type=control_type, **values
    )


@storage_errors
async def list_controls(session: AsyncSession, risk_id: str) -> list[Section2Control]:
    """List concrete controls of a risk."""
    return await Section2Repository(session).list_controls(risk_id)
