"""Section 2 API routes: maturity targets, gap snapshots and concrete controls."""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.api.section2.schemas import (
    AcceptControlRequest,
    GapAnalysisRequest,
    GapAnalysisResponse,
    MaturitySelectionRequest,
    MaturitySelectionResponse,
    Section2ControlCreate,
    Section2ControlResponse,
)
from controlgap.db import GapAnalysisSnapshot, Section2Control, get_db
from controlgap.services import (
    accept_suggested_control,
    get_gap_analysis_snapshot,
    get_maturity_selection,
    list_controls,
    record_control,
    upsert_gap_analysis_snapshot,
    upsert_maturity_selection,
)

router = APIRouter(prefix="/section2", tags=["Section 2"])


def _snapshot_to_response(snapshot: GapAnalysisSnapshot) -> GapAnalysisResponse:
    """Convert a GapAnalysisSnapshot model to GapAnalysisResponse."""
    return GapAnalysisResponse(
        id=snapshot.id,
        risk_id=snapshot.risk_id,
        current_level=snapshot.current_level,
        target_level=snapshot.target_level,
        current_score=snapshot.current_score,
        target_score=snapshot.target_score,
        missing_controls=json.loads(snapshot.missing_controls or "[]"),
        suggested_controls=json.loads(snapshot.suggested_controls or "[]"),
        gap_count=snapshot.gap_count,
        effort_estimate=snapshot.effort_estimate,
        timeline_estimate=snapshot.timeline_estimate,
        defaulted_fields=json.loads(snapshot.defaulted_fields or "[]"),
        created_at=snapshot.created_at,
        updated_at=snapshot.updated_at,
    )


def _control_to_response(control: Section2Control) -> Section2ControlResponse:
    """Convert a Section2Control model to Section2ControlResponse."""
    return Section2ControlResponse(
        id=control.id,
        risk_id=control.risk_id,
        title=control.title,
        description=control.description or "",
        control_type=control.control_type,
        objectives=json.loads(control.objectives or "[]"),
        owner=control.owner or "",
        reviewer=control.reviewer,
        frequency=control.frequency,
        evidence=control.evidence or "",
        evidence_location=control.evidence_location,
        status=control.status,
        maturity_level=control.maturity_level,
        source=control.source,
        template_id=control.template_id,
        implementation_phase=control.implementation_phase,
        implementation_effort=control.implementation_effort,
        implementation_timeline=control.implementation_timeline,
        created_at=control.created_at,
        updated_at=control.updated_at,
    )


# --- Maturity selection ---


@router.post("/maturity-selection", response_model=MaturitySelectionResponse)
async def save_maturity_selection(
    selection_data: MaturitySelectionRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MaturitySelectionResponse:
    """Create or overwrite the maturity selection of a risk."""
    selection = await upsert_maturity_selection(
        db,
        selection_data.risk_id,
        selection_data.selected_level,
        selection_data.target_level,
        current_score=selection_data.current_maturity_score,
        target_score=selection_data.target_maturity_score,
    )
    return MaturitySelectionResponse.model_validate(selection)


@router.get("/maturity-selection/{risk_id}", response_model=MaturitySelectionResponse)
async def read_maturity_selection(
    risk_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MaturitySelectionResponse:
    """Get the maturity selection of a risk."""
    selection = await get_maturity_selection(db, risk_id)
    return MaturitySelectionResponse.model_validate(selection)


# --- Gap analysis snapshot ---


@router.post("/gap-analysis", response_model=GapAnalysisResponse)
async def save_gap_analysis(
    analysis_data: GapAnalysisRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GapAnalysisResponse:
    """Create or overwrite the gap analysis snapshot of a risk."""
    snapshot = await upsert_gap_analysis_snapshot(db, **analysis_data.model_dump())
    return _snapshot_to_response(snapshot)


@router.get("/gap-analysis/{risk_id}", response_model=GapAnalysisResponse)
async def read_gap_analysis(
    risk_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GapAnalysisResponse:
    """Get the gap analysis snapshot of a risk."""
    snapshot = await get_gap_analysis_snapshot(db, risk_id)
    return _snapshot_to_response(snapshot)


# --- Concrete controls ---


@router.post("/accept-control", response_model=Section2ControlResponse)
async def accept_control(
    accept_data: AcceptControlRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Section2ControlResponse:
    """Turn an accepted suggestion into a planned control of the risk."""
    control = await accept_suggested_control(
        db, accept_data.risk_id, accept_data.template_id, accept_data.customizations
    )
    return _control_to_response(control)


@router.post(
    "/controls",
    response_model=Section2ControlResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_control(
    control_data: Section2ControlCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Section2ControlResponse:
    """Record a concrete control of a risk."""
    control = await record_control(db, **control_data.model_dump())
    return _control_to_response(control)


@router.get("/controls/{risk_id}", response_model=list[Section2ControlResponse])
async def list_risk_controls(
    risk_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Section2ControlResponse]:
    """List concrete controls of a risk."""
    controls = await list_controls(db, risk_id)
    return [_control_to_response(c) for c in controls]
