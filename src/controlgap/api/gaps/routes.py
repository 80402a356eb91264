"""Gaps API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.api.gaps.schemas import (
    GapAnalyzeRequest,
    GapAnalyzeResponse,
    GapResponse,
    GapStandardControl,
    GapToBeControl,
)
from controlgap.api.rate_limit import limiter
from controlgap.db import GapDB, get_db
from controlgap.services import detect_gaps, list_gaps

router = APIRouter(prefix="/gaps", tags=["Gaps"])


def _gap_to_response(gap: GapDB) -> GapResponse:
    """Convert a Gap model to GapResponse."""
    std = gap.std_control
    to_be = gap.to_be_control
    return GapResponse(
        id=gap.id,
        process_id=gap.process_id,
        risk_id=gap.risk_id,
        std_control_id=gap.std_control_id,
        gap_type=gap.gap_type,
        recommended_to_be_control_id=gap.recommended_to_be_control_id,
        std_control=GapStandardControl(
            id=std.id,
            control_name=std.control_name,
            control_objective=std.control_objective,
            control_type=std.control_type,
            domain_tag=std.domain_tag,
            typical_frequency=std.typical_frequency,
            typical_evidence=std.typical_evidence,
        )
        if std
        else None,
        to_be_control=GapToBeControl(
            id=to_be.id,
            control_objective=to_be.control_objective,
            owner_role=to_be.owner_role,
            control_type=to_be.control_type,
            domain_tag=to_be.domain_tag,
            implementation_status=to_be.implementation_status,
        )
        if to_be
        else None,
        created_at=gap.created_at,
    )


@router.post("/analyze", response_model=GapAnalyzeResponse)
@limiter.limit("30/minute")
async def analyze_gaps(
    request: Request,
    analyze_data: GapAnalyzeRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GapAnalyzeResponse:
    """Detect gaps of a process for a risk.

    Re-running with unchanged coverage returns the same gaps with
    ``created`` equal to zero.
    """
    result = await detect_gaps(db, analyze_data.process_id, analyze_data.risk_id)
    # Resolve the related controls of every gap in the run
    gaps = await list_gaps(db, analyze_data.process_id, analyze_data.risk_id)
    run_ids = {gap.id for gap in result.gaps}
    report = result.report

    return GapAnalyzeResponse(
        gaps=[_gap_to_response(g) for g in gaps if g.id in run_ids],
        count=result.count,
        created=result.created,
        applicable_count=report.applicable_count,
        covered_count=report.covered_count,
        coverage_percentage=report.coverage_percentage,
        maturity_profile=report.profile,
        org_flags=report.org_flags,
    )


@router.get("/process/{process_id}", response_model=list[GapResponse])
async def list_process_gaps(
    process_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    risk_id: str | None = None,
) -> list[GapResponse]:
    """List gaps of a process with their standard and recommended controls."""
    gaps = await list_gaps(db, process_id, risk_id)
    return [_gap_to_response(g) for g in gaps]
