"""Standard controls API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.api.standard_controls.schemas import (
    StandardControlCreate,
    StandardControlResponse,
)
from controlgap.db import StandardControlDB, get_db
from controlgap.models.controls import DomainTag
from controlgap.models.profile import parse_profile
from controlgap.models.rules import OrgFlag
from controlgap.services import create_standard_control, list_applicable, list_catalog

router = APIRouter(prefix="/standard-controls", tags=["Standard Controls"])


def _control_to_response(control: StandardControlDB) -> StandardControlResponse:
    """Convert a StandardControl model to StandardControlResponse."""
    spec = control.to_spec()
    return StandardControlResponse(
        id=control.id,
        control_name=spec.control_name,
        control_objective=spec.control_objective,
        control_type=spec.control_type,
        domain_tag=spec.domain_tag,
        typical_frequency=spec.typical_frequency,
        typical_evidence=spec.typical_evidence,
        applicability_rule=spec.rule,
        created_at=control.created_at,
    )


@router.get("/", response_model=list[StandardControlResponse])
async def list_standard_controls(
    db: Annotated[AsyncSession, Depends(get_db)],
    domain_tag: DomainTag | None = None,
) -> list[StandardControlResponse]:
    """List the full catalog, optionally restricted to one domain."""
    controls = await list_catalog(db, domain_tag.value if domain_tag else None)
    return [_control_to_response(c) for c in controls]


@router.get("/by-profile/{profile}", response_model=list[StandardControlResponse])
async def list_standard_controls_by_profile(
    profile: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    regulated: bool = False,
    inventory_heavy: bool = False,
    data_intensive: bool = False,
    high_risk: bool = False,
) -> list[StandardControlResponse]:
    """List catalog entries applicable to a comma-separated profile.

    Organizational flags are given as boolean query parameters; unknown
    profile tags are ignored.
    """
    requested = {
        OrgFlag.REGULATED: regulated,
        OrgFlag.INVENTORY_HEAVY: inventory_heavy,
        OrgFlag.DATA_INTENSIVE: data_intensive,
        OrgFlag.HIGH_RISK: high_risk,
    }
    flags = {flag for flag, on in requested.items() if on}
    controls = await list_applicable(db, parse_profile(profile), flags)
    return [_control_to_response(c) for c in controls]


@router.post("/", response_model=StandardControlResponse, status_code=status.HTTP_201_CREATED)
async def create_standard_control_entry(
    control_data: StandardControlCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StandardControlResponse:
    """Add an entry to the catalog."""
    control = await create_standard_control(db, control_data.to_spec())
    return _control_to_response(control)
