"""As-is controls API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.api.as_is_controls.schemas import (
    AsIsControlCreate,
    AsIsControlResponse,
    AsIsControlUpdate,
    MappedStandardControl,
)
from controlgap.db import AsIsControlDB, get_db
from controlgap.db.repositories import (
    AsIsControlRepository,
    ProcessRepository,
    StandardControlRepository,
)
from controlgap.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/as-is-controls", tags=["As-Is Controls"])


def _control_to_response(control: AsIsControlDB) -> AsIsControlResponse:
    """Convert an AsIsControl model to AsIsControlResponse."""
    mapped = control.mapped_std_control
    return AsIsControlResponse(
        id=control.id,
        process_id=control.process_id,
        control_name=control.control_name,
        control_objective=control.control_objective,
        control_type=control.control_type,
        domain_tag=control.domain_tag,
        frequency=control.frequency,
        evidence_source=control.evidence_source,
        owner=control.owner,
        status=control.status,
        mapped_std_control_id=control.mapped_std_control_id,
        mapped_std_control=MappedStandardControl(
            id=mapped.id,
            control_name=mapped.control_name,
            control_type=mapped.control_type,
            domain_tag=mapped.domain_tag,
        )
        if mapped
        else None,
        created_at=control.created_at,
        updated_at=control.updated_at,
    )


async def _check_mapping(db: AsyncSession, std_control_id: str | None) -> None:
    """Reject a mapping to a catalog entry that does not exist."""
    if std_control_id and await StandardControlRepository(db).get_by_id(std_control_id) is None:
        raise ValidationError(
            ["mapped_std_control_id"], f"Standard control {std_control_id} not found"
        )


@router.post("/", response_model=AsIsControlResponse, status_code=status.HTTP_201_CREATED)
async def create_as_is_control(
    control_data: AsIsControlCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AsIsControlResponse:
    """Record a control a process currently has."""
    if await ProcessRepository(db).get_by_id(control_data.process_id) is None:
        raise NotFound(f"Process {control_data.process_id} not found")
    await _check_mapping(db, control_data.mapped_std_control_id)

    repo = AsIsControlRepository(db)
    control = await repo.create(**control_data.model_dump(mode="json"))
    logger.info(
        "Recorded as-is control %s for process %s (%s)",
        control.id,
        control.process_id,
        control.status,
    )
    return _control_to_response(control)


@router.get("/process/{process_id}", response_model=list[AsIsControlResponse])
async def list_as_is_controls(
    process_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[AsIsControlResponse]:
    """List as-is controls of a process with their mapped standard control."""
    controls = await AsIsControlRepository(db).list_for_process(process_id)
    return [_control_to_response(c) for c in controls]


@router.patch("/{control_id}", response_model=AsIsControlResponse)
async def update_as_is_control(
    control_id: str,
    update_data: AsIsControlUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AsIsControlResponse:
    """Update the coverage status, mapping or description of an as-is control."""
    repo = AsIsControlRepository(db)
    control = await repo.get_by_id(control_id)
    if control is None:
        raise NotFound(f"As-is control {control_id} not found")

    changes = update_data.model_dump(mode="json", exclude_unset=True)
    await _check_mapping(db, changes.get("mapped_std_control_id"))

    control = await repo.update(control, **changes)
    return _control_to_response(control)
