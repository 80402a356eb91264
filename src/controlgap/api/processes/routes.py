"""Processes API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.api.processes.schemas import (
    ProcessCreate,
    ProcessDetailResponse,
    ProcessResponse,
    ProcessUpdate,
)
from controlgap.db import ProcessDB, get_db
from controlgap.db.repositories import ProcessRepository
from controlgap.errors import NotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/processes", tags=["Processes"])


def _process_to_response(process: ProcessDB) -> ProcessResponse:
    """Convert a Process model to ProcessResponse."""
    return ProcessResponse(
        id=process.id,
        process_name=process.process_name,
        process_scope=process.process_scope,
        process_owner=process.process_owner,
        systems_in_scope=process.systems,
        regulated=bool(process.regulated),
        inventory_heavy=bool(process.inventory_heavy),
        data_intensive=bool(process.data_intensive),
        high_risk_impact=bool(process.high_risk_impact),
        created_at=process.created_at,
        updated_at=process.updated_at,
    )


@router.get("/", response_model=list[ProcessResponse])
async def list_processes(
    db: Annotated[AsyncSession, Depends(get_db)],
    skip: int = 0,
    limit: int = 100,
) -> list[ProcessResponse]:
    """List processes ordered by name."""
    limit = max(1, min(limit, 500))
    processes = await ProcessRepository(db).list_all(skip=max(0, skip), limit=limit)
    return [_process_to_response(p) for p in processes]


@router.post("/", response_model=ProcessResponse, status_code=status.HTTP_201_CREATED)
async def create_process(
    process_data: ProcessCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProcessResponse:
    """Create a new process."""
    process = await ProcessRepository(db).create(**process_data.model_dump())
    logger.info("Created process %s (%s)", process.process_name, process.id)
    return _process_to_response(process)


@router.get("/{process_id}", response_model=ProcessDetailResponse)
async def get_process(
    process_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProcessDetailResponse:
    """Get a process with counts of its assessments, controls and gaps."""
    process = await ProcessRepository(db).get_by_id(process_id, load_relations=True)
    if process is None:
        raise NotFound(f"Process {process_id} not found")

    return ProcessDetailResponse(
        **_process_to_response(process).model_dump(),
        assessment_count=len(process.maturity_assessments),
        as_is_control_count=len(process.as_is_controls),
        gap_count=len(process.gaps),
        to_be_control_count=len(process.to_be_controls),
    )


@router.patch("/{process_id}", response_model=ProcessResponse)
async def update_process(
    process_id: str,
    update_data: ProcessUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProcessResponse:
    """Update a process's descriptive fields or organizational flags."""
    repo = ProcessRepository(db)
    process = await repo.get_by_id(process_id)
    if process is None:
        raise NotFound(f"Process {process_id} not found")

    process = await repo.update(process, **update_data.model_dump(exclude_unset=True))
    await db.refresh(process)
    return _process_to_response(process)
