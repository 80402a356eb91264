"""To-be controls API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.api.rate_limit import limiter
from controlgap.api.to_be_controls.schemas import (
    GenerateRequest,
    GenerateResponse,
    ToBeControlResponse,
    ToBeControlUpdate,
)
from controlgap.db import get_db
from controlgap.services import (
    generate_to_be_controls,
    list_to_be_controls,
    update_to_be_control,
)

router = APIRouter(prefix="/to-be-controls", tags=["To-Be Controls"])


@router.post("/generate", response_model=GenerateResponse)
@limiter.limit("30/minute")
async def generate_controls(
    request: Request,
    generate_data: GenerateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GenerateResponse:
    """Create a recommended control for every gap that has none yet."""
    result = await generate_to_be_controls(db, generate_data.process_id, generate_data.risk_id)
    return GenerateResponse(
        controls=[ToBeControlResponse.model_validate(c) for c in result.controls],
        count=result.count,
        skipped=result.skipped,
    )


@router.get("/process/{process_id}", response_model=list[ToBeControlResponse])
async def list_process_controls(
    process_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ToBeControlResponse]:
    """List to-be controls of a process."""
    controls = await list_to_be_controls(db, process_id)
    return [ToBeControlResponse.model_validate(c) for c in controls]


@router.patch("/{control_id}", response_model=ToBeControlResponse)
async def update_control(
    control_id: str,
    update_data: ToBeControlUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ToBeControlResponse:
    """Update owner role, guidance or implementation status of a to-be control."""
    changes = update_data.model_dump(mode="json", exclude_unset=True)
    control = await update_to_be_control(db, control_id, **changes)
    return ToBeControlResponse.model_validate(control)
