"""To-be control synthesis for the gaps of a process/risk pair."""

import logging

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.db.models import ToBeControlDB
from controlgap.db.repositories import GapRepository, ToBeControlRepository
from controlgap.engine.synthesis import build_to_be_fields
from controlgap.errors import NotFound, ValidationError, require_fields
from controlgap.models.controls import ImplementationStatus
from controlgap.services.base import storage_errors

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {
    "control_objective",
    "owner_role",
    "frequency",
    "evidence_type",
    "implementation_guidance",
    "implementation_status",
}


class SynthesisResult(BaseModel):
    """Outcome of one synthesis run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    controls: list[ToBeControlDB] = Field(default_factory=list)
    skipped: int = Field(0, description="Gaps already carrying a recommendation")

    @property
    def count(self) -> int:
        return len(self.controls)


@storage_errors
async def generate_to_be_controls(
    session: AsyncSession,
    process_id: str | None,
    risk_id: str | None,
) -> SynthesisResult:
    """Create one recommended control per unlinked gap and link it back.

    Gaps without a resolvable standard control are ignored. Gaps that already
    point at a recommendation are skipped, so repeated runs add nothing. A gap
    is claimed with a conditional update; when a concurrent run links it
    first, the recommendation created here is discarded and the gap counts as
    skipped.
    """
    require_fields(process_id=process_id, risk_id=risk_id)

    gap_repo = GapRepository(session)
    to_be_repo = ToBeControlRepository(session)

    gaps = await gap_repo.list_for_process(process_id, risk_id)

    controls: list[ToBeControlDB] = []
    skipped = 0
    for gap in gaps:
        if gap.std_control is None:
            continue
        if gap.recommended_to_be_control_id:
            skipped += 1
            continue

        fields = build_to_be_fields(gap.std_control, gap.gap_type)
        to_be = await to_be_repo.create(process_id=process_id, **fields)
        if not await gap_repo.claim_recommendation(gap, to_be.id):
            await to_be_repo.delete(to_be)
            skipped += 1
            continue
        controls.append(to_be)

    logger.info(
        "Synthesized %d to-be controls for process %s / risk %s (%d already linked)",
        len(controls),
        process_id,
        risk_id,
        skipped,
    )
    return SynthesisResult(controls=controls, skipped=skipped)


@storage_errors
async def list_to_be_controls(session: AsyncSession, process_id: str) -> list[ToBeControlDB]:
    """List to-be controls of a process."""
    return await ToBeControlRepository(session).list_for_process(process_id)


@storage_errors
async def update_to_be_control(
    session: AsyncSession,
    control_id: str,
    **changes,
) -> ToBeControlDB:
    """Apply owner-workflow changes to a to-be control.

    Control and domain tags are not updatable: they must keep matching the
    standard control of the gap that produced the recommendation.
    """
    unknown = sorted(set(changes) - _UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(unknown, f"Fields cannot be updated: {', '.join(unknown)}")
    if "implementation_status" in changes:
        status = changes["implementation_status"]
        if status not in ImplementationStatus._value2member_map_:
            raise ValidationError(
                ["implementation_status"], f"Invalid implementation status: {status}"
            )

    repo = ToBeControlRepository(session)
    control = await repo.get_by_id(control_id)
    if control is None:
        raise NotFound(f"To-be control {control_id} not found")
    return await repo.update(control, **changes)
