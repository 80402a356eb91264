"""Gap detection for a process/risk pair."""

import logging

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.config import OrganizationSettings, get_org_settings
from controlgap.db.models import GapDB, ProcessDB
from controlgap.db.repositories import (
    AsIsControlRepository,
    GapRepository,
    MaturityAssessmentRepository,
    ProcessRepository,
    StandardControlRepository,
)
from controlgap.engine.applicability import filter_applicable
from controlgap.engine.gap_analysis import CoverageReport, assess_coverage
from controlgap.errors import NotFound, PreconditionFailed, require_fields
from controlgap.models.rules import OrgFlag
from controlgap.services.base import storage_errors

logger = logging.getLogger(__name__)


class GapDetectionResult(BaseModel):
    """Outcome of one gap detection run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    gaps: list[GapDB] = Field(default_factory=list)
    created: int = 0
    report: CoverageReport

    @property
    def count(self) -> int:
        return len(self.gaps)


def resolve_org_flags(
    process: ProcessDB | None,
    settings: OrganizationSettings | None = None,
) -> set[OrgFlag]:
    """Effective organizational flags: organization-wide flags plus the process's own."""
    settings = settings or get_org_settings()
    flags = settings.organization.flags.asserted()
    if process is not None:
        flags |= process.asserted_flags()
    return flags


async def evaluate_coverage(
    session: AsyncSession,
    process_id: str,
    settings: OrganizationSettings | None = None,
) -> CoverageReport:
    """Compute the coverage report of a process without writing anything."""
    settings = settings or get_org_settings()

    process = await ProcessRepository(session).get_by_id(process_id)
    if process is None:
        raise NotFound(f"Process {process_id} not found")

    assessment = await MaturityAssessmentRepository(session).get_latest(process_id)
    if assessment is None:
        raise PreconditionFailed(
            f"No maturity assessment found for process {process_id}; "
            "submit one before running gap analysis"
        )

    profile = assessment.profile
    org_flags = resolve_org_flags(process, settings)

    catalog = await StandardControlRepository(session).list_specs()
    applicable = filter_applicable(catalog, profile, org_flags)
    as_is = await AsIsControlRepository(session).list_for_process(process_id)

    return assess_coverage(
        applicable,
        as_is,
        partial_gap_type=settings.gap_analysis.partial_gap_type,
        profile=profile,
        org_flags=org_flags,
    )


@storage_errors
async def detect_gaps(
    session: AsyncSession,
    process_id: str | None,
    risk_id: str | None,
    settings: OrganizationSettings | None = None,
) -> GapDetectionResult:
    """Record a gap for every applicable standard control the process lacks.

    Gaps are upserted on (process, risk, standard control), so running the
    detection again, or concurrently, with unchanged coverage returns the same
    gap set without creating duplicates.

    Raises:
        ValidationError: process_id or risk_id missing.
        NotFound: the process does not exist.
        PreconditionFailed: the process has no maturity assessment yet.
    """
    require_fields(process_id=process_id, risk_id=risk_id)

    report = await evaluate_coverage(session, process_id, settings)

    gap_repo = GapRepository(session)
    gaps: list[GapDB] = []
    created = 0
    for finding in report.gaps:
        gap, is_new = await gap_repo.upsert(
            process_id=process_id,
            risk_id=risk_id,
            std_control_id=finding.std_control_id,
            gap_type=finding.gap_type.value,
        )
        gaps.append(gap)
        created += int(is_new)

    logger.info(
        "Gap analysis for process %s / risk %s: %d applicable, %d covered, %d gaps (%d new)",
        process_id,
        risk_id,
        report.applicable_count,
        report.covered_count,
        len(gaps),
        created,
    )
    return GapDetectionResult(gaps=gaps, created=created, report=report)


@storage_errors
async def list_gaps(
    session: AsyncSession,
    process_id: str,
    risk_id: str | None = None,
) -> list[GapDB]:
    """List gaps of a process with their standard and to-be controls."""
    return await GapRepository(session).list_for_process(process_id, risk_id)
