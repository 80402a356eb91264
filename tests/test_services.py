"""Tests for assessment submission, gap detection and to-be synthesis."""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from controlgap.config import (
    GapAnalysisSettings,
    OrganizationFlags,
    OrganizationInfo,
    OrganizationSettings,
    PartialCoveragePolicy,
    set_org_settings,
)
from controlgap.db import Base
from controlgap.db.database import engine_options
from controlgap.db.models import GapDB, ProcessDB, ToBeControlDB
from controlgap.db.repositories import (
    AsIsControlRepository,
    GapRepository,
    ProcessRepository,
    StandardControlRepository,
)
from controlgap.errors import NotFound, PreconditionFailed, StorageError, ValidationError
from controlgap.models import ControlType, DomainTag, OrgFlag, OrgFlagRule, StandardControlSpec
from controlgap.services import (
    detect_gaps,
    generate_to_be_controls,
    list_assessments,
    list_gaps,
    resolve_org_flags,
    submit_assessment,
    update_to_be_control,
)

from conftest import ABC_CATALOG, ERP_ANSWERS


# ── Helpers ──────────────────────────────────────────────────────────


async def _assess(session: AsyncSession, process: ProcessDB, answers: dict = ERP_ANSWERS):
    assessment = await submit_assessment(session, process.id, answers)
    await session.commit()
    return assessment


async def _cover(session: AsyncSession, process: ProcessDB, std_id: str, status="exists"):
    control = await AsIsControlRepository(session).create(
        process_id=process.id,
        control_name=f"Existing control for {std_id}",
        status=status,
        mapped_std_control_id=std_id,
    )
    await session.commit()
    return control


async def _count(session: AsyncSession, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar()


# ── Assessments ──────────────────────────────────────────────────────


class TestSubmitAssessment:
    """Tests for submit_assessment."""

    @pytest.mark.asyncio
    async def test_profile_is_derived_and_stored(self, test_session, test_process):
        assessment = await _assess(test_session, test_process)

        assert assessment.assessment_version == 1
        assert assessment.profile == ["erp-enabled", "centralized", "high-risk"]
        assert assessment.answers_dict == ERP_ANSWERS
        # Stored as a JSON list, never a delimited string
        assert assessment.maturity_profile == '["erp-enabled", "centralized", "high-risk"]'

    @pytest.mark.asyncio
    async def test_versions_increment_and_latest_first(self, test_session, test_process):
        await _assess(test_session, test_process)
        await _assess(test_session, test_process, {"automation": "automated"})

        assessments = await list_assessments(test_session, test_process.id)
        assert [a.assessment_version for a in assessments] == [2, 1]
        assert assessments[0].profile == ["automated", "decentralized"]

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_session):
        with pytest.raises(ValidationError) as exc_info:
            await submit_assessment(test_session, None, None)
        assert exc_info.value.fields == ["process_id", "answers"]

    @pytest.mark.asyncio
    async def test_unknown_process(self, test_session):
        with pytest.raises(NotFound):
            await submit_assessment(test_session, "no-such-process", ERP_ANSWERS)


# ── Gap detection ────────────────────────────────────────────────────


class TestDetectGaps:
    """Tests for detect_gaps."""

    @pytest.mark.asyncio
    async def test_single_missing_gap(self, test_session, abc_catalog, test_process):
        await _assess(test_session, test_process)
        await _cover(test_session, test_process, abc_catalog["A"])

        result = await detect_gaps(test_session, test_process.id, "r1")

        assert result.count == 1
        assert result.created == 1
        gap = result.gaps[0]
        assert gap.std_control_id == abc_catalog["C"]
        assert gap.gap_type == "missing"
        assert gap.risk_id == "r1"
        assert result.report.applicable_count == 2

    @pytest.mark.asyncio
    async def test_rerun_is_idempotent(self, test_session, abc_catalog, test_process):
        await _assess(test_session, test_process)
        await _cover(test_session, test_process, abc_catalog["A"])

        first = await detect_gaps(test_session, test_process.id, "r1")
        await test_session.commit()
        second = await detect_gaps(test_session, test_process.id, "r1")
        await test_session.commit()

        assert first.count == second.count == 1
        assert second.created == 0
        assert [g.id for g in first.gaps] == [g.id for g in second.gaps]
        assert await _count(test_session, GapDB) == 1

    @pytest.mark.asyncio
    async def test_gaps_are_per_risk(self, test_session, abc_catalog, test_process):
        await _assess(test_session, test_process)

        await detect_gaps(test_session, test_process.id, "r1")
        result = await detect_gaps(test_session, test_process.id, "r2")

        assert result.created == 2
        assert await _count(test_session, GapDB) == 4

    @pytest.mark.asyncio
    async def test_latest_assessment_is_authoritative(
        self, test_session, abc_catalog, test_process
    ):
        await _assess(test_session, test_process)
        await _assess(test_session, test_process, {"automation": "automated"})

        result = await detect_gaps(test_session, test_process.id, "r1")

        names = {f.control_name for f in result.report.gaps}
        assert names == {"A", "B"}

    @pytest.mark.asyncio
    async def test_without_assessment(self, test_session, abc_catalog, test_process):
        with pytest.raises(PreconditionFailed):
            await detect_gaps(test_session, test_process.id, "r1")
        assert await _count(test_session, GapDB) == 0

    @pytest.mark.asyncio
    async def test_unknown_process(self, test_session):
        with pytest.raises(NotFound):
            await detect_gaps(test_session, "no-such-process", "r1")

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_session):
        with pytest.raises(ValidationError) as exc_info:
            await detect_gaps(test_session, "", None)
        assert exc_info.value.fields == ["process_id", "risk_id"]

    @pytest.mark.asyncio
    async def test_partial_coverage_defaults_to_missing(
        self, test_session, abc_catalog, test_process
    ):
        await _assess(test_session, test_process)
        await _cover(test_session, test_process, abc_catalog["A"], status="partial")

        result = await detect_gaps(test_session, test_process.id, "r1")

        assert {g.gap_type for g in result.gaps} == {"missing"}
        assert result.count == 2

    @pytest.mark.asyncio
    async def test_partial_coverage_as_weak_operation(
        self, test_session, abc_catalog, test_process
    ):
        await _assess(test_session, test_process)
        await _cover(test_session, test_process, abc_catalog["A"], status="partial")
        set_org_settings(
            OrganizationSettings(
                gap_analysis=GapAnalysisSettings(
                    partial_coverage=PartialCoveragePolicy.WEAK_OPERATION
                )
            )
        )

        result = await detect_gaps(test_session, test_process.id, "r1")

        by_std = {g.std_control_id: g.gap_type for g in result.gaps}
        assert by_std == {abc_catalog["A"]: "weak_operation", abc_catalog["C"]: "missing"}

    @pytest.mark.asyncio
    async def test_partial_coverage_suppressed(self, test_session, abc_catalog, test_process):
        await _assess(test_session, test_process)
        await _cover(test_session, test_process, abc_catalog["A"], status="partial")
        settings = OrganizationSettings(
            gap_analysis=GapAnalysisSettings(partial_coverage=PartialCoveragePolicy.SUPPRESS)
        )

        result = await detect_gaps(test_session, test_process.id, "r1", settings=settings)

        assert [g.std_control_id for g in result.gaps] == [abc_catalog["C"]]

    @pytest.mark.asyncio
    async def test_changed_policy_refreshes_gap_type(
        self, test_session, abc_catalog, test_process
    ):
        await _assess(test_session, test_process)
        await _cover(test_session, test_process, abc_catalog["A"], status="partial")
        await detect_gaps(test_session, test_process.id, "r1")

        settings = OrganizationSettings(
            gap_analysis=GapAnalysisSettings(
                partial_coverage=PartialCoveragePolicy.WEAK_OPERATION
            )
        )
        result = await detect_gaps(test_session, test_process.id, "r1", settings=settings)

        assert result.created == 0
        assert await _count(test_session, GapDB) == 2
        gap = await GapRepository(test_session).get_for_control(
            test_process.id, "r1", abc_catalog["A"]
        )
        assert gap.gap_type == "weak_operation"


class TestOrgFlags:
    """Tests for organizational flag resolution."""

    async def _flagged_control(self, session: AsyncSession) -> str:
        control = await StandardControlRepository(session).create(
            StandardControlSpec(
                control_name="Regulatory Filing Review",
                control_objective="Review regulatory filings before submission",
                control_type=ControlType.PREVENTIVE,
                domain_tag=DomainTag.COMPLIANCE,
                rule=OrgFlagRule(flag=OrgFlag.REGULATED),
            )
        )
        await session.commit()
        return control.id

    def test_no_flags_configured(self):
        process = ProcessDB(process_name="P")
        assert resolve_org_flags(process, OrganizationSettings()) == set()

    def test_union_of_org_and_process_flags(self):
        process = ProcessDB(process_name="P", high_risk_impact=True)
        settings = OrganizationSettings(
            organization=OrganizationInfo(flags=OrganizationFlags(regulated=True))
        )
        assert resolve_org_flags(process, settings) == {OrgFlag.REGULATED, OrgFlag.HIGH_RISK}

    @pytest.mark.asyncio
    async def test_flag_rule_ignored_without_flag(self, test_session, test_process):
        await self._flagged_control(test_session)
        await _assess(test_session, test_process)

        result = await detect_gaps(test_session, test_process.id, "r1")

        assert result.count == 0

    @pytest.mark.asyncio
    async def test_flag_from_process(self, test_session, test_process):
        std_id = await self._flagged_control(test_session)
        await ProcessRepository(test_session).update(test_process, regulated=True)
        await _assess(test_session, test_process)

        result = await detect_gaps(test_session, test_process.id, "r1")

        assert [g.std_control_id for g in result.gaps] == [std_id]
        assert result.report.org_flags == [OrgFlag.REGULATED]

    @pytest.mark.asyncio
    async def test_flag_from_organization(self, test_session, test_process):
        std_id = await self._flagged_control(test_session)
        await _assess(test_session, test_process)
        set_org_settings(
            OrganizationSettings(
                organization=OrganizationInfo(flags=OrganizationFlags(regulated=True))
            )
        )

        result = await detect_gaps(test_session, test_process.id, "r1")

        assert [g.std_control_id for g in result.gaps] == [std_id]


# ── To-be synthesis ──────────────────────────────────────────────────


class TestGenerateToBeControls:
    """Tests for generate_to_be_controls."""

    @pytest.mark.asyncio
    async def test_one_control_per_gap_with_matching_tags(
        self, test_session, abc_catalog, test_process
    ):
        await _assess(test_session, test_process)
        await _cover(test_session, test_process, abc_catalog["A"])
        await detect_gaps(test_session, test_process.id, "r1")

        result = await generate_to_be_controls(test_session, test_process.id, "r1")

        assert result.count == 1
        to_be = result.controls[0]
        assert to_be.control_type == "corrective"
        assert to_be.domain_tag == "financial"
        assert to_be.owner_role == "Process Owner"
        assert to_be.implementation_status == "planned"
        assert to_be.implementation_guidance == "Implement C to address missing gap"

        gaps = await list_gaps(test_session, test_process.id, "r1")
        assert gaps[0].recommended_to_be_control_id == to_be.id
        assert gaps[0].to_be_control.control_type == gaps[0].std_control.control_type
        assert gaps[0].to_be_control.domain_tag == gaps[0].std_control.domain_tag

    @pytest.mark.asyncio
    async def test_rerun_skips_linked_gaps(self, test_session, abc_catalog, test_process):
        await _assess(test_session, test_process)
        await detect_gaps(test_session, test_process.id, "r1")

        first = await generate_to_be_controls(test_session, test_process.id, "r1")
        second = await generate_to_be_controls(test_session, test_process.id, "r1")

        assert first.count == 2
        assert second.count == 0
        assert second.skipped == 2
        assert await _count(test_session, ToBeControlDB) == 2

    @pytest.mark.asyncio
    async def test_no_gaps(self, test_session, test_process):
        result = await generate_to_be_controls(test_session, test_process.id, "r1")
        assert result.count == 0

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_session):
        with pytest.raises(ValidationError) as exc_info:
            await generate_to_be_controls(test_session, "p1", "")
        assert exc_info.value.fields == ["risk_id"]


class TestUpdateToBeControl:
    """Tests for the to-be control owner workflow."""

    @pytest.mark.asyncio
    async def test_status_update(self, test_session, abc_catalog, test_process):
        await _assess(test_session, test_process)
        await detect_gaps(test_session, test_process.id, "r1")
        result = await generate_to_be_controls(test_session, test_process.id, "r1")

        control = await update_to_be_control(
            test_session,
            result.controls[0].id,
            implementation_status="in_progress",
            owner_role="AP Supervisor",
        )

        assert control.implementation_status == "in_progress"
        assert control.owner_role == "AP Supervisor"

    @pytest.mark.asyncio
    async def test_tags_cannot_change(self, test_session):
        with pytest.raises(ValidationError) as exc_info:
            await update_to_be_control(test_session, "any", domain_tag="ops")
        assert exc_info.value.fields == ["domain_tag"]

    @pytest.mark.asyncio
    async def test_invalid_status(self, test_session):
        with pytest.raises(ValidationError):
            await update_to_be_control(test_session, "any", implementation_status="done")

    @pytest.mark.asyncio
    async def test_unknown_control(self, test_session):
        with pytest.raises(NotFound):
            await update_to_be_control(test_session, "missing", owner_role="x")


class TestStorageErrors:
    """Tests for storage failure reporting."""

    @pytest.mark.asyncio
    async def test_sqlalchemy_errors_become_storage_errors(self, test_engine, test_session):
        async with test_engine.begin() as conn:
            await conn.exec_driver_sql("DROP TABLE gaps")

        with pytest.raises(StorageError) as exc_info:
            await list_gaps(test_session, "p1")

        assert exc_info.value.kind == "storage_error"
        assert exc_info.value.message == "Storage operation failed"
        assert isinstance(exc_info.value.__cause__, OperationalError)


# ── Concurrent runs ──────────────────────────────────────────────────


@pytest_asyncio.fixture
async def shared_sessions(tmp_path):
    """Session factory over a file-backed database, one session per caller."""
    db_url = f"sqlite+aiosqlite:///{tmp_path / 'controlgap.db'}"
    engine = create_async_engine(db_url, **engine_options(db_url))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


async def _prepare(factory) -> str:
    """ERP-profiled process whose only existing control covers A; returns its id."""
    async with factory() as session:
        ids = {}
        for spec in ABC_CATALOG:
            control = await StandardControlRepository(session).create(spec)
            ids[spec.control_name] = control.id
        process = await ProcessRepository(session).create(process_name="Order to Cash")
        await session.commit()

        await _assess(session, process)
        await _cover(session, process, ids["A"])
        return process.id


async def _in_own_session(factory, operation, *args):
    """Run a service call the way one request does: own session, commit on success."""
    async with factory() as session:
        result = await operation(session, *args)
        await session.commit()
        return result


class TestConcurrentRuns:
    """Two requests for the same process/risk pair running at the same time."""

    @pytest.mark.asyncio
    async def test_concurrent_detection_records_each_gap_once(self, shared_sessions):
        process_id = await _prepare(shared_sessions)

        results = await asyncio.gather(
            _in_own_session(shared_sessions, detect_gaps, process_id, "r1"),
            _in_own_session(shared_sessions, detect_gaps, process_id, "r1"),
        )

        assert [r.count for r in results] == [1, 1]
        assert sorted(r.created for r in results) == [0, 1]
        assert results[0].gaps[0].id == results[1].gaps[0].id
        async with shared_sessions() as session:
            assert await _count(session, GapDB) == 1

    @pytest.mark.asyncio
    async def test_concurrent_synthesis_links_one_control(self, shared_sessions):
        process_id = await _prepare(shared_sessions)
        await _in_own_session(shared_sessions, detect_gaps, process_id, "r1")

        results = await asyncio.gather(
            _in_own_session(shared_sessions, generate_to_be_controls, process_id, "r1"),
            _in_own_session(shared_sessions, generate_to_be_controls, process_id, "r1"),
        )

        assert sorted(r.count for r in results) == [0, 1]
        assert sum(r.skipped for r in results) == 1
        winner = next(r for r in results if r.count == 1).controls[0]
        async with shared_sessions() as session:
            assert await _count(session, ToBeControlDB) == 1
            gaps = await list_gaps(session, process_id, "r1")
            assert gaps[0].recommended_to_be_control_id == winner.id
