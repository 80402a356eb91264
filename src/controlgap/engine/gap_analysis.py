"""Coverage evaluation of applicable standard controls against as-is controls.

A standard control is covered when some as-is control of the process maps to
it with status ``exists``. How ``partial`` coverage counts is a policy
decision passed in by the caller; by default it is treated like
``not_exist`` and produces a ``missing`` gap.
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

from controlgap.models.controls import CoverageStatus, GapType, StandardControlSpec
from controlgap.models.profile import ProfileTag
from controlgap.models.rules import OrgFlag


class CoverageFinding(BaseModel):
    """Coverage result for a single applicable standard control."""

    std_control_id: str
    control_name: str
    control_type: str
    domain_tag: str
    covered: bool
    gap_type: GapType | None = Field(None, description="Set when the control is a gap")
    as_is_control_ids: list[str] = Field(
        default_factory=list, description="As-is controls mapped to this entry"
    )


class CoverageReport(BaseModel):
    """Coverage of the applicable catalog for one process."""

    profile: list[ProfileTag] = Field(default_factory=list)
    org_flags: list[OrgFlag] = Field(default_factory=list)
    applicable_count: int = 0
    covered_count: int = 0
    findings: list[CoverageFinding] = Field(default_factory=list)

    @property
    def gaps(self) -> list[CoverageFinding]:
        """Findings that are not covered."""
        return [f for f in self.findings if not f.covered]

    @property
    def coverage_percentage(self) -> float:
        if self.applicable_count == 0:
            return 100.0
        return round(self.covered_count * 100.0 / self.applicable_count, 1)


def _status_of(control: Any) -> str | None:
    status = getattr(control, "status", None)
    return status.value if hasattr(status, "value") else status


def assess_coverage(
    applicable: Iterable[StandardControlSpec],
    as_is_controls: Iterable[Any],
    partial_gap_type: GapType | None = GapType.MISSING,
    profile: Iterable[ProfileTag] = (),
    org_flags: Iterable[OrgFlag] = (),
) -> CoverageReport:
    """Evaluate which applicable controls are covered.

    Args:
        applicable: Catalog entries that apply to the process (ids required).
        as_is_controls: Objects exposing ``id``, ``mapped_std_control_id``
            and ``status``.
        partial_gap_type: Gap type for entries whose best coverage is
            ``partial``; None means partial coverage counts as covered.
        profile: Profile used to select ``applicable`` (reported only).
        org_flags: Flags used to select ``applicable`` (reported only).

    Returns:
        CoverageReport with one finding per applicable entry.
    """
    by_std_id: dict[str, list[Any]] = {}
    for control in as_is_controls:
        mapped = getattr(control, "mapped_std_control_id", None)
        if mapped:
            by_std_id.setdefault(mapped, []).append(control)

    findings: list[CoverageFinding] = []
    for entry in applicable:
        mapped = by_std_id.get(entry.id, [])
        statuses = {_status_of(c) for c in mapped}

        if CoverageStatus.EXISTS in statuses:
            gap_type = None
        elif CoverageStatus.PARTIAL in statuses:
            gap_type = partial_gap_type
        else:
            gap_type = GapType.MISSING

        findings.append(
            CoverageFinding(
                std_control_id=entry.id,
                control_name=entry.control_name,
                control_type=str(entry.control_type),
                domain_tag=str(entry.domain_tag),
                covered=gap_type is None,
                gap_type=gap_type,
                as_is_control_ids=[c.id for c in mapped if getattr(c, "id", None)],
            )
        )

    return CoverageReport(
        profile=list(profile),
        org_flags=sorted(set(org_flags)),
        applicable_count=len(findings),
        covered_count=sum(1 for f in findings if f.covered),
        findings=findings,
    )
