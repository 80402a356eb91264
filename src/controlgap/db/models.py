"""SQLAlchemy models for ControlGap database."""

import json
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from controlgap.models.controls import StandardControlSpec
from controlgap.models.profile import ProfileTag, parse_profile
from controlgap.models.rules import OrgFlag, parse_rule


def generate_uuid() -> str:
    """Generate a UUID string."""
    return str(uuid.uuid4())


def _loads(value: str | None, default: Any) -> Any:
    """Decode a JSON text column, falling back to ``default`` when empty."""
    if not value:
        return default
    return json.loads(value)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ProcessDB(Base):
    """Business process under review."""

    __tablename__ = "processes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    process_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    process_scope: Mapped[str | None] = mapped_column(Text)
    process_owner: Mapped[str | None] = mapped_column(String(255))
    systems_in_scope: Mapped[str | None] = mapped_column(Text)  # JSON array of system names

    # Organizational context flags used by applicability rules
    regulated: Mapped[bool] = mapped_column(Boolean, default=False)
    inventory_heavy: Mapped[bool] = mapped_column(Boolean, default=False)
    data_intensive: Mapped[bool] = mapped_column(Boolean, default=False)
    high_risk_impact: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    maturity_assessments: Mapped[list["MaturityAssessmentDB"]] = relationship(
        "MaturityAssessmentDB", back_populates="process", cascade="all, delete-orphan"
    )
    as_is_controls: Mapped[list["AsIsControlDB"]] = relationship(
        "AsIsControlDB", back_populates="process", cascade="all, delete-orphan"
    )
    gaps: Mapped[list["GapDB"]] = relationship(
        "GapDB", back_populates="process", cascade="all, delete-orphan"
    )
    to_be_controls: Mapped[list["ToBeControlDB"]] = relationship(
        "ToBeControlDB", back_populates="process", cascade="all, delete-orphan"
    )

    @property
    def systems(self) -> list[str]:
        return _loads(self.systems_in_scope, [])

    def asserted_flags(self) -> set[OrgFlag]:
        """Organizational flags switched on for this process."""
        flags: set[OrgFlag] = set()
        if self.regulated:
            flags.add(OrgFlag.REGULATED)
        if self.inventory_heavy:
            flags.add(OrgFlag.INVENTORY_HEAVY)
        if self.data_intensive:
            flags.add(OrgFlag.DATA_INTENSIVE)
        if self.high_risk_impact:
            flags.add(OrgFlag.HIGH_RISK)
        return flags


class MaturityAssessmentDB(Base):
    """Maturity questionnaire submission for a process."""

    __tablename__ = "maturity_assessments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    process_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("processes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assessment_version: Mapped[int] = mapped_column(Integer, default=1)
    assessment_date: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )
    answers: Mapped[str] = mapped_column(Text, nullable=False)  # JSON object
    maturity_profile: Mapped[str] = mapped_column(Text, nullable=False)  # JSON array of tags

    # Relationships
    process: Mapped["ProcessDB"] = relationship("ProcessDB", back_populates="maturity_assessments")

    @property
    def answers_dict(self) -> dict[str, Any]:
        return _loads(self.answers, {})

    @property
    def profile(self) -> list[ProfileTag]:
        return parse_profile(_loads(self.maturity_profile, []))


class StandardControlDB(Base):
    """Catalog entry of the standard control library."""

    __tablename__ = "standard_controls"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    control_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    control_objective: Mapped[str] = mapped_column(Text, nullable=False)
    control_type: Mapped[str] = mapped_column(String(20), nullable=False)
    domain_tag: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    typical_frequency: Mapped[str | None] = mapped_column(String(100))
    typical_evidence: Mapped[str | None] = mapped_column(Text)
    applicability_rules: Mapped[str | None] = mapped_column(Text)  # JSON rule
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def to_spec(self) -> StandardControlSpec:
        """Convert to the engine model, parsing the stored rule."""
        return StandardControlSpec(
            id=self.id,
            control_name=self.control_name,
            control_objective=self.control_objective,
            control_type=self.control_type,
            domain_tag=self.domain_tag,
            typical_frequency=self.typical_frequency,
            typical_evidence=self.typical_evidence,
            rule=parse_rule(self.applicability_rules),
        )


class AsIsControlDB(Base):
    """Control a process currently has."""

    __tablename__ = "as_is_controls"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    process_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("processes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    control_name: Mapped[str] = mapped_column(String(255), nullable=False)
    control_objective: Mapped[str | None] = mapped_column(Text)
    control_type: Mapped[str | None] = mapped_column(String(20))
    domain_tag: Mapped[str | None] = mapped_column(String(20))
    frequency: Mapped[str | None] = mapped_column(String(100))
    evidence_source: Mapped[str | None] = mapped_column(Text)
    owner: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(20), default="exists")  # exists, partial, not_exist
    mapped_std_control_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("standard_controls.id", ondelete="SET NULL"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    process: Mapped["ProcessDB"] = relationship("ProcessDB", back_populates="as_is_controls")
    mapped_std_control: Mapped[Optional["StandardControlDB"]] = relationship("StandardControlDB")


class ToBeControlDB(Base):
    """Recommended future-state control."""

    __tablename__ = "to_be_controls"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    process_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("processes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    control_objective: Mapped[str] = mapped_column(Text, nullable=False)
    owner_role: Mapped[str] = mapped_column(String(255), default="Process Owner")
    frequency: Mapped[str | None] = mapped_column(String(100))
    evidence_type: Mapped[str | None] = mapped_column(Text)
    control_type: Mapped[str] = mapped_column(String(20), nullable=False)
    domain_tag: Mapped[str] = mapped_column(String(20), nullable=False)
    implementation_guidance: Mapped[str | None] = mapped_column(Text)
    implementation_status: Mapped[str] = mapped_column(
        String(20), default="planned"
    )  # planned, in_progress, live
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    process: Mapped["ProcessDB"] = relationship("ProcessDB", back_populates="to_be_controls")


class GapDB(Base):
    """Applicable standard control not adequately covered for a process/risk pair."""

    __tablename__ = "gaps"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    process_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("processes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    risk_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    std_control_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("standard_controls.id", ondelete="SET NULL"), index=True
    )
    gap_type: Mapped[str] = mapped_column(String(20), default="missing")
    recommended_to_be_control_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("to_be_controls.id", ondelete="SET NULL")
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("process_id", "risk_id", "std_control_id", name="uq_gap_process_risk_std"),
    )

    # Relationships
    process: Mapped["ProcessDB"] = relationship("ProcessDB", back_populates="gaps")
    std_control: Mapped[Optional["StandardControlDB"]] = relationship("StandardControlDB")
    to_be_control: Mapped[Optional["ToBeControlDB"]] = relationship("ToBeControlDB")


class MaturitySelection(Base):
    """Chosen current/target maturity level for a risk."""

    __tablename__ = "maturity_selections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    risk_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    selected_level: Mapped[float] = mapped_column(Float, nullable=False)
    target_level: Mapped[float] = mapped_column(Float, nullable=False)
    current_maturity_score: Mapped[float | None] = mapped_column(Float)
    target_maturity_score: Mapped[float | None] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class GapAnalysisSnapshot(Base):
    """Persisted summary of the latest gap-analysis run for a risk."""

    __tablename__ = "gap_analysis_snapshots"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    risk_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    current_level: Mapped[float] = mapped_column(Float, nullable=False)
    target_level: Mapped[float] = mapped_column(Float, nullable=False)
    current_score: Mapped[float] = mapped_column(Float, nullable=False)
    target_score: Mapped[float] = mapped_column(Float, nullable=False)
    missing_controls: Mapped[str] = mapped_column(Text, default="[]")  # JSON array
    suggested_controls: Mapped[str] = mapped_column(Text, default="[]")  # JSON array
    gap_count: Mapped[int] = mapped_column(Integer, default=0)
    effort_estimate: Mapped[str] = mapped_column(String(50), default="medium")
    timeline_estimate: Mapped[str] = mapped_column(String(50), default="6-12 months")
    defaulted_fields: Mapped[str] = mapped_column(Text, default="[]")  # JSON array of names
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class Section2Control(Base):
    """Concrete control bound to a risk."""

    __tablename__ = "section2_controls"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    risk_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    control_type: Mapped[str] = mapped_column(String(20), nullable=False)
    objectives: Mapped[str] = mapped_column(Text, default="[]")  # JSON array
    owner: Mapped[str] = mapped_column(String(255), default="")
    reviewer: Mapped[str | None] = mapped_column(String(255))
    frequency: Mapped[str] = mapped_column(String(100), default="monthly")
    evidence: Mapped[str] = mapped_column(Text, default="")
    evidence_location: Mapped[str | None] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(String(20), default="existing")
    maturity_level: Mapped[int] = mapped_column(Integer, default=1)
    source: Mapped[str] = mapped_column(String(50), default="existing_documented")
    template_id: Mapped[str | None] = mapped_column(String(100))
    implementation_phase: Mapped[str | None] = mapped_column(String(100))
    implementation_effort: Mapped[str | None] = mapped_column(String(50))
    implementation_timeline: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
