"""Initial schema - baseline migration matching existing models.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Processes
    op.create_table(
        "processes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("process_name", sa.String(255), nullable=False, index=True),
        sa.Column("process_scope", sa.Text),
        sa.Column("process_owner", sa.String(255)),
        sa.Column("systems_in_scope", sa.Text),
        sa.Column("regulated", sa.Boolean, default=False),
        sa.Column("inventory_heavy", sa.Boolean, default=False),
        sa.Column("data_intensive", sa.Boolean, default=False),
        sa.Column("high_risk_impact", sa.Boolean, default=False),
        sa.Column("created_at", sa.DateTime, default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, default=sa.func.now()),
    )

    # Standard control catalog
    op.create_table(
        "standard_controls",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("control_name", sa.String(255), nullable=False, index=True),
        sa.Column("control_objective", sa.Text, nullable=False),
        sa.Column("control_type", sa.String(20), nullable=False),
        sa.Column("domain_tag", sa.String(20), nullable=False, index=True),
        sa.Column("typical_frequency", sa.String(100)),
        sa.Column("typical_evidence", sa.Text),
        sa.Column("applicability_rules", sa.Text),
        sa.Column("created_at", sa.DateTime, default=sa.func.now()),
    )

    # Maturity assessments
    op.create_table(
        "maturity_assessments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "process_id",
            sa.String(36),
            sa.ForeignKey("processes.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("assessment_version", sa.Integer, default=1),
        sa.Column("assessment_date", sa.DateTime, default=sa.func.now(), index=True),
        sa.Column("answers", sa.Text, nullable=False),
        sa.Column("maturity_profile", sa.Text, nullable=False),
    )

    # As-is controls
    op.create_table(
        "as_is_controls",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "process_id",
            sa.String(36),
            sa.ForeignKey("processes.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("control_name", sa.String(255), nullable=False),
        sa.Column("control_objective", sa.Text),
        sa.Column("control_type", sa.String(20)),
        sa.Column("domain_tag", sa.String(20)),
        sa.Column("frequency", sa.String(100)),
        sa.Column("evidence_source", sa.Text),
        sa.Column("owner", sa.String(255)),
        sa.Column("status", sa.String(20), default="exists"),
        sa.Column(
            "mapped_std_control_id",
            sa.String(36),
            sa.ForeignKey("standard_controls.id", ondelete="SET NULL"),
            index=True,
        ),
        sa.Column("created_at", sa.DateTime, default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, default=sa.func.now()),
    )

    # To-be controls
    op.create_table(
        "to_be_controls",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "process_id",
            sa.String(36),
            sa.ForeignKey("processes.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("control_objective", sa.Text, nullable=False),
        sa.Column("owner_role", sa.String(255), default="Process Owner"),
        sa.Column("frequency", sa.String(100)),
        sa.Column("evidence_type", sa.Text),
        sa.Column("control_type", sa.String(20), nullable=False),
        sa.Column("domain_tag", sa.String(20), nullable=False),
        sa.Column("implementation_guidance", sa.Text),
        sa.Column("implementation_status", sa.String(20), default="planned"),
        sa.Column("created_at", sa.DateTime, default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, default=sa.func.now()),
    )

    # Gaps
    op.create_table(
        "gaps",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "process_id",
            sa.String(36),
            sa.ForeignKey("processes.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("risk_id", sa.String(100), nullable=False, index=True),
        sa.Column(
            "std_control_id",
            sa.String(36),
            sa.ForeignKey("standard_controls.id", ondelete="SET NULL"),
            index=True,
        ),
        sa.Column("gap_type", sa.String(20), default="missing"),
        sa.Column(
            "recommended_to_be_control_id",
            sa.String(36),
            sa.ForeignKey("to_be_controls.id", ondelete="SET NULL"),
        ),
        sa.Column("created_at", sa.DateTime, default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, default=sa.func.now()),
        sa.UniqueConstraint(
            "process_id", "risk_id", "std_control_id", name="uq_gap_process_risk_std"
        ),
    )

    # Per-risk maturity selection
    op.create_table(
        "maturity_selections",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("risk_id", sa.String(100), unique=True, nullable=False, index=True),
        sa.Column("selected_level", sa.Float, nullable=False),
        sa.Column("target_level", sa.Float, nullable=False),
        sa.Column("current_maturity_score", sa.Float),
        sa.Column("target_maturity_score", sa.Float),
        sa.Column("created_at", sa.DateTime, default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, default=sa.func.now()),
    )

    # Per-risk gap analysis snapshot
    op.create_table(
        "gap_analysis_snapshots",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("risk_id", sa.String(100), unique=True, nullable=False, index=True),
        sa.Column("current_level", sa.Float, nullable=False),
        sa.Column("target_level", sa.Float, nullable=False),
        sa.Column("current_score", sa.Float, nullable=False),
        sa.Column("target_score", sa.Float, nullable=False),
        sa.Column("missing_controls", sa.Text, default="[]"),
        sa.Column("suggested_controls", sa.Text, default="[]"),
        sa.Column("gap_count", sa.Integer, default=0),
        sa.Column("effort_estimate", sa.String(50), default="medium"),
        sa.Column("timeline_estimate", sa.String(50), default="6-12 months"),
        sa.Column("defaulted_fields", sa.Text, default="[]"),
        sa.Column("created_at", sa.DateTime, default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, default=sa.func.now()),
    )

    # Concrete per-risk controls
    op.create_table(
        "section2_controls",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("risk_id", sa.String(100), nullable=False, index=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, default=""),
        sa.Column("control_type", sa.String(20), nullable=False),
        sa.Column("objectives", sa.Text, default="[]"),
        sa.Column("owner", sa.String(255), default=""),
        sa.Column("reviewer", sa.String(255)),
        sa.Column("frequency", sa.String(100), default="monthly"),
        sa.Column("evidence", sa.Text, default=""),
        sa.Column("evidence_location", sa.String(500)),
        sa.Column("status", sa.String(20), default="existing"),
        sa.Column("maturity_level", sa.Integer, default=1),
        sa.Column("source", sa.String(50), default="existing_documented"),
        sa.Column("template_id", sa.String(100)),
        sa.Column("implementation_phase", sa.String(100)),
        sa.Column("implementation_effort", sa.String(50)),
        sa.Column("implementation_timeline", sa.String(100)),
        sa.Column("created_at", sa.DateTime, default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime, default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("section2_controls")
    op.drop_table("gap_analysis_snapshots")
    op.drop_table("maturity_selections")
    op.drop_table("gaps")
    op.drop_table("to_be_controls")
    op.drop_table("as_is_controls")
    op.drop_table("maturity_assessments")
    op.drop_table("standard_controls")
    op.drop_table("processes")
