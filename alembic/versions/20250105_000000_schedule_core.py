"""scheduling core: orgs, departments, patterns, staffing minimums, batches, slots, shifts

Revision ID: 20250105_000000
Revises:
Create Date: 2025-01-05 00:00:00.000000

shifts.natural_key is the publish upsert target, one per slot:
org|department|schedule_type|date|staffing_minimum|unit|role|pattern|position|oncall
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20250105_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_organizations_code", "organizations", ["code"], unique=True)

    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("org_code", sa.String(length=32), sa.ForeignKey("organizations.code"), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_departments_org_code", "departments", ["org_code"])

    op.create_table(
        "shift_patterns",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("org_code", sa.String(length=32), sa.ForeignKey("organizations.code"), nullable=False),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("departments.id", ondelete="CASCADE"), nullable=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("start_local", sa.Time(), nullable=True),
        sa.Column("end_local", sa.Time(), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=True),
        sa.Column("is_on_call", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_shift_patterns_org_code", "shift_patterns", ["org_code"])

    op.create_table(
        "staffing_minimums",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("org_code", sa.String(length=32), sa.ForeignKey("organizations.code"), nullable=False),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("departments.id", ondelete="CASCADE"), nullable=False),
        sa.Column("unit_id", sa.String(length=64), nullable=True),
        sa.Column("role", sa.String(length=64), nullable=False),
        sa.Column("dow", sa.Integer(), nullable=False),
        sa.Column("min_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "shift_pattern_id",
            sa.Integer(),
            sa.ForeignKey("shift_patterns.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("schedule_type", sa.String(length=16), nullable=False, server_default="regular"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint("min_count >= 0", name="ck_staffing_minimums_min_count"),
        sa.CheckConstraint("dow >= 0 AND dow <= 6", name="ck_staffing_minimums_dow"),
    )
    op.create_index("ix_staffing_minimums_org_code", "staffing_minimums", ["org_code"])
    op.create_index("ix_staffing_minimums_department_id", "staffing_minimums", ["department_id"])

    op.create_table(
        "schedule_batches",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("org_code", sa.String(length=32), sa.ForeignKey("organizations.code"), nullable=False),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("departments.id", ondelete="CASCADE"), nullable=False),
        sa.Column("schedule_type", sa.String(length=16), nullable=False),
        sa.Column("month_key", sa.String(length=7), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="draft"),
        sa.Column("created_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("published_by", sa.String(length=64), nullable=True),
        sa.Column("locked_until", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("department_id", "schedule_type", "month_key", name="uq_schedule_batch_month"),
    )
    op.create_index("ix_schedule_batches_org_code", "schedule_batches", ["org_code"])

    op.create_table(
        "schedule_runs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("batch_id", sa.Integer(), sa.ForeignKey("schedule_batches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("org_code", sa.String(length=32), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("schedule_type", sa.String(length=16), nullable=False),
        sa.Column("month_key", sa.String(length=7), nullable=False),
        sa.Column("generated_by", sa.String(length=64), nullable=True),
        sa.Column("slots_created", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_schedule_runs_batch_id", "schedule_runs", ["batch_id"])

    op.create_table(
        "schedule_slots",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("batch_id", sa.Integer(), sa.ForeignKey("schedule_batches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("org_code", sa.String(length=32), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("schedule_type", sa.String(length=16), nullable=False),
        sa.Column("slot_date", sa.Date(), nullable=False),
        sa.Column("template_id", sa.Integer(), sa.ForeignKey("shift_patterns.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "staffing_minimum_id",
            sa.Integer(),
            sa.ForeignKey("staffing_minimums.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("unit_id", sa.String(length=64), nullable=True),
        sa.Column("role", sa.String(length=64), nullable=False),
        sa.Column("position_no", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=True),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=True),
        sa.Column("assigned_staff_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_schedule_slots_batch_id", "schedule_slots", ["batch_id"])

    op.create_table(
        "shifts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("org_code", sa.String(length=32), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("shift_date", sa.Date(), nullable=False),
        sa.Column("start_local", sa.String(length=8), nullable=True),
        sa.Column("end_local", sa.String(length=8), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=True),
        sa.Column("start_time", sa.DateTime(), nullable=True),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("role", sa.String(length=64), nullable=True),
        sa.Column("unit", sa.String(length=64), nullable=True),
        sa.Column("shift_type", sa.String(length=120), nullable=True),
        sa.Column("shift_pattern_id", sa.Integer(), nullable=True),
        sa.Column("position_no", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_on_call", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("staff_id", sa.String(length=64), nullable=True),
        sa.Column(
            "schedule_slot_id",
            sa.Integer(),
            sa.ForeignKey("schedule_slots.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("natural_key", sa.String(length=255), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("natural_key", name="uq_shifts_natural_key"),
    )
    op.create_index("ix_shifts_org_code", "shifts", ["org_code"])
    op.create_index("ix_shifts_schedule_slot_id", "shifts", ["schedule_slot_id"])


def downgrade() -> None:
    op.drop_index("ix_shifts_schedule_slot_id", table_name="shifts")
    op.drop_index("ix_shifts_org_code", table_name="shifts")
    op.drop_table("shifts")
    op.drop_index("ix_schedule_slots_batch_id", table_name="schedule_slots")
    op.drop_table("schedule_slots")
    op.drop_index("ix_schedule_runs_batch_id", table_name="schedule_runs")
    op.drop_table("schedule_runs")
    op.drop_index("ix_schedule_batches_org_code", table_name="schedule_batches")
    op.drop_table("schedule_batches")
    op.drop_index("ix_staffing_minimums_department_id", table_name="staffing_minimums")
    op.drop_index("ix_staffing_minimums_org_code", table_name="staffing_minimums")
    op.drop_table("staffing_minimums")
    op.drop_index("ix_shift_patterns_org_code", table_name="shift_patterns")
    op.drop_table("shift_patterns")
    op.drop_index("ix_departments_org_code", table_name="departments")
    op.drop_table("departments")
    op.drop_index("ix_organizations_code", table_name="organizations")
    op.drop_table("organizations")
