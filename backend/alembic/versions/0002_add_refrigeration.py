"""Add refrigeration units and unit temperature readings.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18
"""

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


def upgrade() -> None:
    op.create_table(
        "refrigeration_units",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("property_id", sa.String(36), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("type", sa.String(10), server_default="FRIDGE"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("property_id", "name", name="uq_refrigeration_unit_property_name"),
    )
    op.create_index("ix_refrigeration_units_property_id", "refrigeration_units", ["property_id"])

    op.create_table(
        "temperature_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("property_id", sa.String(36), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("unit_id", sa.String(36), sa.ForeignKey("refrigeration_units.id"), nullable=False),
        sa.Column("logged_at", sa.DateTime(), nullable=False),
        sa.Column("period", sa.String(10), nullable=False),
        sa.Column("status", sa.String(10), server_default="NORMAL"),
        sa.Column("value_c", sa.Float()),
        sa.Column("notes", sa.Text()),
        sa.Column("created_by_user_id", sa.String(36), sa.ForeignKey("users.id")),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_temperature_logs_property_id", "temperature_logs", ["property_id"])
    op.create_index("ix_temperature_logs_unit_id", "temperature_logs", ["unit_id"])
    op.create_index(
        "ix_temperature_logs_property_logged_at",
        "temperature_logs", ["property_id", "logged_at"],
    )


def downgrade() -> None:
    op.drop_table("temperature_logs")
    op.drop_table("refrigeration_units")
