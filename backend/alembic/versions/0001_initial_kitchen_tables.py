"""Initial schema: users, properties, memberships, settings and temperature logs.

Revision ID: 0001
Revises: (none)
Create Date: 2026-10-18
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


def upgrade() -> None:
    # ── Users and tenancy ────────────────────────────────────

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255)),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "properties",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "property_memberships",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("property_id", sa.String(36), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "role",
            sa.Enum("PROPERTY_ADMIN", "STAFF", name="membershiprole"),
            server_default="STAFF",
        ),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("property_id", "user_id", name="uq_membership_property_user"),
    )
    op.create_index("ix_property_memberships_property_id", "property_memberships", ["property_id"])
    op.create_index("ix_property_memberships_user_id", "property_memberships", ["user_id"])

    # ── Property-scoped ──────────────────────────────────────

    op.create_table(
        "property_settings",
        sa.Column("property_id", sa.String(36), sa.ForeignKey("properties.id"), primary_key=True),
        sa.Column("blast_chill_target_tenth_c", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("blast_chill_max_minutes", sa.Integer(), nullable=False, server_default="90"),
        sa.Column("updated_by_user_id", sa.String(36)),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "food_temperature_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("property_id", sa.String(36), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("logged_at", sa.DateTime(), nullable=False),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("period", sa.String(10)),
        sa.Column("food_name", sa.String(200), nullable=False),
        sa.Column("temp_c", sa.Float()),
        sa.Column("status", sa.String(20), server_default="OK"),
        sa.Column("notes", sa.Text()),
        sa.Column("blast_event", sa.String(10)),
        sa.Column("batch_id", sa.String(64)),
        sa.Column("created_by_user_id", sa.String(36), sa.ForeignKey("users.id")),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_food_temperature_logs_property_id", "food_temperature_logs", ["property_id"])
    op.create_index("ix_food_temperature_logs_blast_event", "food_temperature_logs", ["blast_event"])
    op.create_index("ix_food_temperature_logs_batch_id", "food_temperature_logs", ["batch_id"])
    op.create_index(
        "ix_food_temp_logs_property_logged_at",
        "food_temperature_logs", ["property_id", "logged_at"],
    )
    op.create_index(
        "ix_food_temp_logs_property_log_date",
        "food_temperature_logs", ["property_id", "log_date"],
    )


def downgrade() -> None:
    op.drop_table("food_temperature_logs")
    op.drop_table("property_settings")
    op.drop_table("property_memberships")
    op.drop_table("properties")
    op.drop_table("users")
    sa.Enum(name="membershiprole").drop(op.get_bind(), checkfirst=True)
