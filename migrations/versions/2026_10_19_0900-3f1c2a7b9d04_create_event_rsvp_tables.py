"""create_event_rsvp_tables

Revision ID: 3f1c2a7b9d04
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9d04"
down_revision = None
branch_labels = None
depends_on = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("public_hash", sa.String(length=32), nullable=False),
        sa.Column("admin_token", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("admin_token"),
    )
    op.create_index("ix_events_public_hash", "events", ["public_hash"], unique=True)

    op.create_table(
        "custom_fields",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("field_name", sa.String(length=255), nullable=False),
        sa.Column(
            "field_type",
            sa.Enum("text", "dropdown", name="field_type_enum"),
            nullable=False,
        ),
        sa.Column("required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        *timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_custom_fields_event_id", "custom_fields", ["event_id"])
    op.create_index("ix_custom_fields_event_id_position", "custom_fields", ["event_id", "position"])

    op.create_table(
        "rsvps",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "response",
            sa.Enum("yes", "maybe", "no", name="rsvp_response_enum"),
            nullable=False,
        ),
        sa.Column("identity_token", sa.String(length=32), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_rsvps_event_id", "rsvps", ["event_id"])
    op.create_index("ix_rsvps_identity_token", "rsvps", ["identity_token"], unique=True)

    op.create_table(
        "custom_field_responses",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("rsvp_id", sa.UUID(), nullable=False),
        sa.Column("custom_field_id", sa.UUID(), nullable=False),
        sa.Column("response_value", sa.String(length=255), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(["rsvp_id"], ["rsvps.uuid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["custom_field_id"], ["custom_fields.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("rsvp_id", "custom_field_id", name="uq_custom_field_responses_rsvp_field"),
    )
    op.create_index("ix_custom_field_responses_rsvp_id", "custom_field_responses", ["rsvp_id"])
    op.create_index(
        "ix_custom_field_responses_custom_field_id", "custom_field_responses", ["custom_field_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_custom_field_responses_custom_field_id", table_name="custom_field_responses")
    op.drop_index("ix_custom_field_responses_rsvp_id", table_name="custom_field_responses")
    op.drop_table("custom_field_responses")
    op.drop_index("ix_rsvps_identity_token", table_name="rsvps")
    op.drop_index("ix_rsvps_event_id", table_name="rsvps")
    op.drop_table("rsvps")
    op.drop_index("ix_custom_fields_event_id_position", table_name="custom_fields")
    op.drop_index("ix_custom_fields_event_id", table_name="custom_fields")
    op.drop_table("custom_fields")
    op.drop_index("ix_events_public_hash", table_name="events")
    op.drop_table("events")
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TYPE rsvp_response_enum")
        op.execute("DROP TYPE field_type_enum")
