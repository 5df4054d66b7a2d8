"""create marketplace tables

Revision ID: 20251101_0001
Revises:
Create Date: 2025-11-01

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


revision = "20251101_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = inspect(bind)
    tables = set(insp.get_table_names())

    if "service_providers" not in tables:
        op.create_table(
            "service_providers",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("user_id", sa.String(36), nullable=False),
            sa.Column("business_name", sa.String(200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("address", sa.String(500), nullable=False),
            sa.Column("zip_code", sa.String(20), nullable=False),
            sa.Column("phone", sa.String(20), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("rating", sa.Numeric(3, 2), nullable=True, server_default="0"),
            sa.Column("total_reviews", sa.Integer(), nullable=True, server_default="0"),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        )
        op.create_index("ix_service_providers_user_id", "service_providers", ["user_id"], unique=True)

    if "equipment" not in tables:
        op.create_table(
            "equipment",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("provider_id", sa.String(36), nullable=True),
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("price_per_day", sa.Numeric(10, 2), nullable=False),
            sa.Column("image_url", sa.String(500), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
            sa.ForeignKeyConstraint(["provider_id"], ["service_providers.id"], ondelete="CASCADE"),
        )
        op.create_index("ix_equipment_provider_id", "equipment", ["provider_id"], unique=False)

    if "equipment_rentals" not in tables:
        op.create_table(
            "equipment_rentals",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("equipment_id", sa.String(36), nullable=False),
            sa.Column("provider_id", sa.String(36), nullable=False),
            sa.Column("customer_id", sa.String(36), nullable=False),
            sa.Column("rental_start_date", sa.Date(), nullable=False),
            sa.Column("rental_end_date", sa.Date(), nullable=False),
            sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
            sa.ForeignKeyConstraint(["equipment_id"], ["equipment.id"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(["provider_id"], ["service_providers.id"], ondelete="RESTRICT"),
        )
        op.create_index("ix_equipment_rentals_equipment_id", "equipment_rentals", ["equipment_id"], unique=False)
        op.create_index("ix_equipment_rentals_provider_id", "equipment_rentals", ["provider_id"], unique=False)
        op.create_index("ix_equipment_rentals_customer_id", "equipment_rentals", ["customer_id"], unique=False)

    if "conversations" not in tables:
        op.create_table(
            "conversations",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("customer_id", sa.String(36), nullable=False),
            sa.Column("provider_id", sa.String(36), nullable=False),
            sa.Column("customer_name", sa.String(200), nullable=False),
            sa.Column("provider_name", sa.String(200), nullable=False),
            sa.Column("last_message", sa.Text(), nullable=True),
            sa.Column("last_message_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
            sa.UniqueConstraint("customer_id", "provider_id", name="uq_conversations_customer_provider"),
        )
        op.create_index("ix_conversations_customer_id", "conversations", ["customer_id"], unique=False)
        op.create_index("ix_conversations_provider_id", "conversations", ["provider_id"], unique=False)
        op.create_index("ix_conversations_last_message_at", "conversations", ["last_message_at"], unique=False)

    if "messages" not in tables:
        op.create_table(
            "messages",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("conversation_id", sa.String(36), nullable=False),
            sa.Column("sender_id", sa.String(36), nullable=False),
            sa.Column("sender_type", sa.String(20), nullable=False),
            sa.Column("message", sa.Text(), nullable=False),
            sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
            sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"], ondelete="CASCADE"),
        )
        op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"], unique=False)
        op.create_index("ix_messages_sender_id", "messages", ["sender_id"], unique=False)
        op.create_index("ix_messages_created_at", "messages", ["created_at"], unique=False)

    if "user_roles" not in tables:
        op.create_table(
            "user_roles",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("user_id", sa.String(36), nullable=False),
            sa.Column("role", sa.String(30), nullable=False),
            sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
        )
        op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"], unique=False)


def downgrade():
    bind = op.get_bind()
    insp = inspect(bind)
    tables = set(insp.get_table_names())

    for table in ("user_roles", "messages", "conversations", "equipment_rentals", "equipment", "service_providers"):
        if table in tables:
            op.drop_table(table)
