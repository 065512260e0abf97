"""Add conversations and messages tables for chat history

Revision ID: 20250913_add_conversation_tables
Revises:
Create Date: 2025-09-13 22:56:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20250913_add_conversation_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Ids are plain strings so client-chosen session ids can be adopted as-is
    op.create_table(
        "conversations",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("conversation_id", sa.String(255), nullable=False),
        sa.Column("sender", sa.String(10), nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.CheckConstraint("sender IN ('user', 'ai')", name="ck_messages_sender"),
    )

    op.create_foreign_key(
        "fk_messages_conversation_id",
        "messages",
        "conversations",
        ["conversation_id"],
        ["id"],
    )

    op.create_index("idx_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("idx_messages_timestamp", "messages", ["timestamp"])


def downgrade() -> None:
    op.drop_index("idx_messages_timestamp", table_name="messages")
    op.drop_index("idx_messages_conversation_id", table_name="messages")
    op.drop_constraint("fk_messages_conversation_id", "messages", type_="foreignkey")
    op.drop_table("messages")
    op.drop_table("conversations")
