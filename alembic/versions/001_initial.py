"""Initial schema: users, per-user config, domain stores, briefings, run and usage logs.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _user_fk() -> sa.Column:
    return sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False)


def upgrade() -> None:
    # 1. users
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("account_status", sa.String(20), nullable=False, server_default="pending"),
        *_timestamps(),
    )
    op.execute(
        "ALTER TABLE users ADD CONSTRAINT ck_users_account_status "
        "CHECK (account_status IN ('pending', 'active', 'suspended', 'trial_expired'))"
    )

    # 2. user_configs
    op.create_table(
        "user_configs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("language", sa.String(10), nullable=True),
        sa.Column("vip_senders", JSONB, nullable=True),
        sa.Column("agent_settings", JSONB, nullable=True),
        sa.Column("agents_active", sa.Boolean, nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )

    # 3. classified_emails
    op.create_table(
        "classified_emails",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _user_fk(),
        sa.Column("email_id", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(1000), nullable=True),
        sa.Column("from_email", sa.String(255), nullable=False),
        sa.Column("from_name", sa.String(255), nullable=True),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("requires_action", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("deadline", sa.String(255), nullable=True),
        sa.Column("email_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("is_archived", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("snippet", sa.Text, nullable=True),
        *_timestamps(),
    )

    # 4. action_items
    op.create_table(
        "action_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _user_fk(),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("category", sa.String(50), nullable=False, server_default="other"),
        sa.Column("deadline_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deadline_urgency", sa.String(20), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("stakeholder_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("stakeholder_company", sa.String(255), nullable=True),
        sa.Column("stakeholder_importance", sa.String(20), nullable=True),
        sa.Column("email_subject", sa.String(1000), nullable=False, server_default=""),
        sa.Column("email_from", sa.String(255), nullable=False, server_default=""),
        *_timestamps(),
    )

    # 5. financial_items
    op.create_table(
        "financial_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _user_fk(),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("creditor", sa.String(255), nullable=False),
        sa.Column("amount", sa.BigInteger, nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(20), nullable=True),
        sa.Column("requires_approval", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("email_subject", sa.String(1000), nullable=True),
        *_timestamps(),
    )

    # 6. legal_analyses
    op.create_table(
        "legal_analyses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _user_fk(),
        sa.Column("document_name", sa.String(500), nullable=False),
        sa.Column("document_type", sa.String(100), nullable=True),
        sa.Column("summary", sa.Text, nullable=True),
        sa.Column("overall_risk", sa.String(20), nullable=False),
        sa.Column("required_action", sa.Text, nullable=True),
        sa.Column("action_deadline", sa.String(255), nullable=True),
        sa.Column("is_urgent", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("parties", sa.Text, nullable=True),
        sa.Column("analyzed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    # 7. commercial_items
    op.create_table(
        "commercial_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _user_fk(),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(20), nullable=True),
        sa.Column("client_company", sa.String(255), nullable=True),
        sa.Column("client_name", sa.String(255), nullable=True),
        sa.Column("client_email", sa.String(255), nullable=True),
        sa.Column("products_services", sa.Text, nullable=True),
        sa.Column("estimated_value", sa.BigInteger, nullable=True),
        sa.Column("currency", sa.String(3), nullable=True),
        sa.Column("deadline_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("suggested_action", sa.Text, nullable=True),
        sa.Column("email_subject", sa.String(1000), nullable=True),
        sa.Column("email_from", sa.String(255), nullable=True),
        *_timestamps(),
    )

    # 8. focus_briefings
    op.create_table(
        "focus_briefings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("scope", sa.String(10), nullable=False),
        sa.Column("briefing_text", sa.Text, nullable=False),
        sa.Column("key_highlights", JSONB, nullable=True),
        sa.Column("prioritized_items", JSONB, nullable=False),
        sa.Column("total_items", sa.Integer, nullable=False, server_default="0"),
        sa.Column("urgent_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )

    # 9. agent_logs
    op.create_table(
        "agent_logs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column("agent_id", sa.String(120), nullable=False),
        sa.Column("agent_type", sa.String(30), nullable=False),
        sa.Column("event_type", sa.String(20), nullable=False),
        sa.Column("success", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("duration_ms", sa.Integer, nullable=False, server_default="0"),
        sa.Column("processed_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column("details", JSONB, nullable=True),
        *_timestamps(),
    )

    # 10. ai_usage_logs
    op.create_table(
        "ai_usage_logs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("agent_type", sa.String(30), nullable=True),
        sa.Column("operation", sa.String(100), nullable=True),
        sa.Column("model", sa.String(100), nullable=True),
        sa.Column("tokens_input", sa.Integer, nullable=False, server_default="0"),
        sa.Column("tokens_output", sa.Integer, nullable=False, server_default="0"),
        sa.Column("cost_usd", sa.Numeric(10, 6), nullable=False, server_default="0"),
        sa.Column("duration_ms", sa.Integer, nullable=False, server_default="0"),
        sa.Column("success", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )

    # Indexes
    op.create_index(
        "ix_focus_briefings_user_scope",
        "focus_briefings",
        ["user_id", "scope", "generated_at"],
    )
    op.create_index("ix_classified_emails_user_priority", "classified_emails", ["user_id", "priority"])
    op.create_index("ix_action_items_user_status", "action_items", ["user_id", "status"])
    op.create_index("ix_financial_items_user_due", "financial_items", ["user_id", "status", "due_date"])
    op.create_index("ix_legal_analyses_user_status", "legal_analyses", ["user_id", "status"])
    op.create_index("ix_commercial_items_user_status", "commercial_items", ["user_id", "status"])
    op.create_index("ix_agent_logs_user_created", "agent_logs", ["user_id", "created_at"])
    op.execute(
        "CREATE INDEX ix_user_configs_agents_active ON user_configs (user_id) "
        "WHERE agents_active"
    )


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS ix_user_configs_agents_active")
    op.drop_index("ix_agent_logs_user_created", table_name="agent_logs")
    op.drop_index("ix_commercial_items_user_status", table_name="commercial_items")
    op.drop_index("ix_legal_analyses_user_status", table_name="legal_analyses")
    op.drop_index("ix_financial_items_user_due", table_name="financial_items")
    op.drop_index("ix_action_items_user_status", table_name="action_items")
    op.drop_index("ix_classified_emails_user_priority", table_name="classified_emails")
    op.drop_index("ix_focus_briefings_user_scope", table_name="focus_briefings")

    # Drop tables in reverse dependency order
    op.drop_table("ai_usage_logs")
    op.drop_table("agent_logs")
    op.drop_table("focus_briefings")
    op.drop_table("commercial_items")
    op.drop_table("legal_analyses")
    op.drop_table("financial_items")
    op.drop_table("action_items")
    op.drop_table("classified_emails")
    op.drop_table("user_configs")
    op.drop_table("users")
