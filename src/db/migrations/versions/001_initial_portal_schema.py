"""Create the portal tables used by the fraud scoring engine.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(), unique=True, nullable=True),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="agent"),
        sa.Column("username", sa.String(), unique=True, nullable=True),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("district", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("status", sa.String(), server_default="active"),
        sa.Column("device_id", sa.String(), nullable=True),
        sa.Column("last_ip", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_users_role"), "users", ["role"])

    op.create_table(
        "agent_profiles",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("csp_id", sa.String(), nullable=False),
        sa.Column("aadhaar_number", sa.String(), unique=True, nullable=True),
        sa.Column("pan_number", sa.String(), unique=True, nullable=True),
        sa.Column("bank_account", sa.String(), nullable=True),
        sa.Column("ifsc_code", sa.String(), nullable=True),
        sa.Column("fraud_score", sa.Integer(), server_default="0"),
        sa.Column("risk_level", sa.String(), server_default="low"),
        *_timestamps(),
    )
    op.create_index(
        op.f("ix_agent_profiles_user_id"), "agent_profiles", ["user_id"], unique=True
    )
    op.create_index(op.f("ix_agent_profiles_csp_id"), "agent_profiles", ["csp_id"], unique=True)
    op.create_index(op.f("ix_agent_profiles_risk_level"), "agent_profiles", ["risk_level"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("transaction_type", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("customer_name", sa.String(), nullable=False),
        sa.Column("customer_aadhaar", sa.String(), nullable=True),
        sa.Column("account_number", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="completed"),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("device_id", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(), nullable=True),
        sa.Column("fraud_flags", postgresql.JSONB(), nullable=True),
        sa.Column(
            "transaction_date", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        *_timestamps(),
    )
    op.create_index(op.f("ix_transactions_agent_id"), "transactions", ["agent_id"])
    op.create_index(
        op.f("ix_transactions_transaction_date"), "transactions", ["transaction_date"]
    )

    op.create_table(
        "check_ins",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("selfie_url", sa.String(), nullable=True),
        sa.Column("video_url", sa.String(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("device_id", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(), nullable=True),
        sa.Column("match_score", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(), server_default="verified"),
        sa.Column("check_in_date", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_check_ins_user_id"), "check_ins", ["user_id"])
    op.create_index(op.f("ix_check_ins_check_in_date"), "check_ins", ["check_in_date"])

    op.create_table(
        "location_logs",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("device_id", sa.String(), nullable=True),
        sa.Column("activity", sa.String(), nullable=True),
        sa.Column("log_date", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_location_logs_user_id"), "location_logs", ["user_id"])
    op.create_index(op.f("ix_location_logs_log_date"), "location_logs", ["log_date"])

    op.create_table(
        "audits",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("audited_user_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("auditor_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("findings", sa.Text(), nullable=True),
        sa.Column("evidence_urls", postgresql.JSONB(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("device_id", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(), nullable=True),
        sa.Column("priority", sa.String(), server_default="normal"),
        sa.Column("hash", sa.String(), nullable=True),
        sa.Column("audit_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_audits_audited_user_id"), "audits", ["audited_user_id"])
    op.create_index(op.f("ix_audits_auditor_id"), "audits", ["auditor_id"])
    op.create_index(op.f("ix_audits_status"), "audits", ["status"])

    op.create_table(
        "auditor_assignments",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("auditor_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("agent_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="assigned"),
        sa.Column("priority", sa.String(), server_default="normal"),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        op.f("ix_auditor_assignments_auditor_id"), "auditor_assignments", ["auditor_id"]
    )
    op.create_index(op.f("ix_auditor_assignments_agent_id"), "auditor_assignments", ["agent_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("read", sa.Boolean(), server_default=sa.false()),
        sa.Column("action_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_notifications_user_id"), "notifications", ["user_id"])

    op.create_table(
        "fraud_rules",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("score_impact", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_index(op.f("ix_fraud_rules_name"), "fraud_rules", ["name"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_fraud_rules_name"), table_name="fraud_rules")
    op.drop_table("fraud_rules")
    op.drop_index(op.f("ix_notifications_user_id"), table_name="notifications")
    op.drop_table("notifications")
    op.drop_index(op.f("ix_auditor_assignments_agent_id"), table_name="auditor_assignments")
    op.drop_index(op.f("ix_auditor_assignments_auditor_id"), table_name="auditor_assignments")
    op.drop_table("auditor_assignments")
    op.drop_index(op.f("ix_audits_status"), table_name="audits")
    op.drop_index(op.f("ix_audits_auditor_id"), table_name="audits")
    op.drop_index(op.f("ix_audits_audited_user_id"), table_name="audits")
    op.drop_table("audits")
    op.drop_index(op.f("ix_location_logs_log_date"), table_name="location_logs")
    op.drop_index(op.f("ix_location_logs_user_id"), table_name="location_logs")
    op.drop_table("location_logs")
    op.drop_index(op.f("ix_check_ins_check_in_date"), table_name="check_ins")
    op.drop_index(op.f("ix_check_ins_user_id"), table_name="check_ins")
    op.drop_table("check_ins")
    op.drop_index(op.f("ix_transactions_transaction_date"), table_name="transactions")
    op.drop_index(op.f("ix_transactions_agent_id"), table_name="transactions")
    op.drop_table("transactions")
    op.drop_index(op.f("ix_agent_profiles_risk_level"), table_name="agent_profiles")
    op.drop_index(op.f("ix_agent_profiles_csp_id"), table_name="agent_profiles")
    op.drop_index(op.f("ix_agent_profiles_user_id"), table_name="agent_profiles")
    op.drop_table("agent_profiles")
    op.drop_index(op.f("ix_users_role"), table_name="users")
    op.drop_table("users")
