"""Directory schema — accounts, profiles, lookups and profile content.

Revision ID: 001_directory_schema
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_directory_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _account_fk() -> sa.Column:
    return sa.Column(
        "account_id", sa.Integer,
        sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email_address", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("verified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("verification_code", sa.LargeBinary(64), nullable=True),
        sa.Column("arrears", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("sex", sa.String(1), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "uq_accounts_email_address_lower", "accounts",
        [sa.text("lower(email_address)")], unique=True,
    )

    op.create_table(
        "countries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(2), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_table(
        "provinces",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("country_id", sa.Integer, sa.ForeignKey("countries.id"), nullable=False),
        sa.Column("code", sa.String(3), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_table(
        "styles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("dark", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_table(
        "backgrounds",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("url", sa.String(500), nullable=True),
    )

    op.create_table(
        "profiles",
        sa.Column(
            "account_id", sa.Integer,
            sa.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("company", sa.String(100), nullable=True),
        sa.Column("email_address", sa.String(255), nullable=True),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("intro", sa.Text, nullable=True),
        sa.Column("additional", sa.Text, nullable=True),
        sa.Column("slogan", sa.String(255), nullable=True),
        sa.Column("services", sa.Text, nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("country_id", sa.Integer, sa.ForeignKey("countries.id"), nullable=True),
        sa.Column("province_id", sa.Integer, sa.ForeignKey("provinces.id"), nullable=True),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("noindex", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("facebook", sa.String(255), nullable=True),
        sa.Column("twitter", sa.String(255), nullable=True),
        sa.Column("pinterest", sa.String(255), nullable=True),
        sa.Column("instagram", sa.String(255), nullable=True),
        sa.Column("linkedin", sa.String(255), nullable=True),
        sa.Column("style_id", sa.Integer, sa.ForeignKey("styles.id"), nullable=True),
        sa.Column("background_id", sa.Integer, sa.ForeignKey("backgrounds.id"), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "profiles_professions",
        sa.Column(
            "account_id", sa.Integer,
            sa.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("profession_name", sa.String(100), primary_key=True),
    )
    op.create_table(
        "service_areas",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _account_fk(),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_index("ix_service_areas_account_id", "service_areas", ["account_id"])
    op.create_table(
        "portraits",
        sa.Column(
            "account_id", sa.Integer,
            sa.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("width", sa.Integer, nullable=True),
        sa.Column("height", sa.Integer, nullable=True),
        sa.Column("mime_type", sa.String(50), nullable=True),
        sa.Column("modified", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "pictures",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _account_fk(),
        sa.Column("heading", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("priority", sa.Integer, nullable=False, server_default="0"),
        sa.Column("width", sa.Integer, nullable=True),
        sa.Column("height", sa.Integer, nullable=True),
    )
    op.create_index("ix_pictures_account_id", "pictures", ["account_id"])
    op.create_table(
        "testimonials",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _account_fk(),
        sa.Column("quote", sa.Text, nullable=False),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("rating", sa.Integer, nullable=True),
    )
    op.create_index("ix_testimonials_account_id", "testimonials", ["account_id"])

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(10), nullable=False, unique=True),
    )
    op.create_table(
        "students",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _account_fk(),
        sa.Column("course_id", sa.Integer, sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("graduated", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_students_account_id", "students", ["account_id"])


def downgrade() -> None:
    for table in (
        "students", "courses", "testimonials", "pictures", "portraits",
        "service_areas", "profiles_professions", "profiles",
        "backgrounds", "styles", "provinces", "countries",
    ):
        op.drop_table(table)
    op.drop_index("uq_accounts_email_address_lower", table_name="accounts")
    op.drop_table("accounts")
