"""create certificates

Revision ID: 3c1f9a7d2b10
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "certificates",
        sa.Column("id", sa.BigInteger(), autoincrement=True, primary_key=True),
        sa.Column("mint", sa.String(length=64), nullable=False),
        sa.Column("holder_wallet", sa.String(length=128), nullable=False),
        sa.Column("issuer_wallet", sa.String(length=128), nullable=False),
        sa.Column("holder_name", sa.Text(), nullable=False),
        sa.Column("course_name", sa.Text(), nullable=False),
        sa.Column("issuer_name", sa.Text(), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("metadata_uri", sa.Text(), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("signature", sa.String(length=128), nullable=True),
        sa.Column("token_account", sa.String(length=64), nullable=True),
        sa.Column("idempotency_key", sa.String(length=64), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("mint"),
        sa.UniqueConstraint("idempotency_key"),
    )
    op.create_index(
        "ix_certificates_holder_wallet", "certificates", ["holder_wallet"]
    )
    op.create_index(
        "ix_certificates_issuer_wallet", "certificates", ["issuer_wallet"]
    )


def downgrade() -> None:
    op.drop_index("ix_certificates_issuer_wallet", table_name="certificates")
    op.drop_index("ix_certificates_holder_wallet", table_name="certificates")
    op.drop_table("certificates")
