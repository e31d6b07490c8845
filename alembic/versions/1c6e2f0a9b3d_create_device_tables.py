"""Create devices, device_repositories and build_scripts tables

Revision ID: 1c6e2f0a9b3d
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "1c6e2f0a9b3d"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "devices",
        sa.Column("id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("codename", sa.String(100), nullable=False),
        sa.Column("manufacturer", sa.String(100), nullable=False),
        sa.Column("platform", sa.String(100), nullable=False),
        sa.Column("android_version", sa.String(50), nullable=False),
        sa.Column("lineage_version", sa.String(50), nullable=False),
        sa.Column("description", sa.String(2000), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_devices_id", "devices", ["id"])
    op.create_index("ix_devices_codename", "devices", ["codename"])

    op.create_table(
        "device_repositories",
        sa.Column("id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("device_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("branch", sa.String(100), nullable=False),
        sa.Column("path", sa.String(500), nullable=False),
        sa.Column("depth", sa.String(10), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["device_id"], ["devices.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_device_repositories_id", "device_repositories", ["id"])
    op.create_index("ix_device_repositories_name", "device_repositories", ["name"])
    op.create_index("ix_device_repositories_device_id", "device_repositories", ["device_id"])

    op.create_table(
        "build_scripts",
        sa.Column("id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("device_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("manifest", sa.String(500), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("kernel_config", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("recovery_patches", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["device_id"], ["devices.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_build_scripts_id", "build_scripts", ["id"])
    op.create_index("ix_build_scripts_device_id", "build_scripts", ["device_id"])


def downgrade() -> None:
    op.drop_index("ix_build_scripts_device_id", table_name="build_scripts")
    op.drop_index("ix_build_scripts_id", table_name="build_scripts")
    op.drop_table("build_scripts")
    op.drop_index("ix_device_repositories_device_id", table_name="device_repositories")
    op.drop_index("ix_device_repositories_name", table_name="device_repositories")
    op.drop_index("ix_device_repositories_id", table_name="device_repositories")
    op.drop_table("device_repositories")
    op.drop_index("ix_devices_codename", table_name="devices")
    op.drop_index("ix_devices_id", table_name="devices")
    op.drop_table("devices")
