"""create_profile_tables

Revision ID: 4b7d1e9a2c30
Revises:
Create Date: 2026-10-19 09:12:44.310562

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4b7d1e9a2c30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create profiles and profile_platforms."""
    op.create_table('profiles',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('handle', sa.String(length=20), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('region', sa.String(length=8), server_default='NA', nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=True),
        sa.Column('current_rank', sa.String(length=50), server_default='Unranked', nullable=False),
        sa.Column('main_role', sa.String(length=16), server_default='Support', nullable=False),
        sa.Column('is_lft', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("region IN ('NA', 'EU', 'APAC')", name='ck_profiles_region'),
        sa.CheckConstraint("main_role IN ('Tank', 'DPS', 'Support')", name='ck_profiles_main_role'),
        sa.CheckConstraint('length(trim(current_rank)) > 0', name='ck_profiles_current_rank'),
        sa.PrimaryKeyConstraint('id'),
    )
    # Handle uniqueness is case-insensitive
    op.create_index(
        'uq_profiles_handle_lower',
        'profiles',
        [sa.text('lower(handle)')],
        unique=True,
    )

    op.create_table('profile_platforms',
        sa.Column('profile_id', sa.String(length=64), nullable=False),
        sa.Column('platform', sa.String(length=16), nullable=False),
        sa.CheckConstraint("platform IN ('PC', 'Console')", name='ck_profile_platforms_platform'),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('profile_id', 'platform'),
    )

    # The API connects with the service role, which bypasses RLS. Enabling it
    # without policies keeps the anon key from reading or writing these tables.
    op.execute("ALTER TABLE profiles ENABLE ROW LEVEL SECURITY;")
    op.execute("ALTER TABLE profile_platforms ENABLE ROW LEVEL SECURITY;")


def downgrade() -> None:
    """Drop profile tables."""
    op.drop_table('profile_platforms')
    op.drop_index('uq_profiles_handle_lower', table_name='profiles')
    op.drop_table('profiles')
