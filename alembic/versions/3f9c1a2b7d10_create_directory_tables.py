"""create_directory_tables

Revision ID: 3f9c1a2b7d10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, UUID


# revision identifiers, used by Alembic.
revision: str = '3f9c1a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CLUB_ROLES = (
    'OWNER', 'ADMIN', 'COACH', 'EQUIPMENT_MANAGER',
    'TREASURER', 'SESSION_COORDINATOR', 'MEMBER',
)
EQUIPMENT_TYPES = ('STICK', 'GLOVE', 'MASK', 'SNORKEL', 'FINS', 'CAP', 'PUCK', 'GOAL')
EQUIPMENT_SIZES = ('XS', 'S', 'M', 'L', 'XL', 'XXL', 'JUNIOR', 'ADULT', 'ONE_SIZE')
EQUIPMENT_CONDITIONS = ('NEW', 'GOOD', 'FAIR', 'POOR')


def upgrade() -> None:
    """Create users, clubs, memberships, reviews, equipment and checkouts."""

    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('auth_id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('username', sa.String(length=50), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_auth_id', 'users', ['auth_id'], unique=True)

    op.create_table(
        'clubs',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('country', sa.String(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('founded_year', sa.Integer(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('governing_body', sa.String(length=100), nullable=True),
        sa.Column('welcomes_beginners', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('is_verified', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_clubs'),
    )
    op.create_index('ix_clubs_slug', 'clubs', ['slug'], unique=True)
    op.create_index('ix_clubs_country', 'clubs', ['country'])
    op.create_index('ix_clubs_latitude', 'clubs', ['latitude'])
    op.create_index('ix_clubs_longitude', 'clubs', ['longitude'])

    op.create_table(
        'club_members',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('club_id', UUID(as_uuid=True), nullable=False),
        sa.Column('role', sa.Enum(*CLUB_ROLES, name='club_role_enum'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_club_members_user_id_users', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['club_id'], ['clubs.id'],
            name='fk_club_members_club_id_clubs', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_club_members'),
        sa.UniqueConstraint('user_id', 'club_id', name='uq_club_members_user_club'),
    )
    op.create_index('ix_club_members_user_id', 'club_members', ['user_id'])
    op.create_index('ix_club_members_club_id', 'club_members', ['club_id'])

    op.create_table(
        'club_reviews',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('club_id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            'rating >= 1 AND rating <= 5', name='ck_club_reviews_rating_range'
        ),
        sa.ForeignKeyConstraint(
            ['club_id'], ['clubs.id'],
            name='fk_club_reviews_club_id_clubs', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_club_reviews_user_id_users', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_club_reviews'),
        sa.UniqueConstraint('user_id', 'club_id', name='uq_club_reviews_user_club'),
    )
    op.create_index('ix_club_reviews_club_id', 'club_reviews', ['club_id'])

    op.create_table(
        'equipment',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('club_id', UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.Enum(*EQUIPMENT_TYPES, name='equipment_type_enum'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('size', sa.Enum(*EQUIPMENT_SIZES, name='equipment_size_enum'), nullable=True),
        sa.Column(
            'condition',
            sa.Enum(*EQUIPMENT_CONDITIONS, name='equipment_condition_enum'),
            nullable=False,
        ),
        sa.Column('is_available', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('serial_number', sa.String(length=100), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['club_id'], ['clubs.id'],
            name='fk_equipment_club_id_clubs', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_equipment'),
    )
    op.create_index('ix_equipment_club_id', 'equipment', ['club_id'])

    # Type already created with the equipment table.
    condition = ENUM(
        *EQUIPMENT_CONDITIONS, name='equipment_condition_enum', create_type=False
    )
    op.create_table(
        'equipment_checkouts',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('equipment_id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('checked_out_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('returned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('condition_out', condition, nullable=False),
        sa.Column('condition_in', condition, nullable=True),
        sa.Column('photo_out_url', sa.String(), nullable=True),
        sa.Column('photo_in_url', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ['equipment_id'], ['equipment.id'],
            name='fk_equipment_checkouts_equipment_id_equipment', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_equipment_checkouts_user_id_users', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_equipment_checkouts'),
    )
    op.create_index(
        'ix_equipment_checkouts_equipment_id', 'equipment_checkouts', ['equipment_id']
    )
    # At most one open checkout per item.
    op.create_index(
        'uq_equipment_checkouts_open',
        'equipment_checkouts',
        ['equipment_id'],
        unique=True,
        postgresql_where=sa.text('returned_at IS NULL'),
    )


def downgrade() -> None:
    """Drop every directory table and enum type."""
    op.drop_table('equipment_checkouts')
    op.drop_table('equipment')
    op.drop_table('club_reviews')
    op.drop_table('club_members')
    op.drop_table('clubs')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_name in (
        'equipment_condition_enum',
        'equipment_size_enum',
        'equipment_type_enum',
        'club_role_enum',
    ):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
