"""create invitations and access_logs tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'invitations',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('organization_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('created_by', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('visitor_name', sa.String(255), nullable=False),
        sa.Column('visitor_phone', sa.String(50), nullable=True),
        sa.Column('visitor_email', sa.String(255), nullable=True),
        sa.Column(
            'type',
            sa.String(20),
            nullable=False,
            server_default=sa.text("'single'"),
        ),
        sa.Column('valid_from', sa.DateTime, nullable=False),
        sa.Column('valid_until', sa.DateTime, nullable=True),
        sa.Column('qr_token', sa.String(64), nullable=False),
        sa.Column('short_code', sa.String(6), nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('used_at', sa.DateTime, nullable=True),
        sa.Column(
            'status',
            sa.String(20),
            nullable=False,
            server_default=sa.text("'active'"),
        ),
        sa.Column(
            'created_at',
            sa.DateTime,
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
    )

    op.create_index(
        'ix_invitations_qr_token', 'invitations', ['qr_token'], unique=True
    )
    op.create_index(
        'ix_invitations_short_code', 'invitations', ['short_code'], unique=True
    )
    op.create_index('ix_invitations_organization_id', 'invitations', ['organization_id'])
    op.create_index('ix_invitations_created_by', 'invitations', ['created_by'])
    op.create_index('ix_invitations_status', 'invitations', ['status'])
    op.create_index('ix_invitations_valid_until', 'invitations', ['valid_until'])

    op.create_table(
        'access_logs',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('organization_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('invitation_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('authorized_by', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('visitor_name', sa.String(255), nullable=False),
        sa.Column('visitor_phone', sa.String(50), nullable=True),
        sa.Column(
            'direction',
            sa.String(10),
            nullable=False,
            server_default=sa.text("'entry'"),
        ),
        sa.Column('method', sa.String(20), nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime,
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        # Log entries outlive the invitations they reference
        sa.ForeignKeyConstraint(
            ['invitation_id'],
            ['invitations.id'],
            name='access_logs_invitation_fkey',
            ondelete='SET NULL',
        ),
    )

    op.create_index('ix_access_logs_organization_id', 'access_logs', ['organization_id'])
    op.create_index('ix_access_logs_invitation_id', 'access_logs', ['invitation_id'])
    op.create_index('ix_access_logs_created_at', 'access_logs', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_access_logs_created_at', table_name='access_logs')
    op.drop_index('ix_access_logs_invitation_id', table_name='access_logs')
    op.drop_index('ix_access_logs_organization_id', table_name='access_logs')
    op.drop_table('access_logs')

    op.drop_index('ix_invitations_valid_until', table_name='invitations')
    op.drop_index('ix_invitations_status', table_name='invitations')
    op.drop_index('ix_invitations_created_by', table_name='invitations')
    op.drop_index('ix_invitations_organization_id', table_name='invitations')
    op.drop_index('ix_invitations_short_code', table_name='invitations')
    op.drop_index('ix_invitations_qr_token', table_name='invitations')
    op.drop_table('invitations')
