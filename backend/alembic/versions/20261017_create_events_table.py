"""
Create events table with inventory constraints.

Revision ID: 20261017_create_events_table
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from typing import Union

# revision identifiers, used by Alembic.
revision: str = '20261017_create_events_table'
down_revision: Union[str, None] = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('tickets_sold', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        # The store itself refuses overselling, whatever the caller does
        sa.CheckConstraint('capacity >= 0', name='ck_events_capacity_non_negative'),
        sa.CheckConstraint('tickets_sold >= 0', name='ck_events_sold_non_negative'),
        sa.CheckConstraint('tickets_sold <= capacity', name='ck_events_sold_lte_capacity'),
    )
    op.create_index('ix_events_id', 'events', ['id'])
    op.create_index('ix_events_date', 'events', ['date'])


def downgrade() -> None:
    op.drop_index('ix_events_date', table_name='events')
    op.drop_index('ix_events_id', table_name='events')
    op.drop_table('events')
