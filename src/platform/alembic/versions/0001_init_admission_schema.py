"""init_admission_schema

Revision ID: 0001
Revises:
Create Date: 2024-10-01

Schema:
- event / customer: display data shown at the gate
- purchase: one checkout; payment status gates admission
- ticket_credential: counter and unit credentials in one table
  (unit = total_units 1); admission is a conditional increment of consumed_count
- admission_attempt_log: append-only audit of every admission attempt
- staff_pin: bcrypt hashes of gate staff PINs
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'event',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('date_text', sa.String(length=64), nullable=True),
        sa.Column('time_text', sa.String(length=64), nullable=True),
        sa.Column('venue_name', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'customer',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    # No foreign keys to customer/event: a purchase whose references are gone
    # is reported as an orphaned ticket instead of being blocked at write time
    op.create_table(
        'purchase',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('customer_id', sa.String(length=64), nullable=False),
        sa.Column('event_id', sa.String(length=64), nullable=False),
        sa.Column('ticket_name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('is_bundle', sa.Boolean(), nullable=False),
        sa.Column('admissions_per_bundle_unit', sa.Integer(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_purchase_customer_id'), 'purchase', ['customer_id'])
    op.create_index(op.f('ix_purchase_event_id'), 'purchase', ['event_id'])

    op.create_table(
        'ticket_credential',
        sa.Column('identifier', sa.String(length=128), nullable=False),
        sa.Column('purchase_id', sa.String(length=64), nullable=False),
        sa.Column('kind', sa.String(length=10), nullable=False),
        sa.Column('consumed_count', sa.Integer(), nullable=False),
        sa.Column('total_units', sa.Integer(), nullable=False),
        sa.Column('last_admitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_admitted_by', sa.String(length=128), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.CheckConstraint(
            'consumed_count >= 0 AND consumed_count <= total_units',
            name='ck_ticket_credential_consumed_range',
        ),
        sa.CheckConstraint("kind IN ('counter', 'unit')", name='ck_ticket_credential_kind'),
        sa.PrimaryKeyConstraint('identifier'),
    )
    op.create_index(op.f('ix_ticket_credential_purchase_id'), 'ticket_credential', ['purchase_id'])

    op.create_table(
        'admission_attempt_log',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('identifier', sa.String(length=255), nullable=False),
        sa.Column('verifier_id', sa.String(length=128), nullable=False),
        sa.Column('attempted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('outcome', sa.String(length=10), nullable=False),
        sa.Column('error_code', sa.String(length=40), nullable=True),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('event_id', sa.String(length=64), nullable=True),
        sa.Column('event_title', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_admission_attempt_log_identifier'), 'admission_attempt_log', ['identifier']
    )
    op.create_index(
        op.f('ix_admission_attempt_log_attempted_at'), 'admission_attempt_log', ['attempted_at']
    )
    op.create_index(
        'ix_admission_attempt_log_event_attempted_at',
        'admission_attempt_log',
        ['event_id', 'attempted_at'],
    )

    op.create_table(
        'staff_pin',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('label', sa.String(length=100), nullable=False),
        sa.Column('hashed_pin', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    op.drop_table('staff_pin')
    op.drop_index('ix_admission_attempt_log_event_attempted_at', table_name='admission_attempt_log')
    op.drop_index(op.f('ix_admission_attempt_log_attempted_at'), table_name='admission_attempt_log')
    op.drop_index(op.f('ix_admission_attempt_log_identifier'), table_name='admission_attempt_log')
    op.drop_table('admission_attempt_log')
    op.drop_index(op.f('ix_ticket_credential_purchase_id'), table_name='ticket_credential')
    op.drop_table('ticket_credential')
    op.drop_index(op.f('ix_purchase_event_id'), table_name='purchase')
    op.drop_index(op.f('ix_purchase_customer_id'), table_name='purchase')
    op.drop_table('purchase')
    op.drop_table('customer')
    op.drop_table('event')
