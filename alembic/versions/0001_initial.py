"""initial barbershop schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Tenants
    op.create_table(
        'barbershops',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('owner_id', UUID, nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False, unique=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('address', sa.String(300), nullable=True),
        sa.Column('timezone', sa.String(50), server_default='America/Sao_Paulo'),
        sa.Column('subscription_status', sa.String(30), server_default='trialing'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('trial_ends_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('current_plan', sa.String(50), nullable=True),
        sa.Column('subscription_id', sa.String(100), nullable=True),
        sa.Column('stripe_customer_id', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_barbershops_owner_id', 'barbershops', ['owner_id'])

    op.create_table(
        'barbershop_settings',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('opening_time', sa.String(5), server_default='08:00'),
        sa.Column('closing_time', sa.String(5), server_default='20:00'),
        sa.Column('is_closed', sa.Boolean, server_default=sa.text('false')),
        sa.Column('fee_dinheiro', sa.Numeric(5, 2), server_default='0'),
        sa.Column('fee_pix', sa.Numeric(5, 2), server_default='0'),
        sa.Column('fee_debito', sa.Numeric(5, 2), server_default='0'),
        sa.Column('fee_credito', sa.Numeric(5, 2), server_default='0'),
    )

    # 2. Staff and catalog
    op.create_table(
        'barbers',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('photo', sa.String(500), nullable=True),
        sa.Column('work_days', postgresql.JSONB, server_default=sa.text("'{}'::jsonb")),
        sa.Column('commission_rate', sa.Numeric(5, 2), server_default='0'),
        sa.Column('advances', sa.Numeric(10, 2), server_default='0'),
        sa.Column('is_active', sa.Boolean, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_barbers_barbershop_id', 'barbers', ['barbershop_id'])

    op.create_table(
        'services',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('duration', sa.Integer, nullable=True),
        sa.Column('category', sa.String(30), server_default='hair'),
        sa.Column('is_active', sa.Boolean, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_services_barbershop_id', 'services', ['barbershop_id'])
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    op.create_table(
        'inventory',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('current_stock', sa.Integer, nullable=False, server_default='0'),
        sa.Column('min_stock', sa.Integer, nullable=False, server_default='5'),
        sa.Column('price_cost', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('price_sell', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('commission_rate', sa.Numeric(5, 2), server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('current_stock >= 0', name='ck_inventory_stock_not_negative'),
    )
    op.create_index('ix_inventory_barbershop_id', 'inventory', ['barbershop_id'])

    # 3. Customers and prepaid packages
    op.create_table(
        'customers',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('phone', sa.String(30), server_default='Sem Telefone'),
        sa.Column('birth_date', sa.Date, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_customers_barbershop_id', 'customers', ['barbershop_id'])

    op.create_table(
        'customer_packages',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('customer_id', UUID, sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('package_name', sa.String(200), nullable=False),
        sa.Column('total_credits', sa.Integer, nullable=False, server_default='4'),
        sa.Column('used_credits', sa.Integer, nullable=False, server_default='0'),
        sa.Column('price_paid', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('used_credits <= total_credits', name='ck_customer_packages_credits'),
    )
    op.create_index('ix_customer_packages_customer_id', 'customer_packages', ['customer_id'])

    # 4. Appointments and sale rows
    op.create_table(
        'appointments',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('barber_id', UUID, sa.ForeignKey('barbers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('barber', sa.String(120), nullable=True),
        sa.Column('customer_id', UUID, sa.ForeignKey('customers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_name', sa.String(200), nullable=False),
        sa.Column('customer_phone', sa.String(30), server_default='Balcão'),
        sa.Column('service', sa.String(200), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('time', sa.String(5), nullable=False),
        sa.Column('duration', sa.Integer, server_default='30'),
        sa.Column('price', sa.Numeric(10, 2), server_default='0'),
        sa.Column('original_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('net_value', sa.Numeric(10, 2), nullable=True),
        sa.Column('payment_method', sa.String(200), nullable=True),
        sa.Column('tip_amount', sa.Numeric(10, 2), server_default='0'),
        sa.Column('product_commission', sa.Numeric(10, 2), server_default='0'),
        sa.Column('commission_rate', sa.Numeric(5, 2), nullable=True),
        sa.Column('item_type', sa.String(20), server_default='servico'),
        sa.Column('inventory_id', UUID, sa.ForeignKey('inventory.id', ondelete='SET NULL'), nullable=True),
        sa.Column('venda_id', sa.String(60), nullable=True),
        sa.Column('is_package_redemption', sa.Boolean, server_default=sa.text('false')),
        sa.Column('package_id', UUID, sa.ForeignKey('customer_packages.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pendente'),
        sa.Column('created_by_admin', sa.Boolean, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_appointments_barbershop_id', 'appointments', ['barbershop_id'])
    op.create_index('ix_appointments_venda_id', 'appointments', ['venda_id'])
    op.create_index('idx_appointments_shop_date', 'appointments', ['barbershop_id', 'date'])
    # One active booking per professional and start time
    op.create_index(
        'uq_appointments_active_slot',
        'appointments',
        ['barber_id', 'date', 'time'],
        unique=True,
        postgresql_where=sa.text("status IN ('pendente', 'confirmado')"),
    )

    # 5. Cash drawer
    op.create_table(
        'cash_flow',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('initial_value', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('expected_value', sa.Numeric(10, 2), nullable=True),
        sa.Column('final_value', sa.Numeric(10, 2), nullable=True),
        sa.Column('difference', sa.Numeric(10, 2), nullable=True),
        sa.Column('status', sa.String(10), nullable=False, server_default='open'),
        sa.Column('session_date', sa.Date, nullable=False),
        sa.Column('opened_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('closed_at', sa.DateTime(timezone=True), nullable=True),
    )
    # At most one open drawer per shop
    op.create_index(
        'uq_cash_flow_open_session',
        'cash_flow',
        ['barbershop_id'],
        unique=True,
        postgresql_where=sa.text("status = 'open'"),
    )

    op.create_table(
        'cash_transactions',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('cash_flow_id', UUID, sa.ForeignKey('cash_flow.id', ondelete='CASCADE'), nullable=False),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(10), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('venda_id', sa.String(60), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_cash_transactions_cash_flow_id', 'cash_transactions', ['cash_flow_id'])

    # 6. Expenses
    op.create_table(
        'expenses',
        sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('barbershop_id', UUID, sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('description', sa.String(300), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(100), server_default='Geral'),
        sa.Column('payment_method', sa.String(20), server_default='dinheiro'),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_expenses_barbershop_id', 'expenses', ['barbershop_id'])


def downgrade() -> None:
    """Downgrade schema."""

    # Drop tables in reverse order (due to foreign keys)
    op.drop_index('ix_expenses_barbershop_id', 'expenses')
    op.drop_table('expenses')

    op.drop_index('ix_cash_transactions_cash_flow_id', 'cash_transactions')
    op.drop_table('cash_transactions')
    op.drop_index('uq_cash_flow_open_session', 'cash_flow')
    op.drop_table('cash_flow')

    op.drop_index('uq_appointments_active_slot', 'appointments')
    op.drop_index('idx_appointments_shop_date', 'appointments')
    op.drop_index('ix_appointments_venda_id', 'appointments')
    op.drop_index('ix_appointments_barbershop_id', 'appointments')
    op.drop_table('appointments')

    op.drop_index('ix_customer_packages_customer_id', 'customer_packages')
    op.drop_table('customer_packages')
    op.drop_index('ix_customers_barbershop_id', 'customers')
    op.drop_table('customers')

    op.drop_index('ix_inventory_barbershop_id', 'inventory')
    op.drop_table('inventory')
    op.drop_index('ix_services_is_active', 'services')
    op.drop_index('ix_services_barbershop_id', 'services')
    op.drop_table('services')
    op.drop_index('ix_barbers_barbershop_id', 'barbers')
    op.drop_table('barbers')

    op.drop_table('barbershop_settings')
    op.drop_index('ix_barbershops_owner_id', 'barbershops')
    op.drop_table('barbershops')
