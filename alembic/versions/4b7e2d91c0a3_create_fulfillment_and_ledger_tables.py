"""Create fulfillment and ledger tables

Revision ID: 4b7e2d91c0a3
Revises:
Create Date: 2026-10-19 09:12:44.381902

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7e2d91c0a3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ### Manually written migration ###
    op.create_table('partners',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('full_name', sa.String(), nullable=False),
    sa.Column('email', sa.String(), nullable=True),
    sa.Column('whatsapp_number', sa.String(), nullable=True),
    sa.Column('affiliate_code', sa.String(), nullable=True),
    sa.Column('bank_name', sa.String(), nullable=True),
    sa.Column('account_number', sa.String(), nullable=True),
    sa.Column('account_holder', sa.String(), nullable=True),
    sa.Column('status', sa.Enum('active', 'inactive', name='partnerstatus'), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('email'),
    sa.UniqueConstraint('affiliate_code')
    )
    op.create_table('surveys',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('partner_id', sa.UUID(), nullable=True),
    sa.Column('customer_name', sa.String(), nullable=False),
    sa.Column('customer_phone', sa.String(), nullable=True),
    sa.Column('address', sa.String(), nullable=True),
    sa.Column('calculator_type', sa.String(), nullable=False),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('status', sa.Enum('pending', 'confirmed', 'completed', 'installation', 'done', 'cancelled', name='surveystatus'), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['partner_id'], ['partners.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_surveys_partner_id', 'surveys', ['partner_id'])
    op.create_index('ix_surveys_status', 'surveys', ['status'])
    op.create_table('invoices',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('invoice_number', sa.String(), nullable=False),
    sa.Column('survey_id', sa.UUID(), nullable=True),
    sa.Column('partner_id', sa.UUID(), nullable=True),
    sa.Column('customer_name', sa.String(), nullable=True),
    sa.Column('invoice_type', sa.String(), nullable=True),
    sa.Column('total_amount', sa.BigInteger(), nullable=False),
    sa.Column('payment_status', sa.Enum('pending', 'paid', 'cancelled', name='paymentstatus'), nullable=False),
    sa.Column('payment_proof_ref', sa.String(), nullable=True),
    sa.Column('commission_paid', sa.Boolean(), server_default=sa.false(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
    sa.CheckConstraint('total_amount > 0', name='ck_invoices_total_amount_positive'),
    sa.CheckConstraint("commission_paid = false OR payment_status = 'paid'", name='ck_invoices_commission_only_when_paid'),
    sa.ForeignKeyConstraint(['survey_id'], ['surveys.id'], ),
    sa.ForeignKeyConstraint(['partner_id'], ['partners.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('invoice_number')
    )
    op.create_index('ix_invoices_survey_id', 'invoices', ['survey_id'])
    op.create_index('ix_invoices_partner_id', 'invoices', ['partner_id'])
    op.create_index('ix_invoices_payment_status', 'invoices', ['payment_status'])
    op.create_table('transactions',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('partner_id', sa.UUID(), nullable=False),
    sa.Column('type', sa.Enum('commission', 'withdraw', name='transactiontype'), nullable=False),
    sa.Column('amount', sa.BigInteger(), nullable=False),
    sa.Column('status', sa.Enum('pending', 'success', 'rejected', 'failed', name='transactionstatus'), nullable=False),
    sa.Column('description', sa.String(), nullable=True),
    sa.Column('proof_ref', sa.String(), nullable=True),
    sa.Column('invoice_id', sa.UUID(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
    sa.CheckConstraint('amount > 0', name='ck_transactions_amount_positive'),
    sa.ForeignKeyConstraint(['partner_id'], ['partners.id'], ),
    sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('invoice_id')
    )
    op.create_index('ix_transactions_partner_id', 'transactions', ['partner_id'])
    op.create_table('app_settings',
    sa.Column('key', sa.String(), nullable=False),
    sa.Column('value', sa.String(), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.PrimaryKeyConstraint('key')
    )
    op.execute("INSERT INTO app_settings (key, value, updated_at) VALUES ('commission_percentage', '5', now())")
    # ### end Alembic commands ###


def downgrade() -> None:
    op.drop_table('app_settings')
    op.drop_index('ix_transactions_partner_id', table_name='transactions')
    op.drop_table('transactions')
    op.drop_index('ix_invoices_payment_status', table_name='invoices')
    op.drop_index('ix_invoices_partner_id', table_name='invoices')
    op.drop_index('ix_invoices_survey_id', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_surveys_status', table_name='surveys')
    op.drop_index('ix_surveys_partner_id', table_name='surveys')
    op.drop_table('surveys')
    op.drop_table('partners')
    sa.Enum(name='transactionstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='transactiontype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='paymentstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='surveystatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='partnerstatus').drop(op.get_bind(), checkfirst=True)
