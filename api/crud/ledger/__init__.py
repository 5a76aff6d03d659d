import uuid
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.crud.ledger.interface import LedgerInterface
from api.crud.ledger.schema import PartnerBalance
from api.errors import NotFound
from api.models import Partner, Transaction, TransactionStatus, TransactionType


class LedgerStore(LedgerInterface):
    """
    Append-mostly store of Transaction rows.

    Nothing here commits: callers own the DB transaction so that ledger
    writes land together with the rows they belong to.
    """

    async def add_entry(
        self,
        session: AsyncSession,
        partner_id: uuid.UUID,
        type: TransactionType,
        amount: int,
        status: TransactionStatus,
        description: str | None = None,
        invoice_id: uuid.UUID | None = None,
        processed_at: datetime | None = None,
    ) -> Transaction:
        entry = Transaction(
            partner_id=partner_id,
            type=type,
            amount=amount,
            status=status,
            description=description,
            invoice_id=invoice_id,
            processed_at=processed_at,
        )
        session.add(entry)
        await session.flush()
        return entry

    async def get_entry(self, session: AsyncSession, transaction_id: uuid.UUID) -> Transaction:
        entry = await session.get(Transaction, transaction_id, populate_existing=True)
        if not entry:
            raise NotFound(f"Transaction {transaction_id} not found")
        return entry

    async def get_by_invoice(self, session: AsyncSession, invoice_id: uuid.UUID) -> Transaction | None:
        return await session.scalar(select(Transaction).where(Transaction.invoice_id == invoice_id))

    async def list_for_partner(self, session: AsyncSession, partner_id: uuid.UUID) -> list[Transaction]:
        query = (
            select(Transaction)
            .where(Transaction.partner_id == partner_id)
            .order_by(Transaction.created_at.desc())
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def list_withdrawals(self, session: AsyncSession, status: TransactionStatus | None = None) -> list[Transaction]:
        query = select(Transaction).where(Transaction.type == TransactionType.WITHDRAW)
        if status is not None:
            query = query.where(Transaction.status == status)
        result = await session.execute(query.order_by(Transaction.created_at.desc()))
        return list(result.scalars().all())

    async def totals_for_partner(self, session: AsyncSession, partner_id: uuid.UUID) -> PartnerBalance:
        """
        balance = Σ(commission, success) − Σ(withdraw, success) − Σ(withdraw, pending)

        Always derived from the live rows. Inside an open transaction this
        sees the caller's own uncommitted writes.
        """
        query = (
            select(Transaction.type, Transaction.status, func.coalesce(func.sum(Transaction.amount), 0))
            .where(Transaction.partner_id == partner_id)
            .group_by(Transaction.type, Transaction.status)
        )
        sums = {(row[0], row[1]): int(row[2]) for row in (await session.execute(query)).all()}
        return PartnerBalance.derive(
            partner_id=partner_id,
            total_earned=sums.get((TransactionType.COMMISSION, TransactionStatus.SUCCESS), 0),
            total_withdrawn=sums.get((TransactionType.WITHDRAW, TransactionStatus.SUCCESS), 0),
            pending_withdrawal=sums.get((TransactionType.WITHDRAW, TransactionStatus.PENDING), 0),
        )

    async def lock_partner(self, session: AsyncSession, partner_id: uuid.UUID) -> Partner:
        """
        Row lock on the partner, serialising balance checks for that partner
        until the surrounding transaction ends. SQLite ignores FOR UPDATE and
        serialises writers on its own.
        """
        partner = await session.scalar(
            select(Partner).where(Partner.id == partner_id).with_for_update()
        )
        if not partner:
            raise NotFound(f"Partner {partner_id} not found")
        return partner
