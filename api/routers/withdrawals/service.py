import logging
import uuid

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from api.crud.ledger import LedgerStore
from api.errors import AlreadyFinalized, InsufficientBalance, InvalidAmount, NotAWithdrawal
from api.models import Transaction, TransactionStatus, TransactionType
from api.models.base import utcnow
from config import ENV
from utils.money import format_amount


class WithdrawalService:
    def __init__(self, session: AsyncSession, env: ENV | None = None):
        self.session = session
        self.ledger = LedgerStore()
        self.env = env or ENV()

    async def request_withdrawal(self, partner_id: uuid.UUID, amount: int, description: str | None = None) -> Transaction:
        """Reserve part of the partner's balance as a pending withdrawal."""
        if amount < self.env.MIN_WITHDRAWAL_AMOUNT:
            raise InvalidAmount(f"Minimum withdrawal is {format_amount(self.env.MIN_WITHDRAWAL_AMOUNT)}")

        try:
            partner = await self.ledger.lock_partner(self.session, partner_id)
            balance = await self.ledger.totals_for_partner(self.session, partner_id)
            if amount > balance.balance:
                raise InsufficientBalance(
                    f"Requested {format_amount(amount)}, available balance is {format_amount(balance.balance)}"
                )

            entry = await self.ledger.add_entry(
                self.session,
                partner_id=partner_id,
                type=TransactionType.WITHDRAW,
                amount=amount,
                status=TransactionStatus.PENDING,
                description=description or f"Withdrawal to {partner.bank_name} - {partner.account_number}",
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logging.info(f"Withdrawal {entry.id} of {amount} requested by partner {partner_id}")
        return entry

    async def list_withdrawals(self, status: TransactionStatus | None = None) -> list[Transaction]:
        return await self.ledger.list_withdrawals(self.session, status)

    async def _pending_withdrawal(self, transaction_id: uuid.UUID) -> Transaction:
        entry = await self.ledger.get_entry(self.session, transaction_id)
        if entry.type != TransactionType.WITHDRAW:
            raise NotAWithdrawal(f"Transaction {transaction_id} is a {entry.type.value}, not a withdrawal")
        if entry.status != TransactionStatus.PENDING:
            raise AlreadyFinalized(f"Withdrawal {transaction_id} is already {entry.status.value}")
        return entry

    async def _finalize(self, entry: Transaction, values: dict) -> None:
        result = await self.session.execute(
            update(Transaction)
            .where(
                Transaction.id == entry.id,
                Transaction.type == TransactionType.WITHDRAW,
                Transaction.status == TransactionStatus.PENDING,
            )
            .values(processed_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise AlreadyFinalized(f"Withdrawal {entry.id} was finalized concurrently")

    async def approve(self, transaction_id: uuid.UUID, proof_ref: str | None = None) -> Transaction:
        """
        Mark a pending withdrawal as paid out.

        The amount was reserved when it was requested, so the derived balance
        is not re-checked. What is re-checked, under the partner lock and
        after our own write, is that paid-out withdrawals never exceed
        credited commissions.
        """
        try:
            entry = await self._pending_withdrawal(transaction_id)
            await self.ledger.lock_partner(self.session, entry.partner_id)

            values = {"status": TransactionStatus.SUCCESS}
            if proof_ref:
                values["proof_ref"] = proof_ref
            await self._finalize(entry, values)

            totals = await self.ledger.totals_for_partner(self.session, entry.partner_id)
            if totals.total_withdrawn > totals.total_earned:
                raise InsufficientBalance(
                    f"Approving withdrawal {transaction_id} would pay out {format_amount(totals.total_withdrawn)} "
                    f"against {format_amount(totals.total_earned)} earned"
                )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(entry)
        logging.info(f"Withdrawal {entry.id} of {entry.amount} approved for partner {entry.partner_id}")
        return entry

    async def reject(self, transaction_id: uuid.UUID) -> Transaction:
        """Reject a pending withdrawal; its reserved amount returns to the balance."""
        try:
            entry = await self._pending_withdrawal(transaction_id)
            await self._finalize(entry, {"status": TransactionStatus.REJECTED})
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(entry)
        logging.info(f"Withdrawal {entry.id} of {entry.amount} rejected for partner {entry.partner_id}")
        return entry
