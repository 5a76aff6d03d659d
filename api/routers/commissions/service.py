import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.crud.ledger import LedgerStore
from api.crud.ledger.schema import TransactionRead
from api.crud.settings import SettingsService
from api.errors import (
    InvalidAmount,
    MissingPartner,
    MultiplePayableInvoices,
    NoPayableInvoice,
    NotFound,
    SurveyNotDone,
)
from api.models import Invoice, Partner, PaymentStatus, Survey, SurveyStatus, Transaction, TransactionStatus, TransactionType
from api.models.base import utcnow
from utils.money import calculate_commission
from .schemas import Disbursement

DEFAULT_BONUS_DESCRIPTION = "Bonus from admin"


class CommissionService:
    def __init__(self, session: AsyncSession, settings: SettingsService | None = None):
        self.session = session
        self.ledger = LedgerStore()
        self.settings = settings or SettingsService()

    async def disburse(self, survey_id: uuid.UUID) -> Disbursement:
        """
        Credit the partner's commission for a finished survey's paid invoice.

        The commission_paid flag flip and the ledger insert share one DB
        transaction; either both are committed or neither is. Calling this
        again for the same survey returns the existing credit.
        """
        try:
            survey = await self.session.get(Survey, survey_id, populate_existing=True)
            if not survey:
                raise NotFound(f"Survey {survey_id} not found")
            if survey.status != SurveyStatus.DONE:
                raise SurveyNotDone(f"Survey {survey_id} is {survey.status.value}, commission is paid once it is done")
            if not survey.partner_id:
                raise MissingPartner(f"Survey {survey_id} has no partner to credit")

            invoice = await self._payable_invoice(survey_id)
            if invoice.commission_paid:
                return await self._already_disbursed(survey_id, invoice.id, invoice.invoice_number)

            percentage = await self.settings.get_commission_percentage(self.session)
            amount = calculate_commission(invoice.total_amount, percentage)
            if amount <= 0:
                raise InvalidAmount(
                    f"Commission for invoice {invoice.invoice_number} at {percentage}% rounds to zero"
                )

            flipped = await self.session.execute(
                update(Invoice)
                .where(
                    Invoice.id == invoice.id,
                    Invoice.payment_status == PaymentStatus.PAID,
                    Invoice.commission_paid.is_(False),
                )
                .values(commission_paid=True)
                .execution_options(synchronize_session=False)
            )
            if flipped.rowcount == 0:
                # Another admin got there between our read and our write
                invoice_id, number = invoice.id, invoice.invoice_number
                await self.session.rollback()
                return await self._already_disbursed(survey_id, invoice_id, number)

            entry = await self.ledger.add_entry(
                self.session,
                partner_id=survey.partner_id,
                type=TransactionType.COMMISSION,
                amount=amount,
                status=TransactionStatus.SUCCESS,
                description=f"Commission {percentage}% from {invoice.invoice_number}",
                invoice_id=invoice.id,
                processed_at=utcnow(),
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logging.warning(f"Commission for survey {survey_id} already recorded by a concurrent request")
            invoice = await self._payable_invoice(survey_id)
            return await self._already_disbursed(survey_id, invoice.id, invoice.invoice_number)
        except Exception:
            await self.session.rollback()
            raise

        logging.info(
            f"Disbursed commission {amount} ({percentage}%) to partner {survey.partner_id} "
            f"for invoice {invoice.invoice_number}"
        )
        return Disbursement(
            survey_id=survey_id,
            invoice_id=invoice.id,
            already_disbursed=False,
            transaction=TransactionRead.model_validate(entry),
        )

    async def _payable_invoice(self, survey_id: uuid.UUID) -> Invoice:
        result = await self.session.execute(
            select(Invoice)
            .where(Invoice.survey_id == survey_id, Invoice.payment_status == PaymentStatus.PAID)
            .execution_options(populate_existing=True)
        )
        invoices = list(result.scalars().all())
        if not invoices:
            raise NoPayableInvoice(f"Survey {survey_id} has no paid invoice")
        if len(invoices) > 1:
            numbers = ", ".join(sorted(i.invoice_number for i in invoices))
            raise MultiplePayableInvoices(f"Survey {survey_id} has several paid invoices: {numbers}")
        return invoices[0]

    async def _already_disbursed(self, survey_id: uuid.UUID, invoice_id: uuid.UUID, invoice_number: str) -> Disbursement:
        entry = await self.ledger.get_by_invoice(self.session, invoice_id)
        logging.info(f"Commission for invoice {invoice_number} was already disbursed")
        return Disbursement(
            survey_id=survey_id,
            invoice_id=invoice_id,
            already_disbursed=True,
            transaction=TransactionRead.model_validate(entry) if entry else None,
        )

    async def grant_bonus(self, partner_id: uuid.UUID, amount: int, description: str | None = None) -> Transaction:
        """Manual credit from an admin, not tied to any invoice."""
        if amount <= 0:
            raise InvalidAmount("Bonus amount must be positive")
        try:
            if not await self.session.get(Partner, partner_id):
                raise NotFound(f"Partner {partner_id} not found")
            entry = await self.ledger.add_entry(
                self.session,
                partner_id=partner_id,
                type=TransactionType.COMMISSION,
                amount=amount,
                status=TransactionStatus.SUCCESS,
                description=description or DEFAULT_BONUS_DESCRIPTION,
                processed_at=utcnow(),
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logging.info(f"Granted bonus {amount} to partner {partner_id}")
        return entry
