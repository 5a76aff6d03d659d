import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import AlreadyFinalized, BusinessRuleError, DuplicateRecord, NotFound, ProofRequired
from api.models import Invoice, Partner, PaymentStatus, Survey, SurveyStatus
from api.models.base import utcnow
from api.routers.surveys.service import SurveyService
from .schemas import CascadeWarning, InvoiceApproval, InvoiceCreate, InvoiceRead


class InvoiceService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_invoice(self, dto: InvoiceCreate) -> Invoice:
        partner_id = dto.partner_id
        if dto.survey_id:
            survey = await self.session.get(Survey, dto.survey_id)
            if not survey:
                raise NotFound(f"Survey {dto.survey_id} not found")
            # Invoices finalised from a partner's survey belong to that partner
            partner_id = partner_id or survey.partner_id
        if partner_id and not await self.session.get(Partner, partner_id):
            raise NotFound(f"Partner {partner_id} not found")

        invoice = Invoice(
            **dto.model_dump(exclude={"partner_id"}),
            partner_id=partner_id,
            payment_status=PaymentStatus.PENDING,
            commission_paid=False,
        )
        self.session.add(invoice)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateRecord(f"Invoice number {dto.invoice_number} already exists")
        await self.session.refresh(invoice)
        return invoice

    async def get_invoice(self, invoice_id: uuid.UUID) -> Invoice:
        invoice = await self.session.get(Invoice, invoice_id, populate_existing=True)
        if not invoice:
            raise NotFound(f"Invoice {invoice_id} not found")
        return invoice

    async def list_invoices(self, payment_status: PaymentStatus | None = None) -> list[Invoice]:
        query = select(Invoice)
        if payment_status is not None:
            query = query.where(Invoice.payment_status == payment_status)
        result = await self.session.execute(query.order_by(Invoice.created_at.desc()))
        return list(result.scalars().all())

    async def approve(self, invoice_id: uuid.UUID, proof_ref: str | None = None) -> InvoiceApproval:
        """
        Mark a pending invoice as paid, then try to move its survey to
        installation. The second step never undoes the first: its failure
        comes back as a warning on the result.
        """
        invoice = await self.get_invoice(invoice_id)
        if invoice.payment_status != PaymentStatus.PENDING:
            raise AlreadyFinalized(f"Invoice {invoice.invoice_number} is already {invoice.payment_status.value}")

        proof = proof_ref or invoice.payment_proof_ref
        if not proof:
            raise ProofRequired(f"Invoice {invoice.invoice_number} needs a payment proof before approval")

        # Step 1: the payment itself
        result = await self.session.execute(
            update(Invoice)
            .where(Invoice.id == invoice_id, Invoice.payment_status == PaymentStatus.PENDING)
            .values(payment_status=PaymentStatus.PAID, paid_at=utcnow(), payment_proof_ref=proof)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            message = f"Invoice {invoice.invoice_number} was finalized concurrently"
            await self.session.rollback()
            raise AlreadyFinalized(message)
        await self.session.commit()
        await self.session.refresh(invoice)
        approved = InvoiceRead.model_validate(invoice)
        logging.info(f"Invoice {approved.invoice_number} approved as paid")

        # Step 2: the cascade into the survey
        survey_status = None
        warnings: list[CascadeWarning] = []
        if approved.survey_id:
            survey_status, warning = await self._cascade(approved)
            if warning:
                warnings.append(warning)

        return InvoiceApproval(
            invoice=approved,
            survey_status=survey_status,
            warnings=warnings,
        )

    async def _cascade(self, invoice: InvoiceRead) -> tuple[SurveyStatus | None, CascadeWarning | None]:
        survey_id, number = invoice.survey_id, invoice.invoice_number
        surveys = SurveyService(self.session)
        try:
            survey = await surveys.cascade_to_installation(survey_id)
            return survey.status, None
        except BusinessRuleError as e:
            logging.warning(f"Invoice {number} paid but survey {survey_id} not moved: {e.message}")
            warning = CascadeWarning(code=e.code, message=e.message)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logging.error(f"Invoice {number} paid but survey {survey_id} update failed: {e}")
            warning = CascadeWarning(code="cascade_failed", message=str(e))

        survey = await self.session.get(Survey, survey_id, populate_existing=True)
        return (survey.status if survey else None), warning

    async def reject(self, invoice_id: uuid.UUID) -> Invoice:
        invoice = await self.get_invoice(invoice_id)
        if invoice.payment_status != PaymentStatus.PENDING:
            raise AlreadyFinalized(f"Invoice {invoice.invoice_number} is already {invoice.payment_status.value}")

        result = await self.session.execute(
            update(Invoice)
            .where(Invoice.id == invoice_id, Invoice.payment_status == PaymentStatus.PENDING)
            .values(payment_status=PaymentStatus.CANCELLED)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            message = f"Invoice {invoice.invoice_number} was finalized concurrently"
            await self.session.rollback()
            raise AlreadyFinalized(message)
        await self.session.commit()
        await self.session.refresh(invoice)
        logging.info(f"Invoice {invoice.invoice_number} rejected")
        return invoice
