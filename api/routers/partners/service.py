import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.crud.ledger import LedgerStore
from api.crud.ledger.schema import PartnerBalance
from api.errors import DuplicateRecord, NotFound
from api.models import Invoice, Partner, PartnerStatus, PaymentStatus, Transaction, TransactionStatus, TransactionType
from utils.affiliate import AffiliateCode
from .schemas import PartnerCreate, PartnerRead, PartnerSummary


class PartnerService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.ledger = LedgerStore()
        self.codes = AffiliateCode()

    async def create_partner(self, dto: PartnerCreate) -> Partner:
        taken = set((await self.session.execute(select(Partner.affiliate_code))).scalars().all())
        partner = Partner(**dto.model_dump(), affiliate_code=self.codes.generate_code(taken))
        self.session.add(partner)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateRecord(f"Partner with email {dto.email} already exists")
        await self.session.refresh(partner)
        logging.info(f"Partner {partner.id} registered with code {partner.affiliate_code}")
        return partner

    async def get_partner(self, partner_id: uuid.UUID) -> Partner:
        partner = await self.session.get(Partner, partner_id, populate_existing=True)
        if not partner:
            raise NotFound(f"Partner {partner_id} not found")
        return partner

    async def set_status(self, partner_id: uuid.UUID, status: PartnerStatus) -> Partner:
        partner = await self.get_partner(partner_id)
        partner.status = status
        await self.session.commit()
        await self.session.refresh(partner)
        return partner

    async def get_balance(self, partner_id: uuid.UUID) -> PartnerBalance:
        await self.get_partner(partner_id)
        return await self.ledger.totals_for_partner(self.session, partner_id)

    async def get_transactions(self, partner_id: uuid.UUID) -> list[Transaction]:
        await self.get_partner(partner_id)
        return await self.ledger.list_for_partner(self.session, partner_id)

    async def list_partners(self) -> list[PartnerSummary]:
        partners = (await self.session.execute(select(Partner).order_by(Partner.created_at.desc()))).scalars().all()

        sales_query = (
            select(Invoice.partner_id, func.coalesce(func.sum(Invoice.total_amount), 0))
            .where(Invoice.partner_id.is_not(None), Invoice.payment_status == PaymentStatus.PAID)
            .group_by(Invoice.partner_id)
        )
        sales = {row[0]: int(row[1]) for row in (await self.session.execute(sales_query)).all()}

        ledger_query = (
            select(Transaction.partner_id, Transaction.type, Transaction.status, func.sum(Transaction.amount))
            .group_by(Transaction.partner_id, Transaction.type, Transaction.status)
        )
        sums: dict[tuple, int] = {}
        for partner_id, type_, status, total in (await self.session.execute(ledger_query)).all():
            sums[(partner_id, type_, status)] = int(total or 0)

        summaries = []
        for partner in partners:
            balance = PartnerBalance.derive(
                partner_id=partner.id,
                total_earned=sums.get((partner.id, TransactionType.COMMISSION, TransactionStatus.SUCCESS), 0),
                total_withdrawn=sums.get((partner.id, TransactionType.WITHDRAW, TransactionStatus.SUCCESS), 0),
                pending_withdrawal=sums.get((partner.id, TransactionType.WITHDRAW, TransactionStatus.PENDING), 0),
            )
            summaries.append(PartnerSummary(
                **PartnerRead.model_validate(partner).model_dump(),
                total_sales=sales.get(partner.id, 0),
                total_commission=balance.total_earned,
                total_withdrawn=balance.total_withdrawn,
                pending_withdrawal=balance.pending_withdrawal,
                available_balance=balance.balance,
            ))
        return summaries
