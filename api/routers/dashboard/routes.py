from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.database import get_session
from api.models import Invoice, Partner, Transaction, TransactionStatus, TransactionType

router = APIRouter()


class DashboardStats(BaseModel):
    total_revenue: int
    pending_withdrawals: int
    total_partners: int


@router.get("/stats", response_model=DashboardStats, summary="Admin dashboard totals")
async def get_dashboard_stats(session: AsyncSession = Depends(get_session)):
    # Revenue counts every invoice regardless of payment status
    total_revenue = await session.scalar(select(func.coalesce(func.sum(Invoice.total_amount), 0)))
    pending_withdrawals = await session.scalar(
        select(func.count(Transaction.id)).where(
            Transaction.type == TransactionType.WITHDRAW,
            Transaction.status == TransactionStatus.PENDING,
        )
    )
    total_partners = await session.scalar(select(func.count(Partner.id)))
    return DashboardStats(
        total_revenue=int(total_revenue or 0),
        pending_withdrawals=pending_withdrawals or 0,
        total_partners=total_partners or 0,
    )
