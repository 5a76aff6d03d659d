import uuid
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.crud.ledger.schema import TransactionRead
from api.database import get_session
from api.errors import BusinessRuleError, to_http
from api.models.transaction import TransactionStatus
from .schemas import WithdrawalApproveRequest, WithdrawalRequestCreate
from .service import WithdrawalService

router = APIRouter()

def get_withdrawal_service(session: AsyncSession = Depends(get_session)) -> WithdrawalService:
    return WithdrawalService(session)

@router.get("", response_model=list[TransactionRead], summary="List withdrawal requests, optionally by status")
async def list_withdrawals(
    status: TransactionStatus | None = Query(None, description="Filter by transaction status"),
    service: WithdrawalService = Depends(get_withdrawal_service)
):
    return await service.list_withdrawals(status)

@router.post("/request", response_model=TransactionRead, status_code=status.HTTP_201_CREATED, summary="Request a withdrawal for a partner")
async def request_withdrawal(
    dto: WithdrawalRequestCreate,
    service: WithdrawalService = Depends(get_withdrawal_service)
):
    try:
        return await service.request_withdrawal(dto.partner_id, dto.amount, dto.description)
    except BusinessRuleError as e:
        raise to_http(e)

@router.patch("/{transaction_id}/approve", response_model=TransactionRead, summary="Approve a withdrawal request")
async def approve_withdrawal(
    transaction_id: uuid.UUID,
    dto: WithdrawalApproveRequest | None = None,
    service: WithdrawalService = Depends(get_withdrawal_service)
):
    try:
        return await service.approve(transaction_id, dto.proof_ref if dto else None)
    except BusinessRuleError as e:
        raise to_http(e)

@router.patch("/{transaction_id}/reject", response_model=TransactionRead, summary="Reject a withdrawal request")
async def reject_withdrawal(
    transaction_id: uuid.UUID,
    service: WithdrawalService = Depends(get_withdrawal_service)
):
    try:
        return await service.reject(transaction_id)
    except BusinessRuleError as e:
        raise to_http(e)
