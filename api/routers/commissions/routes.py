import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.crud.ledger.schema import TransactionRead
from api.database import get_session
from api.errors import BusinessRuleError, to_http
from .schemas import BonusCreate, Disbursement
from .service import CommissionService

router = APIRouter()

def get_commission_service(session: AsyncSession = Depends(get_session)) -> CommissionService:
    return CommissionService(session)

@router.post("/surveys/{survey_id}/disburse", response_model=Disbursement, summary="Disburse the commission for a finished survey")
async def disburse_commission(
    survey_id: uuid.UUID,
    service: CommissionService = Depends(get_commission_service)
):
    try:
        return await service.disburse(survey_id)
    except BusinessRuleError as e:
        raise to_http(e)

@router.post("/partners/{partner_id}/bonus", response_model=TransactionRead, status_code=status.HTTP_201_CREATED, summary="Credit a manual bonus to a partner")
async def grant_bonus(
    partner_id: uuid.UUID,
    dto: BonusCreate,
    service: CommissionService = Depends(get_commission_service)
):
    try:
        return await service.grant_bonus(partner_id, dto.amount, dto.description)
    except BusinessRuleError as e:
        raise to_http(e)
