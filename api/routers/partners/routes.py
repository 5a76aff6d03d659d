import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.crud.ledger.schema import PartnerBalance, TransactionRead
from api.database import get_session
from api.errors import BusinessRuleError, to_http
from .schemas import PartnerCreate, PartnerRead, PartnerStatusUpdate, PartnerSummary
from .service import PartnerService

router = APIRouter()

def get_partner_service(session: AsyncSession = Depends(get_session)) -> PartnerService:
    return PartnerService(session)

@router.post("", response_model=PartnerRead, status_code=status.HTTP_201_CREATED, summary="Register a partner")
async def create_partner(
    dto: PartnerCreate,
    service: PartnerService = Depends(get_partner_service)
):
    try:
        return await service.create_partner(dto)
    except BusinessRuleError as e:
        raise to_http(e)

@router.get("", response_model=list[PartnerSummary], summary="List partners with sales and commission figures")
async def list_partners(service: PartnerService = Depends(get_partner_service)):
    return await service.list_partners()

@router.patch("/{partner_id}/status", response_model=PartnerRead, summary="Activate or deactivate a partner")
async def update_partner_status(
    partner_id: uuid.UUID,
    dto: PartnerStatusUpdate,
    service: PartnerService = Depends(get_partner_service)
):
    try:
        return await service.set_status(partner_id, dto.status)
    except BusinessRuleError as e:
        raise to_http(e)

@router.get("/{partner_id}/balance", response_model=PartnerBalance, summary="Live balance derived from the ledger")
async def get_partner_balance(
    partner_id: uuid.UUID,
    service: PartnerService = Depends(get_partner_service)
):
    try:
        return await service.get_balance(partner_id)
    except BusinessRuleError as e:
        raise to_http(e)

@router.get("/{partner_id}/transactions", response_model=list[TransactionRead], summary="Partner ledger history")
async def get_partner_transactions(
    partner_id: uuid.UUID,
    service: PartnerService = Depends(get_partner_service)
):
    try:
        return await service.get_transactions(partner_id)
    except BusinessRuleError as e:
        raise to_http(e)
