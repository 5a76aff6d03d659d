from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from api.crud.settings import SettingsService
from api.database import get_session
from api.errors import BusinessRuleError, to_http

router = APIRouter()
settings_service = SettingsService()


class CommissionPercentage(BaseModel):
    percentage: int = Field(ge=0, le=100)


@router.get("/commission-percentage", response_model=CommissionPercentage, summary="Current commission percentage")
async def get_commission_percentage(session: AsyncSession = Depends(get_session)):
    return CommissionPercentage(percentage=await settings_service.get_commission_percentage(session))

@router.put("/commission-percentage", response_model=CommissionPercentage, summary="Change the commission percentage for future disbursements")
async def set_commission_percentage(
    dto: CommissionPercentage,
    session: AsyncSession = Depends(get_session)
):
    try:
        return CommissionPercentage(percentage=await settings_service.set_commission_percentage(dto.percentage, session))
    except BusinessRuleError as e:
        raise to_http(e)
