import uuid
from datetime import datetime
from pydantic import BaseModel, Field

from api.models.partner import PartnerStatus


class PartnerCreate(BaseModel):
    full_name: str = Field(min_length=1)
    email: str | None = None
    whatsapp_number: str | None = None
    bank_name: str | None = None
    account_number: str | None = None
    account_holder: str | None = None


class PartnerStatusUpdate(BaseModel):
    status: PartnerStatus


class PartnerRead(BaseModel):
    id: uuid.UUID
    full_name: str
    email: str | None = None
    whatsapp_number: str | None = None
    affiliate_code: str | None = None
    bank_name: str | None = None
    account_number: str | None = None
    account_holder: str | None = None
    status: PartnerStatus
    created_at: datetime

    class Config:
        from_attributes = True


class PartnerSummary(PartnerRead):
    total_sales: int
    total_commission: int
    total_withdrawn: int
    pending_withdrawal: int
    available_balance: int
