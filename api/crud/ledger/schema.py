import uuid
from datetime import datetime
from pydantic import BaseModel

from api.models.transaction import TransactionStatus, TransactionType


class PartnerBalance(BaseModel):
    partner_id: uuid.UUID
    balance: int
    total_earned: int
    total_withdrawn: int
    pending_withdrawal: int

    @classmethod
    def derive(cls, partner_id: uuid.UUID, total_earned: int, total_withdrawn: int, pending_withdrawal: int) -> "PartnerBalance":
        return cls(
            partner_id=partner_id,
            balance=total_earned - total_withdrawn - pending_withdrawal,
            total_earned=total_earned,
            total_withdrawn=total_withdrawn,
            pending_withdrawal=pending_withdrawal,
        )


class TransactionRead(BaseModel):
    id: uuid.UUID
    partner_id: uuid.UUID
    type: TransactionType
    amount: int
    status: TransactionStatus
    description: str | None = None
    proof_ref: str | None = None
    invoice_id: uuid.UUID | None = None
    created_at: datetime
    processed_at: datetime | None = None

    class Config:
        from_attributes = True
