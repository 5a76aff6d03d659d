import uuid
from pydantic import BaseModel, Field


class WithdrawalRequestCreate(BaseModel):
    partner_id: uuid.UUID
    amount: int = Field(gt=0)
    description: str | None = None


class WithdrawalApproveRequest(BaseModel):
    proof_ref: str | None = None
