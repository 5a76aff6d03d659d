import uuid
from pydantic import BaseModel, Field

from api.crud.ledger.schema import TransactionRead


class Disbursement(BaseModel):
    survey_id: uuid.UUID
    invoice_id: uuid.UUID
    # True when an earlier call already paid this invoice's commission
    already_disbursed: bool
    transaction: TransactionRead | None = None


class BonusCreate(BaseModel):
    amount: int = Field(gt=0)
    description: str | None = None
