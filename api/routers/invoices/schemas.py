import uuid
from datetime import datetime
from pydantic import BaseModel, Field

from api.models.invoice import PaymentStatus
from api.models.survey import SurveyStatus


class InvoiceCreate(BaseModel):
    invoice_number: str = Field(min_length=1)
    total_amount: int = Field(gt=0, description="Amount in the smallest currency unit")
    survey_id: uuid.UUID | None = None
    partner_id: uuid.UUID | None = None
    customer_name: str | None = None
    invoice_type: str | None = None


class InvoiceApproveRequest(BaseModel):
    # Optional when a proof is already stored on the invoice
    proof_ref: str | None = None


class InvoiceRead(BaseModel):
    id: uuid.UUID
    invoice_number: str
    survey_id: uuid.UUID | None
    partner_id: uuid.UUID | None
    customer_name: str | None = None
    invoice_type: str | None = None
    total_amount: int
    payment_status: PaymentStatus
    payment_proof_ref: str | None = None
    commission_paid: bool
    created_at: datetime
    paid_at: datetime | None = None

    class Config:
        from_attributes = True


class CascadeWarning(BaseModel):
    code: str
    message: str


class InvoiceApproval(BaseModel):
    invoice: InvoiceRead
    # Status of the linked survey after the cascade, None when nothing is linked
    survey_status: SurveyStatus | None = None
    warnings: list[CascadeWarning] = []
