import uuid
from datetime import datetime
from pydantic import BaseModel, Field

from api.models.survey import SurveyStatus


class SurveyCreate(BaseModel):
    partner_id: uuid.UUID | None = None
    customer_name: str = Field(min_length=1)
    customer_phone: str | None = None
    address: str | None = None
    calculator_type: str = Field(min_length=1)
    notes: str | None = None


class SurveyTransitionRequest(BaseModel):
    target_status: SurveyStatus
    # Status the caller last saw; a mismatch is reported as precondition_failed
    expected_status: SurveyStatus | None = None


class SurveyRead(BaseModel):
    id: uuid.UUID
    partner_id: uuid.UUID | None
    customer_name: str
    customer_phone: str | None = None
    address: str | None = None
    calculator_type: str
    notes: str | None = None
    status: SurveyStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
