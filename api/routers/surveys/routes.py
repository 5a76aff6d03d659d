import uuid
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.database import get_session
from api.errors import BusinessRuleError, to_http
from api.models.survey import SurveyStatus
from .schemas import SurveyCreate, SurveyRead, SurveyTransitionRequest
from .service import SurveyService

router = APIRouter()

def get_survey_service(session: AsyncSession = Depends(get_session)) -> SurveyService:
    return SurveyService(session)

@router.post("", response_model=SurveyRead, status_code=status.HTTP_201_CREATED, summary="Register a new survey job")
async def create_survey(
    dto: SurveyCreate,
    service: SurveyService = Depends(get_survey_service)
):
    try:
        return await service.create_survey(dto)
    except BusinessRuleError as e:
        raise to_http(e)

@router.get("", response_model=list[SurveyRead], summary="List surveys, optionally by status")
async def list_surveys(
    status: SurveyStatus | None = Query(None, description="Filter by survey status"),
    service: SurveyService = Depends(get_survey_service)
):
    return await service.list_surveys(status)

@router.get("/{survey_id}", response_model=SurveyRead, summary="Get a survey")
async def get_survey(
    survey_id: uuid.UUID,
    service: SurveyService = Depends(get_survey_service)
):
    try:
        return await service.get_survey(survey_id)
    except BusinessRuleError as e:
        raise to_http(e)

@router.post("/{survey_id}/transition", response_model=SurveyRead, summary="Move a survey to another status")
async def transition_survey(
    survey_id: uuid.UUID,
    dto: SurveyTransitionRequest,
    service: SurveyService = Depends(get_survey_service)
):
    try:
        return await service.transition(survey_id, dto.target_status, dto.expected_status)
    except BusinessRuleError as e:
        raise to_http(e)
