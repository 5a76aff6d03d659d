import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import InvalidTransition, NotFound, PreconditionFailed
from api.models import Partner, Survey, SurveyStatus
from api.models.base import utcnow
from .schemas import SurveyCreate

# Edges an admin may request directly
ADMIN_TRANSITIONS: dict[SurveyStatus, frozenset[SurveyStatus]] = {
    SurveyStatus.PENDING: frozenset({SurveyStatus.CONFIRMED, SurveyStatus.CANCELLED}),
    SurveyStatus.CONFIRMED: frozenset({SurveyStatus.COMPLETED}),
    SurveyStatus.COMPLETED: frozenset({SurveyStatus.INSTALLATION}),
    SurveyStatus.INSTALLATION: frozenset({SurveyStatus.DONE}),
}

# Edges only the payment-approval cascade may take: a paid invoice moves the
# job straight to installation from any pre-installation state
CASCADE_TRANSITIONS: dict[SurveyStatus, frozenset[SurveyStatus]] = {
    SurveyStatus.PENDING: frozenset({SurveyStatus.INSTALLATION}),
    SurveyStatus.CONFIRMED: frozenset({SurveyStatus.INSTALLATION}),
    SurveyStatus.COMPLETED: frozenset({SurveyStatus.INSTALLATION}),
}

TERMINAL_STATUSES = frozenset({SurveyStatus.DONE, SurveyStatus.CANCELLED})


def can_transition(current: SurveyStatus, target: SurveyStatus, cascade: bool = False) -> bool:
    edges = CASCADE_TRANSITIONS if cascade else ADMIN_TRANSITIONS
    return target in edges.get(current, frozenset())


class SurveyService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_survey(self, dto: SurveyCreate) -> Survey:
        if dto.partner_id and not await self.session.get(Partner, dto.partner_id):
            raise NotFound(f"Partner {dto.partner_id} not found")

        survey = Survey(**dto.model_dump(), status=SurveyStatus.PENDING)
        self.session.add(survey)
        await self.session.commit()
        await self.session.refresh(survey)
        logging.info(f"Survey {survey.id} created for partner {survey.partner_id}")
        return survey

    async def get_survey(self, survey_id: uuid.UUID) -> Survey:
        survey = await self.session.get(Survey, survey_id, populate_existing=True)
        if not survey:
            raise NotFound(f"Survey {survey_id} not found")
        return survey

    async def list_surveys(self, status: SurveyStatus | None = None) -> list[Survey]:
        query = select(Survey)
        if status is not None:
            query = query.where(Survey.status == status)
        result = await self.session.execute(query.order_by(Survey.created_at.desc()))
        return list(result.scalars().all())

    async def transition(
        self,
        survey_id: uuid.UUID,
        target: SurveyStatus,
        expected: SurveyStatus | None = None,
    ) -> Survey:
        """Admin-requested move along one edge of the survey graph."""
        survey = await self.get_survey(survey_id)
        current = survey.status

        if not can_transition(current, target):
            raise InvalidTransition(f"Survey {survey_id} cannot move from {current.value} to {target.value}")
        if expected is not None and expected != current:
            raise PreconditionFailed(
                f"Survey {survey_id} is {current.value}, expected {expected.value}"
            )

        return await self._write_transition(survey, current, target)

    async def cascade_to_installation(self, survey_id: uuid.UUID) -> Survey:
        """
        Move a survey to installation after its invoice was paid, starting
        from whatever status it currently has. A survey already in
        installation is left untouched.
        """
        survey = await self.get_survey(survey_id)
        current = survey.status

        if current == SurveyStatus.INSTALLATION:
            return survey
        if not can_transition(current, SurveyStatus.INSTALLATION, cascade=True):
            raise InvalidTransition(
                f"Survey {survey_id} is {current.value} and cannot move to installation"
            )

        return await self._write_transition(survey, current, SurveyStatus.INSTALLATION)

    async def _write_transition(self, survey: Survey, current: SurveyStatus, target: SurveyStatus) -> Survey:
        # Conditional write keyed on the status we decided from
        result = await self.session.execute(
            update(Survey)
            .where(Survey.id == survey.id, Survey.status == current)
            .values(status=target, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            message = f"Survey {survey.id} changed concurrently, it is no longer {current.value}"
            await self.session.rollback()
            raise PreconditionFailed(message)

        await self.session.commit()
        await self.session.refresh(survey)
        logging.info(f"Survey {survey.id}: {current.value} -> {target.value}")
        return survey
