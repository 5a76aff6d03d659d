import pytest

from api.crud.settings import COMMISSION_PERCENTAGE_KEY, SettingsService
from api.errors import InvalidAmount
from api.models import AppSetting


async def test_default_percentage_when_unset(db_session):
    assert await SettingsService().get_commission_percentage(db_session) == 5


async def test_set_and_read_back(db_session):
    service = SettingsService()

    await service.set_commission_percentage(12, db_session)
    assert await service.get_commission_percentage(db_session) == 12

    await service.set_commission_percentage(0, db_session)
    assert await service.get_commission_percentage(db_session) == 0


@pytest.mark.parametrize("value", [-1, 101])
async def test_out_of_range_is_refused(db_session, value):
    service = SettingsService()

    with pytest.raises(InvalidAmount):
        await service.set_commission_percentage(value, db_session)

    assert await service.get_commission_percentage(db_session) == 5


@pytest.mark.parametrize("stored", ["five", "250"])
async def test_unusable_stored_value_falls_back_to_default(db_session, stored):
    db_session.add(AppSetting(key=COMMISSION_PERCENTAGE_KEY, value=stored))
    await db_session.commit()

    assert await SettingsService().get_commission_percentage(db_session) == 5
