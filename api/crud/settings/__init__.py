import logging

from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import InvalidAmount
from api.models import AppSetting
from config import ENV

COMMISSION_PERCENTAGE_KEY = "commission_percentage"


class SettingsService:
    def __init__(self, env: ENV | None = None):
        self.env = env or ENV()

    async def get_commission_percentage(self, session: AsyncSession) -> int:
        """Current percentage; the configured default when unset or unreadable."""
        setting = await session.get(AppSetting, COMMISSION_PERCENTAGE_KEY, populate_existing=True)
        if not setting:
            return self.env.DEFAULT_COMMISSION_PERCENTAGE
        try:
            value = int(setting.value)
        except ValueError:
            logging.warning(f"Unreadable commission percentage {setting.value!r}, using default")
            return self.env.DEFAULT_COMMISSION_PERCENTAGE
        if not 0 <= value <= 100:
            logging.warning(f"Commission percentage {value} out of range, using default")
            return self.env.DEFAULT_COMMISSION_PERCENTAGE
        return value

    async def set_commission_percentage(self, value: int, session: AsyncSession) -> int:
        if not 0 <= value <= 100:
            raise InvalidAmount("Commission percentage must be between 0 and 100")
        setting = await session.get(AppSetting, COMMISSION_PERCENTAGE_KEY)
        if setting:
            setting.value = str(value)
        else:
            session.add(AppSetting(key=COMMISSION_PERCENTAGE_KEY, value=str(value)))
        await session.commit()
        logging.info(f"Commission percentage set to {value}%")
        return value
