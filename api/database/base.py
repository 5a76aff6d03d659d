from api.models.base import Base  # noqa

# Import all the models, so that Base has them before being
# imported by Alembic.
# This ensures that Alembic's autogenerate can "see" the models.
from api.models.partner import Partner  # noqa
from api.models.survey import Survey  # noqa
from api.models.invoice import Invoice  # noqa
from api.models.transaction import Transaction  # noqa
from api.models.app_setting import AppSetting  # noqa
