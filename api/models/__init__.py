from .base import Base
from .partner import Partner, PartnerStatus
from .survey import Survey, SurveyStatus
from .invoice import Invoice, PaymentStatus
from .transaction import Transaction, TransactionType, TransactionStatus
from .app_setting import AppSetting
