from fastapi import Depends, FastAPI
import uvicorn
from api.routers.system import routes as SystemRoutes
from api.routers.surveys import routes as SurveyRoutes
from api.routers.invoices import routes as InvoiceRoutes
from api.routers.commissions import routes as CommissionRoutes
from api.routers.withdrawals import routes as WithdrawalRoutes
from api.routers.partners import routes as PartnerRoutes
from api.routers.settings import routes as SettingsRoutes
from api.routers.dashboard import routes as DashboardRoutes
from api.security import require_admin_service
from utils.logger import setup_logging


class FastAPIManager:
    def __init__(self):
        setup_logging()
        # version format: version.subversion:month.year.day:stage (beta, stable)
        self.api = FastAPI(
            version="1.0:10.26.19:beta",
            title="Installation fulfillment & partner commissions",
            description=(
                "Back office for curtain and blind installation jobs: survey lifecycle, invoice payment approval, "
                "partner commission disbursement and withdrawal approval. Partner balances are always derived "
                "from the transaction ledger. All business routes require the admin service key."
            ),
        )
        self.add_routers()

    def add_routers(self):
        admin = [Depends(require_admin_service)]
        self.api.include_router(
            SystemRoutes.router
        )
        self.api.include_router(
            SurveyRoutes.router,
            prefix="/surveys",
            dependencies=admin,
            tags=["Surveys"]
        )
        self.api.include_router(
            InvoiceRoutes.router,
            prefix="/invoices",
            dependencies=admin,
            tags=["Invoices"]
        )
        self.api.include_router(
            CommissionRoutes.router,
            prefix="/commissions",
            dependencies=admin,
            tags=["Commissions"]
        )
        self.api.include_router(
            WithdrawalRoutes.router,
            prefix="/withdrawals",
            dependencies=admin,
            tags=["Withdrawals"]
        )
        self.api.include_router(
            PartnerRoutes.router,
            prefix="/partners",
            dependencies=admin,
            tags=["Partners"]
        )
        self.api.include_router(
            SettingsRoutes.router,
            prefix="/settings",
            dependencies=admin,
            tags=["Settings"]
        )
        self.api.include_router(
            DashboardRoutes.router,
            prefix="/dashboard",
            dependencies=admin,
            tags=["Dashboard"]
        )

    def start_server(self):
        uvicorn.run(self.api, host="0.0.0.0", port=8000)

    def get_app(self) -> FastAPI:
        return self.api
