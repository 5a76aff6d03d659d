"""Shared fixtures: a fresh SQLite file database per test, sessions, and factories."""

import os

os.environ.setdefault("ADMIN_API_TOKEN", "test-admin-token")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./pytest.db")
os.environ.setdefault("DEFAULT_COMMISSION_PERCENTAGE", "5")
os.environ.setdefault("MIN_WITHDRAWAL_AMOUNT", "50000")

import uuid

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from api.database.base import Base
from api.models import (
    Invoice,
    Partner,
    PaymentStatus,
    Survey,
    SurveyStatus,
    Transaction,
    TransactionStatus,
    TransactionType,
)

ADMIN_HEADERS = {"X-API-Key": os.environ["ADMIN_API_TOKEN"]}


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """File database so that separate sessions use separate connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False, "timeout": 15},
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def other_session(session_factory):
    """A second, independent admin session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(session_factory):
    from httpx import ASGITransport, AsyncClient

    from api.database import get_session
    from main import app

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers=ADMIN_HEADERS) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_partner(db_session):
    async def _make(full_name: str = "Siti Rahma", **kwargs) -> Partner:
        partner = Partner(
            full_name=full_name,
            bank_name=kwargs.pop("bank_name", "BCA"),
            account_number=kwargs.pop("account_number", "1234567890"),
            **kwargs,
        )
        db_session.add(partner)
        await db_session.commit()
        return partner
    return _make


@pytest.fixture
def make_survey(db_session):
    async def _make(partner: Partner | None = None, status: SurveyStatus = SurveyStatus.PENDING, **kwargs) -> Survey:
        survey = Survey(
            partner_id=partner.id if partner else None,
            customer_name=kwargs.pop("customer_name", "Budi Santoso"),
            calculator_type=kwargs.pop("calculator_type", "gorden"),
            status=status,
            **kwargs,
        )
        db_session.add(survey)
        await db_session.commit()
        return survey
    return _make


@pytest.fixture
def make_invoice(db_session):
    async def _make(
        survey: Survey | None = None,
        total_amount: int = 1_000_000,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        **kwargs,
    ) -> Invoice:
        invoice = Invoice(
            invoice_number=kwargs.pop("invoice_number", f"INV-{uuid.uuid4().hex[:8].upper()}"),
            survey_id=survey.id if survey else None,
            partner_id=kwargs.pop("partner_id", survey.partner_id if survey else None),
            total_amount=total_amount,
            payment_status=payment_status,
            **kwargs,
        )
        db_session.add(invoice)
        await db_session.commit()
        return invoice
    return _make


@pytest.fixture
def make_transaction(db_session):
    async def _make(
        partner: Partner,
        type: TransactionType,
        amount: int,
        status: TransactionStatus,
        **kwargs,
    ) -> Transaction:
        entry = Transaction(partner_id=partner.id, type=type, amount=amount, status=status, **kwargs)
        db_session.add(entry)
        await db_session.commit()
        return entry
    return _make
