import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from api.crud.ledger import LedgerStore
from api.errors import NotFound
from api.models import PaymentStatus, SurveyStatus, Transaction, TransactionStatus, TransactionType

COMMISSION = TransactionType.COMMISSION
WITHDRAW = TransactionType.WITHDRAW


async def test_empty_ledger_has_zero_balance(db_session, make_partner):
    partner = await make_partner()

    totals = await LedgerStore().totals_for_partner(db_session, partner.id)

    assert totals.balance == 0
    assert totals.total_earned == 0
    assert totals.total_withdrawn == 0
    assert totals.pending_withdrawal == 0


async def test_balance_formula_over_mixed_history(db_session, make_partner, make_transaction):
    partner = await make_partner()
    await make_transaction(partner, COMMISSION, 100_000, TransactionStatus.SUCCESS)
    await make_transaction(partner, COMMISSION, 25_000, TransactionStatus.SUCCESS)
    await make_transaction(partner, WITHDRAW, 40_000, TransactionStatus.SUCCESS)
    await make_transaction(partner, WITHDRAW, 30_000, TransactionStatus.PENDING)
    # Neither of these counts
    await make_transaction(partner, WITHDRAW, 60_000, TransactionStatus.REJECTED)
    await make_transaction(partner, WITHDRAW, 70_000, TransactionStatus.FAILED)

    totals = await LedgerStore().totals_for_partner(db_session, partner.id)

    assert totals.total_earned == 125_000
    assert totals.total_withdrawn == 40_000
    assert totals.pending_withdrawal == 30_000
    assert totals.balance == 125_000 - 40_000 - 30_000


async def test_balance_is_rederived_after_status_change(db_session, make_partner, make_transaction):
    partner = await make_partner()
    ledger = LedgerStore()
    await make_transaction(partner, COMMISSION, 50_000, TransactionStatus.SUCCESS)
    withdrawal = await make_transaction(partner, WITHDRAW, 50_000, TransactionStatus.PENDING)
    assert (await ledger.totals_for_partner(db_session, partner.id)).balance == 0

    withdrawal.status = TransactionStatus.REJECTED
    await db_session.commit()

    assert (await ledger.totals_for_partner(db_session, partner.id)).balance == 50_000


async def test_totals_are_per_partner(db_session, make_partner, make_transaction):
    first = await make_partner("First")
    second = await make_partner("Second")
    await make_transaction(first, COMMISSION, 10_000, TransactionStatus.SUCCESS)
    await make_transaction(second, COMMISSION, 99_000, TransactionStatus.SUCCESS)

    totals = await LedgerStore().totals_for_partner(db_session, first.id)

    assert totals.total_earned == 10_000


async def test_list_for_partner_returns_only_their_rows(db_session, make_partner, make_transaction):
    partner = await make_partner()
    other = await make_partner("Other")
    await make_transaction(partner, COMMISSION, 10_000, TransactionStatus.SUCCESS)
    await make_transaction(partner, WITHDRAW, 5_000, TransactionStatus.PENDING)
    await make_transaction(other, COMMISSION, 1_000, TransactionStatus.SUCCESS)

    rows = await LedgerStore().list_for_partner(db_session, partner.id)

    assert len(rows) == 2
    assert {row.partner_id for row in rows} == {partner.id}


async def test_lock_partner_unknown_raises_not_found(db_session):
    with pytest.raises(NotFound):
        await LedgerStore().lock_partner(db_session, uuid.uuid4())


async def test_invoice_can_be_credited_only_once(db_session, make_partner, make_survey, make_invoice):
    partner = await make_partner()
    survey = await make_survey(partner, status=SurveyStatus.DONE)
    invoice = await make_invoice(survey, payment_status=PaymentStatus.PAID)
    db_session.add(Transaction(
        partner_id=partner.id, type=COMMISSION, amount=1, status=TransactionStatus.SUCCESS, invoice_id=invoice.id
    ))
    await db_session.commit()

    db_session.add(Transaction(
        partner_id=partner.id, type=COMMISSION, amount=1, status=TransactionStatus.SUCCESS, invoice_id=invoice.id
    ))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()
