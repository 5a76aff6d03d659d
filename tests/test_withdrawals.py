import uuid
from unittest.mock import AsyncMock

import pytest

from api.crud.ledger import LedgerStore
from api.errors import AlreadyFinalized, InsufficientBalance, InvalidAmount, NotAWithdrawal, NotFound
from api.models import TransactionStatus, TransactionType
from api.routers.withdrawals.service import WithdrawalService

COMMISSION = TransactionType.COMMISSION
WITHDRAW = TransactionType.WITHDRAW


@pytest.fixture
def earning_partner(make_partner, make_transaction):
    async def _make(earned: int = 50_000):
        partner = await make_partner(bank_name="Mandiri", account_number="0987654321")
        await make_transaction(partner, COMMISSION, earned, TransactionStatus.SUCCESS)
        return partner
    return _make


async def _balance(session, partner_id):
    return await LedgerStore().totals_for_partner(session, partner_id)


async def test_request_reserves_the_amount(db_session, earning_partner):
    partner = await earning_partner()

    entry = await WithdrawalService(db_session).request_withdrawal(partner.id, 50_000)

    assert entry.type == WITHDRAW
    assert entry.status == TransactionStatus.PENDING
    assert entry.description == "Withdrawal to Mandiri - 0987654321"
    balance = await _balance(db_session, partner.id)
    assert balance.balance == 0
    assert balance.pending_withdrawal == 50_000


async def test_approve_moves_reservation_to_withdrawn(db_session, earning_partner):
    partner = await earning_partner()
    service = WithdrawalService(db_session)
    entry = await service.request_withdrawal(partner.id, 50_000)

    approved = await service.approve(entry.id, proof_ref="transfer-proofs/wd-1.png")

    assert approved.status == TransactionStatus.SUCCESS
    assert approved.proof_ref == "transfer-proofs/wd-1.png"
    assert approved.processed_at is not None
    balance = await _balance(db_session, partner.id)
    assert balance.total_withdrawn == 50_000
    assert balance.pending_withdrawal == 0
    assert balance.balance == 0


async def test_reject_restores_the_balance(db_session, earning_partner):
    partner = await earning_partner()
    service = WithdrawalService(db_session)
    entry = await service.request_withdrawal(partner.id, 50_000)

    rejected = await service.reject(entry.id)

    assert rejected.status == TransactionStatus.REJECTED
    assert rejected.processed_at is not None
    assert (await _balance(db_session, partner.id)).balance == 50_000


async def test_request_below_minimum(db_session, earning_partner):
    partner = await earning_partner(100_000)

    with pytest.raises(InvalidAmount):
        await WithdrawalService(db_session).request_withdrawal(partner.id, 49_999)


async def test_request_above_balance(db_session, earning_partner):
    partner = await earning_partner()
    partner_id = partner.id

    with pytest.raises(InsufficientBalance):
        await WithdrawalService(db_session).request_withdrawal(partner_id, 60_000)

    assert (await _balance(db_session, partner_id)).pending_withdrawal == 0


async def test_pending_requests_count_against_new_ones(db_session, earning_partner):
    partner = await earning_partner(100_000)
    partner_id = partner.id
    service = WithdrawalService(db_session)
    await service.request_withdrawal(partner_id, 60_000)

    with pytest.raises(InsufficientBalance):
        await service.request_withdrawal(partner_id, 50_000)


async def test_request_for_unknown_partner(db_session):
    with pytest.raises(NotFound):
        await WithdrawalService(db_session).request_withdrawal(uuid.uuid4(), 50_000)


async def test_second_approval_cannot_overdraw(db_session, make_partner, make_transaction):
    partner = await make_partner()
    await make_transaction(partner, COMMISSION, 50_000, TransactionStatus.SUCCESS)
    first = await make_transaction(partner, WITHDRAW, 50_000, TransactionStatus.PENDING)
    second = await make_transaction(partner, WITHDRAW, 50_000, TransactionStatus.PENDING)
    partner_id, second_id = partner.id, second.id
    service = WithdrawalService(db_session)

    await service.approve(first.id)
    with pytest.raises(InsufficientBalance):
        await service.approve(second_id)

    entry = await LedgerStore().get_entry(db_session, second_id)
    assert entry.status == TransactionStatus.PENDING
    balance = await _balance(db_session, partner_id)
    assert balance.total_withdrawn == 50_000
    assert balance.total_earned == 50_000


async def test_concurrent_approvals_of_one_withdrawal(db_session, other_session, make_partner, make_transaction):
    partner = await make_partner()
    await make_transaction(partner, COMMISSION, 50_000, TransactionStatus.SUCCESS)
    withdrawal = await make_transaction(partner, WITHDRAW, 50_000, TransactionStatus.PENDING)
    partner_id, withdrawal_id = partner.id, withdrawal.id
    admin_a = WithdrawalService(db_session)
    admin_b = WithdrawalService(other_session)

    # Both admins saw the withdrawal as pending
    stale = await admin_a._pending_withdrawal(withdrawal_id)
    await admin_b.approve(withdrawal_id, proof_ref="transfer-proofs/b.png")
    admin_a._pending_withdrawal = AsyncMock(return_value=stale)

    with pytest.raises(AlreadyFinalized):
        await admin_a.approve(withdrawal_id, proof_ref="transfer-proofs/a.png")

    entry = await LedgerStore().get_entry(other_session, withdrawal_id)
    assert entry.status == TransactionStatus.SUCCESS
    assert entry.proof_ref == "transfer-proofs/b.png"
    balance = await _balance(other_session, partner_id)
    assert balance.total_withdrawn == 50_000
    assert balance.balance == 0


async def test_commission_rows_are_not_withdrawals(db_session, make_partner, make_transaction):
    partner = await make_partner()
    commission = await make_transaction(partner, COMMISSION, 50_000, TransactionStatus.PENDING)
    commission_id = commission.id
    service = WithdrawalService(db_session)

    with pytest.raises(NotAWithdrawal):
        await service.approve(commission_id)
    with pytest.raises(NotAWithdrawal):
        await service.reject(commission_id)


@pytest.mark.parametrize("final", [TransactionStatus.SUCCESS, TransactionStatus.REJECTED, TransactionStatus.FAILED])
async def test_finalized_withdrawals_stay_final(db_session, earning_partner, make_transaction, final):
    partner = await earning_partner(200_000)
    entry = await make_transaction(partner, WITHDRAW, 50_000, final)
    entry_id = entry.id
    service = WithdrawalService(db_session)

    with pytest.raises(AlreadyFinalized):
        await service.approve(entry_id)
    with pytest.raises(AlreadyFinalized):
        await service.reject(entry_id)


async def test_unknown_withdrawal(db_session):
    with pytest.raises(NotFound):
        await WithdrawalService(db_session).approve(uuid.uuid4())


async def test_list_withdrawals_by_status(db_session, earning_partner, make_transaction):
    partner = await earning_partner(200_000)
    pending = await make_transaction(partner, WITHDRAW, 50_000, TransactionStatus.PENDING)
    await make_transaction(partner, WITHDRAW, 50_000, TransactionStatus.SUCCESS)
    service = WithdrawalService(db_session)

    assert [w.id for w in await service.list_withdrawals(TransactionStatus.PENDING)] == [pending.id]
    everything = await service.list_withdrawals()
    assert len(everything) == 2
    assert all(w.type == WITHDRAW for w in everything)
