"""Tests for exact-coin provisioning and delegation."""

import pytest

from coinplan.errors import InternalInvariantViolation
from coinplan.gas import GasBudgetTable
from coinplan.planner import TransferPlanner
from coinplan.staking import (
    ADD_DELEGATION_FUNCTION,
    SUI_SYSTEM_STATE_OBJECT_ID,
    DelegationRequest,
    StakeCoinProvisioner,
    find_exact_coin,
    get_active_validators,
)
from tests.fakes import OWNER, VALIDATOR, FakeLedger, make_coin


class LossyLedger(FakeLedger):
    """Self-transfers arrive one unit short, so no exact coin ever appears."""

    def _credit(self, recipient, amount):
        return super()._credit(recipient, amount - 1)


def _provisioner(ledger: FakeLedger) -> StakeCoinProvisioner:
    return StakeCoinProvisioner(TransferPlanner(ledger, ledger))


def test_find_exact_coin() -> None:
    coins = [make_coin("a", 300), make_coin("b", 100), make_coin("c", 100)]
    assert find_exact_coin(coins, 100).id == "b"
    assert find_exact_coin(coins, 300).id == "a"
    assert find_exact_coin(coins, 200) is None
    assert find_exact_coin(coins, 400) is None


@pytest.mark.asyncio
async def test_provision_reuses_existing_exact_coin() -> None:
    ledger = FakeLedger({"a": 500, "b": 1000})

    coin_id = await _provisioner(ledger).provision_exact(500)

    assert coin_id == "a"
    assert ledger.call_names() == ["sync"]


@pytest.mark.asyncio
async def test_provision_synthesizes_coin_with_self_transfer() -> None:
    ledger = FakeLedger({"a": 5000})

    coin_id = await _provisioner(ledger).provision_exact(1000)

    assert coin_id == "0xnew1"
    assert ("direct_transfer", "a", OWNER, 1000, 100) in ledger.calls
    assert ledger.coins == {"a": 3900, "0xnew1": 1000}


@pytest.mark.asyncio
async def test_provision_fails_when_synthesis_does_not_produce_coin() -> None:
    ledger = LossyLedger({"a": 5000})

    with pytest.raises(InternalInvariantViolation):
        await _provisioner(ledger).provision_exact(1000)

    # Exactly one synthesis attempt.
    assert ledger.call_names().count("direct_transfer") == 1


@pytest.mark.asyncio
async def test_stake_coin_issues_delegation_call() -> None:
    ledger = FakeLedger({"a": 5000})

    response = await _provisioner(ledger).stake_coin(1000, VALIDATOR)

    assert response["digest"].startswith("tx-")
    assert ledger.calls[-1] == (
        "move_call",
        "0x2",
        "sui_system",
        ADD_DELEGATION_FUNCTION,
        [],
        [SUI_SYSTEM_STATE_OBJECT_ID, "0xnew1", VALIDATOR],
        1000,
    )


@pytest.mark.asyncio
async def test_delegate_uses_configured_stake_budget() -> None:
    ledger = FakeLedger({})
    planner = TransferPlanner(ledger, ledger)
    planner.gas_table = GasBudgetTable(stake=77)

    await StakeCoinProvisioner(planner).delegate(
        DelegationRequest(amount=5, validator_address=VALIDATOR, provisioned_coin_id="0xc")
    )

    assert ledger.calls[-1][-1] == 77


@pytest.mark.asyncio
async def test_get_active_validators() -> None:
    ledger = FakeLedger({})

    validators = await get_active_validators(ledger)

    addresses = [v["fields"]["metadata"]["fields"]["sui_address"] for v in validators]
    assert addresses == ["0xv1", "0xv2"]


@pytest.mark.asyncio
async def test_get_active_validators_rejects_unexpected_shape() -> None:
    class EmptyProvider:
        async def get_object(self, object_id):
            return {"status": "Exists", "details": {"data": {"fields": {}}}}

    with pytest.raises(ValueError):
        await get_active_validators(EmptyProvider())
