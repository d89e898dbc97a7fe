"""Transfer planning: choose the cheapest operation that moves an amount.

The planner always refreshes the coin snapshot before deciding, prefers a
single-coin direct transfer, falls back to a multi-coin pay, and when the pay
would consume every coin it first carves a dedicated gas coin with a
self-transfer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from coinplan.coins import Coin, coin_from_object
from coinplan.config import Settings, ZeroAmountPolicy, load_settings
from coinplan.errors import (
    InsufficientBalance,
    InsufficientGas,
    InternalInvariantViolation,
    PartiallyCommittedTransfer,
)
from coinplan.gas import GasBudgetTable
from coinplan.interfaces import Provider, Signer
from coinplan.selector import select_at_least, select_combined_at_least, total_balance
from coinplan.snapshot import AccountCoins, CoinSnapshot, SnapshotSource
from coinplan.utils.logging import get_logger

logger = get_logger(__name__)


class TransferKind(str, Enum):
    DIRECT_TRANSFER = "direct_transfer"
    PAY = "pay"
    PAY_WITH_GAS_CARVE = "pay_with_gas_carve"


@dataclass(frozen=True)
class TransferPlan:
    """One planned transfer. Built and consumed within a single call.

    For ``PAY_WITH_GAS_CARVE`` the ``carve_*`` fields describe the self-transfer
    that runs first; ``input_coin_ids`` are then replaced by a fresh selection.
    """

    amount: int
    recipient: str
    input_coin_ids: Tuple[str, ...]
    gas_budget: int
    operation_kind: TransferKind
    carve_coin_id: Optional[str] = None
    carve_amount: int = 0
    carve_gas_budget: int = 0

    @property
    def needs_gas_carve(self) -> bool:
        return self.operation_kind is TransferKind.PAY_WITH_GAS_CARVE


@dataclass(frozen=True)
class TransferOutcome:
    """Executed plan plus the ledger's responses."""

    plan: TransferPlan
    response: Any
    carve_response: Any = None


def plan_transfer(
    snapshot: CoinSnapshot,
    amount: int,
    recipient: str,
    gas_table: GasBudgetTable,
    zero_amount_policy: ZeroAmountPolicy = ZeroAmountPolicy.BEST_FIT,
) -> TransferPlan:
    """Plan a transfer of the gas coin from `snapshot` without touching the ledger.

    Raises:
        InsufficientBalance: The pool cannot cover the amount plus fees.
        InsufficientGas: A carve is needed but no coin can fund it.
    """
    _check_amount(amount)
    coins = list(snapshot.coins)
    direct_budget = gas_table.transfer_sui
    target = amount + direct_budget

    single = select_at_least(coins, target)
    if single:
        return TransferPlan(
            amount=amount,
            recipient=recipient,
            input_coin_ids=(single[0].id,),
            gas_budget=direct_budget,
            operation_kind=TransferKind.DIRECT_TRANSFER,
        )

    total = total_balance(coins)
    gas_cost_for_pay = gas_table.pay_budget(len(coins))
    selected = select_combined_at_least(
        coins, target, zero_amount_policy=zero_amount_policy
    )
    if not selected:
        raise InsufficientBalance(
            requested=target,
            available=total,
            suggested_max=total - gas_cost_for_pay,
            gas_budget=gas_cost_for_pay,
        )

    if len(selected) < len(coins):
        return TransferPlan(
            amount=amount,
            recipient=recipient,
            input_coin_ids=_ids(selected),
            gas_budget=gas_cost_for_pay,
            operation_kind=TransferKind.PAY,
        )

    # Every coin is an input, so none is left over to pay the fee.
    carve_cost = gas_cost_for_pay + direct_budget
    if not select_combined_at_least(
        coins, amount + carve_cost, zero_amount_policy=zero_amount_policy
    ):
        raise InsufficientBalance(
            requested=amount + carve_cost,
            available=total,
            suggested_max=total - carve_cost,
            gas_budget=carve_cost,
        )

    largest = selected[-1]
    if largest.balance < carve_cost:
        raise InsufficientGas(required=carve_cost, largest_balance=largest.balance)

    return TransferPlan(
        amount=amount,
        recipient=recipient,
        input_coin_ids=_ids(selected),
        gas_budget=gas_cost_for_pay,
        operation_kind=TransferKind.PAY_WITH_GAS_CARVE,
        carve_coin_id=largest.id,
        carve_amount=gas_cost_for_pay,
        carve_gas_budget=direct_budget,
    )


def plan_coin_transfer(
    snapshot: CoinSnapshot,
    amount: int,
    recipient: str,
    gas_table: GasBudgetTable,
    zero_amount_policy: ZeroAmountPolicy = ZeroAmountPolicy.BEST_FIT,
) -> TransferPlan:
    """Plan a pay of a non-gas denomination; the fee comes from the signer's gas coins."""
    _check_amount(amount)
    coins = list(snapshot.coins)
    selected = select_combined_at_least(
        coins, amount, zero_amount_policy=zero_amount_policy
    )
    if not selected:
        total = total_balance(coins)
        raise InsufficientBalance(requested=amount, available=total, suggested_max=total)
    return TransferPlan(
        amount=amount,
        recipient=recipient,
        input_coin_ids=_ids(selected),
        gas_budget=gas_table.transfer,
        operation_kind=TransferKind.PAY,
    )


class TransferPlanner:
    """Refreshes the account's coins, plans a transfer and executes it.

    Callers must not run two planning calls for the same account at once:
    both would draw on the same coins and no locking happens here.
    """

    def __init__(
        self,
        signer: Signer,
        provider: Provider,
        source: Optional[SnapshotSource] = None,
        gas_table: Optional[GasBudgetTable] = None,
        zero_amount_policy: ZeroAmountPolicy = ZeroAmountPolicy.BEST_FIT,
    ) -> None:
        self.signer = signer
        self.provider = provider
        self.source = source or AccountCoins(signer, provider)
        self.gas_table = gas_table or GasBudgetTable()
        self.zero_amount_policy = zero_amount_policy

    @classmethod
    def from_settings(
        cls,
        signer: Signer,
        provider: Provider,
        settings: Optional[Settings] = None,
    ) -> "TransferPlanner":
        settings = settings or load_settings()
        return cls(
            signer=signer,
            provider=provider,
            source=AccountCoins(signer, provider, settings.gas_type_arg),
            gas_table=GasBudgetTable.from_settings(settings),
            zero_amount_policy=settings.zero_amount_policy,
        )

    async def plan_and_execute_transfer(
        self, amount: int, recipient: str
    ) -> TransferOutcome:
        """Send `amount` of the gas coin to `recipient` using the cheapest operation."""
        snapshot = await self.source.refresh()
        plan = plan_transfer(
            snapshot,
            amount,
            recipient,
            self.gas_table,
            zero_amount_policy=self.zero_amount_policy,
        )
        logger.info(
            "transfer_planned",
            kind=plan.operation_kind.value,
            amount=amount,
            recipient=recipient,
            inputs=len(plan.input_coin_ids),
            gas_budget=plan.gas_budget,
        )

        if plan.operation_kind is TransferKind.DIRECT_TRANSFER:
            response = await self.signer.direct_transfer(
                plan.input_coin_ids[0], recipient, amount, plan.gas_budget
            )
            return TransferOutcome(plan=plan, response=response)

        if plan.operation_kind is TransferKind.PAY:
            return TransferOutcome(plan=plan, response=await self._pay(plan))

        return await self._pay_with_gas_carve(plan, snapshot.type_arg)

    async def transfer_coin(
        self, amount: int, recipient: str, source: SnapshotSource
    ) -> TransferOutcome:
        """Send `amount` of the denomination tracked by `source` via pay."""
        snapshot = await source.refresh()
        plan = plan_coin_transfer(
            snapshot,
            amount,
            recipient,
            self.gas_table,
            zero_amount_policy=self.zero_amount_policy,
        )
        logger.info(
            "coin_transfer_planned",
            type_arg=snapshot.type_arg,
            amount=amount,
            recipient=recipient,
            inputs=len(plan.input_coin_ids),
        )
        return TransferOutcome(plan=plan, response=await self._pay(plan))

    async def _pay(self, plan: TransferPlan) -> Any:
        return await self.signer.pay(
            list(plan.input_coin_ids), [plan.recipient], [plan.amount], plan.gas_budget
        )

    async def _pay_with_gas_carve(
        self, plan: TransferPlan, type_arg: str
    ) -> TransferOutcome:
        own_address = await self.signer.get_address()
        logger.info(
            "gas_carve_started",
            coin_id=plan.carve_coin_id,
            carve_amount=plan.carve_amount,
        )
        carve_response = await self.signer.direct_transfer(
            plan.carve_coin_id, own_address, plan.carve_amount, plan.carve_gas_budget
        )
        logger.info("gas_carve_committed", coin_id=plan.carve_coin_id)

        # The carve is on the ledger now; anything failing past this point
        # leaves a split coin behind.
        try:
            await self.signer.sync_account_state()
            raw_inputs = await self.provider.select_coins_at_least(
                own_address, plan.amount, type_arg, []
            )
            inputs = _decode_coins(raw_inputs)
            if not inputs:
                raise InternalInvariantViolation(
                    f"No coins cover {plan.amount} after carving the gas coin"
                )
            final_plan = replace(plan, input_coin_ids=_ids(inputs))
            response = await self._pay(final_plan)
        except Exception as exc:
            logger.warning(
                "transfer_partially_committed",
                coin_id=plan.carve_coin_id,
                amount=plan.amount,
                recipient=plan.recipient,
                error=str(exc),
            )
            raise PartiallyCommittedTransfer(
                f"Gas coin was carved from {plan.carve_coin_id} but the transfer of "
                f"{plan.amount} to {plan.recipient} failed: {exc}",
                carve_response=carve_response,
            ) from exc

        return TransferOutcome(
            plan=final_plan, response=response, carve_response=carve_response
        )


def _decode_coins(raw: Sequence[Any]) -> List[Coin]:
    return [coin_from_object(item) for item in raw]


def _ids(coins: Sequence[Coin]) -> Tuple[str, ...]:
    return tuple(coin.id for coin in coins)


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise ValueError(f"Transfer amount must be non-negative, got {amount}")


__all__ = [
    "TransferKind",
    "TransferOutcome",
    "TransferPlan",
    "TransferPlanner",
    "plan_coin_transfer",
    "plan_transfer",
]
