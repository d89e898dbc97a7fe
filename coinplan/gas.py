"""Gas budgets attached to each kind of on-ledger operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

from coinplan.config import Settings

PAY_BUDGET_MAX_MULTIPLIER = 10


class OperationKind(str, Enum):
    TRANSFER = "transfer"
    TRANSFER_SUI = "transfer_sui"
    PAY = "pay"
    SPLIT = "split"
    MERGE = "merge"
    STAKE = "stake"


@dataclass(frozen=True)
class GasBudgetTable:
    """Fixed fee ceilings per operation kind."""

    transfer: int = 100
    transfer_sui: int = 100
    pay: int = 100
    split: int = 1000
    merge: int = 500
    stake: int = 1000

    @classmethod
    def from_settings(cls, settings: Settings) -> "GasBudgetTable":
        return cls(
            transfer=settings.gas_budget_transfer,
            transfer_sui=settings.gas_budget_transfer_sui,
            pay=settings.gas_budget_pay,
            split=settings.gas_budget_split,
            merge=settings.gas_budget_merge,
            stake=settings.gas_budget_stake,
        )

    def fixed_budget(self, kind: OperationKind) -> int:
        return getattr(self, OperationKind(kind).value)

    def pay_budget(self, coin_count: int) -> int:
        """Budget for a pay over `coin_count` coins: `pay * min(10, n / 2)`.

        Mirrors the ledger's admission check for pay, which asks for more
        budget as inputs grow although the fee charged does not. Fractional
        results round up.
        """
        if coin_count < 0:
            raise ValueError(f"coin_count must be non-negative, got {coin_count}")
        multiplier = min(Fraction(PAY_BUDGET_MAX_MULTIPLIER), Fraction(coin_count, 2))
        budget = self.pay * multiplier
        return -(-budget.numerator // budget.denominator)


__all__ = ["GasBudgetTable", "OperationKind", "PAY_BUDGET_MAX_MULTIPLIER"]
