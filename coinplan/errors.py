"""Typed failures raised by the planner and the stake provisioner."""

from __future__ import annotations

from typing import Any, Optional


class CoinPlanError(Exception):
    """Base class for every failure surfaced by coinplan."""


class InsufficientBalance(CoinPlanError):
    """No selection of coins covers the requested amount.

    Attributes:
        requested: Amount the selection had to cover (transfer plus any fee).
        available: Combined balance of the pool that was searched.
        suggested_max: Reduced amount the caller could retry with.
    """

    def __init__(
        self,
        requested: int,
        available: int,
        suggested_max: int,
        gas_budget: Optional[int] = None,
    ) -> None:
        self.requested = requested
        self.available = available
        self.suggested_max = suggested_max
        self.gas_budget = gas_budget
        gas_text = f" plus gas budget {gas_budget}" if gas_budget else ""
        super().__init__(
            f"Coin balance {available} is not sufficient to cover the transfer "
            f"amount {requested}{gas_text}. "
            f"Try reducing the transfer amount to {suggested_max}."
        )


class InsufficientGas(CoinPlanError):
    """No single coin can fund the gas carve-out together with its own fee."""

    def __init__(self, required: int, largest_balance: int) -> None:
        self.required = required
        self.largest_balance = largest_balance
        super().__init__(
            "None of the coins has sufficient balance to cover gas fee "
            f"(need {required}, largest coin holds {largest_balance})"
        )


class InternalInvariantViolation(CoinPlanError):
    """A synthesis step did not produce its expected post-condition. Not retriable."""


class PartiallyCommittedTransfer(CoinPlanError):
    """The gas carve-out reached the ledger but the main transfer did not.

    The wallet is left holding a split coin. Nothing is rolled back; callers
    should surface this to the user as a warning.
    """

    def __init__(self, message: str, carve_response: Any) -> None:
        self.carve_response = carve_response
        super().__init__(message)


__all__ = [
    "CoinPlanError",
    "InsufficientBalance",
    "InsufficientGas",
    "InternalInvariantViolation",
    "PartiallyCommittedTransfer",
]
