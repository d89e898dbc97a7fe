"""Coin selection and transfer planning for a Sui wallet."""

from coinplan.coins import Coin, coin_from_object
from coinplan.errors import (
    CoinPlanError,
    InsufficientBalance,
    InsufficientGas,
    InternalInvariantViolation,
    PartiallyCommittedTransfer,
)
from coinplan.gas import GasBudgetTable
from coinplan.planner import TransferKind, TransferOutcome, TransferPlan, TransferPlanner
from coinplan.snapshot import AccountCoins, CoinSnapshot
from coinplan.staking import StakeCoinProvisioner

__all__ = [
    "AccountCoins",
    "Coin",
    "CoinPlanError",
    "CoinSnapshot",
    "GasBudgetTable",
    "InsufficientBalance",
    "InsufficientGas",
    "InternalInvariantViolation",
    "PartiallyCommittedTransfer",
    "StakeCoinProvisioner",
    "TransferKind",
    "TransferOutcome",
    "TransferPlan",
    "TransferPlanner",
    "coin_from_object",
]
