"""Pure coin selection over an in-memory list of coins.

Nothing here performs I/O or mutates its inputs, so the functions can run
against any snapshot without coordinating with the ledger.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from coinplan.coins import Coin
from coinplan.config import ZeroAmountPolicy


def total_balance(coins: Iterable[Coin]) -> int:
    return sum(coin.balance for coin in coins)


def sort_by_balance(coins: Iterable[Coin]) -> List[Coin]:
    """Ascending by balance; equal balances keep their original order."""
    return sorted(coins, key=lambda coin: coin.balance)


def select_at_least(
    coins: Sequence[Coin],
    amount: int,
    excluded: Iterable[str] = (),
) -> List[Coin]:
    """Return every coin that alone covers `amount`, smallest first.

    Args:
        coins: Candidate coins, usually a snapshot's contents.
        amount: Minimum balance a coin must hold.
        excluded: Object ids to ignore.

    Returns:
        Qualifying coins ascending by balance; empty when none qualifies.
    """
    _check_amount(amount)
    skip = set(excluded)
    return sort_by_balance(
        coin for coin in coins if coin.id not in skip and coin.balance >= amount
    )


def select_combined_at_least(
    coins: Sequence[Coin],
    amount: int,
    excluded: Iterable[str] = (),
    zero_amount_policy: ZeroAmountPolicy = ZeroAmountPolicy.BEST_FIT,
) -> List[Coin]:
    """Return a small set of coins whose combined balance covers `amount`.

    A single best-fit coin wins whenever one is large enough, even if it
    overshoots. Otherwise the largest coins are taken one by one until the
    remainder can be best-fitted.

    Returns:
        Selected coins ascending by balance. An empty list means the pool is
        insufficient. When the pool total equals `amount` every coin is
        returned.
    """
    _check_amount(amount)
    skip = set(excluded)
    sorted_coins = sort_by_balance(coin for coin in coins if coin.id not in skip)

    total = total_balance(sorted_coins)
    if total < amount:
        return []
    if total == amount:
        return sorted_coins
    if amount == 0 and zero_amount_policy == ZeroAmountPolicy.EMPTY:
        return []

    return sort_by_balance(_select_greedy(sorted_coins, amount))


def _select_greedy(sorted_coins: List[Coin], amount: int) -> List[Coin]:
    # Caller guarantees total(sorted_coins) > amount, so the loop always ends
    # with a best-fit before the pool runs dry.
    selected: List[Coin] = []
    remaining_target = amount
    end = len(sorted_coins)
    while True:
        best_fit = next(
            (c for c in sorted_coins[:end] if c.balance >= remaining_target), None
        )
        if best_fit is not None:
            selected.append(best_fit)
            return selected

        end -= 1
        largest = sorted_coins[end]
        selected.append(largest)
        remaining_target -= largest.balance


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise ValueError(f"Selection amount must be non-negative, got {amount}")


__all__ = [
    "select_at_least",
    "select_combined_at_least",
    "sort_by_balance",
    "total_balance",
]
