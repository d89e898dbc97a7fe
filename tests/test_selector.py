"""Tests for the pure coin selection functions."""

from itertools import permutations

import pytest

from coinplan.config import ZeroAmountPolicy
from coinplan.selector import (
    select_at_least,
    select_combined_at_least,
    sort_by_balance,
    total_balance,
)
from tests.fakes import make_coin


def _pool(**balances):
    return [make_coin(coin_id, balance) for coin_id, balance in balances.items()]


def _ids(coins):
    return [c.id for c in coins]


POOLS = [
    _pool(),
    _pool(a=10),
    _pool(a=10, b=5, c=100),
    _pool(a=10, b=5),
    _pool(a=0, b=0, c=7),
    _pool(a=3, b=3, c=3, d=3),
    _pool(a=1, b=2, c=4, d=8, e=16, f=32),
    _pool(a=50, b=50),
]
AMOUNTS = [0, 1, 3, 5, 12, 15, 20, 63, 100, 101]


class TestSelectAtLeast:
    @pytest.mark.parametrize("coins", POOLS)
    @pytest.mark.parametrize("amount", AMOUNTS)
    def test_result_sorted_and_qualifying(self, coins, amount) -> None:
        excluded = {"b"}
        result = select_at_least(coins, amount, excluded)

        balances = [c.balance for c in result]
        assert balances == sorted(balances)
        assert all(c.balance >= amount for c in result)
        assert not excluded & set(_ids(result))

    def test_returns_every_qualifying_coin(self) -> None:
        coins = _pool(a=10, b=5, c=100, d=12)
        assert _ids(select_at_least(coins, 10)) == ["a", "d", "c"]

    def test_ties_keep_snapshot_order(self) -> None:
        coins = _pool(x=7, y=3, z=7, w=3)
        assert _ids(select_at_least(coins, 0)) == ["y", "w", "x", "z"]

    def test_none_qualifies(self) -> None:
        assert select_at_least(_pool(a=10, b=5), 12) == []

    def test_idempotent(self) -> None:
        coins = _pool(a=10, b=5, c=100)
        assert select_at_least(coins, 5) == select_at_least(coins, 5)

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValueError):
            select_at_least(_pool(a=1), -1)


class TestSelectCombinedAtLeast:
    @pytest.mark.parametrize("coins", POOLS)
    @pytest.mark.parametrize("amount", AMOUNTS)
    def test_sufficiency_properties(self, coins, amount) -> None:
        result = select_combined_at_least(coins, amount)
        total = total_balance(coins)

        if total < amount:
            assert result == []
        elif total == amount:
            assert sorted(_ids(result)) == sorted(_ids(coins))
        else:
            assert total_balance(result) >= amount
            assert len(set(_ids(result))) == len(result)
            balances = [c.balance for c in result]
            assert balances == sorted(balances)

    def test_best_fit_single_coin_even_when_overshooting(self) -> None:
        result = select_combined_at_least(_pool(a=10, b=5, c=100), 12)
        assert _ids(result) == ["c"]

    def test_takes_largest_then_best_fits_remainder(self) -> None:
        result = select_combined_at_least(_pool(a=10, b=5), 12)
        assert [(c.id, c.balance) for c in result] == [("b", 5), ("a", 10)]

    def test_insufficient_pool_returns_empty(self) -> None:
        assert select_combined_at_least(_pool(a=10), 20) == []

    def test_exact_total_returns_every_coin(self) -> None:
        result = select_combined_at_least(_pool(a=50, b=50), 100)
        assert _ids(result) == ["a", "b"]

    def test_remainder_fit_skips_coins_too_small(self) -> None:
        coins = _pool(a=1, b=2, c=4, d=8, e=16, f=32)
        # 32 first leaves 8, which d covers exactly.
        assert _ids(select_combined_at_least(coins, 40)) == ["d", "f"]

    def test_excluded_coins_are_ignored(self) -> None:
        coins = _pool(a=10, b=5, c=100)
        result = select_combined_at_least(coins, 12, excluded=["c"])
        assert _ids(result) == ["b", "a"]

    def test_exclusion_can_make_pool_insufficient(self) -> None:
        coins = _pool(a=10, b=5, c=100)
        assert select_combined_at_least(coins, 12, excluded=["c", "a"]) == []

    def test_zero_amount_best_fits_smallest_coin(self) -> None:
        coins = _pool(a=10, b=5, c=100)
        assert _ids(select_combined_at_least(coins, 0)) == ["b"]

    def test_zero_amount_empty_policy(self) -> None:
        coins = _pool(a=10, b=5, c=100)
        result = select_combined_at_least(
            coins, 0, zero_amount_policy=ZeroAmountPolicy.EMPTY
        )
        assert result == []

    def test_zero_amount_against_zero_total_returns_every_coin(self) -> None:
        coins = _pool(a=0, b=0)
        for policy in ZeroAmountPolicy:
            result = select_combined_at_least(coins, 0, zero_amount_policy=policy)
            assert _ids(result) == ["a", "b"]

    def test_does_not_mutate_input(self) -> None:
        coins = _pool(a=10, b=5, c=1)
        snapshot = list(coins)
        select_combined_at_least(coins, 14)
        assert coins == snapshot

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValueError):
            select_combined_at_least(_pool(a=1), -5)


def test_total_balance_is_order_independent() -> None:
    coins = _pool(a=10, b=5, c=100, d=0)
    totals = {total_balance(p) for p in permutations(coins)}
    assert totals == {115}


def test_total_balance_of_nothing_is_zero() -> None:
    assert total_balance([]) == 0


def test_total_balance_handles_arbitrary_precision() -> None:
    big = 2**128
    assert total_balance(_pool(a=big, b=big)) == 2**129


def test_sort_by_balance_is_stable() -> None:
    coins = _pool(p=2, q=1, r=2, s=1)
    assert _ids(sort_by_balance(coins)) == ["q", "s", "p", "r"]
