"""Point-in-time views of an account's coins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol, Tuple

from coinplan.coins import GAS_TYPE_ARG, Coin, coin_from_object, get_coin_type_from_arg
from coinplan.interfaces import Provider, Signer
from coinplan.selector import total_balance
from coinplan.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CoinSnapshot:
    """Coins of one denomination owned by `owner`, in ledger order."""

    owner: str
    type_arg: str
    coins: Tuple[Coin, ...] = ()

    def __post_init__(self) -> None:
        seen = set()
        expected_type = get_coin_type_from_arg(self.type_arg)
        for coin in self.coins:
            if coin.id in seen:
                raise ValueError(f"Duplicate coin id {coin.id} in snapshot")
            seen.add(coin.id)
            if coin.type_tag != expected_type:
                raise ValueError(
                    f"Coin {coin.id} has type {coin.type_tag}, expected {expected_type}"
                )

    def __iter__(self) -> Iterator[Coin]:
        return iter(self.coins)

    def __len__(self) -> int:
        return len(self.coins)

    @property
    def total_balance(self) -> int:
        return total_balance(self.coins)


class SnapshotSource(Protocol):
    """Produces a fresh snapshot after syncing with the ledger."""

    async def refresh(self) -> CoinSnapshot:
        ...


class AccountCoins:
    """Snapshot source backed by the signer's account and an RPC provider."""

    def __init__(
        self, signer: Signer, provider: Provider, type_arg: str = GAS_TYPE_ARG
    ) -> None:
        self.signer = signer
        self.provider = provider
        self.type_arg = type_arg
        self._coin_type = get_coin_type_from_arg(type_arg)

    async def refresh(self) -> CoinSnapshot:
        await self.signer.sync_account_state()
        address = await self.signer.get_address()
        refs = await self.provider.get_objects_owned_by_address(address)

        coins = []
        for ref in refs:
            if ref.get("type") != self._coin_type:
                continue
            data = await self.provider.get_object(ref["objectId"])
            coins.append(coin_from_object(data))

        snapshot = CoinSnapshot(owner=address, type_arg=self.type_arg, coins=tuple(coins))
        logger.debug(
            "coin_snapshot_refreshed",
            owner=address,
            type_arg=self.type_arg,
            coins=len(snapshot),
            total=snapshot.total_balance,
        )
        return snapshot


__all__ = ["AccountCoins", "CoinSnapshot", "SnapshotSource"]
