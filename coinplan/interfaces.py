"""Capabilities the planner consumes from the wallet's signer and RPC provider."""

from __future__ import annotations

from typing import Any, Dict, List, Protocol, Sequence


class Signer(Protocol):
    """Signs and submits transactions on behalf of one account."""

    async def sync_account_state(self) -> None:
        ...

    async def get_address(self) -> str:
        ...

    async def direct_transfer(
        self, coin_id: str, recipient: str, amount: int, gas_budget: int
    ) -> Any:
        ...

    async def pay(
        self,
        input_coin_ids: Sequence[str],
        recipients: Sequence[str],
        amounts: Sequence[int],
        gas_budget: int,
    ) -> Any:
        ...

    async def call_move_function(
        self,
        package: str,
        module: str,
        function: str,
        type_args: Sequence[str],
        args: Sequence[Any],
        gas_budget: int,
    ) -> Any:
        ...


class Provider(Protocol):
    """Read access to ledger objects."""

    async def get_object(self, object_id: str) -> Dict[str, Any]:
        ...

    async def get_objects_owned_by_address(self, address: str) -> List[Dict[str, Any]]:
        """Return object refs, each carrying at least `objectId` and `type`."""
        ...

    async def select_coins_at_least(
        self,
        address: str,
        amount: int,
        type_arg: str,
        excluded_ids: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """Server-side combined selection; returns coin objects in wire form."""
        ...


__all__ = ["Provider", "Signer"]
