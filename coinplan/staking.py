"""Delegating coins to a validator.

The system delegation call consumes a whole coin, so staking first needs a
coin worth exactly the requested amount. When the wallet holds none, one is
synthesized by transferring that amount to the wallet's own address.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from coinplan.coins import Coin
from coinplan.errors import InternalInvariantViolation
from coinplan.interfaces import Provider
from coinplan.planner import TransferPlanner
from coinplan.selector import select_at_least
from coinplan.utils.logging import get_logger

logger = get_logger(__name__)

SUI_SYSTEM_STATE_OBJECT_ID = "0x0000000000000000000000000000000000000005"
SUI_SYSTEM_PACKAGE_ID = "0x2"
SUI_SYSTEM_MODULE_NAME = "sui_system"
ADD_DELEGATION_FUNCTION = "request_add_delegation"


@dataclass(frozen=True)
class DelegationRequest:
    amount: int
    validator_address: str
    provisioned_coin_id: str


def find_exact_coin(coins: Sequence[Coin], amount: int) -> Optional[Coin]:
    """Return the smallest coin covering `amount` if it holds exactly `amount`."""
    candidates = select_at_least(coins, amount)
    if candidates and candidates[0].balance == amount:
        return candidates[0]
    return None


class StakeCoinProvisioner:
    """Obtains exact-amount coins and issues delegation calls."""

    def __init__(self, planner: TransferPlanner) -> None:
        self.planner = planner

    async def provision_exact(self, amount: int) -> str:
        """Return the id of a coin holding exactly `amount`, creating one if needed.

        Raises:
            InternalInvariantViolation: The self-transfer did not produce the
                expected coin. Not retried.
        """
        snapshot = await self.planner.source.refresh()
        coin = find_exact_coin(snapshot.coins, amount)
        if coin is not None:
            return coin.id

        own_address = await self.planner.signer.get_address()
        logger.info("stake_coin_synthesizing", amount=amount, owner=own_address)
        await self.planner.plan_and_execute_transfer(amount, own_address)

        snapshot = await self.planner.source.refresh()
        coin = find_exact_coin(snapshot.coins, amount)
        if coin is None:
            logger.error("stake_coin_synthesis_failed", amount=amount, owner=own_address)
            raise InternalInvariantViolation(
                f"Self-transfer of {amount} did not produce a coin with that exact balance"
            )
        logger.info("stake_coin_synthesized", amount=amount, coin_id=coin.id)
        return coin.id

    async def stake_coin(self, amount: int, validator_address: str) -> Any:
        """Delegate `amount` to `validator_address`."""
        coin_id = await self.provision_exact(amount)
        request = DelegationRequest(
            amount=amount,
            validator_address=validator_address,
            provisioned_coin_id=coin_id,
        )
        return await self.delegate(request)

    async def delegate(self, request: DelegationRequest) -> Any:
        logger.info(
            "delegation_requested",
            amount=request.amount,
            validator=request.validator_address,
            coin_id=request.provisioned_coin_id,
        )
        return await self.planner.signer.call_move_function(
            SUI_SYSTEM_PACKAGE_ID,
            SUI_SYSTEM_MODULE_NAME,
            ADD_DELEGATION_FUNCTION,
            [],
            [
                SUI_SYSTEM_STATE_OBJECT_ID,
                request.provisioned_coin_id,
                request.validator_address,
            ],
            self.planner.gas_table.stake,
        )


async def get_active_validators(provider: Provider) -> List[Dict[str, Any]]:
    """Read the active validator set from the system state object."""
    contents = await provider.get_object(SUI_SYSTEM_STATE_OBJECT_ID)
    details = contents.get("details")
    data = details.get("data") if isinstance(details, dict) else None
    try:
        validators = data["fields"]["validators"]
        return list(validators["fields"]["active_validators"])
    except (KeyError, TypeError) as exc:
        raise ValueError("System state object has no active validator set") from exc


__all__ = [
    "ADD_DELEGATION_FUNCTION",
    "SUI_SYSTEM_STATE_OBJECT_ID",
    "DelegationRequest",
    "StakeCoinProvisioner",
    "find_exact_coin",
    "get_active_validators",
]
