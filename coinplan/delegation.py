"""Read-only view over `0x2::delegation::Delegation` objects."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

DELEGATION_OBJECT_TYPE = "0x2::delegation::Delegation"


class DelegationFields(BaseModel):
    model_config = ConfigDict(extra="allow")

    active_delegation: Any = None
    delegate_amount: int
    next_reward_unclaimed_epoch: int
    validator_address: str
    coin_locked_until_epoch: Any = None
    ending_epoch: Any = None


def get_option(value: Any) -> Any:
    """Unwrap a Move `Option<T>` as rendered over RPC (`{"vec": [...]}`)."""
    if isinstance(value, Mapping):
        if "fields" in value and isinstance(value["fields"], Mapping):
            value = value["fields"]
        if "vec" in value:
            items = value["vec"] or []
            return items[0] if items else None
    return value


def is_delegation_object(obj: Mapping[str, Any]) -> bool:
    data = obj.get("data")
    return isinstance(data, Mapping) and data.get("type") == DELEGATION_OBJECT_TYPE


class Delegation:
    """One delegation owned by the wallet."""

    def __init__(self, obj: Mapping[str, Any]) -> None:
        if not is_delegation_object(obj):
            raise ValueError("Object is not a delegation")
        self._fields = DelegationFields.model_validate(obj["data"]["fields"])

    def next_reward_unclaimed_epoch(self) -> int:
        return self._fields.next_reward_unclaimed_epoch

    def active_delegation(self) -> int:
        return int(get_option(self._fields.active_delegation) or 0)

    def delegate_amount(self) -> int:
        return self._fields.delegate_amount

    def ending_epoch(self) -> Optional[int]:
        value = get_option(self._fields.ending_epoch)
        return int(value) if value is not None else None

    def validator_address(self) -> str:
        return self._fields.validator_address

    def is_active(self) -> bool:
        return self.active_delegation() > 0 and not self.ending_epoch()

    def has_unclaimed_rewards(self, epoch: int) -> bool:
        return self.next_reward_unclaimed_epoch() <= epoch and (
            self.is_active() or (self.ending_epoch() or 0) > epoch
        )


__all__ = ["DELEGATION_OBJECT_TYPE", "Delegation", "get_option", "is_delegation_object"]
