"""Coin model and helpers for the `0x2::coin::Coin<T>` wire representation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

COIN_PACKAGE_ID = "0x2"
COIN_MODULE_NAME = "coin"
COIN_TYPE = f"{COIN_PACKAGE_ID}::{COIN_MODULE_NAME}::Coin"
COIN_TYPE_ARG_REGEX = re.compile(r"^0x2::coin::Coin<(.+)>$")

GAS_TYPE_ARG = "0x2::sui::SUI"
GAS_SYMBOL = "SUI"

# Coins the wallet knows how to display; extend as new denominations ship.
SUPPORTED_COINS: List[Dict[str, str]] = [
    {
        "coin_name": "SUI Coin",
        "coin_symbol": GAS_SYMBOL,
        "coin_type": GAS_TYPE_ARG,
    },
]


@dataclass(frozen=True)
class Coin:
    """A value-holding object captured at one instant."""

    id: str
    type_tag: str
    balance: int

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise ValueError(f"Coin {self.id} has negative balance {self.balance}")

    @property
    def type_arg(self) -> Optional[str]:
        return get_coin_type_arg(self.type_tag)

    @property
    def symbol(self) -> Optional[str]:
        arg = self.type_arg
        return get_coin_symbol(arg) if arg else None

    @property
    def is_sui(self) -> bool:
        return self.symbol == GAS_SYMBOL


@dataclass(frozen=True)
class StructTag:
    address: str
    module: str
    name: str
    type_params: tuple = ()


class _UID(BaseModel):
    id: str


class _CoinFields(BaseModel):
    model_config = ConfigDict(extra="allow")

    balance: int = Field(ge=0)
    id: _UID


class _MoveObject(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    fields: _CoinFields
    data_type: Optional[str] = Field(default=None, alias="dataType")


def _move_object_payload(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """Unwrap a full object response (`{status, details: {data}}`) if needed."""
    if "status" in data:
        status = data.get("status")
        if status != "Exists":
            raise ValueError(f"Object is not available (status={status!r})")
        details = data.get("details") or {}
        payload = details.get("data") if isinstance(details, Mapping) else None
        if not isinstance(payload, Mapping):
            raise ValueError("Object response carries no move object data")
        return payload
    return data


def get_object_type(data: Mapping[str, Any]) -> Optional[str]:
    try:
        payload = _move_object_payload(data)
    except ValueError:
        return None
    value = payload.get("type")
    return value if isinstance(value, str) else None


def is_coin(data: Mapping[str, Any]) -> bool:
    object_type = get_object_type(data)
    return bool(object_type and object_type.startswith(COIN_TYPE))


def get_coin_type_arg(type_tag: str) -> Optional[str]:
    """Return `T` from `0x2::coin::Coin<T>`, or None for other types."""
    match = COIN_TYPE_ARG_REGEX.match(type_tag)
    return match.group(1) if match else None


def get_coin_symbol(coin_type_arg: str) -> str:
    return coin_type_arg[coin_type_arg.rfind(":") + 1 :]


def get_coin_type_from_arg(coin_type_arg: str) -> str:
    return f"{COIN_TYPE}<{coin_type_arg}>"


def is_sui(data: Mapping[str, Any]) -> bool:
    object_type = get_object_type(data)
    arg = get_coin_type_arg(object_type) if object_type else None
    return bool(arg) and get_coin_symbol(arg) == GAS_SYMBOL


def get_coin_struct_tag(coin_type_arg: str) -> StructTag:
    parts = coin_type_arg.split("::")
    if len(parts) != 3:
        raise ValueError(f"Malformed coin type argument: {coin_type_arg!r}")
    address, module, name = parts
    return StructTag(address=normalize_object_id(address), module=module, name=name)


def normalize_object_id(value: str) -> str:
    """Left-pad a hex object id to 20 bytes with a `0x` prefix."""
    raw = value[2:] if value.startswith("0x") else value
    return "0x" + raw.lower().rjust(40, "0")


def coin_from_object(data: Mapping[str, Any]) -> Coin:
    """Decode a coin from its wire representation.

    Accepts either a bare move object (`{"type": ..., "fields": {...}}`) or a
    full object response wrapping one under `details.data`.

    Raises:
        ValueError: If the object is missing, is not a coin, or its fields are
            malformed (pydantic's ``ValidationError`` is a ``ValueError``).
    """
    payload = _move_object_payload(data)
    move_object = _MoveObject.model_validate(payload)
    if not move_object.type.startswith(COIN_TYPE):
        raise ValueError(f"Object of type {move_object.type!r} is not a coin")
    return Coin(
        id=move_object.fields.id.id,
        type_tag=move_object.type,
        balance=move_object.fields.balance,
    )


__all__ = [
    "COIN_TYPE",
    "GAS_SYMBOL",
    "GAS_TYPE_ARG",
    "SUPPORTED_COINS",
    "Coin",
    "StructTag",
    "coin_from_object",
    "get_coin_struct_tag",
    "get_coin_symbol",
    "get_coin_type_arg",
    "get_coin_type_from_arg",
    "is_coin",
    "is_sui",
    "normalize_object_id",
]
