"""Application configuration management."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ZeroAmountPolicy(str, Enum):
    """What combined selection returns for a zero amount against a funded pool."""

    BEST_FIT = "best_fit"
    EMPTY = "empty"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment or `.env`."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    gas_budget_transfer: int = Field(default=100, alias="GAS_BUDGET_TRANSFER", ge=0)
    gas_budget_transfer_sui: int = Field(
        default=100, alias="GAS_BUDGET_TRANSFER_SUI", ge=0
    )
    gas_budget_pay: int = Field(default=100, alias="GAS_BUDGET_PAY", ge=0)
    gas_budget_split: int = Field(default=1000, alias="GAS_BUDGET_SPLIT", ge=0)
    gas_budget_merge: int = Field(default=500, alias="GAS_BUDGET_MERGE", ge=0)
    gas_budget_stake: int = Field(default=1000, alias="GAS_BUDGET_STAKE", ge=0)

    gas_type_arg: str = Field(default="0x2::sui::SUI", alias="GAS_TYPE_ARG")
    zero_amount_policy: ZeroAmountPolicy = Field(
        default=ZeroAmountPolicy.BEST_FIT,
        alias="ZERO_AMOUNT_POLICY",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("zero_amount_policy", mode="before")
    @classmethod
    def _normalize_policy(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("gas_type_arg")
    @classmethod
    def _check_type_arg(cls, value: str) -> str:
        if value.count("::") != 2:
            raise ValueError(
                f"GAS_TYPE_ARG must look like <package>::<module>::<name>, got {value!r}"
            )
        return value


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Return cached Settings instance, raising a helpful message on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc


__all__ = ["Settings", "ZeroAmountPolicy", "load_settings"]
