from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from functools import cache

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

ENV_DECIMAL_PRECISION = "ASSET_EXCHANGE_DECIMAL_PRECISION"
ENV_DUPLICATE_POLICY = "ASSET_EXCHANGE_DUPLICATE_POLICY"


class DuplicatePolicy(Enum):
    """What ExchangeMarket construction does when the same AssetsPair appears twice."""

    RAISE = "raise"
    LAST_WINS = "last_wins"


@dataclass(frozen=True)
class Settings:
    """Process-wide settings of the asset exchange core.

    Attributes:
        decimal_precision: Precision of the decimal context used for Decimal conversions.
        duplicate_policy: Default policy for duplicate keys in one market construction.
    """

    decimal_precision: int = 28
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.RAISE

    def __post_init__(self) -> None:
        # Raise: precision must be a positive int for `decimal.Context`
        if not isinstance(self.decimal_precision, int) or self.decimal_precision <= 0:
            raise ValueError(f"Cannot create `Settings` because $decimal_precision ({self.decimal_precision}) is not a positive int")


def _read_decimal_precision() -> int:
    raw = os.environ.get(ENV_DECIMAL_PRECISION)
    if raw is None or not raw.strip():
        return Settings.decimal_precision

    try:
        precision = int(raw.strip())
    except ValueError as e:
        raise ValueError(f"Cannot call `load_settings` because ${ENV_DECIMAL_PRECISION} ('{raw}') is not an int") from e

    # Raise: decimal contexts need a positive precision
    if precision <= 0:
        raise ValueError(f"Cannot call `load_settings` because ${ENV_DECIMAL_PRECISION} ('{raw}') is not a positive int")

    return precision


def _read_duplicate_policy() -> DuplicatePolicy:
    raw = os.environ.get(ENV_DUPLICATE_POLICY)
    if raw is None or not raw.strip():
        return Settings.duplicate_policy

    try:
        return DuplicatePolicy(raw.strip().lower())
    except ValueError as e:
        allowed = [p.value for p in DuplicatePolicy]
        raise ValueError(f"Cannot call `load_settings` because ${ENV_DUPLICATE_POLICY} ('{raw}') is not one of {allowed}") from e


@cache
def load_settings() -> Settings:
    """Load `Settings` from the environment (a `.env` file in the working directory is honoured).

    Real environment variables take precedence over `.env` values. The result is cached;
    call `load_settings.cache_clear()` to re-read the environment.

    Returns:
        Settings: Loaded settings.

    Raises:
        ValueError: If a variable holds an invalid value.
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)
    settings = Settings(
        decimal_precision=_read_decimal_precision(),
        duplicate_policy=_read_duplicate_policy(),
    )
    logger.debug(f"Loaded {settings}")
    return settings
