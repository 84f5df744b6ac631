from __future__ import annotations

# DataFrame adapter: build an ExchangeMarket from one row per pair, and render a market back
# into a DataFrame for inspection.

import logging
from collections.abc import Callable
from typing import Any

import pandas as pd

from asset_exchange.config import DuplicatePolicy
from asset_exchange.domain.assets.asset_registry import AssetRegistry
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.domain.exchange.exchange_market import ExchangeMarket
from asset_exchange.utils.numeric_tools import Numeric, as_decimal

logger = logging.getLogger(__name__)


def market_from_dataframe(
    df: pd.DataFrame,
    base_column: str = "base",
    quote_column: str = "quote",
    rate_column: str = "rate",
    value_parser: Callable[[Any], Numeric] = as_decimal,
    *,
    registry: AssetRegistry | None = None,
    duplicate_policy: DuplicatePolicy | None = None,
) -> ExchangeMarket:
    """Build an ExchangeMarket from a pandas DataFrame with one row per pair.

    Input DataFrame has to meet these requirements:
    - Columns: $base_column, $quote_column, $rate_column (other columns are ignored).
    - Each row is one fact "1 base == rate quote". Row order is the entry order, which matters
      only for `DuplicatePolicy.LAST_WINS`.

    Args:
        df: Source data.
        base_column: Name of the column with base asset codes.
        quote_column: Name of the column with quote asset codes.
        rate_column: Name of the column with rates.
        value_parser: Converts each cell of $rate_column into a number. Defaults to `as_decimal`,
            which goes through `str(...)` and so keeps numpy floats free of binary noise.
        registry: Registry for asset dimensions; None means the process default.
        duplicate_policy: Policy for repeated pairs; None means `Settings.duplicate_policy`.

    Returns:
        ExchangeMarket: Market with one entry per row.

    Raises:
        TypeError: If $df is not a pandas DataFrame.
        ValueError: If a required column is missing or a rate cell is empty.
    """
    # Raise: $df must be a pandas DataFrame
    if not isinstance(df, pd.DataFrame):
        raise TypeError(f"Cannot call `market_from_dataframe` because $df is not a pandas DataFrame (got type '{type(df).__name__}')")

    # Raise: required columns must be present
    missing = [c for c in (base_column, quote_column, rate_column) if c not in df.columns]
    if missing:
        raise ValueError(f"Cannot call `market_from_dataframe` because $df is missing column(s) {missing}. Available columns: {list(df.columns)}")

    entries: list[tuple[AssetsPair, Numeric]] = []
    for base, quote, raw_rate in df[[base_column, quote_column, rate_column]].itertuples(index=False, name=None):
        # Raise: empty cells cannot be rates
        if pd.isna(raw_rate):
            raise ValueError(f"Cannot call `market_from_dataframe` because rate for pair '{base}/{quote}' is empty")
        entries.append((AssetsPair(base, quote), value_parser(raw_rate)))

    market = ExchangeMarket.from_entries(entries, registry=registry, duplicate_policy=duplicate_policy)
    logger.debug(f"Built ExchangeMarket from DataFrame with {len(df)} row(s)")
    return market


def market_to_dataframe(market: ExchangeMarket) -> pd.DataFrame:
    """Render $market as a DataFrame with columns `base`, `quote`, `rate`, sorted by (base, quote).

    Args:
        market: Market to render.

    Returns:
        pd.DataFrame: One row per pair; the `rate` column keeps the rates' numeric objects.
    """
    rows = [{"base": pair.base, "quote": pair.quote, "rate": market[pair].value} for pair in market.list_pairs()]
    return pd.DataFrame(rows, columns=["base", "quote", "rate"])
