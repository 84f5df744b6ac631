from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from asset_exchange.domain.assets.asset_registry import AssetRegistry
from asset_exchange.domain.exchange.exchange_market import ExchangeMarket

from .protocol import RatesPayloadAdapter

logger = logging.getLogger(__name__)


def market_from_payload(raw: Mapping[str, Any], adapter: RatesPayloadAdapter, *, registry: AssetRegistry | None = None) -> ExchangeMarket:
    """Parse a provider document with $adapter and build an ExchangeMarket from it.

    Args:
        raw: Decoded JSON document of the provider.
        adapter: Adapter matching the provider's shape.
        registry: Registry for asset dimensions; None means the process default.

    Returns:
        ExchangeMarket: One pair per listed asset, the payload's anchor as base.

    Raises:
        RatesPayloadError: If $raw does not match the adapter's shape.
    """
    payload = adapter.parse(raw)
    market = ExchangeMarket.from_payload(payload, registry=registry)
    logger.info(f"Built ExchangeMarket from '{payload.source or adapter.__class__.__name__}' payload: anchor '{payload.anchor}', {len(market)} pair(s)")
    return market
