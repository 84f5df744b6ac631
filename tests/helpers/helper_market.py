from __future__ import annotations

from decimal import Decimal

from asset_exchange.domain.assets.asset_registry import AssetRegistry
from asset_exchange.domain.assets.quantity import Quantity
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.domain.exchange.exchange_market import ExchangeMarket


def create_registry() -> AssetRegistry:
    """Create a fresh AssetRegistry so tests never depend on the process default."""
    return AssetRegistry()


def create_amount(value, code: str, registry: AssetRegistry) -> Quantity:
    """Create a Quantity of $value in asset $code."""
    return Quantity.of(value, code, registry)


def create_usd_brl_market(registry: AssetRegistry) -> ExchangeMarket:
    """Create a market with asymmetric USD/BRL and BRL/USD rates (not exact reciprocals)."""
    return ExchangeMarket(
        [
            (AssetsPair("USD", "BRL"), 5.33897),
            (AssetsPair("BRL", "USD"), 0.187302),
        ],
        registry=registry,
    )


def create_eur_usd_cad_market(registry: AssetRegistry) -> ExchangeMarket:
    """Create a market EUR/USD + USD/CAD without a direct EUR/CAD pair."""
    return ExchangeMarket(
        [
            (AssetsPair("EUR", "USD"), 1.19536),
            (AssetsPair("USD", "CAD"), 1.29849),
        ],
        registry=registry,
    )


def create_decimal_cross_market(registry: AssetRegistry) -> ExchangeMarket:
    """Create a Decimal market with two possible bridges (GBP and USD) between EUR and JPY."""
    return ExchangeMarket(
        {
            AssetsPair("EUR", "USD"): Decimal("1.10"),
            AssetsPair("USD", "JPY"): Decimal("150"),
            AssetsPair("EUR", "GBP"): Decimal("0.85"),
            AssetsPair("GBP", "JPY"): Decimal("190"),
        },
        registry=registry,
    )
