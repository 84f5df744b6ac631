from __future__ import annotations

from typing import Any


def create_open_exchange_rates_document() -> dict[str, Any]:
    """Create a document shaped like an Open Exchange Rates `latest.json` response."""
    return {
        "disclaimer": "Usage subject to terms",
        "license": "https://openexchangerates.org/license",
        "timestamp": 1700000000,
        "base": "USD",
        "rates": {
            "BRL": 5.33897,
            "EUR": 0.836565,
            "USD": 1,
            "XAU": 0.000541,
        },
    }


def create_exchange_rate_api_document() -> dict[str, Any]:
    """Create a document shaped like an ExchangeRate-API v6 `latest` response."""
    return {
        "result": "success",
        "base_code": "EUR",
        "conversion_rates": {
            "EUR": 1,
            "USD": 1.19536,
            "CAD": 1.55216,
        },
    }


def create_coinbase_document() -> dict[str, Any]:
    """Create a document shaped like a Coinbase `exchange-rates` response (rates as strings)."""
    return {
        "data": {
            "currency": "USD",
            "rates": {
                "BTC": "0.0000157",
                "ETH": "0.00031",
                "USD": "1.0",
            },
        },
    }
