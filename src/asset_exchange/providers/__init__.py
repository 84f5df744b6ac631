from asset_exchange.providers.protocol import RatesPayloadAdapter
from asset_exchange.providers.json_payloads import CoinbaseAdapter, ExchangeRateApiAdapter, OpenExchangeRatesAdapter
from asset_exchange.providers.market_builders import market_from_payload
from asset_exchange.providers.dataframe_rates import market_from_dataframe, market_to_dataframe

__all__ = [
    "RatesPayloadAdapter",
    "CoinbaseAdapter",
    "ExchangeRateApiAdapter",
    "OpenExchangeRatesAdapter",
    "market_from_payload",
    "market_from_dataframe",
    "market_to_dataframe",
]
