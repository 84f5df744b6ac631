__version__ = "0.1.0"

from asset_exchange.config import DuplicatePolicy, Settings, load_settings
from asset_exchange.domain.assets.asset_handle import AssetHandle
from asset_exchange.domain.assets.asset_registry import AssetRegistry, get_default_registry
from asset_exchange.domain.assets.quantity import Quantity
from asset_exchange.domain.assets.unit import Unit
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.domain.exchange.conversion_mode import ConversionMode
from asset_exchange.domain.exchange.converter import convert, find_intermediate_asset
from asset_exchange.domain.exchange.exchange_market import ExchangeMarket
from asset_exchange.domain.exchange.rate import Rate
from asset_exchange.domain.exchange.rates_payload import RatesPayload
from asset_exchange.errors import (
    AssetExchangeError,
    DegenerateAssetsPair,
    DimensionMismatch,
    DuplicateRatePair,
    InvalidAssetCode,
    MissingIntermediateAsset,
    MissingRatePair,
    NonPositiveRate,
    RatesPayloadError,
)

__all__ = [
    "AssetExchangeError",
    "AssetHandle",
    "AssetRegistry",
    "AssetsPair",
    "ConversionMode",
    "DegenerateAssetsPair",
    "DimensionMismatch",
    "DuplicatePolicy",
    "DuplicateRatePair",
    "ExchangeMarket",
    "InvalidAssetCode",
    "MissingIntermediateAsset",
    "MissingRatePair",
    "NonPositiveRate",
    "Quantity",
    "Rate",
    "RatesPayload",
    "RatesPayloadError",
    "Settings",
    "Unit",
    "convert",
    "find_intermediate_asset",
    "get_default_registry",
    "load_settings",
]
