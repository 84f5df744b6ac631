from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from asset_exchange.domain.assets.asset_registry import validate_asset_code
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.errors import DegenerateAssetsPair, NonPositiveRate, RatesPayloadError
from asset_exchange.utils.numeric_tools import Numeric, is_numeric, is_positive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatesPayload:
    """Rates quoted against one anchor asset: each entry `(code, v)` means "1 anchor == v code".

    This is the provider-independent shape every rate-feed adapter produces. Concrete JSON field
    names are the adapters' concern.

    Attributes:
        anchor: Asset code all rates are quoted against.
        rates: Mapping of asset code → positive number of that asset per 1 $anchor.
        source: Optional label of the feed the payload came from.
    """

    anchor: str
    rates: Mapping[str, Numeric]
    source: str | None = None

    def __post_init__(self) -> None:
        validate_asset_code(self.anchor, operation="RatesPayload.__init__")

        # Raise: rates must be a mapping
        if not isinstance(self.rates, Mapping):
            raise RatesPayloadError(f"Cannot create `RatesPayload` because $rates is not a mapping (got type '{type(self.rates).__name__}')")

        for code, value in self.rates.items():
            validate_asset_code(code, operation="RatesPayload.__init__")

            # Raise: values must already be parsed numbers
            if not is_numeric(value):
                raise RatesPayloadError(f"Cannot create `RatesPayload` because rate for $code '{code}' ({value!r}) is not numeric")

            # Raise: rates must be strictly positive
            if not is_positive(value):
                raise NonPositiveRate(f"Cannot create `RatesPayload` because rate for $code '{code}' ({value}) is not > 0", value=value)

        # Freeze a private copy so later mutation of the caller's dict cannot leak in
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    def to_entries(self) -> list[tuple[AssetsPair, Numeric]]:
        """Expand into one `(AssetsPair(anchor, code), value)` entry per listed asset.

        A listed anchor with value exactly 1 (some feeds include it) is skipped.

        Returns:
            list[tuple[AssetsPair, Numeric]]: Entries in payload order, anchor as base.

        Raises:
            DegenerateAssetsPair: If the anchor is listed with a value other than 1.
        """
        entries: list[tuple[AssetsPair, Numeric]] = []
        for code, value in self.rates.items():
            if code == self.anchor:
                # Raise: self-rate other than 1 is contradictory input
                if value != 1:
                    raise DegenerateAssetsPair(f"Cannot call `to_entries` because anchor '{self.anchor}' is listed against itself with rate {value}", code=code)
                logger.debug(f"Skipped self-rate of anchor '{self.anchor}' in RatesPayload")
                continue
            entries.append((AssetsPair(self.anchor, code), value))
        return entries
