from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, TypeAlias

from asset_exchange.config import DuplicatePolicy, load_settings
from asset_exchange.domain.assets.asset_registry import AssetRegistry, resolve_registry
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.domain.exchange.rate import Rate
from asset_exchange.domain.exchange.rates_payload import RatesPayload
from asset_exchange.errors import DimensionMismatch, DuplicateRatePair, MissingRatePair
from asset_exchange.utils.numeric_tools import Numeric, is_numeric

logger = logging.getLogger(__name__)

# Accepted spellings of a key: AssetsPair("USD", "BRL"), ("USD", "BRL") or "USD/BRL"
PairLike: TypeAlias = AssetsPair | tuple[str, str] | str

# Accepted spellings of a rate: Rate, or a plain positive number (str is parsed as Decimal)
RateLike: TypeAlias = Rate | Numeric | str

Entry: TypeAlias = tuple[PairLike, RateLike]


class ExchangeMarket(Mapping[AssetsPair, Rate]):
    """Read-only collection of AssetsPair → Rate facts.

    The market is fully built in `__init__` and never changes afterwards, so any number of
    threads may read it concurrently without locking.

    Rates for the two directions of one pair are stored as given. If both USD/BRL and BRL/USD
    are present they need not be exact reciprocals (bid/ask spreads are preserved).

    Input shapes accepted by `__init__` (all normalized to one internal mapping):
    - a single `(pair, rate)` entry,
    - an iterable of `(pair, rate)` entries,
    - a mapping of pair → rate,
    - a `RatesPayload` (expanded to one entry per listed asset, anchor as base),
    - None (empty market).

    Examples:
        >>> market = ExchangeMarket([
        ...     (AssetsPair("USD", "BRL"), 5.33897),
        ...     (AssetsPair("BRL", "USD"), 0.187302),
        ... ])
        >>> market.rate_for("USD", "BRL").value
        5.33897
    """

    # region Init

    def __init__(
        self,
        source: Entry | Iterable[Entry] | Mapping[PairLike, RateLike] | RatesPayload | None = None,
        *,
        registry: AssetRegistry | None = None,
        duplicate_policy: DuplicatePolicy | None = None,
    ) -> None:
        """Build a market from $source.

        Args:
            source: Rate data in any of the shapes listed in the class docstring.
            registry: Registry for asset dimensions; None means the process default.
            duplicate_policy: What to do with a repeated pair. None means `Settings.duplicate_policy`.

        Raises:
            DuplicateRatePair: If a pair repeats and the policy is `DuplicatePolicy.RAISE`.
            DimensionMismatch: If a Rate's unit does not match its key or comes from another registry.
            NonPositiveRate: If a plain number rate is <= 0.
            InvalidAssetCode / DegenerateAssetsPair: If a key is malformed.
            TypeError: If $source or one of its entries has an unsupported shape.
        """
        self._registry = resolve_registry(registry)
        self._duplicate_policy = load_settings().duplicate_policy if duplicate_policy is None else duplicate_policy

        rates: dict[AssetsPair, Rate] = {}
        for raw_pair, raw_rate in self._iter_entries(source):
            pair = self._normalize_pair(raw_pair)
            rate = self._normalize_rate(pair, raw_rate)

            if pair in rates:
                # Raise: duplicates would silently mask bad input
                if self._duplicate_policy is DuplicatePolicy.RAISE:
                    raise DuplicateRatePair(f"Cannot create `ExchangeMarket` because pair '{pair}' appears more than once", pair=pair)
                logger.warning(f"ExchangeMarket replaced rate for pair '{pair}': {rates[pair]} -> {rate} (last one wins)")

            rates[pair] = rate

        self._rates: Mapping[AssetsPair, Rate] = MappingProxyType(rates)
        self._assets: tuple[str, ...] = tuple(sorted({code for pair in rates for code in pair}))
        logger.debug(f"Created ExchangeMarket with {len(rates)} pair(s) over {len(self._assets)} asset(s)")

    @classmethod
    def from_entry(cls, pair: PairLike, rate: RateLike, *, registry: AssetRegistry | None = None) -> ExchangeMarket:
        """Build a market holding exactly one pair."""
        return cls([(pair, rate)], registry=registry)

    @classmethod
    def from_entries(cls, entries: Iterable[Entry], *, registry: AssetRegistry | None = None, duplicate_policy: DuplicatePolicy | None = None) -> ExchangeMarket:
        """Build a market from an ordered iterable of `(pair, rate)` entries."""
        return cls(list(entries), registry=registry, duplicate_policy=duplicate_policy)

    @classmethod
    def from_mapping(cls, mapping: Mapping[PairLike, RateLike], *, registry: AssetRegistry | None = None) -> ExchangeMarket:
        """Build a market from a mapping of pair → rate.

        Distinct spellings of one pair (e.g. "USD/BRL" and ("USD", "BRL")) still count as duplicates.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError(f"Cannot call `from_mapping` because $mapping is not a Mapping (got type '{type(mapping).__name__}')")
        return cls(mapping, registry=registry)

    @classmethod
    def from_payload(cls, payload: RatesPayload, *, registry: AssetRegistry | None = None) -> ExchangeMarket:
        """Build a market from rates quoted against one anchor asset (anchor becomes the base)."""
        if not isinstance(payload, RatesPayload):
            raise TypeError(f"Cannot call `from_payload` because $payload is not RatesPayload (got type '{type(payload).__name__}')")
        return cls(payload, registry=registry)

    # endregion

    # region Normalization

    @classmethod
    def _iter_entries(cls, source: Any) -> Iterable[tuple[Any, Any]]:
        if source is None:
            return []
        if isinstance(source, RatesPayload):
            return source.to_entries()
        if isinstance(source, Mapping):
            return list(source.items())
        if cls._is_single_entry(source):
            return [source]
        if isinstance(source, (str, bytes)) or not isinstance(source, Iterable):
            raise TypeError(f"Cannot create `ExchangeMarket` because $source has unsupported type '{type(source).__name__}'")

        entries = []
        for item in source:
            # Raise: every item must be a (pair, rate) couple
            if not isinstance(item, (tuple, list)) or len(item) != 2:
                raise TypeError(f"Cannot create `ExchangeMarket` because entry {item!r} is not a (pair, rate) tuple")
            entries.append((item[0], item[1]))
        return entries

    @staticmethod
    def _is_single_entry(source: Any) -> bool:
        if not isinstance(source, tuple) or len(source) != 2:
            return False
        pair, rate = source
        pair_like = isinstance(pair, (AssetsPair, str)) or (isinstance(pair, tuple) and len(pair) == 2 and all(isinstance(c, str) for c in pair))
        rate_like = isinstance(rate, (Rate, str)) or is_numeric(rate)
        return pair_like and rate_like

    @staticmethod
    def _normalize_pair(raw_pair: Any) -> AssetsPair:
        if isinstance(raw_pair, AssetsPair):
            return raw_pair
        if isinstance(raw_pair, str):
            return AssetsPair.from_str(raw_pair)
        if isinstance(raw_pair, tuple) and len(raw_pair) == 2:
            return AssetsPair(raw_pair[0], raw_pair[1])
        raise TypeError(f"Cannot create `ExchangeMarket` because key {raw_pair!r} is not AssetsPair, (base, quote) tuple or 'BASE/QUOTE' string")

    def _normalize_rate(self, pair: AssetsPair, raw_rate: Any) -> Rate:
        if not isinstance(raw_rate, Rate):
            return Rate.of(pair, raw_rate, self._registry)

        # Raise: a Rate must describe exactly the pair it is keyed by, in this market's registry
        if raw_rate.base.registry is not self._registry or raw_rate.base.code != pair.base or raw_rate.quote.code != pair.quote:
            raise DimensionMismatch(f"Cannot create `ExchangeMarket` because rate unit '{raw_rate.unit}' does not match pair '{pair}' in this market's registry", expected=pair, actual=raw_rate.unit)

        return raw_rate

    # endregion

    # region Lookup

    @property
    def registry(self) -> AssetRegistry:
        """Get the registry this market's rates are expressed in."""
        return self._registry

    @property
    def duplicate_policy(self) -> DuplicatePolicy:
        """Get the duplicate policy this market was built with."""
        return self._duplicate_policy

    def has_pair(self, base: str, quote: str) -> bool:
        """Check whether a rate for (base, quote) is present. Degenerate pairs are simply absent."""
        if base == quote:
            return False
        return AssetsPair(base, quote) in self._rates

    def rate_for(self, base: str, quote: str) -> Rate:
        """Return the rate for (base, quote).

        Raises:
            MissingRatePair: If no such pair is present.
        """
        pair = AssetsPair(base, quote)
        rate = self._rates.get(pair)
        if rate is None:
            raise MissingRatePair(f"Cannot call `rate_for` because pair '{pair}' is not in this ExchangeMarket", pair=pair)
        return rate

    def list_assets(self) -> list[str]:
        """List every asset code appearing in any pair, sorted lexicographically."""
        return list(self._assets)

    def list_pairs(self) -> list[AssetsPair]:
        """List all pairs sorted by (base, quote)."""
        return sorted(self._rates)

    def merge(self, other: ExchangeMarket, *, duplicate_policy: DuplicatePolicy | None = None) -> ExchangeMarket:
        """Return a new market holding the entries of both markets; $other comes last.

        Raises:
            DuplicateRatePair: If both markets share a pair and the policy is `DuplicatePolicy.RAISE`.
        """
        policy = self._duplicate_policy if duplicate_policy is None else duplicate_policy
        return ExchangeMarket([*self._rates.items(), *other.items()], registry=self._registry, duplicate_policy=policy)

    # endregion

    # region Mapping

    def __getitem__(self, pair: AssetsPair) -> Rate:
        return self._rates[pair]

    def __contains__(self, pair: object) -> bool:
        return pair in self._rates

    def __iter__(self) -> Iterator[AssetsPair]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self._rates)} pairs: {', '.join(str(p) for p in self.list_pairs())})"

    # endregion
