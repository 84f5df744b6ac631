from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from asset_exchange.domain.assets.asset_registry import validate_asset_code
from asset_exchange.errors import DegenerateAssetsPair, InvalidAssetCode


class AssetsPair:
    """Ordered (base, quote) pair of asset codes.

    Denotes "price of 1 $base unit, expressed in $quote units". Equality and hashing are
    structural, so AssetsPair("USD", "BRL") built twice is the same dictionary key.

    Attributes:
        base (str): Asset that is priced (denominator of the rate unit).
        quote (str): Asset the price is expressed in (numerator of the rate unit).

    Examples:
        >>> pair = AssetsPair("USD", "BRL")
        >>> str(pair)
        'USD/BRL'
        >>> pair.inverse() == AssetsPair("BRL", "USD")
        True
    """

    __slots__ = ("_base", "_quote")

    def __init__(self, base: str, quote: str) -> None:
        """Initialize an AssetsPair.

        Args:
            base: Base asset code.
            quote: Quote asset code.

        Raises:
            InvalidAssetCode: If $base or $quote is empty or malformed.
            DegenerateAssetsPair: If $base == $quote.
        """
        self._base = validate_asset_code(base, operation="AssetsPair.__init__")
        self._quote = validate_asset_code(quote, operation="AssetsPair.__init__")

        # Raise: a pair must relate two different assets
        if self._base == self._quote:
            raise DegenerateAssetsPair(f"Cannot call `AssetsPair.__init__` because $base and $quote are both '{base}'", code=base)

    @classmethod
    def from_str(cls, pair_str: str) -> AssetsPair:
        """Parse a pair from a string like 'USD/BRL'.

        Raises:
            InvalidAssetCode: If the string is not in format 'BASE/QUOTE'.
            DegenerateAssetsPair: If both sides are equal.
        """
        if not isinstance(pair_str, str):
            raise InvalidAssetCode(f"Cannot call `AssetsPair.from_str` because $pair_str ({pair_str!r}) is not str", code=pair_str)

        parts = pair_str.strip().split("/")
        if len(parts) != 2:
            raise InvalidAssetCode(f"Cannot call `AssetsPair.from_str` because $pair_str ('{pair_str}') is not in format 'BASE/QUOTE'", code=pair_str)

        return cls(parts[0], parts[1])

    @property
    def base(self) -> str:
        """Get the base asset code."""
        return self._base

    @property
    def quote(self) -> str:
        """Get the quote asset code."""
        return self._quote

    def inverse(self) -> AssetsPair:
        """Return the pair with base and quote swapped (no rate is implied)."""
        return AssetsPair(self._quote, self._base)

    # region Magic

    def __iter__(self) -> Iterator[str]:
        yield self._base
        yield self._quote

    def __eq__(self, other: Any) -> bool:
        if other is self:
            return True
        if not isinstance(other, AssetsPair):
            return False
        return self._base == other._base and self._quote == other._quote

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, AssetsPair):
            return NotImplemented
        return (self._base, self._quote) < (other._base, other._quote)

    def __hash__(self) -> int:
        return hash((self._base, self._quote))

    def __str__(self) -> str:
        return f"{self._base}/{self._quote}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self._base}', '{self._quote}')"

    # endregion
