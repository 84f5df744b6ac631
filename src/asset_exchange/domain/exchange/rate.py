from __future__ import annotations

from typing import Any

from asset_exchange.domain.assets.asset_handle import AssetHandle
from asset_exchange.domain.assets.asset_registry import AssetRegistry, resolve_registry
from asset_exchange.domain.assets.quantity import Quantity
from asset_exchange.domain.assets.unit import Unit
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.errors import DimensionMismatch, NonPositiveRate
from asset_exchange.utils.numeric_tools import Numeric, as_decimal, is_numeric, is_positive


class Rate:
    """Positive conversion factor: 1 unit of base asset equals $value units of quote asset.

    The factor is stored as a `Quantity` with unit `quote/base`, so applying it to an amount
    is plain quantity multiplication and units cancel by construction. The numeric
    representation (float, Decimal, Fraction, int) is whatever the quantity carries.

    Examples:
        >>> rate = Rate.of(AssetsPair("USD", "BRL"), Decimal("5.33897"), registry)
        >>> str(rate)
        '5.33897 BRL/USD'
        >>> rate.apply(Quantity.of(100, "USD", registry))
        Quantity(Decimal('533.89700'), BRL)
    """

    __slots__ = ("_quantity", "_quote", "_base")

    def __init__(self, quantity: Quantity) -> None:
        """Initialize a Rate from a quantity of unit `quote/base`.

        Args:
            quantity: Positive quantity whose unit has the shape `quote/base`.

        Raises:
            TypeError: If $quantity is not a Quantity.
            NonPositiveRate: If $quantity.value <= 0 (or NaN).
            DimensionMismatch: If the unit is not of the shape `quote/base`.
        """
        # Raise: rate must wrap a Quantity
        if not isinstance(quantity, Quantity):
            raise TypeError(f"Cannot create `Rate` because $quantity is not Quantity (got type '{type(quantity).__name__}')")

        # Raise: rate must be strictly positive
        if not quantity.is_positive():
            raise NonPositiveRate(f"Cannot create `Rate` because $quantity.value ({quantity.value}) is not > 0", value=quantity.value)

        # Raise: unit must be one asset over another asset
        ratio = quantity.unit.as_ratio()
        if ratio is None:
            raise DimensionMismatch(f"Cannot create `Rate` because $quantity.unit ('{quantity.unit}') is not of the shape 'quote/base'", actual=quantity.unit)

        self._quantity = quantity
        self._quote, self._base = ratio

    @classmethod
    def of(cls, pair: AssetsPair, value: Numeric | str, registry: AssetRegistry | None = None) -> Rate:
        """Create a Rate for $pair from a plain number.

        Args:
            pair: Pair the rate belongs to.
            value: Positive number of quote units per 1 base unit. Strings are parsed as Decimal.
            registry: Registry to resolve asset codes in; None means the process default.

        Returns:
            Rate: New rate with unit `pair.quote / pair.base`.

        Raises:
            NonPositiveRate: If $value <= 0.
        """
        if isinstance(value, str):
            value = as_decimal(value)

        # Raise: only numeric scalars are accepted here
        if not is_numeric(value):
            raise TypeError(f"Cannot call `Rate.of` because $value ({value!r}) is not numeric (got type '{type(value).__name__}')")

        # Raise: check sign before touching the registry
        if not is_positive(value):
            raise NonPositiveRate(f"Cannot call `Rate.of` because $value ({value}) for pair '{pair}' is not > 0", value=value)

        assets = resolve_registry(registry)
        unit = assets.unit(pair.quote) / assets.unit(pair.base)
        return cls(Quantity(value, unit))

    # region Properties

    @property
    def quantity(self) -> Quantity:
        """Get the underlying quantity (unit `quote/base`)."""
        return self._quantity

    @property
    def value(self) -> Numeric:
        """Get the numeric value (quote units per 1 base unit)."""
        return self._quantity.value

    @property
    def unit(self) -> Unit:
        """Get the rate unit `quote/base`."""
        return self._quantity.unit

    @property
    def base(self) -> AssetHandle:
        """Get the base asset (denominator of the unit)."""
        return self._base

    @property
    def quote(self) -> AssetHandle:
        """Get the quote asset (numerator of the unit)."""
        return self._quote

    @property
    def pair(self) -> AssetsPair:
        """Get the AssetsPair this rate's unit describes."""
        return AssetsPair(self._base.code, self._quote.code)

    # endregion

    # region Application

    def apply(self, amount: Quantity) -> Quantity:
        """Convert $amount from base to quote: `amount * rate`.

        Raises:
            DimensionMismatch: If $amount is not denominated in this rate's base asset.
        """
        self._require_asset(amount, self._base, "apply")
        return amount * self._quantity

    def apply_inverse(self, amount: Quantity) -> Quantity:
        """Convert $amount from quote back to base: `amount / rate`.

        Uses this rate as quoted; no reciprocal rate is assumed to exist in any market.

        Raises:
            DimensionMismatch: If $amount is not denominated in this rate's quote asset.
        """
        self._require_asset(amount, self._quote, "apply_inverse")
        return amount / self._quantity

    def compose(self, other: Rate) -> Rate:
        """Chain two legs: (A→M) composed with (M→B) gives (A→B), `self * other`.

        Raises:
            DimensionMismatch: If $self.quote is not $other.base.
        """
        # Raise: legs must share the middle asset
        if self._quote is not other._base:
            raise DimensionMismatch(f"Cannot call `compose` because $self.quote ('{self._quote}') is not $other.base ('{other._base}')", expected=self._quote, actual=other._base)

        return Rate(self._quantity * other._quantity)

    @staticmethod
    def _require_asset(amount: Quantity, expected: AssetHandle, operation: str) -> None:
        actual = amount.unit.asset if isinstance(amount, Quantity) else None
        if actual is not expected:
            shown = amount.unit if isinstance(amount, Quantity) else type(amount).__name__
            raise DimensionMismatch(f"Cannot call `{operation}` because $amount is in '{shown}' but the rate expects '{expected}'", expected=expected.unit, actual=shown)

    # endregion

    # region Magic

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Rate):
            return False
        return self._quantity == other._quantity

    def __hash__(self) -> int:
        return hash(self._quantity)

    def __str__(self) -> str:
        return str(self._quantity)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._quantity.value!r}, {self._quantity.unit})"

    # endregion
