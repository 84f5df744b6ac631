from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from asset_exchange.domain.assets.asset_handle import AssetHandle
from asset_exchange.domain.assets.asset_registry import AssetRegistry, resolve_registry
from asset_exchange.domain.assets.unit import DIMENSIONLESS, Unit
from asset_exchange.errors import DimensionMismatch
from asset_exchange.utils.numeric_tools import Numeric, coerce_operands, is_numeric, is_positive

if TYPE_CHECKING:
    from asset_exchange.domain.exchange.conversion_mode import ConversionMode
    from asset_exchange.domain.exchange.exchange_market import ExchangeMarket


class Quantity:
    """An amount inseparable from its unit, e.g. 100 USD or 5.33897 BRL/USD.

    The numeric representation is whatever the caller passes in: `int`, `float`, `Decimal` or
    `Fraction`. Arithmetic keeps that representation; when Decimal meets float or Fraction,
    the other side is converted to Decimal (see `coerce_operands`).

    Comparisons use exact numeric values with no conversion, like Python's own numbers, so
    `Quantity(0.1, USD) != Quantity(Decimal("0.1"), USD)` (the float is not exactly 0.1) and
    equal quantities always hash equally.

    Addition, subtraction and comparisons require identical units and raise
    `DimensionMismatch` otherwise. Multiplication and division compose units, so
    `100 USD * 5.33897 BRL/USD == 533.897 BRL`.
    """

    __slots__ = ("_value", "_unit")

    def __init__(self, value: Numeric, unit: Unit | AssetHandle = DIMENSIONLESS) -> None:
        """Initialize a Quantity with value and unit.

        Args:
            value: Numeric value (`int`, `float`, `Decimal` or `Fraction`).
            unit: Unit of the value. An AssetHandle stands for its reference unit.

        Raises:
            TypeError: If $value is not numeric or $unit is not a Unit / AssetHandle.
        """
        # Raise: value must be one of the supported numeric representations
        if not is_numeric(value):
            raise TypeError(f"Cannot create `Quantity` because $value ({value!r}) is not int, float, Decimal or Fraction (got type '{type(value).__name__}')")

        if isinstance(unit, AssetHandle):
            unit = unit.unit

        # Raise: unit must be a Unit instance
        if not isinstance(unit, Unit):
            raise TypeError(f"Cannot create `Quantity` because $unit is not Unit or AssetHandle (got type '{type(unit).__name__}')")

        self._value = value
        self._unit = unit

    # region Factories

    @classmethod
    def of(cls, value: Numeric, asset: str | AssetHandle, registry: AssetRegistry | None = None) -> Quantity:
        """Create a quantity of $value in the reference unit of $asset.

        Args:
            value: Numeric value.
            asset: Asset code or handle. Codes are resolved in $registry.
            registry: Registry to resolve codes in; None means the process default.

        Returns:
            Quantity: New quantity.

        Raises:
            InvalidAssetCode: If $asset is a malformed code.
        """
        handle = asset if isinstance(asset, AssetHandle) else resolve_registry(registry).resolve(asset)
        return cls(value, handle.unit)

    @classmethod
    def from_str(cls, value_str: str, registry: AssetRegistry | None = None) -> Quantity:
        """Parse a quantity from a string like '100.50 USD'.

        The value part is parsed as Decimal.

        Args:
            value_str: String in format 'value asset_code'.
            registry: Registry to resolve the code in; None means the process default.

        Returns:
            Quantity: Parsed quantity.

        Raises:
            ValueError: If the string format or the value part is invalid.
            InvalidAssetCode: If the asset code is malformed.
        """
        value_str = value_str.strip()
        if not value_str:
            raise ValueError("Value string with $value_str = '' cannot be empty")

        parts = value_str.split()
        if len(parts) != 2:
            raise ValueError(f"Value string with $value_str = '{value_str}' must be in format 'value asset_code'")

        value_part, code_part = parts
        try:
            value = Decimal(value_part)
        except (ValueError, TypeError, InvalidOperation) as e:
            raise ValueError(f"Invalid value part '{value_part}' in string '{value_str}'") from e

        return cls.of(value, code_part, registry)

    # endregion

    # region Properties

    @property
    def value(self) -> Numeric:
        """Get the numeric value."""
        return self._value

    @property
    def unit(self) -> Unit:
        """Get the unit."""
        return self._unit

    @property
    def asset(self) -> AssetHandle:
        """Get the single asset this quantity is denominated in.

        Raises:
            DimensionMismatch: If the unit is not exactly one asset (e.g. a rate or dimensionless).
        """
        handle = self._unit.asset
        if handle is None:
            raise DimensionMismatch(f"Cannot read `asset` because $unit ('{self._unit}') is not a single asset unit", actual=self._unit)
        return handle

    @property
    def code(self) -> str:
        """Get the asset code of a single-asset quantity."""
        return self.asset.code

    def is_positive(self) -> bool:
        """Return True if $value > 0."""
        return is_positive(self._value)

    def is_zero(self) -> bool:
        """Return True if $value == 0."""
        return self._value == 0

    # endregion

    # region Conversion

    def to(self, target: str | AssetHandle, market: ExchangeMarket, mode: ConversionMode | None = None) -> Quantity:
        """Convert this quantity into $target using $market. See `asset_exchange.convert`."""
        from asset_exchange.domain.exchange.conversion_mode import ConversionMode
        from asset_exchange.domain.exchange.converter import convert

        return convert(target, self, market, ConversionMode.DIRECT if mode is None else mode)

    def isclose(self, other: Quantity, rel_tol: float = 1e-9, abs_tol: float = 0.0) -> bool:
        """Return True if $other has the same unit and a value close to $value.

        Values are compared as floats via `math.isclose`.

        Raises:
            DimensionMismatch: If units differ.
        """
        self._check_same_unit(other, "isclose")
        return math.isclose(float(self._value), float(other._value), rel_tol=rel_tol, abs_tol=abs_tol)

    # endregion

    # region Helpers

    def _check_same_unit(self, other: Quantity, operation: str) -> None:
        """Raise DimensionMismatch if $other has a different unit."""
        if self._unit != other._unit:
            raise DimensionMismatch(f"Cannot call `{operation}` because units differ: '{self._unit}' and '{other._unit}'", expected=self._unit, actual=other._unit)

    # endregion

    # region Comparison

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Quantity):
            return False
        if self._unit != other._unit:
            return False
        return self._value == other._value

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_same_unit(other, "__lt__")
        return self._value < other._value

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_same_unit(other, "__le__")
        return self._value <= other._value

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_same_unit(other, "__gt__")
        return self._value > other._value

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_same_unit(other, "__ge__")
        return self._value >= other._value

    def __hash__(self) -> int:
        return hash((self._value, self._unit))

    # endregion

    # region Arithmetic

    def __add__(self, other: Any) -> Quantity:
        if isinstance(other, Quantity):
            self._check_same_unit(other, "__add__")
            left, right = coerce_operands(self._value, other._value)
            return Quantity(left + right, self._unit)

        if not is_numeric(other):
            return NotImplemented

        # Plain 0 is the additive identity, so `sum(quantities)` works
        if other == 0:
            return self

        # Raise: a bare number only adds to a dimensionless quantity
        if not self._unit.is_dimensionless:
            raise DimensionMismatch(f"Cannot call `__add__` because a plain number ({other!r}) cannot be added to a quantity in '{self._unit}'", expected=self._unit, actual=DIMENSIONLESS)

        left, right = coerce_operands(self._value, other)
        return Quantity(left + right, self._unit)

    def __radd__(self, other: Any) -> Quantity:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Quantity:
        if isinstance(other, Quantity):
            return self.__add__(-other)
        if not is_numeric(other):
            return NotImplemented
        return self.__add__(-other)

    def __rsub__(self, other: Any) -> Quantity:
        return (-self).__add__(other)

    def __mul__(self, other: Any) -> Quantity:
        if isinstance(other, Quantity):
            left, right = coerce_operands(self._value, other._value)
            return Quantity(left * right, self._unit * other._unit)

        if not is_numeric(other):
            return NotImplemented

        left, right = coerce_operands(self._value, other)
        return Quantity(left * right, self._unit)

    def __rmul__(self, other: Any) -> Quantity:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Quantity:
        if isinstance(other, Quantity):
            left, right = coerce_operands(self._value, other._value)
            return Quantity(_divide(left, right), self._unit / other._unit)

        if not is_numeric(other):
            return NotImplemented

        left, right = coerce_operands(self._value, other)
        return Quantity(_divide(left, right), self._unit)

    def __rtruediv__(self, other: Any) -> Quantity:
        if not is_numeric(other):
            return NotImplemented
        left, right = coerce_operands(other, self._value)
        return Quantity(_divide(left, right), self._unit.inverse())

    def __neg__(self) -> Quantity:
        return Quantity(-self._value, self._unit)

    def __pos__(self) -> Quantity:
        return Quantity(+self._value, self._unit)

    def __abs__(self) -> Quantity:
        return Quantity(abs(self._value), self._unit)

    # endregion

    # region String representations

    def __str__(self) -> str:
        """Return string like '100.50 USD' (just the value when dimensionless)."""
        if self._unit.is_dimensionless:
            return str(self._value)
        return f"{self._value} {self._unit}"

    def __repr__(self) -> str:
        """Return string like 'Quantity(100.50, USD)'."""
        return f"{self.__class__.__name__}({self._value!r}, {self._unit})"

    # endregion


def _divide(left: Numeric, right: Numeric) -> Numeric:
    # int / int would silently become float; keep ints exact only when the result is whole
    if isinstance(left, int) and isinstance(right, int):
        if right == 0:
            raise ZeroDivisionError("Cannot divide Quantity by zero")
        quotient, remainder = divmod(left, right)
        return quotient if remainder == 0 else left / right

    if right == 0:
        raise ZeroDivisionError("Cannot divide Quantity by zero")
    return left / right
