from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from asset_exchange.domain.assets.asset_handle import AssetHandle


class Unit:
    """Immutable product of asset dimensions raised to integer exponents.

    A Unit is what makes quantities commensurable: 100 USD has unit `USD`, a USD→BRL rate has
    unit `BRL/USD`, and multiplying both cancels `USD` and leaves `BRL`. Zero exponents are
    dropped, so `USD/USD` collapses to the dimensionless unit.

    Every asset unit is a reference unit (scale 1:1 to its dimension); no scaled units exist.

    Examples:
        >>> usd = registry.unit("USD")
        >>> brl = registry.unit("BRL")
        >>> str(brl / usd)
        'BRL/USD'
        >>> (brl / usd) * usd == brl
        True
    """

    __slots__ = ("_factors", "_hash")

    def __init__(self, factors: Mapping[AssetHandle, int] | None = None) -> None:
        """Initialize a Unit from a mapping of asset handle to exponent.

        Args:
            factors: Mapping of AssetHandle → non-zero int exponent. None or empty means dimensionless.

        Raises:
            TypeError: If an exponent is not int.
        """
        items: list[tuple[AssetHandle, int]] = []
        for handle, exponent in (factors or {}).items():
            # Raise: exponents are integers only; fractional powers of money make no sense
            if isinstance(exponent, bool) or not isinstance(exponent, int):
                raise TypeError(f"Cannot create `Unit` because exponent of '{handle}' is not int (got type '{type(exponent).__name__}')")
            if exponent != 0:
                items.append((handle, exponent))

        # Canonical order keeps equality, hashing and display deterministic
        items.sort(key=lambda item: (item[0].code, item[0].dimension))
        self._factors: tuple[tuple[AssetHandle, int], ...] = tuple(items)
        self._hash = hash(self._factors)

    # region Properties

    @property
    def factors(self) -> dict[AssetHandle, int]:
        """Get a copy of the handle → exponent mapping."""
        return dict(self._factors)

    @property
    def is_dimensionless(self) -> bool:
        """True if this unit has no asset factors at all."""
        return not self._factors

    @property
    def asset(self) -> AssetHandle | None:
        """Get the single asset of this unit if it is exactly one asset to the power 1, else None."""
        if len(self._factors) == 1 and self._factors[0][1] == 1:
            return self._factors[0][0]
        return None

    def exponent_of(self, handle: AssetHandle) -> int:
        """Return the exponent of $handle in this unit (0 if absent)."""
        for factor_handle, exponent in self._factors:
            if factor_handle is handle:
                return exponent
        return 0

    def as_ratio(self) -> tuple[AssetHandle, AssetHandle] | None:
        """Return `(numerator, denominator)` if this unit has the shape `A/B`, else None.

        Returns:
            tuple[AssetHandle, AssetHandle] | None: Numerator and denominator handles.
        """
        if len(self._factors) != 2:
            return None

        numerator = [h for h, e in self._factors if e == 1]
        denominator = [h for h, e in self._factors if e == -1]
        if len(numerator) != 1 or len(denominator) != 1:
            return None
        return numerator[0], denominator[0]

    # endregion

    # region Algebra

    def __mul__(self, other: Any) -> Unit:
        if not isinstance(other, Unit):
            return NotImplemented
        combined = dict(self._factors)
        for handle, exponent in other._factors:
            combined[handle] = combined.get(handle, 0) + exponent
        return Unit(combined)

    def __truediv__(self, other: Any) -> Unit:
        if not isinstance(other, Unit):
            return NotImplemented
        return self * other.inverse()

    def __pow__(self, power: int) -> Unit:
        # Raise: only integer powers keep exponents integral
        if isinstance(power, bool) or not isinstance(power, int):
            raise TypeError(f"Cannot call `Unit.__pow__` because $power ({power!r}) is not int")
        return Unit({handle: exponent * power for handle, exponent in self._factors})

    def inverse(self) -> Unit:
        """Return the reciprocal unit (all exponents negated)."""
        return self**-1

    # endregion

    # region Magic

    def __eq__(self, other: Any) -> bool:
        if other is self:
            return True
        if not isinstance(other, Unit):
            return False
        return self._factors == other._factors

    def __hash__(self) -> int:
        return self._hash

    def __str__(self) -> str:
        numerator = [_format_factor(h.code, e) for h, e in self._factors if e > 0]
        denominator = [_format_factor(h.code, -e) for h, e in self._factors if e < 0]

        if not denominator:
            return "*".join(numerator)

        top = "*".join(numerator) if numerator else "1"
        bottom = "*".join(denominator)
        if len(denominator) > 1:
            bottom = f"({bottom})"
        return f"{top}/{bottom}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self}')"

    # endregion


def _format_factor(code: str, exponent: int) -> str:
    return code if exponent == 1 else f"{code}^{exponent}"


DIMENSIONLESS = Unit()
