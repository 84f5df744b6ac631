"""Error taxonomy of the asset exchange core.

Every error derives from `AssetExchangeError` and also from the builtin exception a plain
check would raise (`ValueError`, `LookupError`, `TypeError`), so callers can catch either.
"""

from __future__ import annotations

from typing import Any


class AssetExchangeError(Exception):
    """Base class for all errors raised by `asset_exchange`."""


class InvalidAssetCode(AssetExchangeError, ValueError):
    """Asset code is empty or malformed."""

    def __init__(self, message: str, *, code: Any = None) -> None:
        super().__init__(message)
        self.code = code


class DegenerateAssetsPair(AssetExchangeError, ValueError):
    """AssetsPair was built with identical base and quote."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class NonPositiveRate(AssetExchangeError, ValueError):
    """Rate value is zero, negative or NaN."""

    def __init__(self, message: str, *, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class DuplicateRatePair(AssetExchangeError, ValueError):
    """The same AssetsPair appeared more than once in one market construction."""

    def __init__(self, message: str, *, pair: Any = None) -> None:
        super().__init__(message)
        self.pair = pair


class MissingRatePair(AssetExchangeError, LookupError):
    """ExchangeMarket has no Rate for the required AssetsPair."""

    def __init__(self, message: str, *, pair: Any = None) -> None:
        super().__init__(message)
        self.pair = pair

    # LookupError would otherwise render like KeyError in some contexts; keep the plain message
    def __str__(self) -> str:
        return self.args[0]


class MissingIntermediateAsset(AssetExchangeError, LookupError):
    """No asset bridges the two legs of an intermediate conversion."""

    def __init__(self, message: str, *, first: str | None = None, last: str | None = None) -> None:
        super().__init__(message)
        self.first = first
        self.last = last

    def __str__(self) -> str:
        return self.args[0]


class DimensionMismatch(AssetExchangeError, TypeError):
    """A quantity's unit disagrees with the unit an operation expects."""

    def __init__(self, message: str, *, expected: Any = None, actual: Any = None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class RatesPayloadError(AssetExchangeError, ValueError):
    """A provider payload is missing fields or carries malformed values."""

    def __init__(self, message: str, *, payload: Any | None = None) -> None:
        super().__init__(message)
        self.payload = payload
