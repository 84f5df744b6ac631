from __future__ import annotations

import logging
from threading import Lock

from bidict import bidict

from asset_exchange.domain.assets.asset_handle import AssetHandle
from asset_exchange.domain.assets.unit import Unit
from asset_exchange.errors import InvalidAssetCode

logger = logging.getLogger(__name__)

# Characters reserved by unit display and parsing ("BRL/USD", "EUR*USD", "USD^2")
_RESERVED_CODE_CHARS = frozenset("/*^()")


def validate_asset_code(code: object, *, operation: str = "validate_asset_code") -> str:
    """Return $code unchanged if it is a valid asset code.

    A valid code is a non-empty `str` without whitespace and without any of the reserved
    characters `/ * ^ ( )`. Codes are case-sensitive and never normalized.

    Args:
        code: Candidate asset code.
        operation: Name of the calling operation, used in the error message.

    Returns:
        str: The same $code.

    Raises:
        InvalidAssetCode: If $code is not a valid asset code.
    """
    # Raise: code must be a string
    if not isinstance(code, str):
        raise InvalidAssetCode(f"Cannot call `{operation}` because $code ({code!r}) is not str (got type '{type(code).__name__}')", code=code)

    # Raise: code must not be empty
    if not code:
        raise InvalidAssetCode(f"Cannot call `{operation}` because $code is empty", code=code)

    # Raise: whitespace and reserved characters would make unit strings ambiguous
    if any(ch.isspace() for ch in code) or any(ch in _RESERVED_CODE_CHARS for ch in code):
        raise InvalidAssetCode(f"Cannot call `{operation}` because $code ('{code}') contains whitespace or one of reserved characters {sorted(_RESERVED_CODE_CHARS)}", code=code)

    return code


class AssetRegistry:
    """Append-only registry that maps asset codes to unique `AssetHandle`(s).

    The first `resolve` of a code creates a new dimension (the next index in an append-only
    table) together with its reference unit; every later `resolve` of the same code returns the
    identical handle. Handles are never removed.

    Thread safety:
        Lookups of already-known codes read the code → dimension `bidict` without locking.
        Creation of an unseen code takes a lock, re-checks, appends the handle to the table and
        only then publishes the code, so concurrent callers can never observe two handles for
        one code.
    """

    def __init__(self) -> None:
        # Append-only table; index == AssetHandle.dimension
        self._handles: list[AssetHandle] = []

        # Code <-> dimension index
        self._dimensions_by_code_bidict: bidict[str, int] = bidict()

        self._create_lock = Lock()

    # region Main

    def resolve(self, code: str) -> AssetHandle:
        """Return the handle for $code, creating it on first use.

        Args:
            code: Asset code (e.g., "USD").

        Returns:
            AssetHandle: The unique handle of $code in this registry.

        Raises:
            InvalidAssetCode: If $code is empty or malformed.
        """
        # Fast path: known code, no locking
        dimension = self._dimensions_by_code_bidict.get(code) if isinstance(code, str) else None
        if dimension is not None:
            return self._handles[dimension]

        validate_asset_code(code, operation="resolve")

        with self._create_lock:
            # Re-check: another thread may have created the handle meanwhile
            dimension = self._dimensions_by_code_bidict.get(code)
            if dimension is not None:
                return self._handles[dimension]

            handle = AssetHandle(code, len(self._handles), self)
            # Publish the handle before the code so lock-free readers always find it
            self._handles.append(handle)
            self._dimensions_by_code_bidict[code] = handle.dimension

        logger.debug(f"AssetRegistry created dimension {handle.dimension} for asset $code '{code}'")
        return handle

    def unit(self, code: str) -> Unit:
        """Return the reference unit of $code, creating the asset on first use."""
        return self.resolve(code).unit

    # endregion

    # region Lookup

    def contains(self, code: str) -> bool:
        """Check whether $code has already been resolved (does not create it)."""
        return code in self._dimensions_by_code_bidict

    def handle_for_dimension(self, dimension: int) -> AssetHandle:
        """Return the handle registered at $dimension.

        Raises:
            KeyError: If no asset has this dimension index.
        """
        if dimension not in self._dimensions_by_code_bidict.inverse:
            raise KeyError(f"Cannot call `handle_for_dimension` because $dimension ({dimension}) is not registered")
        return self._handles[dimension]

    def code_for_dimension(self, dimension: int) -> str:
        """Return the asset code registered at $dimension.

        Raises:
            KeyError: If no asset has this dimension index.
        """
        try:
            return self._dimensions_by_code_bidict.inverse[dimension]
        except KeyError as e:
            raise KeyError(f"Cannot call `code_for_dimension` because $dimension ({dimension}) is not registered") from e

    def list_codes(self) -> list[str]:
        """List all registered asset codes in registration order."""
        return [handle.code for handle in list(self._handles)]

    # endregion

    # region Magic

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.contains(code)

    def __len__(self) -> int:
        return len(self._dimensions_by_code_bidict)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self)} assets)"

    # endregion


# region Process default

_default_registry: AssetRegistry | None = None
_default_registry_lock = Lock()


def get_default_registry() -> AssetRegistry:
    """Return the process-wide default `AssetRegistry`, creating it lazily.

    Every API that takes `registry=None` falls back to this instance.
    """
    global _default_registry
    registry = _default_registry
    if registry is not None:
        return registry

    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = AssetRegistry()
        return _default_registry


def resolve_registry(registry: AssetRegistry | None) -> AssetRegistry:
    """Return $registry, or the process default when $registry is None."""
    return get_default_registry() if registry is None else registry


# endregion
