from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asset_exchange.domain.assets.asset_registry import AssetRegistry
    from asset_exchange.domain.assets.unit import Unit


class AssetHandle:
    """Dimension tag and reference unit of one asset code, issued by an `AssetRegistry`.

    Handles are created only by `AssetRegistry.resolve` and are never destroyed. Equality is
    identity: one registry returns the same handle for the same code for the whole process
    lifetime, and handles issued by two different registries never compare equal.

    Attributes:
        code (str): Asset code (e.g., "USD", "XAU").
        dimension (int): Index of this asset's dimension in the owning registry's table.
        registry (AssetRegistry): Registry that issued this handle.
        unit (Unit): Reference unit of this asset (its dimension to the power 1, scale 1:1).
    """

    __slots__ = ("_code", "_dimension", "_registry", "_unit")

    def __init__(self, code: str, dimension: int, registry: AssetRegistry) -> None:
        # Local import: Unit refers back to AssetHandle
        from asset_exchange.domain.assets.unit import Unit

        self._code = code
        self._dimension = dimension
        self._registry = registry
        self._unit = Unit({self: 1})

    @property
    def code(self) -> str:
        """Get the asset code."""
        return self._code

    @property
    def dimension(self) -> int:
        """Get the dimension index inside the owning registry."""
        return self._dimension

    @property
    def registry(self) -> AssetRegistry:
        """Get the registry that issued this handle."""
        return self._registry

    @property
    def unit(self) -> Unit:
        """Get the reference unit of this asset."""
        return self._unit

    def __str__(self) -> str:
        return self._code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self._code}', dimension={self._dimension})"
