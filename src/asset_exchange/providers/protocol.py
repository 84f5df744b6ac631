from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from asset_exchange.domain.exchange.rates_payload import RatesPayload


# region Interface


@runtime_checkable
class RatesPayloadAdapter(Protocol):
    """Translates one rate provider's JSON shape into a `RatesPayload`.

    An adapter only renames and parses fields; it performs no conversion logic and never
    fetches anything. Each real-world provider schema gets its own adapter.
    """

    def parse(self, raw: Mapping[str, Any]) -> RatesPayload:
        """Parse the decoded JSON document $raw of this provider.

        Args:
            raw: Decoded JSON object as returned by the provider.

        Returns:
            RatesPayload: Anchor asset and rates quoted per 1 anchor.

        Raises:
            RatesPayloadError: If required fields are missing or malformed.
        """
        ...


# endregion
