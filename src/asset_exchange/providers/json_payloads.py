from __future__ import annotations

from collections.abc import Callable, Mapping
from decimal import InvalidOperation
from typing import Any

from asset_exchange.domain.exchange.rates_payload import RatesPayload
from asset_exchange.errors import RatesPayloadError
from asset_exchange.utils.numeric_tools import Numeric, as_decimal

from .protocol import RatesPayloadAdapter

ValueParser = Callable[[Any], Numeric]


def _require_mapping(raw: Any, field: str, payload: Any) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise RatesPayloadError(f"Rates payload field '{field}' is not an object (got type '{type(raw).__name__}')", payload=payload)
    return raw


def _require_code(raw: Any, field: str, payload: Any) -> str:
    if not isinstance(raw, str) or not raw:
        raise RatesPayloadError(f"Rates payload field '{field}' is missing or not a string", payload=payload)
    return raw


def _parse_rates(raw_rates: Mapping[str, Any], value_parser: ValueParser, payload: Any) -> dict[str, Numeric]:
    parsed: dict[str, Numeric] = {}
    for code, raw_value in raw_rates.items():
        # JSON booleans and nulls are never rates
        if raw_value is None or isinstance(raw_value, bool):
            raise RatesPayloadError(f"Rates payload value for '{code}' ({raw_value!r}) is not a number", payload=payload)
        try:
            parsed[code] = value_parser(raw_value)
        except (ValueError, TypeError, InvalidOperation) as e:
            raise RatesPayloadError(f"Rates payload value for '{code}' ({raw_value!r}) cannot be parsed", payload=payload) from e
    return parsed


class OpenExchangeRatesAdapter(RatesPayloadAdapter):
    """Adapter for `{"base": "USD", "rates": {"EUR": 0.92, ...}}` documents.

    Used by Open Exchange Rates (latest / historical endpoints) and by Frankfurter / ECB mirrors.
    An error document (`{"error": true, "description": ...}`) raises `RatesPayloadError`.
    """

    source_name = "open-exchange-rates"

    def __init__(self, value_parser: ValueParser = as_decimal) -> None:
        self._value_parser = value_parser

    def parse(self, raw: Mapping[str, Any]) -> RatesPayload:
        document = _require_mapping(raw, "<root>", raw)

        if document.get("error"):
            message = document.get("description") or document.get("message") or "Open Exchange Rates error"
            raise RatesPayloadError(str(message), payload=raw)

        anchor = _require_code(document.get("base"), "base", raw)
        rates = _parse_rates(_require_mapping(document.get("rates"), "rates", raw), self._value_parser, raw)
        return RatesPayload(anchor=anchor, rates=rates, source=self.source_name)


class ExchangeRateApiAdapter(RatesPayloadAdapter):
    """Adapter for `{"result": "success", "base_code": "USD", "conversion_rates": {...}}` documents."""

    source_name = "exchangerate-api"

    def __init__(self, value_parser: ValueParser = as_decimal) -> None:
        self._value_parser = value_parser

    def parse(self, raw: Mapping[str, Any]) -> RatesPayload:
        document = _require_mapping(raw, "<root>", raw)

        result = document.get("result", "success")
        if result != "success":
            raise RatesPayloadError(f"ExchangeRate-API returned result '{result}' ({document.get('error-type', 'unknown error')})", payload=raw)

        anchor = _require_code(document.get("base_code"), "base_code", raw)
        rates = _parse_rates(_require_mapping(document.get("conversion_rates"), "conversion_rates", raw), self._value_parser, raw)
        return RatesPayload(anchor=anchor, rates=rates, source=self.source_name)


class CoinbaseAdapter(RatesPayloadAdapter):
    """Adapter for `{"data": {"currency": "USD", "rates": {"BTC": "0.0000157", ...}}}` documents.

    Coinbase sends rates as strings; the default parser keeps them exact as Decimal.
    """

    source_name = "coinbase"

    def __init__(self, value_parser: ValueParser = as_decimal) -> None:
        self._value_parser = value_parser

    def parse(self, raw: Mapping[str, Any]) -> RatesPayload:
        document = _require_mapping(raw, "<root>", raw)
        data = _require_mapping(document.get("data"), "data", raw)

        anchor = _require_code(data.get("currency"), "data.currency", raw)
        rates = _parse_rates(_require_mapping(data.get("rates"), "data.rates", raw), self._value_parser, raw)
        return RatesPayload(anchor=anchor, rates=rates, source=self.source_name)
