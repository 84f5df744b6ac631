from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from asset_exchange.config import DuplicatePolicy
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.domain.exchange.exchange_market import ExchangeMarket
from asset_exchange.domain.exchange.rate import Rate
from asset_exchange.domain.exchange.rates_payload import RatesPayload
from asset_exchange.errors import DegenerateAssetsPair, DimensionMismatch, DuplicateRatePair, MissingRatePair, NonPositiveRate
from tests.helpers.test_assistant import TEST_ASSISTANT as TST


def test_build_from_entries_keeps_both_directions_as_given() -> None:
    registry = TST.market.create_registry()

    market = TST.market.create_usd_brl_market(registry)

    assert len(market) == 2
    assert market.rate_for("USD", "BRL").value == 5.33897
    assert market.rate_for("BRL", "USD").value == 0.187302
    assert market.list_assets() == ["BRL", "USD"]


def test_build_from_single_entry() -> None:
    registry = TST.market.create_registry()

    market = ExchangeMarket((AssetsPair("USD", "BRL"), 5.33897), registry=registry)

    assert market.list_pairs() == [AssetsPair("USD", "BRL")]
    assert ExchangeMarket.from_entry("USD/BRL", 5.33897, registry=registry).rate_for("USD", "BRL") == market.rate_for("USD", "BRL")


def test_build_from_mapping_with_all_key_spellings() -> None:
    registry = TST.market.create_registry()

    market = ExchangeMarket.from_mapping(
        {
            AssetsPair("EUR", "USD"): Decimal("1.19536"),
            ("USD", "CAD"): "1.29849",
            "GBP/USD": 1.27,
        },
        registry=registry,
    )

    assert market.list_pairs() == [AssetsPair("EUR", "USD"), AssetsPair("GBP", "USD"), AssetsPair("USD", "CAD")]
    assert market.rate_for("USD", "CAD").value == Decimal("1.29849")


def test_build_from_rates_accepts_rate_objects() -> None:
    registry = TST.market.create_registry()
    rate = Rate.of(AssetsPair("USD", "BRL"), Decimal("5.33897"), registry)

    market = ExchangeMarket([(AssetsPair("USD", "BRL"), rate)], registry=registry)

    assert market[AssetsPair("USD", "BRL")] is rate


def test_rate_must_match_its_key() -> None:
    registry = TST.market.create_registry()
    rate = Rate.of(AssetsPair("USD", "BRL"), Decimal("5.33897"), registry)

    with pytest.raises(DimensionMismatch):
        ExchangeMarket([(AssetsPair("BRL", "USD"), rate)], registry=registry)


def test_rate_must_come_from_market_registry() -> None:
    registry = TST.market.create_registry()
    rate = Rate.of(AssetsPair("USD", "BRL"), Decimal("5.33897"), TST.market.create_registry())

    with pytest.raises(DimensionMismatch):
        ExchangeMarket([(AssetsPair("USD", "BRL"), rate)], registry=registry)


def test_empty_market() -> None:
    registry = TST.market.create_registry()

    market = ExchangeMarket(registry=registry)

    assert len(market) == 0
    assert market.list_assets() == []
    assert not market.has_pair("USD", "BRL")


def test_build_from_payload_uses_anchor_as_base() -> None:
    registry = TST.market.create_registry()
    payload = RatesPayload(anchor="USD", rates={"BRL": Decimal("5.33897"), "EUR": Decimal("0.836565")})

    market = ExchangeMarket.from_payload(payload, registry=registry)

    assert market.list_pairs() == [AssetsPair("USD", "BRL"), AssetsPair("USD", "EUR")]
    assert not market.has_pair("BRL", "USD")


def test_payload_anchor_self_rate_of_one_is_skipped() -> None:
    registry = TST.market.create_registry()
    payload = RatesPayload(anchor="USD", rates={"USD": 1, "BRL": 5.33897})

    market = ExchangeMarket(payload, registry=registry)

    assert market.list_pairs() == [AssetsPair("USD", "BRL")]


def test_payload_anchor_self_rate_other_than_one_raises() -> None:
    registry = TST.market.create_registry()
    payload = RatesPayload(anchor="USD", rates={"USD": 1.01, "BRL": 5.33897})

    with pytest.raises(DegenerateAssetsPair):
        ExchangeMarket(payload, registry=registry)


def test_duplicate_pair_raises_by_default() -> None:
    registry = TST.market.create_registry()

    with pytest.raises(DuplicateRatePair):
        ExchangeMarket([("USD/BRL", 5.33897), (AssetsPair("USD", "BRL"), 5.4)], registry=registry)


def test_duplicate_pair_spelled_differently_in_mapping_raises() -> None:
    registry = TST.market.create_registry()

    with pytest.raises(DuplicateRatePair):
        ExchangeMarket.from_mapping({"USD/BRL": 5.33897, ("USD", "BRL"): 5.4}, registry=registry)


def test_duplicate_pair_last_wins_when_configured(caplog: pytest.LogCaptureFixture) -> None:
    registry = TST.market.create_registry()

    with caplog.at_level(logging.WARNING, logger="asset_exchange.domain.exchange.exchange_market"):
        market = ExchangeMarket(
            [("USD/BRL", 5.33897), ("USD/BRL", 5.4)],
            registry=registry,
            duplicate_policy=DuplicatePolicy.LAST_WINS,
        )

    assert market.rate_for("USD", "BRL").value == 5.4
    assert market.duplicate_policy is DuplicatePolicy.LAST_WINS
    assert "USD/BRL" in caplog.text


def test_invalid_rate_value_is_rejected() -> None:
    registry = TST.market.create_registry()

    with pytest.raises(NonPositiveRate):
        ExchangeMarket([("USD/BRL", 0)], registry=registry)


@pytest.mark.parametrize("source", ["USD/BRL", 42, [("USD/BRL",)], [("USD/BRL", 5, 6)], [AssetsPair("USD", "BRL")]])
def test_unsupported_source_shapes_are_rejected(source) -> None:
    registry = TST.market.create_registry()

    with pytest.raises(TypeError):
        ExchangeMarket(source, registry=registry)


def test_has_pair_and_rate_for() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_eur_usd_cad_market(registry)

    assert market.has_pair("EUR", "USD")
    assert not market.has_pair("USD", "EUR")
    assert not market.has_pair("EUR", "EUR")

    with pytest.raises(MissingRatePair) as exc_info:
        market.rate_for("EUR", "CAD")
    assert exc_info.value.pair == AssetsPair("EUR", "CAD")
    assert "EUR/CAD" in str(exc_info.value)


def test_mapping_interface() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)

    assert AssetsPair("USD", "BRL") in market
    assert market.get(AssetsPair("EUR", "USD")) is None
    assert set(market) == {AssetsPair("USD", "BRL"), AssetsPair("BRL", "USD")}
    with pytest.raises(KeyError):
        market[AssetsPair("EUR", "USD")]


def test_market_is_read_only() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)

    with pytest.raises(TypeError):
        market[AssetsPair("EUR", "USD")] = Rate.of(AssetsPair("EUR", "USD"), 1.19, registry)
    with pytest.raises(TypeError):
        market._rates[AssetsPair("EUR", "USD")] = Rate.of(AssetsPair("EUR", "USD"), 1.19, registry)


def test_source_mutation_after_build_does_not_leak() -> None:
    registry = TST.market.create_registry()
    source = {"USD/BRL": 5.33897}

    market = ExchangeMarket(source, registry=registry)
    source["EUR/USD"] = 1.19

    assert len(market) == 1


def test_merge() -> None:
    registry = TST.market.create_registry()
    first = TST.market.create_usd_brl_market(registry)
    second = TST.market.create_eur_usd_cad_market(registry)

    merged = first.merge(second)

    assert len(merged) == 4
    assert merged.list_assets() == ["BRL", "CAD", "EUR", "USD"]
    # Inputs stay untouched
    assert len(first) == 2

    with pytest.raises(DuplicateRatePair):
        merged.merge(first)

    override = ExchangeMarket([("USD/BRL", 5.5)], registry=registry)
    assert first.merge(override, duplicate_policy=DuplicatePolicy.LAST_WINS).rate_for("USD", "BRL").value == 5.5


def test_repr_lists_pairs_sorted() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)

    assert repr(market) == "ExchangeMarket(2 pairs: BRL/USD, USD/BRL)"
