from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest

from asset_exchange.domain.assets.quantity import Quantity
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.domain.exchange.conversion_mode import ConversionMode
from asset_exchange.domain.exchange.converter import convert, find_intermediate_asset
from asset_exchange.domain.exchange.exchange_market import ExchangeMarket
from asset_exchange.errors import DimensionMismatch, InvalidAssetCode, MissingIntermediateAsset, MissingRatePair
from tests.helpers.test_assistant import TEST_ASSISTANT as TST


# region Single-leg modes


def test_direct_multiplies_by_source_target_rate() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)

    result = convert("BRL", TST.market.create_amount(100, "USD", registry), market, ConversionMode.DIRECT)

    assert result.unit == registry.unit("BRL")
    assert result.value == pytest.approx(533.897)


def test_direct_and_inverse_use_different_rates() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)
    amount = TST.market.create_amount(500, "BRL", registry)

    direct = convert("USD", amount, market, ConversionMode.DIRECT)
    inverse = convert("USD", amount, market, ConversionMode.INVERSE)

    # DIRECT reads BRL/USD, INVERSE divides by USD/BRL; the two rates are not reciprocals
    assert direct.value == pytest.approx(93.651)
    assert inverse.value == pytest.approx(93.65102257551551)
    assert direct != inverse
    assert direct.unit == inverse.unit == registry.unit("USD")


def test_default_mode_is_direct() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)
    amount = TST.market.create_amount(100, "USD", registry)

    assert convert("BRL", amount, market) == convert("BRL", amount, market, ConversionMode.DIRECT)
    assert amount.to("BRL", market) == convert("BRL", amount, market)


def test_missing_pair_raises() -> None:
    registry = TST.market.create_registry()
    market = ExchangeMarket([("USD/BRL", 5.33897)], registry=registry)
    amount = TST.market.create_amount(500, "BRL", registry)

    with pytest.raises(MissingRatePair) as exc_info:
        convert("USD", amount, market, ConversionMode.DIRECT)
    assert exc_info.value.pair == AssetsPair("BRL", "USD")

    # INVERSE finds USD/BRL and divides
    assert convert("USD", amount, market, ConversionMode.INVERSE).value == pytest.approx(93.65102257551551)


def test_inverse_missing_pair_raises() -> None:
    registry = TST.market.create_registry()
    market = ExchangeMarket([("USD/BRL", 5.33897)], registry=registry)

    with pytest.raises(MissingRatePair):
        convert("BRL", TST.market.create_amount(100, "USD", registry), market, ConversionMode.INVERSE)


# endregion

# region Intermediate modes


def test_direct_via_intermediate() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_eur_usd_cad_market(registry)

    result = convert("CAD", TST.market.create_amount(100, "EUR", registry), market, ConversionMode.DIRECT_VIA_INTERMEDIATE)

    assert result.unit == registry.unit("CAD")
    assert result.value == pytest.approx(155.21630064)


def test_direct_via_intermediate_without_bridge_raises() -> None:
    registry = TST.market.create_registry()
    market = ExchangeMarket([("EUR/USD", 1.19536), ("GBP/CAD", 1.7)], registry=registry)

    with pytest.raises(MissingIntermediateAsset) as exc_info:
        convert("CAD", TST.market.create_amount(100, "EUR", registry), market, ConversionMode.DIRECT_VIA_INTERMEDIATE)
    assert (exc_info.value.first, exc_info.value.last) == ("EUR", "CAD")


def test_intermediate_search_is_lexicographic() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_decimal_cross_market(registry)

    assert find_intermediate_asset(market, "EUR", "JPY") == "GBP"

    result = convert("JPY", TST.market.create_amount(100, "EUR", registry), market, ConversionMode.DIRECT_VIA_INTERMEDIATE)
    # Through GBP: 100 * 0.85 * 190; through USD it would have been 100 * 1.10 * 150
    assert result.value == Decimal("16150")


def test_intermediate_search_skips_endpoints() -> None:
    registry = TST.market.create_registry()
    market = ExchangeMarket([("AAA/ZZZ", 2), ("ZZZ/ZZZ2", 3)], registry=registry)

    with pytest.raises(MissingIntermediateAsset):
        find_intermediate_asset(market, "AAA", "ZZZ")
    assert find_intermediate_asset(market, "AAA", "ZZZ2") == "ZZZ"


def test_inverse_via_intermediate() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_decimal_cross_market(registry)

    result = convert("EUR", TST.market.create_amount(Decimal("16150"), "JPY", registry), market, ConversionMode.INVERSE_VIA_INTERMEDIATE)

    assert result.unit == registry.unit("EUR")
    assert result.value == Decimal("100")


def test_inverse_via_intermediate_floats() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_eur_usd_cad_market(registry)

    result = convert("EUR", TST.market.create_amount(155.21630064, "CAD", registry), market, ConversionMode.INVERSE_VIA_INTERMEDIATE)

    assert result.value == pytest.approx(100)


def test_inverse_via_intermediate_with_tiny_float_rates() -> None:
    registry = TST.market.create_registry()
    # 1e-200 * 1e-200 underflows to 0.0, each rate on its own is a valid positive float
    market = ExchangeMarket([("CAD/USD", 1e-200), ("USD/EUR", 1e-200)], registry=registry)

    result = convert("CAD", TST.market.create_amount(1e-300, "EUR", registry), market, ConversionMode.INVERSE_VIA_INTERMEDIATE)

    assert result.unit == registry.unit("CAD")
    assert result.value == pytest.approx(1e100)


def test_inverse_via_intermediate_without_bridge_raises() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)

    with pytest.raises(MissingIntermediateAsset):
        convert("USD", TST.market.create_amount(100, "BRL", registry), market, ConversionMode.INVERSE_VIA_INTERMEDIATE)


# endregion

# region Degenerate and invalid input


@pytest.mark.parametrize("mode", list(ConversionMode))
def test_degenerate_conversion_returns_amount_in_every_mode(mode: ConversionMode) -> None:
    registry = TST.market.create_registry()
    empty_market = ExchangeMarket(registry=registry)
    amount = TST.market.create_amount(Decimal("42.10"), "USD", registry)

    assert convert("USD", amount, empty_market, mode) is amount
    assert convert(registry.resolve("USD"), amount, empty_market, mode) is amount


def test_source_from_other_registry_raises() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)
    foreign_amount = TST.market.create_amount(100, "USD", TST.market.create_registry())

    with pytest.raises(DimensionMismatch):
        convert("BRL", foreign_amount, market)


def test_target_handle_from_other_registry_raises() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)
    foreign_target = TST.market.create_registry().resolve("BRL")

    with pytest.raises(DimensionMismatch):
        convert(foreign_target, TST.market.create_amount(100, "USD", registry), market)


def test_amount_must_be_single_asset_quantity() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)
    rate_quantity = Quantity(5, registry.unit("BRL") / registry.unit("USD"))

    with pytest.raises(DimensionMismatch):
        convert("BRL", rate_quantity, market)
    with pytest.raises(TypeError):
        convert("BRL", 100, market)


def test_malformed_target_raises() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)

    with pytest.raises(InvalidAssetCode):
        convert("BRL/USD", TST.market.create_amount(100, "USD", registry), market)


# endregion

# region Numeric representations


def test_fraction_round_trip_is_exact() -> None:
    registry = TST.market.create_registry()
    market = ExchangeMarket([("USD/BRL", Fraction(533897, 100000))], registry=registry)
    amount = TST.market.create_amount(Fraction(100), "USD", registry)

    brl = convert("BRL", amount, market, ConversionMode.DIRECT)
    back = convert("USD", brl, market, ConversionMode.INVERSE)

    assert brl.value == Fraction(533897, 1000)
    assert back == amount
    assert isinstance(back.value, Fraction)


def test_decimal_round_trip_is_exact() -> None:
    registry = TST.market.create_registry()
    market = ExchangeMarket([("USD/BRL", Decimal("5.33897"))], registry=registry)
    amount = TST.market.create_amount(Decimal("100"), "USD", registry)

    brl = convert("BRL", amount, market, ConversionMode.DIRECT)
    back = convert("USD", brl, market, ConversionMode.INVERSE)

    assert brl.value == Decimal("533.897")
    assert back.value == Decimal("100")
    assert isinstance(back.value, Decimal)


@pytest.mark.parametrize(
    "rate,reciprocal,value",
    [
        (Fraction(533897, 100000), Fraction(100000, 533897), Fraction(500)),
        (Decimal("1.25"), Decimal("0.8"), Decimal("500")),
        (5.33897, 1 / 5.33897, 500.0),
    ],
)
def test_direct_round_trip_over_reciprocal_rates(rate, reciprocal, value) -> None:
    registry = TST.market.create_registry()
    market = ExchangeMarket([("USD/BRL", rate), ("BRL/USD", reciprocal)], registry=registry)
    amount = TST.market.create_amount(value, "USD", registry)

    back = convert("USD", convert("BRL", amount, market), market)

    if isinstance(value, float):
        assert back.isclose(amount)
    else:
        assert back == amount


def test_conversion_is_repeatable() -> None:
    registry = TST.market.create_registry()
    market = TST.market.create_usd_brl_market(registry)
    amount = TST.market.create_amount(100, "USD", registry)

    results = {convert("BRL", amount, market).value for _ in range(5)}

    assert len(results) == 1


# endregion
