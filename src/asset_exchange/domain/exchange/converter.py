from __future__ import annotations

import logging
from decimal import localcontext
from typing import assert_never

from asset_exchange.config import load_settings
from asset_exchange.domain.assets.asset_handle import AssetHandle
from asset_exchange.domain.assets.asset_registry import AssetRegistry, validate_asset_code
from asset_exchange.domain.assets.quantity import Quantity
from asset_exchange.domain.exchange.assets_pair import AssetsPair
from asset_exchange.domain.exchange.conversion_mode import ConversionMode
from asset_exchange.domain.exchange.exchange_market import ExchangeMarket
from asset_exchange.domain.exchange.rate import Rate
from asset_exchange.errors import DimensionMismatch, MissingIntermediateAsset, MissingRatePair

logger = logging.getLogger(__name__)


def find_intermediate_asset(market: ExchangeMarket, first: str, last: str) -> str:
    """Return the asset m that bridges $first → m → $last in $market.

    Candidates are all assets of $market in lexicographic order (excluding $first and $last);
    the first m with both pairs (first, m) and (m, last) present wins. The order is fixed, so the
    choice is reproducible; callers needing a specific bridge should add a direct pair instead.

    Args:
        market: Market to search.
        first: Base asset of the first leg.
        last: Quote asset of the second leg.

    Returns:
        str: Code of the intermediate asset.

    Raises:
        MissingIntermediateAsset: If no asset bridges the two legs.
    """
    for candidate in market.list_assets():
        if candidate == first or candidate == last:
            continue
        if market.has_pair(first, candidate) and market.has_pair(candidate, last):
            return candidate

    raise MissingIntermediateAsset(f"Cannot call `find_intermediate_asset` because no asset m has both pairs '{first}/m' and 'm/{last}' in the ExchangeMarket", first=first, last=last)


def convert(
    target: str | AssetHandle,
    amount: Quantity,
    market: ExchangeMarket,
    mode: ConversionMode = ConversionMode.DIRECT,
    *,
    registry: AssetRegistry | None = None,
) -> Quantity:
    """Convert $amount into the $target asset using rates from $market.

    | mode | rates used | result |
    |---|---|---|
    | DIRECT | (source, target) | amount * rate |
    | INVERSE | (target, source) | amount / rate |
    | DIRECT_VIA_INTERMEDIATE | (source, m), (m, target) | amount * r1 * r2 |
    | INVERSE_VIA_INTERMEDIATE | (target, m), (m, source) | amount / r2 / r1 |

    Converting into the asset $amount is already in returns $amount unchanged, in every mode and
    whatever the market holds. The call is stateless and either fully succeeds or raises.

    Args:
        target: Target asset code or handle.
        amount: Quantity denominated in a single asset (the source asset).
        market: Market to read rates from.
        mode: Conversion mode, `ConversionMode.DIRECT` by default.
        registry: Registry to resolve $target in; None means `market.registry`.

    Returns:
        Quantity: Equivalent amount in $target.

    Raises:
        MissingRatePair: If DIRECT / INVERSE cannot find its pair.
        MissingIntermediateAsset: If an intermediate mode finds no bridging asset.
        DimensionMismatch: If $amount is not a single-asset quantity, lives in another registry,
            or the result does not land in $target.
        InvalidAssetCode: If $target is a malformed code.
    """
    # Raise: only quantities carry an asset
    if not isinstance(amount, Quantity):
        raise TypeError(f"Cannot call `convert` because $amount is not Quantity (got type '{type(amount).__name__}')")

    source = amount.unit.asset
    # Raise: the source asset must be unambiguous
    if source is None:
        raise DimensionMismatch(f"Cannot call `convert` because $amount ('{amount}') is not denominated in a single asset", actual=amount.unit)

    # Degenerate conversion is a no-op, never an error
    target_code = target.code if isinstance(target, AssetHandle) else validate_asset_code(target, operation="convert")
    if target_code == source.code and (not isinstance(target, AssetHandle) or target is source):
        return amount

    assets = market.registry if registry is None else registry

    # Raise: source and target dimensions must come from the market's registry
    if source.registry is not assets:
        raise DimensionMismatch(f"Cannot call `convert` because $amount's asset '{source}' is not registered in the registry used for conversion", expected=assets, actual=source.registry)
    if isinstance(target, AssetHandle) and target.registry is not assets:
        raise DimensionMismatch(f"Cannot call `convert` because $target '{target}' is not registered in the registry used for conversion", expected=assets, actual=target.registry)

    target_handle = target if isinstance(target, AssetHandle) else assets.resolve(target)

    with localcontext() as ctx:
        ctx.prec = load_settings().decimal_precision

        if mode is ConversionMode.DIRECT:
            rate = _lookup_rate(market, source.code, target_handle.code, mode)
            result = rate.apply(amount)
            via = None
        elif mode is ConversionMode.INVERSE:
            rate = _lookup_rate(market, target_handle.code, source.code, mode)
            result = rate.apply_inverse(amount)
            via = None
        elif mode is ConversionMode.DIRECT_VIA_INTERMEDIATE:
            via = find_intermediate_asset(market, source.code, target_handle.code)
            first_leg = _lookup_rate(market, source.code, via, mode)
            second_leg = _lookup_rate(market, via, target_handle.code, mode)
            result = second_leg.apply(first_leg.apply(amount))
        elif mode is ConversionMode.INVERSE_VIA_INTERMEDIATE:
            via = find_intermediate_asset(market, target_handle.code, source.code)
            first_leg = _lookup_rate(market, target_handle.code, via, mode)
            second_leg = _lookup_rate(market, via, source.code, mode)
            # Leg by leg: the product of both rates may underflow where each single step does not
            result = first_leg.apply_inverse(second_leg.apply_inverse(amount))
        else:
            assert_never(mode)

    # Raise: units must cancel down to exactly the target asset
    if result.unit != target_handle.unit:
        raise DimensionMismatch(f"Cannot call `convert` because the result unit '{result.unit}' is not the target '{target_handle}'", expected=target_handle.unit, actual=result.unit)

    logger.debug(f"Converted {amount} to {result} (mode={mode.name}, via={via})")
    return result


def _lookup_rate(market: ExchangeMarket, base: str, quote: str, mode: ConversionMode) -> Rate:
    pair = AssetsPair(base, quote)
    rate = market.get(pair)
    if rate is None:
        raise MissingRatePair(f"Cannot call `convert` in mode {mode.name} because pair '{pair}' is not in the ExchangeMarket", pair=pair)
    return rate
