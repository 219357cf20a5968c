"""Portfolio allocation weights from margin of safety.

Three strategies:
    equal: 100 / N for every holding.
    value-weighted: proportional to non-negative margin of safety. When
        no holding has a positive margin the result is empty; there is
        no equal-weight fallback.
    conviction: fixed top-N / tail weights by margin-of-safety rank.
        Weights are absolute and do not sum to 100 in general.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from vulture_engine.config import AllocationConfig, AllocationStrategy
from vulture_engine.data.models import Holding

logger = logging.getLogger(__name__)


def _equal_weights(holdings: Sequence[Holding]) -> dict[str, float]:
    if not holdings:
        raise ValueError("Equal-weight allocation requires at least one holding")
    weight = 100.0 / len(holdings)
    return {h.ticker: weight for h in holdings}


def _value_weights(holdings: Sequence[Holding]) -> dict[str, float]:
    opportunities = [(h.ticker, max(h.margin_of_safety, 0.0)) for h in holdings]
    total_mos = sum(mos for _, mos in opportunities)

    if total_mos <= 0:
        logger.info(
            "No positive margin of safety across %d holdings, "
            "no value weights assigned",
            len(holdings),
        )
        return {}

    return {ticker: mos / total_mos * 100.0 for ticker, mos in opportunities}


def _conviction_weights(
    holdings: Sequence[Holding], config: AllocationConfig,
) -> dict[str, float]:
    # sorted() is stable: tied margins keep their input order
    ranked = sorted(holdings, key=lambda h: h.margin_of_safety, reverse=True)
    return {
        h.ticker: (
            config.conviction_top_weight
            if rank < config.conviction_top_n
            else config.conviction_tail_weight
        )
        for rank, h in enumerate(ranked)
    }


def calculate_allocation_weights(
    holdings: Sequence[Holding],
    strategy: AllocationStrategy | str,
    config: AllocationConfig | None = None,
) -> dict[str, float]:
    """Calculate target portfolio weights in percent.

    Args:
        holdings: Candidates with tickers unique within the call.
        strategy: AllocationStrategy or its string value.
        config: Conviction sizing. Uses defaults if None.

    Returns:
        {ticker: weight_percent}. May be empty for value-weighted.

    Raises:
        ValueError: If the strategy is unknown, or if equal weighting is
            requested with no holdings.
    """
    config = config or AllocationConfig()
    strategy = AllocationStrategy(strategy)

    if strategy is AllocationStrategy.EQUAL:
        weights = _equal_weights(holdings)
    elif strategy is AllocationStrategy.VALUE_WEIGHTED:
        weights = _value_weights(holdings)
    else:
        weights = _conviction_weights(holdings, config)

    logger.debug(
        "%s allocation: %d holdings, total weight %.2f",
        strategy.value,
        len(weights),
        sum(weights.values()),
    )
    return weights
