"""Compound annual growth rates and benchmark period returns."""

from __future__ import annotations

import logging
import math

from vulture_engine.config import GrowthConfig
from vulture_engine.data.contracts import BenchmarkReturns
from vulture_engine.data.models import PriceSnapshot

logger = logging.getLogger(__name__)


def calculate_cagr(
    begin_value: float,
    end_value: float,
    years: float,
    config: GrowthConfig | None = None,
) -> float | None:
    """Annualised compound growth rate from begin to end value.

    Args:
        begin_value: Starting value. Must be positive.
        end_value: Ending value. Must be positive.
        years: Time span in years (fractions allowed, e.g. 1/12).
        config: Growth configuration (result ceiling). Uses defaults if None.

    Returns:
        CAGR in percent, or None if the inputs are non-positive or the
        result is non-finite or at/above the ceiling (treated as a data
        quality problem, e.g. a near-zero base).
    """
    config = config or GrowthConfig()

    if begin_value <= 0 or end_value <= 0 or years <= 0:
        return None

    try:
        result = ((end_value / begin_value) ** (1.0 / years) - 1.0) * 100.0
    except OverflowError:
        logger.debug(
            "CAGR overflow: %s -> %s over %s years", begin_value, end_value, years,
        )
        return None

    if not math.isfinite(result) or result >= config.cagr_ceiling:
        logger.debug(
            "CAGR %s outside valid range (%s -> %s over %s years)",
            result, begin_value, end_value, years,
        )
        return None

    return result


def compute_benchmark_returns(
    ticker: str,
    name: str,
    snapshot: PriceSnapshot,
    config: GrowthConfig | None = None,
) -> BenchmarkReturns:
    """CAGR from each look-back price to the current price.

    Args:
        ticker: Benchmark ticker.
        name: Display name.
        snapshot: Current and historical prices.
        config: Growth configuration (horizons in years, ceiling).

    Returns:
        BenchmarkReturns with one CAGR per horizon; None where undefined.
    """
    config = config or GrowthConfig()
    horizons = config.benchmark_horizons

    return BenchmarkReturns(
        ticker=ticker,
        name=name,
        snapshot=snapshot,
        cagr_1m=calculate_cagr(
            snapshot.one_month_ago, snapshot.current, horizons["1m"], config,
        ),
        cagr_1y=calculate_cagr(
            snapshot.one_year_ago, snapshot.current, horizons["1y"], config,
        ),
        cagr_3y=calculate_cagr(
            snapshot.three_years_ago, snapshot.current, horizons["3y"], config,
        ),
        cagr_5y=calculate_cagr(
            snapshot.five_years_ago, snapshot.current, horizons["5y"], config,
        ),
    )
