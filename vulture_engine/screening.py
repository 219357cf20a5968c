"""Screening: margin of safety, vulture status, and valuation reports."""

from __future__ import annotations

import logging
from dataclasses import replace

from vulture_engine.analysis.dcf import calculate_dcf
from vulture_engine.config import ClassifierConfig, DCFConfig, VultureStatus
from vulture_engine.data.contracts import ValuationReport
from vulture_engine.data.models import FinancialMetrics

logger = logging.getLogger(__name__)


def calculate_margin_of_safety(intrinsic_value: float, current_price: float) -> float:
    """Compute margin of safety in percent.

    MoS = (IV - price) / IV * 100. Positive when price is below IV.

    Args:
        intrinsic_value: Intrinsic value per share.
        current_price: Current stock price.

    Returns:
        Margin of safety in percent, or 0.0 if IV <= 0.
    """
    if intrinsic_value <= 0:
        return 0.0
    return (intrinsic_value - current_price) / intrinsic_value * 100.0


def classify(
    intrinsic_value: float,
    current_price: float,
    margin_of_safety: float,
    debt_to_equity: float,
    has_moat: bool,
    config: ClassifierConfig | None = None,
) -> VultureStatus:
    """Classify an opportunity. Gates are checked in order; first match wins.

    1. Non-positive IV: nothing to value, monitor cash.
    2. No moat: cheapness without a durable advantage is a value trap,
       regardless of price.
    3. Large discount with high leverage: flagged before it can be a buy.
    4-6. Margin-of-safety bands.

    ``current_price`` is part of the signature but no gate reads it; the
    price enters through ``margin_of_safety``.
    """
    config = config or ClassifierConfig()

    if intrinsic_value <= 0:
        return VultureStatus.SPECULATIVE

    if not has_moat:
        return VultureStatus.VALUE_TRAP

    if (
        margin_of_safety > config.strong_buy_min_mos
        and debt_to_equity > config.high_leverage_min_debt_to_equity
    ):
        return VultureStatus.CAUTION_HIGH_LEVERAGE

    if margin_of_safety > config.strong_buy_min_mos:
        return VultureStatus.STRONG_BUY
    if margin_of_safety > config.fair_value_min_mos:
        return VultureStatus.FAIR_VALUE
    return VultureStatus.OVERVALUED


def evaluate_company(
    ticker: str,
    metrics: FinancialMetrics,
    has_moat: bool = True,
    growth_rate: float | None = None,
    wacc: float | None = None,
    dcf_config: DCFConfig | None = None,
    classifier_config: ClassifierConfig | None = None,
) -> ValuationReport:
    """Run DCF, margin of safety, and classification for one company.

    Args:
        ticker: Ticker symbol (for the report and log messages).
        metrics: Company fundamentals including current price.
        has_moat: Whether the company has a durable competitive advantage.
        growth_rate: Override growth (percent). Ignored when None or 0.
        wacc: Override WACC (percent). Ignored when None or 0.
        dcf_config: DCF parameters.
        classifier_config: Classification thresholds.

    Returns:
        ValuationReport. Without a price (``current_price`` 0) the report
        is still produced; check ``has_price`` before presenting MoS or
        status.
    """
    overrides: dict[str, float] = {}
    if growth_rate:
        overrides["growth_rate"] = growth_rate
    if wacc:
        overrides["wacc"] = wacc
    if overrides:
        metrics = replace(metrics, **overrides)

    dcf = calculate_dcf(metrics, dcf_config)
    price = float(metrics.current_price)

    if price <= 0:
        logger.info(
            "%s: no current price, margin of safety and status not meaningful",
            ticker,
        )

    mos = calculate_margin_of_safety(dcf.intrinsic_value, price)
    status = classify(
        dcf.intrinsic_value,
        price,
        mos,
        dcf.debt_to_equity,
        has_moat,
        classifier_config,
    )

    logger.debug(
        "%s: IV %.2f, price %.2f, MoS %.1f%%, %s",
        ticker, dcf.intrinsic_value, price, mos, status.value,
    )

    return ValuationReport(
        ticker=ticker,
        dcf=dcf,
        margin_of_safety=mos,
        status=status,
        current_price=price,
        growth_rate=float(metrics.growth_rate),
        wacc=float(metrics.wacc),
        has_moat=has_moat,
    )
