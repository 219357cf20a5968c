"""Position cost basis and portfolio mark-to-market."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from vulture_engine.data.contracts import PortfolioSummary, PositionSummary
from vulture_engine.data.models import Position

logger = logging.getLogger(__name__)


def apply_purchase(
    position: Position | None,
    ticker: str,
    shares: float,
    price: float,
) -> Position:
    """Add a purchase to a position, averaging the cost basis.

    Args:
        position: Existing position, or None to open a new one.
        ticker: Ticker symbol.
        shares: Shares bought. Must be positive.
        price: Price paid per share. Must be positive.

    Returns:
        New Position with accumulated shares and averaged cost.

    Raises:
        ValueError: If shares or price is not positive.
    """
    if shares <= 0:
        raise ValueError(f"{ticker}: shares must be positive, got {shares}")
    if price <= 0:
        raise ValueError(f"{ticker}: purchase price must be positive, got {price}")

    cost = shares * price
    if position is None:
        return Position(
            ticker=ticker,
            shares=shares,
            average_cost_basis=price,
            total_cost_basis=cost,
        )

    total_shares = position.shares + shares
    total_cost = position.total_cost_basis + cost
    return Position(
        ticker=position.ticker,
        shares=total_shares,
        average_cost_basis=total_cost / total_shares,
        total_cost_basis=total_cost,
    )


def summarize_portfolio(
    positions: Sequence[Position],
    prices: Mapping[str, float],
) -> PortfolioSummary:
    """Mark positions to market and total the gains.

    Args:
        positions: Owned positions.
        prices: {ticker: current_price}. Missing tickers are valued at 0.

    Returns:
        PortfolioSummary with per-position detail.
    """
    total_value = 0.0
    total_cost = 0.0
    summaries: list[PositionSummary] = []

    for position in positions:
        price = prices.get(position.ticker, 0.0)
        if price <= 0:
            logger.warning("%s: no current price, valued at 0", position.ticker)

        market_value = position.shares * price
        avg_cost = position.average_cost_basis
        gain_percent = (
            (price - avg_cost) / avg_cost * 100.0 if avg_cost > 0 else 0.0
        )

        total_value += market_value
        total_cost += position.total_cost_basis

        summaries.append(
            PositionSummary(
                ticker=position.ticker,
                shares=position.shares,
                average_cost_basis=avg_cost,
                current_price=price,
                market_value=market_value,
                gain_percent=gain_percent,
                gain_dollar=market_value - position.total_cost_basis,
            )
        )

    total_gain = total_value - total_cost
    total_gain_percent = total_gain / total_cost * 100.0 if total_cost > 0 else 0.0

    return PortfolioSummary(
        total_value=total_value,
        total_cost_basis=total_cost,
        total_gain=total_gain,
        total_gain_percent=total_gain_percent,
        positions=tuple(summaries),
    )
