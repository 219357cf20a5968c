"""Input data models for the valuation engine."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Union

from vulture_engine.config import MetricDefaults

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]

_TRUE_STRINGS = {"1", "true", "t", "yes", "y"}
_FALSE_STRINGS = {"0", "false", "f", "no", "n"}


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def _number(value: object, default: Number, field_name: str) -> Number:
    """Coerce a scalar to a number, falling back to ``default``.

    Decimal inputs pass through untouched and numeric strings are parsed
    as Decimal, so callers keep full precision. Other numbers become float.

    Args:
        value: Raw value (may be None, blank, NaN, or a numeric string).
        default: Value used when ``value`` is missing or unparseable.
        field_name: Field name for log messages.

    Returns:
        The parsed number, or ``default``.
    """
    if _is_missing(value):
        return default
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, str):
            parsed = Decimal(value.strip())
            if not parsed.is_finite():
                raise ValueError(f"non-finite value {value!r}")
            return parsed
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, InvalidOperation):
        logger.warning(
            "%s: unparseable value %r, using %s", field_name, value, default,
        )
        return default


def parse_flag(value: object, default: bool) -> bool:
    """Parse a boolean flag from a bool, number, or string."""
    if _is_missing(value):
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    logger.warning("unrecognised flag value %r, using %s", value, default)
    return default


@dataclass(frozen=True)
class FinancialMetrics:
    """Fundamental inputs for one company.

    Attributes:
        revenue: Trailing revenue.
        operating_cash_flow: Operating cash flow.
        capex: Capital expenditure, typically non-negative.
        total_debt: Total debt.
        cash: Cash and equivalents.
        shares_outstanding: Shares outstanding. Values <= 0 are replaced
            with 1 by the DCF before per-share division.
        growth_rate: Annual FCF growth, in percent (20 means 20%).
        wacc: Discount rate, in percent.
        current_price: Market price per share. 0 means no price available.
    """

    revenue: Number = 0
    operating_cash_flow: Number = 0
    capex: Number = 0
    total_debt: Number = 0
    cash: Number = 0
    shares_outstanding: Number = 1
    growth_rate: Number = 20
    wacc: Number = 10
    current_price: Number = 0

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, Any],
        defaults: MetricDefaults | None = None,
    ) -> FinancialMetrics:
        """Build metrics from a loosely typed mapping (dict, CSV row).

        Missing monetary fields become 0, a missing share count becomes
        the default (1), and missing growth/WACC take the collaborator
        defaults.
        """
        defaults = defaults or MetricDefaults()
        return cls(
            revenue=_number(row.get("revenue"), 0, "revenue"),
            operating_cash_flow=_number(
                row.get("operating_cash_flow"), 0, "operating_cash_flow",
            ),
            capex=_number(row.get("capex"), 0, "capex"),
            total_debt=_number(row.get("total_debt"), 0, "total_debt"),
            cash=_number(row.get("cash"), 0, "cash"),
            shares_outstanding=_number(
                row.get("shares_outstanding"),
                defaults.shares_outstanding,
                "shares_outstanding",
            ),
            growth_rate=_number(
                row.get("growth_rate"), defaults.growth_rate, "growth_rate",
            ),
            wacc=_number(row.get("wacc"), defaults.wacc, "wacc"),
            current_price=_number(
                row.get("current_price"), 0, "current_price",
            ),
        )


@dataclass(frozen=True)
class Holding:
    """Allocation candidate: a ticker and its margin of safety (percent)."""

    ticker: str
    margin_of_safety: float


@dataclass(frozen=True)
class Position:
    """An owned position with its cost basis.

    Attributes:
        ticker: Ticker symbol.
        shares: Number of shares held.
        average_cost_basis: Cost per share after averaging purchases.
        total_cost_basis: Total amount paid for all shares.
    """

    ticker: str
    shares: float
    average_cost_basis: float
    total_cost_basis: float


@dataclass(frozen=True)
class PriceSnapshot:
    """Prices for one instrument at fixed look-back points."""

    current: float
    one_month_ago: float
    one_year_ago: float
    three_years_ago: float
    five_years_ago: float
