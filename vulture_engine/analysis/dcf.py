"""DCF intrinsic value calculation.

Five-year FCF projection with annual discounting. Terminal value uses the
Gordon Growth Model on the final projected cash flow, discounted back over
the projection horizon.

All intermediate arithmetic runs in Decimal. The local context does not
trap division by zero, so a WACC at or below the terminal growth rate
yields an infinite or extreme terminal value rather than an exception.
"""

import logging
from decimal import (
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)

from vulture_engine.config import DCFConfig
from vulture_engine.data.contracts import DCFResult
from vulture_engine.data.models import FinancialMetrics, Number

logger = logging.getLogger(__name__)

_ZERO = Decimal(0)
_ONE = Decimal(1)
_HUNDRED = Decimal(100)


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal via its string form.

    Going through ``str`` keeps ``0.1`` as ``Decimal("0.1")`` instead of
    the exact binary expansion of the float.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Percentage ratio, 0 when the denominator is not positive."""
    if denominator > _ZERO:
        return numerator / denominator * _HUNDRED
    return _ZERO


def calculate_dcf(
    metrics: FinancialMetrics,
    config: DCFConfig | None = None,
) -> DCFResult:
    """Calculate DCF intrinsic value per share.

    Args:
        metrics: Company fundamentals. ``growth_rate`` and ``wacc`` are
            percentages.
        config: DCF parameters (terminal growth, horizon, precision).
            Uses defaults if None.

    Returns:
        DCFResult with projected cash flows, present values, equity value,
        intrinsic value per share, and supporting ratios.

    Raises:
        ValueError: If ``config.projection_years`` is less than 1.
    """
    config = config or DCFConfig()
    if config.projection_years < 1:
        raise ValueError(
            f"projection_years must be at least 1, got {config.projection_years}"
        )

    with localcontext() as ctx:
        ctx.prec = config.decimal_precision
        ctx.traps[DivisionByZero] = False
        ctx.traps[InvalidOperation] = False
        ctx.traps[Overflow] = False

        revenue = to_decimal(metrics.revenue)
        op_cash_flow = to_decimal(metrics.operating_cash_flow)
        capex = to_decimal(metrics.capex)
        debt = to_decimal(metrics.total_debt)
        cash = to_decimal(metrics.cash)
        shares = to_decimal(metrics.shares_outstanding)
        growth = to_decimal(metrics.growth_rate) / _HUNDRED
        wacc = to_decimal(metrics.wacc) / _HUNDRED
        terminal_growth = to_decimal(config.terminal_growth_rate)

        # Zero, negative, or NaN share counts fall back to 1
        if not shares > _ZERO:
            logger.debug("Non-positive shares outstanding (%s), using 1", shares)
            shares = _ONE

        if wacc <= terminal_growth:
            logger.warning(
                "WACC %s%% is at or below terminal growth %s%%: "
                "terminal value is unstable",
                metrics.wacc,
                terminal_growth * _HUNDRED,
            )

        fcf = op_cash_flow - capex

        # Project FCF forward, compounding at the growth rate
        projected: list[Decimal] = []
        current = fcf
        for _ in range(config.projection_years):
            current = current * (_ONE + growth)
            projected.append(current)

        # Discount each projected year to present value
        pv_fcf = _ZERO
        for year, cash_flow in enumerate(projected, 1):
            discount_factor = _ONE / (_ONE + wacc) ** year
            pv_fcf += cash_flow * discount_factor

        # Terminal value: Gordon Growth Model on the final year
        terminal_fcf = projected[-1] * (_ONE + terminal_growth)
        terminal_value = terminal_fcf / (wacc - terminal_growth)
        pv_terminal = terminal_value / (_ONE + wacc) ** config.projection_years

        enterprise_value = pv_fcf + pv_terminal
        equity_value = enterprise_value + cash - debt
        intrinsic_value = equity_value / shares

        fcf_margin = _ratio(fcf, revenue)
        debt_to_equity = _ratio(debt, equity_value)
        cash_flow_quality = _ratio(op_cash_flow, revenue)

        return DCFResult(
            fcf=float(fcf),
            projected_fcf=tuple(float(cf) for cf in projected),
            pv_fcf=float(pv_fcf),
            terminal_value=float(terminal_value),
            pv_terminal=float(pv_terminal),
            enterprise_value=float(enterprise_value),
            equity_value=float(equity_value),
            intrinsic_value=float(intrinsic_value),
            fcf_margin=float(fcf_margin),
            debt_to_equity=float(debt_to_equity),
            cash_flow_quality=float(cash_flow_quality),
        )
