"""Engine output contracts.

Dataclasses defining the shape of data returned by the engine. All values
are plain floats: Decimal precision is kept internally and converted only
when a result is built.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from vulture_engine.config import VultureStatus
from vulture_engine.data.models import PriceSnapshot


@dataclass(frozen=True)
class DCFResult:
    """DCF valuation result for one set of metrics."""

    fcf: float
    projected_fcf: tuple[float, ...]
    pv_fcf: float
    terminal_value: float
    pv_terminal: float
    enterprise_value: float
    equity_value: float
    intrinsic_value: float
    fcf_margin: float
    debt_to_equity: float
    cash_flow_quality: float


@dataclass(frozen=True)
class SensitivityCell:
    """Intrinsic value under one growth/WACC pair (percent inputs)."""

    growth: float
    wacc: float
    value: float


@dataclass(frozen=True)
class SensitivityMatrix:
    """Intrinsic value grid over growth and WACC assumptions.

    Attributes:
        growth_steps: Growth rates, ascending (columns).
        wacc_steps: Discount rates, descending (rows).
        cells: One row per WACC step, one cell per growth step.
    """

    growth_steps: tuple[float, ...]
    wacc_steps: tuple[float, ...]
    cells: tuple[tuple[SensitivityCell, ...], ...]

    @property
    def center(self) -> SensitivityCell:
        """Cell for the base growth and base WACC."""
        row = len(self.wacc_steps) // 2
        col = len(self.growth_steps) // 2
        return self.cells[row][col]

    def to_frame(self) -> pd.DataFrame:
        """Grid as a DataFrame: index is WACC, columns are growth."""
        frame = pd.DataFrame(
            [[cell.value for cell in row] for row in self.cells],
            index=pd.Index(self.wacc_steps, name="wacc"),
            columns=pd.Index(self.growth_steps, name="growth"),
        )
        return frame


@dataclass(frozen=True)
class ValuationReport:
    """DCF, margin of safety, and classification for one ticker."""

    ticker: str
    dcf: DCFResult
    margin_of_safety: float
    status: VultureStatus
    current_price: float
    growth_rate: float
    wacc: float
    has_moat: bool

    @property
    def has_price(self) -> bool:
        """False when no market price was supplied.

        Margin of safety and status are not meaningful without a price.
        """
        return self.current_price > 0


@dataclass(frozen=True)
class BenchmarkReturns:
    """Annualised returns for one benchmark across look-back horizons."""

    ticker: str
    name: str
    snapshot: PriceSnapshot
    cagr_1m: float | None
    cagr_1y: float | None
    cagr_3y: float | None
    cagr_5y: float | None


@dataclass(frozen=True)
class PositionSummary:
    """Mark-to-market view of one position."""

    ticker: str
    shares: float
    average_cost_basis: float
    current_price: float
    market_value: float
    gain_percent: float
    gain_dollar: float


@dataclass(frozen=True)
class PortfolioSummary:
    """Totals across all positions."""

    total_value: float
    total_cost_basis: float
    total_gain: float
    total_gain_percent: float
    positions: tuple[PositionSummary, ...]
