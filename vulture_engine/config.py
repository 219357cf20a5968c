"""Engine configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class VultureStatus(Enum):
    """Investment classification labels, in gate order."""

    SPECULATIVE = "SPECULATIVE: Monitor Cash"
    VALUE_TRAP = "VALUE TRAP: No Moat"
    CAUTION_HIGH_LEVERAGE = "CAUTION: High Leverage"
    STRONG_BUY = "STRONG BUY"
    FAIR_VALUE = "FAIR VALUE"
    OVERVALUED = "OVERVALUED"


class AllocationStrategy(Enum):
    """Portfolio weighting strategies."""

    EQUAL = "equal"
    VALUE_WEIGHTED = "value-weighted"
    CONVICTION = "conviction"


@dataclass
class DCFConfig:
    """DCF valuation parameters."""

    terminal_growth_rate: Decimal = Decimal("0.02")
    projection_years: int = 5
    decimal_precision: int = 28


@dataclass
class ClassifierConfig:
    """Vulture status gate thresholds (percentages)."""

    strong_buy_min_mos: float = 20.0
    high_leverage_min_debt_to_equity: float = 50.0
    fair_value_min_mos: float = 0.0


@dataclass
class GrowthConfig:
    """CAGR parameters."""

    # Results at or above this percentage are treated as data errors.
    cagr_ceiling: float = 100_000.0
    benchmark_horizons: dict[str, float] = field(
        default_factory=lambda: {
            "1m": 1.0 / 12.0,
            "1y": 1.0,
            "3y": 3.0,
            "5y": 5.0,
        }
    )


@dataclass
class SensitivityConfig:
    """Sensitivity matrix step offsets (percentage points)."""

    growth_offsets: tuple[float, ...] = (-5.0, -2.0, 0.0, 2.0, 5.0)
    wacc_offsets: tuple[float, ...] = (2.0, 1.0, 0.0, -1.0, -2.0)


@dataclass
class AllocationConfig:
    """Conviction sizing. Weights are absolute and not normalised."""

    conviction_top_n: int = 5
    conviction_top_weight: float = 15.0
    conviction_tail_weight: float = 5.0


@dataclass
class MetricDefaults:
    """Defaults applied when a collaborator omits a value."""

    growth_rate: float = 20.0
    wacc: float = 10.0
    has_moat: bool = True
    shares_outstanding: float = 1.0
