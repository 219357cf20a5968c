"""Intrinsic value sensitivity to growth and discount-rate assumptions.

Growth and WACC interact non-linearly through both the explicit-period
discounting and the terminal value, so every cell is a full DCF run.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from vulture_engine.analysis.dcf import calculate_dcf, to_decimal
from vulture_engine.config import DCFConfig, SensitivityConfig
from vulture_engine.data.contracts import SensitivityCell, SensitivityMatrix
from vulture_engine.data.models import FinancialMetrics

logger = logging.getLogger(__name__)


def generate_sensitivity_matrix(
    metrics: FinancialMetrics,
    base_growth: float,
    base_wacc: float,
    config: SensitivityConfig | None = None,
    dcf_config: DCFConfig | None = None,
) -> SensitivityMatrix:
    """Build the intrinsic value grid around a base growth and WACC.

    Growth steps ascend left to right; WACC steps descend top to bottom,
    so the top-left corner is the most pessimistic combination.

    Args:
        metrics: Company fundamentals. Its own growth and WACC are
            replaced per cell.
        base_growth: Centre growth rate, in percent.
        base_wacc: Centre discount rate, in percent.
        config: Step offsets. Uses defaults if None.
        dcf_config: DCF parameters passed through to each run.

    Returns:
        SensitivityMatrix with one row per WACC step.
    """
    config = config or SensitivityConfig()

    # Steps are summed in Decimal, so 10.3 - 2 is 8.3 in both label and DCF
    growth_rates = [
        to_decimal(base_growth) + to_decimal(offset)
        for offset in config.growth_offsets
    ]
    wacc_rates = [
        to_decimal(base_wacc) + to_decimal(offset)
        for offset in config.wacc_offsets
    ]
    growth_steps = tuple(float(g) for g in growth_rates)
    wacc_steps = tuple(float(w) for w in wacc_rates)

    rows: list[tuple[SensitivityCell, ...]] = []
    for wacc, wacc_label in zip(wacc_rates, wacc_steps):
        row: list[SensitivityCell] = []
        for growth, growth_label in zip(growth_rates, growth_steps):
            result = calculate_dcf(
                replace(metrics, growth_rate=growth, wacc=wacc), dcf_config,
            )
            row.append(
                SensitivityCell(
                    growth=growth_label,
                    wacc=wacc_label,
                    value=result.intrinsic_value,
                )
            )
        rows.append(tuple(row))

    logger.debug(
        "Sensitivity grid: growth %s, wacc %s", growth_steps, wacc_steps,
    )

    return SensitivityMatrix(
        growth_steps=growth_steps,
        wacc_steps=wacc_steps,
        cells=tuple(rows),
    )
