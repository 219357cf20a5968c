"""CSV export of valuation reports, sensitivity grids, and weights."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

import pandas as pd

from vulture_engine.data.contracts import (
    BenchmarkReturns,
    SensitivityMatrix,
    ValuationReport,
)

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "ticker",
    "status",
    "intrinsic_value",
    "current_price",
    "margin_of_safety",
    "has_price",
    "has_moat",
    "growth_rate",
    "wacc",
    "fcf",
    "pv_fcf",
    "terminal_value",
    "pv_terminal",
    "enterprise_value",
    "equity_value",
    "fcf_margin",
    "debt_to_equity",
    "cash_flow_quality",
]


def reports_to_frame(reports: Sequence[ValuationReport]) -> pd.DataFrame:
    """Flatten valuation reports into one row per ticker."""
    rows = []
    for report in reports:
        dcf = report.dcf
        rows.append({
            "ticker": report.ticker,
            "status": report.status.value,
            "intrinsic_value": dcf.intrinsic_value,
            "current_price": report.current_price,
            "margin_of_safety": report.margin_of_safety,
            "has_price": report.has_price,
            "has_moat": report.has_moat,
            "growth_rate": report.growth_rate,
            "wacc": report.wacc,
            "fcf": dcf.fcf,
            "pv_fcf": dcf.pv_fcf,
            "terminal_value": dcf.terminal_value,
            "pv_terminal": dcf.pv_terminal,
            "enterprise_value": dcf.enterprise_value,
            "equity_value": dcf.equity_value,
            "fcf_margin": dcf.fcf_margin,
            "debt_to_equity": dcf.debt_to_equity,
            "cash_flow_quality": dcf.cash_flow_quality,
        })
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def _write(frame: pd.DataFrame, path: Path, index: bool = False) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=index)
    logger.info("Wrote %d rows to %s", len(frame), path)


def export_reports(reports: Sequence[ValuationReport], path: Path) -> None:
    """Write valuation reports to CSV."""
    _write(reports_to_frame(reports), path)


def export_sensitivity(matrix: SensitivityMatrix, path: Path) -> None:
    """Write the sensitivity grid (WACC rows, growth columns) to CSV."""
    _write(matrix.to_frame(), path, index=True)


def export_weights(weights: Mapping[str, float], path: Path) -> None:
    """Write allocation weights to CSV, in mapping order."""
    frame = pd.DataFrame(
        {"ticker": list(weights.keys()), "weight": list(weights.values())},
    )
    _write(frame, path)


def export_benchmarks(returns: Sequence[BenchmarkReturns], path: Path) -> None:
    """Write benchmark prices and period CAGRs to CSV."""
    frame = pd.DataFrame([
        {
            "ticker": r.ticker,
            "name": r.name,
            "current": r.snapshot.current,
            "cagr_1m": r.cagr_1m,
            "cagr_1y": r.cagr_1y,
            "cagr_3y": r.cagr_3y,
            "cagr_5y": r.cagr_5y,
        }
        for r in returns
    ], columns=["ticker", "name", "current", "cagr_1m", "cagr_1y", "cagr_3y", "cagr_5y"])
    _write(frame, path)
