"""Engine data models, output contracts, and CSV loading."""

from __future__ import annotations

from vulture_engine.data.csv_loader import (
    load_holdings,
    load_metrics,
    load_price_snapshots,
)
from vulture_engine.data.models import (
    FinancialMetrics,
    Holding,
    Position,
    PriceSnapshot,
)

__all__ = [
    "FinancialMetrics",
    "Holding",
    "Position",
    "PriceSnapshot",
    "load_holdings",
    "load_metrics",
    "load_price_snapshots",
]
