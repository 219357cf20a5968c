"""CSV loaders for metrics, holdings, and benchmark prices."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from vulture_engine.config import MetricDefaults
from vulture_engine.data.models import (
    FinancialMetrics,
    Holding,
    PriceSnapshot,
    parse_flag,
)

logger = logging.getLogger(__name__)

PRICE_COLUMNS = (
    "current",
    "one_month_ago",
    "one_year_ago",
    "three_years_ago",
    "five_years_ago",
)


def _read_csv(path: Path, required: set[str]) -> pd.DataFrame:
    """Read a CSV and check that the required columns are present.

    Tickers are read verbatim as text, so ``NA`` and zero-padded codes
    such as ``005930`` survive. In other columns only blank cells are
    missing. Rows with a blank ticker are dropped.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required columns are missing.
    """
    columns = list(pd.read_csv(path, nrows=0).columns)
    missing = required - set(columns)
    if missing:
        raise ValueError(f"{path}: missing required columns: {sorted(missing)}")

    frame = pd.read_csv(
        path,
        dtype={"ticker": str},
        keep_default_na=False,
        na_values={c: [""] for c in columns if c != "ticker"},
    )
    frame["ticker"] = frame["ticker"].astype(str).str.strip().str.upper()

    blank = frame["ticker"] == ""
    if blank.any():
        logger.warning("%s: skipping %d rows with no ticker", path, int(blank.sum()))
        frame = frame[~blank].reset_index(drop=True)
    return frame


def load_metrics(
    path: Path,
    defaults: MetricDefaults | None = None,
) -> dict[str, tuple[FinancialMetrics, bool]]:
    """Load per-ticker metrics and moat flags.

    Only ``ticker`` is required; absent columns or blank cells fall back
    to MetricDefaults.

    Args:
        path: Metrics CSV path.
        defaults: Collaborator defaults. Uses MetricDefaults() if None.

    Returns:
        {ticker: (metrics, has_moat)}, in file order. A repeated ticker
        keeps its last row.
    """
    defaults = defaults or MetricDefaults()
    frame = _read_csv(path, {"ticker"})

    result: dict[str, tuple[FinancialMetrics, bool]] = {}
    for row in frame.to_dict(orient="records"):
        ticker = row["ticker"]
        if ticker in result:
            logger.warning("%s: duplicate row in %s, keeping the last", ticker, path)
        metrics = FinancialMetrics.from_mapping(row, defaults)
        has_moat = parse_flag(row.get("has_moat"), defaults.has_moat)
        result[ticker] = (metrics, has_moat)

    logger.info("Loaded metrics for %d tickers from %s", len(result), path)
    return result


def load_holdings(path: Path) -> list[Holding]:
    """Load allocation candidates (ticker, margin_of_safety).

    Rows with a missing margin of safety are skipped.
    """
    frame = _read_csv(path, {"ticker", "margin_of_safety"})

    holdings: list[Holding] = []
    for ticker, mos in zip(frame["ticker"], frame["margin_of_safety"]):
        if pd.isna(mos):
            logger.warning("%s: missing margin of safety, skipping", ticker)
            continue
        holdings.append(Holding(ticker=ticker, margin_of_safety=float(mos)))

    logger.info("Loaded %d holdings from %s", len(holdings), path)
    return holdings


def load_price_snapshots(path: Path) -> list[tuple[str, str, PriceSnapshot]]:
    """Load benchmark price snapshots.

    Missing prices become 0, which yields a None CAGR for that horizon.

    Returns:
        [(ticker, name, snapshot)] in file order. ``name`` defaults to the
        ticker when the column is absent or blank.
    """
    frame = _read_csv(path, {"ticker", "current"})

    snapshots: list[tuple[str, str, PriceSnapshot]] = []
    for row in frame.to_dict(orient="records"):
        ticker = row["ticker"]
        name = row.get("name")
        if name is None or pd.isna(name) or not str(name).strip():
            name = ticker
        prices = {}
        for column in PRICE_COLUMNS:
            value = row.get(column)
            prices[column] = 0.0 if value is None or pd.isna(value) else float(value)
        snapshots.append((ticker, str(name), PriceSnapshot(**prices)))

    return snapshots
