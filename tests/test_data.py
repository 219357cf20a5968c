"""Tests for CSV loading and export."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from vulture_engine.analysis.sensitivity import generate_sensitivity_matrix
from vulture_engine.data import (
    FinancialMetrics,
    PriceSnapshot,
    load_holdings,
    load_metrics,
    load_price_snapshots,
)
from vulture_engine.metrics.growth import compute_benchmark_returns
from vulture_engine.output.csv_export import (
    REPORT_COLUMNS,
    export_benchmarks,
    export_reports,
    export_sensitivity,
    export_weights,
    reports_to_frame,
)
from vulture_engine.screening import evaluate_company

METRICS_CSV = """ticker,revenue,operating_cash_flow,capex,total_debt,cash,shares_outstanding,growth_rate,wacc,current_price,has_moat
aapl,1000000,300000,50000,100000,200000,100,15,10,100,true
msft,500000,120000,20000,0,50000,50,,,0,no
"""


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content)
    return path


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


class TestLoadMetrics:

    def test_loads_rows(self, tmp_path: Path) -> None:
        universe = load_metrics(_write(tmp_path, "m.csv", METRICS_CSV))
        assert list(universe) == ["AAPL", "MSFT"]
        metrics, has_moat = universe["AAPL"]
        assert isinstance(metrics, FinancialMetrics)
        assert metrics.operating_cash_flow == 300_000
        assert metrics.growth_rate == 15
        assert has_moat is True

    def test_blank_cells_use_defaults(self, tmp_path: Path) -> None:
        universe = load_metrics(_write(tmp_path, "m.csv", METRICS_CSV))
        metrics, has_moat = universe["MSFT"]
        assert metrics.growth_rate == 20
        assert metrics.wacc == 10
        assert metrics.current_price == 0
        assert has_moat is False

    def test_ticker_only(self, tmp_path: Path) -> None:
        universe = load_metrics(_write(tmp_path, "m.csv", "ticker\nXYZ\n"))
        metrics, has_moat = universe["XYZ"]
        assert metrics == FinancialMetrics(
            revenue=0, operating_cash_flow=0, capex=0, total_debt=0, cash=0,
            shares_outstanding=1, growth_rate=20, wacc=10, current_price=0,
        )
        assert has_moat is True

    def test_duplicate_keeps_last(self, tmp_path: Path) -> None:
        content = "ticker,revenue\nA,1\nA,2\n"
        universe = load_metrics(_write(tmp_path, "m.csv", content))
        assert universe["A"][0].revenue == 2

    def test_na_and_zero_padded_tickers(self, tmp_path: Path) -> None:
        content = "ticker,revenue,growth_rate\nNA,100,\n005930,200,8\n"
        universe = load_metrics(_write(tmp_path, "m.csv", content))
        assert list(universe) == ["NA", "005930"]
        assert universe["NA"][0].growth_rate == 20
        assert universe["005930"][0].revenue == 200

    def test_missing_ticker_column(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="missing required columns"):
            load_metrics(_write(tmp_path, "m.csv", "revenue\n1\n"))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_metrics(tmp_path / "absent.csv")


class TestLoadHoldings:

    def test_loads(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "h.csv", "ticker,margin_of_safety\nA,20\nB,-5\n")
        holdings = load_holdings(path)
        assert [(h.ticker, h.margin_of_safety) for h in holdings] == [
            ("A", 20.0), ("B", -5.0),
        ]

    def test_skips_missing_mos(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "h.csv", "ticker,margin_of_safety\nA,20\nB,\n")
        assert [h.ticker for h in load_holdings(path)] == ["A"]

    def test_tickers_read_as_text(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path, "h.csv", "ticker,margin_of_safety\nNA,10\n005930,20\n",
        )
        holdings = load_holdings(path)
        assert [h.ticker for h in holdings] == ["NA", "005930"]
        assert [h.margin_of_safety for h in holdings] == [10.0, 20.0]

    def test_blank_ticker_rows_dropped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "h.csv", "ticker,margin_of_safety\n,10\nA,20\n")
        assert [h.ticker for h in load_holdings(path)] == ["A"]

    def test_requires_mos_column(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="margin_of_safety"):
            load_holdings(_write(tmp_path, "h.csv", "ticker\nA\n"))


class TestLoadPriceSnapshots:

    def test_loads(self, tmp_path: Path) -> None:
        content = (
            "ticker,name,current,one_month_ago,one_year_ago,three_years_ago,five_years_ago\n"
            "GLD,Gold (USD/oz),2050,2000,1900,1700,1200\n"
        )
        ((ticker, name, snapshot),) = load_price_snapshots(
            _write(tmp_path, "p.csv", content)
        )
        assert ticker == "GLD"
        assert name == "Gold (USD/oz)"
        assert snapshot.current == 2050
        assert snapshot.five_years_ago == 1200

    def test_missing_columns_become_zero(self, tmp_path: Path) -> None:
        content = "ticker,current,one_year_ago\nBTC,42000,26000\n"
        ((ticker, name, snapshot),) = load_price_snapshots(
            _write(tmp_path, "p.csv", content)
        )
        assert name == "BTC"
        assert snapshot.one_year_ago == 26000
        assert snapshot.three_years_ago == 0


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class TestExport:

    def test_reports_frame(self, tmp_path: Path) -> None:
        universe = load_metrics(_write(tmp_path, "m.csv", METRICS_CSV))
        reports = [
            evaluate_company(t, m, has_moat=moat) for t, (m, moat) in universe.items()
        ]
        frame = reports_to_frame(reports)
        assert list(frame.columns) == REPORT_COLUMNS
        assert list(frame["ticker"]) == ["AAPL", "MSFT"]
        assert list(frame["has_price"]) == [True, False]
        assert frame.loc[1, "status"] == "VALUE TRAP: No Moat"

    def test_export_reports_creates_parent(self, tmp_path: Path) -> None:
        universe = load_metrics(_write(tmp_path, "m.csv", METRICS_CSV))
        reports = [evaluate_company(t, m) for t, (m, _) in universe.items()]
        out = tmp_path / "nested" / "valuations.csv"
        export_reports(reports, out)
        written = pd.read_csv(out)
        assert len(written) == 2
        assert written.loc[0, "fcf"] == 250_000

    def test_export_sensitivity(self, tmp_path: Path) -> None:
        metrics = FinancialMetrics(operating_cash_flow=100, shares_outstanding=10)
        matrix = generate_sensitivity_matrix(metrics, 10, 8)
        out = tmp_path / "grid.csv"
        export_sensitivity(matrix, out)
        written = pd.read_csv(out, index_col="wacc")
        assert list(written.index) == [10, 9, 8, 7, 6]
        assert written.shape == (5, 5)
        assert written.loc[8.0].iloc[2] == pytest.approx(matrix.center.value)

    def test_export_weights(self, tmp_path: Path) -> None:
        out = tmp_path / "weights.csv"
        export_weights({"A": 60.0, "B": 40.0}, out)
        written = pd.read_csv(out)
        assert list(written["ticker"]) == ["A", "B"]
        assert list(written["weight"]) == [60.0, 40.0]

    def test_export_empty_weights(self, tmp_path: Path) -> None:
        out = tmp_path / "weights.csv"
        export_weights({}, out)
        written = pd.read_csv(out)
        assert list(written.columns) == ["ticker", "weight"]
        assert written.empty

    def test_export_benchmarks(self, tmp_path: Path) -> None:
        returns = [
            compute_benchmark_returns(
                "BTC", "Bitcoin", PriceSnapshot(42000, 38000, 26000, 19000, 6500),
            )
        ]
        out = tmp_path / "bench.csv"
        export_benchmarks(returns, out)
        written = pd.read_csv(out)
        assert written.loc[0, "name"] == "Bitcoin"
        assert written.loc[0, "cagr_1y"] == pytest.approx(returns[0].cagr_1y)
