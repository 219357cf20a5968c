"""Tests for vulture_engine.analysis.sensitivity."""

from __future__ import annotations

import pandas as pd
import pytest

from vulture_engine.analysis.dcf import calculate_dcf
from vulture_engine.analysis.sensitivity import generate_sensitivity_matrix
from vulture_engine.config import SensitivityConfig
from vulture_engine.data.contracts import SensitivityMatrix
from vulture_engine.data.models import FinancialMetrics


def _metrics() -> FinancialMetrics:
    return FinancialMetrics(
        revenue=1_000_000,
        operating_cash_flow=300_000,
        capex=50_000,
        total_debt=100_000,
        cash=200_000,
        shares_outstanding=100,
        growth_rate=10.0,
        wacc=8.0,
        current_price=100,
    )


class TestGenerateSensitivityMatrix:

    def test_returns_matrix(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8)
        assert isinstance(matrix, SensitivityMatrix)

    def test_growth_steps(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8)
        assert matrix.growth_steps == (5, 8, 10, 12, 15)

    def test_wacc_steps_descend(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8)
        assert matrix.wacc_steps == (10, 9, 8, 7, 6)

    def test_grid_shape(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8)
        assert len(matrix.cells) == 5
        assert all(len(row) == 5 for row in matrix.cells)

    def test_rows_are_wacc_columns_are_growth(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8)
        for row, wacc in zip(matrix.cells, matrix.wacc_steps):
            assert [cell.wacc for cell in row] == [wacc] * 5
            assert tuple(cell.growth for cell in row) == matrix.growth_steps

    def test_center_equals_plain_dcf(self) -> None:
        metrics = _metrics()
        matrix = generate_sensitivity_matrix(metrics, 10.0, 8.0)
        assert matrix.center.growth == 10
        assert matrix.center.wacc == 8
        assert matrix.center.value == calculate_dcf(metrics).intrinsic_value

    def test_every_cell_is_full_dcf(self) -> None:
        metrics = _metrics()
        matrix = generate_sensitivity_matrix(metrics, 10, 8)
        corner = matrix.cells[0][0]
        expected = calculate_dcf(
            FinancialMetrics(
                revenue=1_000_000,
                operating_cash_flow=300_000,
                capex=50_000,
                total_debt=100_000,
                cash=200_000,
                shares_outstanding=100,
                growth_rate=5,
                wacc=10,
            )
        )
        assert corner.value == pytest.approx(expected.intrinsic_value, rel=1e-12)

    def test_pessimistic_corner_is_lowest(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8)
        values = [cell.value for row in matrix.cells for cell in row]
        assert matrix.cells[0][0].value == min(values)
        assert matrix.cells[-1][-1].value == max(values)

    def test_base_independent_of_metrics_rates(self) -> None:
        # The metrics' own growth/WACC are replaced per cell
        matrix = generate_sensitivity_matrix(_metrics(), 20, 12)
        assert matrix.center.growth == 20
        assert matrix.center.wacc == 12

    def test_custom_offsets(self) -> None:
        config = SensitivityConfig(
            growth_offsets=(-1.0, 0.0, 1.0), wacc_offsets=(1.0, 0.0, -1.0),
        )
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8, config=config)
        assert matrix.growth_steps == (9, 10, 11)
        assert matrix.wacc_steps == (9, 8, 7)
        assert matrix.center.wacc == 8

    def test_fractional_base_steps_are_exact(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10.3, 8.1)
        assert matrix.growth_steps == (5.3, 8.3, 10.3, 12.3, 15.3)
        assert matrix.wacc_steps == (10.1, 9.1, 8.1, 7.1, 6.1)
        assert matrix.cells[0][1].growth == 8.3

    def test_low_base_wacc_does_not_raise(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 3)
        assert matrix.wacc_steps[-1] == 1
        assert matrix.cells[-1][0].value < 0


class TestToFrame:

    def test_frame_layout(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8)
        frame = matrix.to_frame()
        assert isinstance(frame, pd.DataFrame)
        assert frame.shape == (5, 5)
        assert list(frame.index) == [10, 9, 8, 7, 6]
        assert list(frame.columns) == [5, 8, 10, 12, 15]
        assert frame.index.name == "wacc"
        assert frame.columns.name == "growth"

    def test_frame_values(self) -> None:
        matrix = generate_sensitivity_matrix(_metrics(), 10, 8)
        frame = matrix.to_frame()
        assert frame.loc[8.0, 10.0] == matrix.center.value
