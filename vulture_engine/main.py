"""CLI entry point for the valuation engine."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from vulture_engine.analysis.allocation import calculate_allocation_weights
from vulture_engine.analysis.sensitivity import generate_sensitivity_matrix
from vulture_engine.config import AllocationStrategy
from vulture_engine.data import load_holdings, load_metrics, load_price_snapshots
from vulture_engine.data.contracts import BenchmarkReturns, ValuationReport
from vulture_engine.metrics.growth import compute_benchmark_returns
from vulture_engine.output.csv_export import (
    export_benchmarks,
    export_reports,
    export_sensitivity,
    export_weights,
)
from vulture_engine.screening import evaluate_company

logger = logging.getLogger(__name__)


def _add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="vulture-engine",
        description="DCF valuation, classification, and allocation engine",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # value command
    value_parser = subparsers.add_parser(
        "value", help="Value every ticker in a metrics CSV"
    )
    value_parser.add_argument("metrics", type=Path, help="Metrics CSV path")
    value_parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/valuations.csv"),
        help="Output CSV path (default: output/valuations.csv)",
    )
    value_parser.add_argument(
        "--growth",
        type=float,
        default=None,
        help="Override growth rate in percent for all tickers",
    )
    value_parser.add_argument(
        "--wacc",
        type=float,
        default=None,
        help="Override WACC in percent for all tickers",
    )
    _add_verbose(value_parser)

    # sensitivity command
    sens_parser = subparsers.add_parser(
        "sensitivity", help="Growth/WACC sensitivity grid for one ticker"
    )
    sens_parser.add_argument("metrics", type=Path, help="Metrics CSV path")
    sens_parser.add_argument("ticker", help="Ticker to analyse")
    sens_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output CSV path (default: output/sensitivity_<TICKER>.csv)",
    )
    _add_verbose(sens_parser)

    # allocate command
    alloc_parser = subparsers.add_parser(
        "allocate", help="Allocation weights from a holdings CSV"
    )
    alloc_parser.add_argument("holdings", type=Path, help="Holdings CSV path")
    alloc_parser.add_argument(
        "--strategy",
        choices=[s.value for s in AllocationStrategy],
        default=AllocationStrategy.EQUAL.value,
        help="Weighting strategy (default: equal)",
    )
    alloc_parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/weights.csv"),
        help="Output CSV path (default: output/weights.csv)",
    )
    _add_verbose(alloc_parser)

    # benchmark command
    bench_parser = subparsers.add_parser(
        "benchmark", help="Period CAGRs from a benchmark prices CSV"
    )
    bench_parser.add_argument("prices", type=Path, help="Prices CSV path")
    bench_parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/benchmarks.csv"),
        help="Output CSV path (default: output/benchmarks.csv)",
    )
    _add_verbose(bench_parser)

    return parser.parse_args(argv)


def run_value(args: argparse.Namespace) -> list[ValuationReport]:
    """Execute the value command.

    Args:
        args: Parsed CLI arguments.

    Returns:
        The valuation reports written to the output file.
    """
    universe = load_metrics(args.metrics)

    reports = [
        evaluate_company(
            ticker,
            metrics,
            has_moat=has_moat,
            growth_rate=args.growth,
            wacc=args.wacc,
        )
        for ticker, (metrics, has_moat) in universe.items()
    ]
    export_reports(reports, args.output)

    no_price = sum(1 for r in reports if not r.has_price)
    if no_price:
        logger.warning("%d tickers have no current price", no_price)
    logger.info("Valued %d tickers, written to %s", len(reports), args.output)
    return reports


def run_sensitivity(args: argparse.Namespace) -> None:
    """Execute the sensitivity command.

    Raises:
        ValueError: If the ticker is not in the metrics file.
    """
    universe = load_metrics(args.metrics)
    ticker = args.ticker.strip().upper()
    if ticker not in universe:
        raise ValueError(f"{ticker}: not found in {args.metrics}")

    metrics, _ = universe[ticker]
    matrix = generate_sensitivity_matrix(
        metrics, float(metrics.growth_rate), float(metrics.wacc),
    )

    output: Path = args.output or Path(f"output/sensitivity_{ticker}.csv")
    export_sensitivity(matrix, output)
    logger.info(
        "%s: centre value %.2f, written to %s", ticker, matrix.center.value, output,
    )


def run_allocate(args: argparse.Namespace) -> dict[str, float]:
    """Execute the allocate command."""
    holdings = load_holdings(args.holdings)
    weights = calculate_allocation_weights(holdings, args.strategy)

    if not weights:
        logger.warning(
            "No weights assigned (%s strategy, %d holdings)",
            args.strategy, len(holdings),
        )
    export_weights(weights, args.output)
    return weights


def run_benchmark(args: argparse.Namespace) -> list[BenchmarkReturns]:
    """Execute the benchmark command."""
    returns = [
        compute_benchmark_returns(ticker, name, snapshot)
        for ticker, name, snapshot in load_price_snapshots(args.prices)
    ]
    export_benchmarks(returns, args.output)
    return returns


COMMANDS = {
    "value": run_value,
    "sensitivity": run_sensitivity,
    "allocate": run_allocate,
    "benchmark": run_benchmark,
}


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).
    """
    args = _parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        COMMANDS[args.command](args)
    except (ValueError, FileNotFoundError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
