"""
Moulding Line Simulation Runner.

Usage:
    python run_simulation.py                               # Default 8h shift, 1 replication
    python run_simulation.py --replications 10             # 95% confidence intervals
    python run_simulation.py --sweep inspection            # Sensitivity over 1..10 stations
    python run_simulation.py --output-dir data/output      # Export summary and wait samples
"""

import argparse
import logging
import sys
import time

from line_sim.config.core import InvalidConfigError, SimulationConfig
from line_sim.config.loader import load_config
from line_sim.product.core import STAGES, Stage
from line_sim.simulation.history import ScenarioHistory
from line_sim.simulation.replication import run
from line_sim.simulation.results import SimulationStats
from line_sim.simulation.sensitivity import SensitivityPoint, analyze_sensitivity
from line_sim.writers.results_writer import OUTPUT_FORMATS, ResultsWriter


def format_report(stats: SimulationStats) -> str:
    """Plain-text KPI report for the terminal."""
    lines = [
        "=" * 60,
        f"LINE KPIs ({stats.replications} replication(s))",
        "=" * 60,
        f"Jobs created / completed : {stats.total_jobs} / {stats.completed_jobs}",
        f"Throughput               : {stats.throughput:.2f} jobs/hr",
        f"Average WIP              : {stats.avg_wip:.2f}",
        f"Service level (<5 min)   : {stats.service_level:.1%}",
        f"Avg lead time            : {stats.avg_lead_time:.2f} min "
        f"[{stats.lead_time_ci.lower:.2f}, {stats.lead_time_ci.upper:.2f}]",
        f"Degradation cost total   : ${stats.total_degradation_cost:,.2f}",
        f"Degradation cost / part  : ${stats.avg_degradation_cost_per_part:.2f} "
        f"[{stats.cost_ci.lower:.2f}, {stats.cost_ci.upper:.2f}]",
        "-" * 60,
        f"{'Stage':<12} {'Util':>8} {'Wait avg':>10} {'Wait p90':>10} {'Wait max':>10}",
    ]
    for stage in STAGES:
        ws = stats.wait_stats[stage]
        lines.append(
            f"{stage.label:<12} {stats.machine_utilization[stage]:>8.1%} "
            f"{ws.avg:>10.2f} {ws.p90:>10.2f} {ws.max:>10.2f}"
        )
    lines.append("=" * 60)
    return "\n".join(lines)


def build_config(args: argparse.Namespace) -> SimulationConfig:
    return load_config(
        args.config,
        duration=args.duration,
        moulding_machines=args.moulding,
        inspection_stations=args.inspection,
        packaging_machines=args.packaging,
        arrival_interval_mean=args.arrival_mean,
        degradation_cost_per_minute=args.cost_per_minute,
        degradation_threshold=args.threshold,
        replications=args.replications,
        seed=args.seed,
    )


def main() -> None:
    """Run the line simulation (and optionally a sensitivity sweep)."""
    parser = argparse.ArgumentParser(
        description="Moulding -> Inspection -> Packaging line simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_simulation.py --inspection 3 --replications 5
  python run_simulation.py --sweep packaging --workers 4
  python run_simulation.py --output-dir data/output --format parquet
        """,
    )

    parser.add_argument("--config", type=str, default=None, help="JSON config file")

    # Per-field overrides
    parser.add_argument("--duration", type=float, default=None, help="Minutes to simulate")
    parser.add_argument("--moulding", type=int, default=None, help="Moulding machines")
    parser.add_argument("--inspection", type=int, default=None, help="Inspection stations")
    parser.add_argument("--packaging", type=int, default=None, help="Packaging machines")
    parser.add_argument(
        "--arrival-mean", type=float, default=None, help="Mean inter-arrival time (min)"
    )
    parser.add_argument(
        "--cost-per-minute", type=float, default=None, help="Degradation cost per minute"
    )
    parser.add_argument(
        "--threshold", type=float, default=None, help="Degradation grace period (min)"
    )
    parser.add_argument("--replications", type=int, default=None, help="Replications")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed")

    parser.add_argument(
        "--sweep",
        type=str,
        choices=[s.value for s in Stage],
        default=None,
        help="Sweep this stage's server count over 1..10",
    )
    parser.add_argument(
        "--workers", type=int, default=None, help="Processes for replications/sweeps"
    )
    parser.add_argument(
        "--output-dir", type=str, default=None, help="Directory for exported results"
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=list(OUTPUT_FORMATS),
        default="csv",
        help="Table format for exports (default: csv)",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except InvalidConfigError as e:
        print("Invalid configuration:")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    print(
        f"Initializing line simulation (M-I-P={config.moulding_machines}-"
        f"{config.inspection_stations}-{config.packaging_machines}, "
        f"Duration={config.duration:g} min, Replications={config.replications}, "
        f"Seed={config.seed})..."
    )

    start_time = time.time()
    history = ScenarioHistory()
    points: list[SensitivityPoint] = []

    if args.sweep:
        result = analyze_sensitivity(config, args.sweep, workers=args.workers)
        stats = result.baseline
        points = result.points
    else:
        stats = run(config, workers=args.workers)

    elapsed = time.time() - start_time
    print(f"\nSimulation completed in {elapsed:.2f} seconds.")

    history.record(config, stats)
    print("\n" + format_report(stats) + "\n")

    if points:
        print(f"SENSITIVITY: {args.sweep} server count")
        print(f"{'Count':>6} {'Cost/part':>12} {'Avg wait':>10}")
        for p in points:
            print(f"{p.label:>6} {p.cost:>12.2f} {p.avg_wait:>10.2f}")

    if args.output_dir:
        writer = ResultsWriter(args.output_dir, output_format=args.format)
        writer.write_run(stats, config)
        writer.write_sensitivity(points)
        writer.write_history(history)
        print(f"\nResults saved to {writer.output_dir}")


if __name__ == "__main__":
    main()
