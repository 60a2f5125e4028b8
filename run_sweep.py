#!/usr/bin/env python3
"""Entry point for jump-range route sweeps.

Sweeps jump-range values, runs independent route searches through random
point fields in parallel, and streams one TSV record per trial to stdout
in trial-id order. Logs go to stderr.

Usage:
    python run_sweep.py -d 0.002375 -n 10 -m 100000
    python run_sweep.py --config sweep.json --summary results/summary.json
    python run_sweep.py --config sweep.json --dry-run
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Generator

from src.config import ANCHOR_CONFIG, SimulationConfig, config_from_json, full_config_hash
from src.scheduler import JobScheduler, default_worker_count
from src.simulation import SimulationJob, count_problems, generate_problems, jump_ranges

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that logs stage start and elapsed time."""
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    log.info("Completed: %s in %.1fs", name, time.monotonic() - t0)


def apply_overrides(config: SimulationConfig, args: argparse.Namespace) -> SimulationConfig:
    """Apply command-line flags on top of a loaded or default config."""
    field_cfg = config.field
    sweep = config.sweep
    scheduler = config.scheduler

    if args.field_size is not None:
        field_cfg = replace(field_cfg, size=args.field_size)
    if args.field_padding is not None:
        field_cfg = replace(field_cfg, padding=args.field_padding)
    if args.density is not None:
        field_cfg = replace(field_cfg, density=args.density)
    if args.trials is not None:
        sweep = replace(sweep, trials=args.trials)
    if args.jump_start is not None:
        sweep = replace(sweep, jump_start=args.jump_start)
    if args.jump_stop is not None:
        sweep = replace(sweep, jump_stop=args.jump_stop)
    if args.jump_step is not None:
        sweep = replace(sweep, jump_step=args.jump_step)
    if args.workers is not None:
        scheduler = replace(scheduler, workers=args.workers)
    if args.executor is not None:
        scheduler = replace(scheduler, executor=args.executor)

    config = replace(config, field=field_cfg, sweep=sweep, scheduler=scheduler)
    if args.max_hop is not None:
        config = replace(config, max_hop=args.max_hop)
    if args.seed is not None:
        config = replace(config, seed=args.seed)
    if args.random_seed:
        config = replace(config, seed=None)
    return config


def run_sweep(
    config: SimulationConfig,
    summary_path: Path | None = None,
) -> int:
    """Run the full sweep, writing TSV to stdout.

    Args:
        config: Simulation configuration.
        summary_path: Optional path for the per-jump-range JSON summary.

    Returns:
        Number of trial records written.
    """
    # Lazy imports keep --dry-run fast
    from src.reporting import build_summary, write_results, write_summary

    scheduler = JobScheduler.from_config(
        config.scheduler, job=SimulationJob.from_config(config.field)
    )
    collected = []

    def stream():
        for result in scheduler.run(generate_problems(config)):
            if summary_path is not None:
                collected.append(result)
            yield result

    t0 = time.monotonic()
    with stage_timer("Sweep"):
        try:
            written = write_results(stream(), sys.stdout, config.field.size)
        except KeyboardInterrupt:
            scheduler.cancel()
            raise
    elapsed = time.monotonic() - t0
    log.info("Wrote %d records", written)

    if summary_path is not None:
        with stage_timer("Summary"):
            summary = build_summary(collected, config, elapsed_seconds=elapsed)
            write_summary(summary, summary_path)

    return written


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Sweep jump ranges and search routes through random point fields"
    )
    parser.add_argument("--config", type=str, help="Path to sweep config JSON file")
    parser.add_argument("--field-size", type=float, help=f"Start-to-goal distance (default {ANCHOR_CONFIG.field.size})")
    parser.add_argument("--field-padding", type=float, help=f"Field margin on each side of the corridor (default {ANCHOR_CONFIG.field.padding})")
    parser.add_argument("-d", "--density", type=float, help=f"Point density [per cubic unit] (default {ANCHOR_CONFIG.field.density})")
    parser.add_argument("-n", "--trials", type=int, help="Trial count per jump range (default 1)")
    parser.add_argument("-m", "--max-hop", type=int, help=f"Max hop count for a single trial (default {ANCHOR_CONFIG.max_hop})")
    parser.add_argument("--jump-start", type=float, help="First jump range")
    parser.add_argument("--jump-stop", type=float, help="Sweep stops below this jump range")
    parser.add_argument("--jump-step", type=float, help="Jump range increment")
    parser.add_argument("--workers", type=int, help="Worker count (default: CPUs - 2, min 1)")
    parser.add_argument("--executor", choices=("process", "thread"), help="Worker pool type")
    parser.add_argument("--seed", type=int, help="Master seed for per-trial fields")
    parser.add_argument("--random-seed", action="store_true", help="Draw fresh fields every run (ignore seed)")
    parser.add_argument("--summary", type=str, help="Write per-jump-range JSON summary to this path")
    parser.add_argument("--dry-run", action="store_true", help="Show sweep plan without running it")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG-level logging")
    args = parser.parse_args()

    # Configure logging (stderr, so stdout stays pure TSV)
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = ANCHOR_CONFIG
    if args.config is not None:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        config = config_from_json(config_path.read_text())

    try:
        config = apply_overrides(config, args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.dry_run:
        values = jump_ranges(config.sweep)
        workers = config.scheduler.workers or default_worker_count()
        print(f"Sweep plan (config hash {full_config_hash(config)}):")
        print(f"  Density:     {config.field.density:.6f}")
        print(f"  Field:       size={config.field.size}, padding={config.field.padding}")
        if values:
            print(f"  Jump ranges: {len(values)} values, {values[0]:.2f} .. {values[-1]:.2f}")
        else:
            print("  Jump ranges: none")
        print(f"  Trials:      {config.sweep.trials} per jump range")
        print(f"  Problems:    {count_problems(config)}")
        print(f"  Max hop:     {config.max_hop}")
        print(f"  Seed:        {config.seed}")
        print(f"  Workers:     {workers} ({config.scheduler.executor})")
        print("\n[dry-run] Config loaded successfully. Exiting.")
        return

    summary_path = Path(args.summary) if args.summary else None
    try:
        run_sweep(config, summary_path)
    except KeyboardInterrupt:
        log.warning("Interrupted")
        sys.exit(130)
    except Exception:
        log.exception("Sweep failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
