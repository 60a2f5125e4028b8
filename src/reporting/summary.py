"""Per-jump-range aggregation of trial Results and JSON run summaries.

The sweep's real output is a success-rate-versus-jump-range curve. This
module folds trial Results into one row per jump range with an exact
(Clopper-Pearson) binomial confidence interval on the success rate, and
writes the rows together with run provenance to a JSON file.
"""

import json
import logging
from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np
from scipy.stats import binomtest

from src.config.experiment import SimulationConfig
from src.config.hashing import full_config_hash, outcome_config_hash
from src.config.serialization import config_to_dict
from src.reproducibility.git_hash import get_git_hash
from src.simulation.types import Result

log = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

# Jump ranges come from start + i * step; rounding groups trials reliably
_JUMP_DECIMALS = 9


@dataclass(frozen=True)
class JumpRangeStats:
    """Aggregate of all trials run at one jump range."""

    jump_range: float
    trials: int
    successes: int
    success_rate: float
    ci_low: float
    ci_high: float
    mean_hops: float | None  # successes only
    mean_distance: float | None  # successes only
    mean_efficiency: float | None  # successes only
    failures: dict[str, int] = field(default_factory=dict)


def success_interval(
    successes: int, trials: int, confidence: float = 0.95
) -> tuple[float, float]:
    """Exact Clopper-Pearson interval for a binomial success rate.

    Args:
        successes: Number of successful trials.
        trials: Number of trials (must be > 0).
        confidence: Confidence level.

    Returns:
        (low, high) bounds in [0, 1].
    """
    if trials <= 0:
        raise ValueError(f"trials must be > 0, got {trials}")
    ci = binomtest(successes, trials).proportion_ci(
        confidence_level=confidence, method="exact"
    )
    return float(ci.low), float(ci.high)


def summarize(
    results: Iterable[Result],
    field_size: float,
    confidence: float = 0.95,
) -> list[JumpRangeStats]:
    """Group Results by jump range and compute per-range statistics.

    Args:
        results: Trial Results in any order.
        field_size: Straight-line start-to-goal distance, for efficiency.
        confidence: Confidence level of the success-rate interval.

    Returns:
        One JumpRangeStats per distinct jump range, ascending.
    """
    groups: dict[float, list[Result]] = defaultdict(list)
    for result in results:
        groups[round(result.jump_range, _JUMP_DECIMALS)].append(result)

    stats: list[JumpRangeStats] = []
    for jump_range in sorted(groups):
        group = groups[jump_range]
        wins = [r for r in group if r.succeeded]
        n, k = len(group), len(wins)
        low, high = success_interval(k, n, confidence)

        if wins:
            hops = np.array([r.hop_count for r in wins], dtype=np.float64)
            dists = np.array([r.total_distance for r in wins], dtype=np.float64)
            mean_hops = float(hops.mean())
            mean_distance = float(dists.mean())
            mean_efficiency = float((field_size / dists).mean())
        else:
            mean_hops = mean_distance = mean_efficiency = None

        failures = Counter(str(r.because) for r in group if not r.succeeded)
        stats.append(
            JumpRangeStats(
                jump_range=jump_range,
                trials=n,
                successes=k,
                success_rate=k / n,
                ci_low=low,
                ci_high=high,
                mean_hops=mean_hops,
                mean_distance=mean_distance,
                mean_efficiency=mean_efficiency,
                failures=dict(sorted(failures.items())),
            )
        )
    return stats


def build_reproduction_block(config: SimulationConfig, code_hash: str) -> dict[str, Any]:
    """Copy-pasteable commands to re-run this sweep at the same code version.

    run_cmd names every setting that affects Results, so it reproduces the
    sweep without the original config file. Scheduler settings are left to
    the defaults of the machine running it.
    """
    is_dirty = code_hash.endswith("-dirty")
    clean_hash = code_hash.removesuffix("-dirty")

    run_parts = ["python run_sweep.py"]
    run_parts.append(
        f"--field-size {config.field.size} "
        f"--field-padding {config.field.padding}"
    )
    run_parts.append(f"-d {config.field.density}")
    run_parts.append(f"-n {config.sweep.trials}")
    run_parts.append(f"-m {config.max_hop}")
    run_parts.append(
        f"--jump-start {config.sweep.jump_start} "
        f"--jump-stop {config.sweep.jump_stop} "
        f"--jump-step {config.sweep.jump_step}"
    )
    if config.seed is not None:
        run_parts.append(f"--seed {config.seed}")
    else:
        run_parts.append("--random-seed")

    dirty_warning = (
        "WARNING: The working tree had uncommitted changes when this "
        "sweep was run. Results may not be exactly reproducible."
    ) if is_dirty else None

    return {
        "checkout_cmd": f"git checkout {clean_hash}",
        "run_cmd": " \\\n  ".join(run_parts),
        "seed": config.seed,
        "is_dirty": is_dirty,
        "dirty_warning": dirty_warning,
    }


def build_summary(
    results: Iterable[Result],
    config: SimulationConfig,
    elapsed_seconds: float | None = None,
) -> dict[str, Any]:
    """Assemble the JSON-ready run summary: metadata plus per-range rows."""
    results = list(results)
    code_hash = get_git_hash()
    rows = summarize(results, config.field.size)
    return {
        "schema_version": SCHEMA_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "description": config.description,
        "tags": list(config.tags),
        "config": config_to_dict(config),
        "metadata": {
            "config_hash": full_config_hash(config),
            "outcome_hash": outcome_config_hash(config),
            "code_hash": code_hash,
            "elapsed_seconds": elapsed_seconds,
            "reproduction": build_reproduction_block(config, code_hash),
        },
        "totals": {
            "trials": len(results),
            "successes": sum(1 for r in results if r.succeeded),
        },
        "jump_ranges": [asdict(row) for row in rows],
    }


def write_summary(summary: dict[str, Any], path: Path) -> Path:
    """Write a run summary as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(summary, f, indent=2)
    log.info("Summary written to %s", path)
    return path
