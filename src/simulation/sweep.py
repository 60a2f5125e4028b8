"""Problem generation for a jump-range sweep.

Enumerates jump-range values from the sweep config and emits `trials`
Problems per value with strictly increasing ids. Each Problem carries its
own field seed derived from the master seed, so a sweep is reproducible
from a single seed yet every trial samples a different random field.
"""

import logging
from collections.abc import Iterator

from src.config.experiment import SimulationConfig, SweepConfig
from src.reproducibility.seeds import derive_seeds
from src.simulation.types import Problem

log = logging.getLogger(__name__)


def jump_ranges(sweep: SweepConfig) -> list[float]:
    """Jump-range values start, start + step, ... while below stop.

    Values are produced by repeated addition, so long sweeps carry the
    accumulated round-off of that loop. The anchor sweep 6.8 .. 75 step
    0.05 yields 1365 values; the last is 74.9999999999979 and is reported
    as 75.00.
    """
    values: list[float] = []
    value = sweep.jump_start
    while value < sweep.jump_stop:
        values.append(value)
        value += sweep.jump_step
    return values


def count_problems(config: SimulationConfig) -> int:
    """Total number of Problems generate_problems() will yield."""
    return len(jump_ranges(config.sweep)) * config.sweep.trials


def generate_problems(config: SimulationConfig) -> Iterator[Problem]:
    """Lazily yield every Problem of the sweep in id order.

    Args:
        config: Simulation configuration (sweep, density, hop budget, seed).

    Yields:
        Problems with ids 0, 1, 2, ... and per-trial seeds.
    """
    values = jump_ranges(config.sweep)
    total = len(values) * config.sweep.trials
    log.info(
        "Sweep: %d jump ranges x %d trials = %d problems",
        len(values),
        config.sweep.trials,
        total,
    )

    if config.seed is not None:
        seeds: list[int | None] = list(derive_seeds(config.seed, total))
    else:
        seeds = [None] * total

    problem_id = 0
    for jump_range in values:
        for _ in range(config.sweep.trials):
            yield Problem(
                id=problem_id,
                jump_range=jump_range,
                density=config.field.density,
                max_hop=config.max_hop,
                seed=seeds[problem_id],
            )
            problem_id += 1
