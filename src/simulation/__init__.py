"""Simulation module: problems, results, single-trial jobs and sweeps."""

from src.simulation.job import (
    FIELD_PADDING,
    FIELD_SIZE,
    SimulationJob,
    endpoints,
    run_simulation,
)
from src.simulation.sweep import count_problems, generate_problems, jump_ranges
from src.simulation.types import Problem, Result

__all__ = [
    "FIELD_PADDING",
    "FIELD_SIZE",
    "Problem",
    "Result",
    "SimulationJob",
    "count_problems",
    "endpoints",
    "generate_problems",
    "jump_ranges",
    "run_simulation",
]
