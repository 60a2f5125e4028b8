"""Single-trial simulation: build a field, search it, package the Result.

Start and goal sit on the x axis at -size/2 and +size/2. The field cube is
wider than that corridor by `padding` on every side so points near the
corridor ends still have neighbours on all sides.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from src.config.experiment import FieldConfig
from src.field.points import PointField
from src.field.types import Point3
from src.search.route import find_route
from src.simulation.types import Problem, Result

log = logging.getLogger(__name__)

FIELD_SIZE = FieldConfig().size
FIELD_PADDING = FieldConfig().padding


def endpoints(field_size: float = FIELD_SIZE) -> tuple[Point3, Point3]:
    """Fixed (start, goal) pair for a corridor of the given length."""
    return Point3(-field_size / 2, 0.0, 0.0), Point3(field_size / 2, 0.0, 0.0)


def run_simulation(
    problem: Problem,
    field_size: float = FIELD_SIZE,
    field_padding: float = FIELD_PADDING,
    field: PointField | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> Result:
    """Run one trial and return its Result.

    Args:
        problem: Trial parameters.
        field_size: Start-to-goal distance.
        field_padding: Margin added to each side of the generated cube.
        field: Optional pre-built field. It is reset and then owned by this
            run; never pass a field that another running job is using.
        should_stop: Optional cancellation check forwarded to the search.

    Returns:
        Result carrying problem.id.
    """
    log.debug("Start search id=%d", problem.id)

    if field is None:
        rng = np.random.default_rng(problem.seed)
        field = PointField.generate(
            field_size + 2 * field_padding, problem.density, rng
        )
    else:
        field.reset()

    start, goal = endpoints(field_size)
    outcome = find_route(
        field,
        start,
        goal,
        problem.jump_range,
        problem.max_hop,
        should_stop=should_stop,
    )

    result = Result(
        id=problem.id,
        succeeded=outcome.succeeded,
        because=outcome.because,
        density=problem.density,
        jump_range=problem.jump_range,
        hop_count=outcome.hop_count,
        total_distance=outcome.total_distance,
    )
    log.debug(
        "Done search id=%d: %s (%d iterations, %d points expanded)",
        problem.id, result, outcome.iterations, outcome.expanded,
    )
    return result


@dataclass(frozen=True, slots=True)
class SimulationJob:
    """Picklable job callable binding the corridor geometry.

    Instances are what the scheduler ships to worker processes, so they
    hold only plain values.
    """

    field_size: float = FIELD_SIZE
    field_padding: float = FIELD_PADDING

    @classmethod
    def from_config(cls, config: FieldConfig) -> "SimulationJob":
        return cls(field_size=config.size, field_padding=config.padding)

    def __call__(
        self,
        problem: Problem,
        should_stop: Callable[[], bool] | None = None,
    ) -> Result:
        return run_simulation(
            problem,
            field_size=self.field_size,
            field_padding=self.field_padding,
            should_stop=should_stop,
        )
