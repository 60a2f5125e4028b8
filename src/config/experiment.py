"""Simulation configuration dataclasses, all frozen and slotted for immutability."""

import dataclasses
from dataclasses import dataclass

EXECUTORS = ("process", "thread")


@dataclass(frozen=True, slots=True)
class FieldConfig:
    """Point field geometry and density."""

    size: float = 1000.0  # start-to-goal distance along x
    padding: float = 80.0  # extra margin per side of the travel corridor
    density: float = 0.002375  # points per cubic unit

    @property
    def side_length(self) -> float:
        """Edge length of the generated cube (size plus padding on both sides)."""
        return self.size + 2 * self.padding


@dataclass(frozen=True, slots=True)
class SweepConfig:
    """Jump-range sweep: values start + i * step for every value < stop."""

    jump_start: float = 6.8
    jump_stop: float = 75.0
    jump_step: float = 0.05
    trials: int = 1  # independent trials per jump range


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    """Worker pool parameters."""

    workers: int | None = None  # None = cpu_count - 2, floor 1
    capacity: int = 32  # max problems in flight
    executor: str = "process"  # "process" or "thread"


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Top-level simulation configuration composing all sub-configs.

    All fields are frozen and typed. Cross-parameter validation runs
    in __post_init__ to reject invalid configurations early.
    """

    field: FieldConfig = dataclasses.field(default_factory=FieldConfig)
    sweep: SweepConfig = dataclasses.field(default_factory=SweepConfig)
    scheduler: SchedulerConfig = dataclasses.field(default_factory=SchedulerConfig)
    max_hop: int = 100_000
    seed: int | None = 42  # None = nondeterministic fields
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Cross-parameter validation."""
        if self.field.size <= 0:
            raise ValueError(f"field size must be > 0, got {self.field.size}")
        if self.field.padding < 0:
            raise ValueError(
                f"field padding must be >= 0, got {self.field.padding}"
            )
        if self.field.density < 0:
            raise ValueError(
                f"density must be >= 0, got {self.field.density}"
            )
        if self.sweep.jump_start <= 0:
            raise ValueError(
                f"jump_start must be > 0, got {self.sweep.jump_start}"
            )
        if self.sweep.jump_step <= 0:
            raise ValueError(
                f"jump_step must be > 0, got {self.sweep.jump_step}"
            )
        if self.sweep.jump_stop < self.sweep.jump_start:
            raise ValueError(
                f"jump_stop ({self.sweep.jump_stop}) must be "
                f">= jump_start ({self.sweep.jump_start})"
            )
        if self.sweep.trials < 1:
            raise ValueError(f"trials must be >= 1, got {self.sweep.trials}")
        if self.max_hop < 1:
            raise ValueError(f"max_hop must be >= 1, got {self.max_hop}")
        if self.scheduler.workers is not None and self.scheduler.workers < 1:
            raise ValueError(
                f"workers must be >= 1, got {self.scheduler.workers}"
            )
        if self.scheduler.capacity < 1:
            raise ValueError(
                f"capacity must be >= 1, got {self.scheduler.capacity}"
            )
        if self.scheduler.executor not in EXECUTORS:
            raise ValueError(
                f"executor must be one of {EXECUTORS}, "
                f"got {self.scheduler.executor!r}"
            )
