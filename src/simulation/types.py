"""Problem and result records exchanged between the sweep, workers and output."""

from dataclasses import dataclass

from src.search.types import FailureReason


@dataclass(frozen=True, slots=True)
class Problem:
    """One trial: a jump range to test at a given density and hop budget.

    `id` is the correlation key for in-order emission; producers assign ids
    in strictly increasing order. `seed` makes the trial's random field
    reproducible; None draws fresh entropy.
    """

    id: int
    jump_range: float
    density: float
    max_hop: int
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.id < 0:
            raise ValueError(f"id must be >= 0, got {self.id}")
        if self.jump_range <= 0:
            raise ValueError(f"jump_range must be > 0, got {self.jump_range}")
        if self.density < 0:
            raise ValueError(f"density must be >= 0, got {self.density}")
        if self.max_hop <= 0:
            raise ValueError(f"max_hop must be > 0, got {self.max_hop}")


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of one Problem. Exactly one Result is produced per Problem."""

    id: int
    succeeded: bool
    because: FailureReason | None
    density: float
    jump_range: float
    hop_count: int | None = None
    total_distance: float | None = None

    def efficiency(self, field_size: float) -> float | None:
        """Straight-line distance over travelled distance, successes only."""
        if not self.succeeded or not self.total_distance:
            return None
        return field_size / self.total_distance

    def __str__(self) -> str:
        return f"{{id={self.id}, succ={self.succeeded}, because={self.because}}}"
