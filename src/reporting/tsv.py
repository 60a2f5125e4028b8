"""Tab-separated trial records, one line per Result in id order.

Success: id, NA, T, density, jump range, hop count, total distance, efficiency.
Failure: id, reason, F, density, jump range, NA, NA, NA.
"""

from collections.abc import Iterable
from typing import TextIO

from src.simulation.types import Result

COLUMNS = (
    "ID",
    "Because",
    "Succ",
    "Density",
    "JumpRange",
    "Count",
    "TotalJump",
    "Efficiency",
)
HEADER = "\t".join(COLUMNS)
NA = "NA"


def format_result(result: Result, field_size: float) -> str:
    """Render one Result as a TSV line (without trailing newline)."""
    if result.succeeded:
        return (
            f"{result.id}\t{NA}\tT\t{result.density:.6f}\t"
            f"{result.jump_range:.2f}\t{result.hop_count}\t"
            f"{result.total_distance:.2f}\t"
            f"{result.efficiency(field_size):.4f}"
        )
    return (
        f"{result.id}\t{result.because}\tF\t{result.density:.6f}\t"
        f"{result.jump_range:.2f}\t{NA}\t{NA}\t{NA}"
    )


def write_results(
    results: Iterable[Result],
    out: TextIO,
    field_size: float,
    header: bool = True,
) -> int:
    """Stream Results to `out` as TSV, flushing after every record.

    Returns:
        Number of records written (excluding the header).
    """
    if header:
        out.write(HEADER + "\n")
        out.flush()
    count = 0
    for result in results:
        out.write(format_result(result, field_size) + "\n")
        out.flush()
        count += 1
    return count
