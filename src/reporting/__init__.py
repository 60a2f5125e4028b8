"""Trial output: streaming TSV records and per-jump-range JSON summaries."""

from src.reporting.summary import (
    JumpRangeStats,
    build_reproduction_block,
    build_summary,
    success_interval,
    summarize,
    write_summary,
)
from src.reporting.tsv import HEADER, format_result, write_results

__all__ = [
    "HEADER",
    "JumpRangeStats",
    "build_reproduction_block",
    "build_summary",
    "format_result",
    "success_interval",
    "summarize",
    "write_results",
    "write_summary",
]
