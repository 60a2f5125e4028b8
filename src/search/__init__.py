"""Route search module: greedy depth-first search with backtracking."""

from src.search.route import find_route, path_length, sort_toward_goal, trace_path
from src.search.types import FailureReason, SearchNode, SearchOutcome

__all__ = [
    "FailureReason",
    "SearchNode",
    "SearchOutcome",
    "find_route",
    "path_length",
    "sort_toward_goal",
    "trace_path",
]
