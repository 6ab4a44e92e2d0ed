"""Statistics of evaluated values by their depth in the dataflow graph."""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

from proggen.program import Statement


class DepthStats:
    """Counts values, and distinct integer values, at each dataflow depth."""

    def __init__(self) -> None:
        self.depth_values: dict[int, set[int]] = {}
        self.depth_count: dict[int, int] = {}

    def update(self, program: Sequence[Statement], values: Mapping[str, Any]) -> None:
        """Record ``values`` (symbol to value) produced by ``program``."""
        depths = depth_map(program)
        for sym, value in values.items():
            depth = depths.get(sym, 0)
            self.depth_count[depth] = self.depth_count.get(depth, 0) + 1
            distinct = self.depth_values.setdefault(depth, set())
            if isinstance(value, int) and not isinstance(value, bool):
                distinct.add(value)

    def report(self) -> str:
        """A tab-separated table of depth, unique count, total and ratio."""
        lines = ["Depth\tUnique\tTotal\tRatio\n"]
        for depth in sorted(self.depth_values):
            unique = len(self.depth_values[depth])
            total = self.depth_count[depth]
            lines.append(f"{depth}\t{unique}\t{total}\t{unique / total:<8f} \n")
        return "".join(lines)


def get_depth(depth_map: Mapping[str, int], *args: str) -> int:
    """One more than the deepest known argument; unknown arguments count as 0."""
    return max((depth_map[a] for a in args if a in depth_map), default=0) + 1


def depth_map(program: Iterable[Statement]) -> dict[str, int]:
    """Map each output symbol to its depth in the program's dataflow."""
    depths: dict[str, int] = {}
    for stmt in program:
        depths[stmt.outsym] = get_depth(depths, *stmt.argsyms)
    return depths


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean; NaN for no values."""
    items = list(values)
    if not items:
        return math.nan
    return sum(items) / len(items)