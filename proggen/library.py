"""Function libraries that programs are sampled from, and reward tracking."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Function:
    """A named library function with parameter types and a return type."""

    value: Callable[..., Any] | None
    name: str
    ptypes: tuple[str, ...] = ()
    rtype: str = ""

    def __call__(self, *args: Any) -> Any:
        if self.value is None:
            raise TypeError(f"function {self.name!r} has no implementation")
        return self.value(*args)


@dataclass
class LibraryInverse:
    """Indexes a library by type: which functions return or accept each type."""

    provides: dict[str, set[str]] = field(default_factory=dict)
    requires: dict[str, set[str]] = field(default_factory=dict)

    def __str__(self) -> str:
        parts = ["provides:\n"]
        for type_name, names in self.provides.items():
            parts.append(f"type: {type_name}, fn_set:\n{_format_names(names)}\n")
        parts.append("requires:\n")
        for type_name, names in self.requires.items():
            parts.append(f"type: {type_name}, fn_set:\n{_format_names(names)}\n")
        return "".join(parts)


def _format_names(names: Iterable[str]) -> str:
    return "".join(f"  {name}\n" for name in sorted(names))


class Library:
    """A collection of functions keyed by name."""

    def __init__(self) -> None:
        self._functions: dict[str, Function] = {}

    def add(
        self,
        func: Callable[..., Any] | None,
        name: str,
        ptypes: Iterable[str],
        rtype: str,
    ) -> Function:
        """Register ``func`` under ``name`` and return the library entry."""
        entry = Function(func, name, tuple(ptypes), rtype)
        self._functions[name] = entry
        return entry

    def remove(self, name: str) -> None:
        """Remove a function; removing an absent name does nothing."""
        self._functions.pop(name, None)

    def __getitem__(self, name: str) -> Function:
        return self._functions[name]

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def inverse(self) -> LibraryInverse:
        """Index the library by the types functions provide and require."""
        inv = LibraryInverse()
        for fn in self._functions.values():
            inv.provides.setdefault(fn.rtype, set()).add(fn.name)
        for fn in self._functions.values():
            for ptype in fn.ptypes:
                inv.requires.setdefault(ptype, set()).add(fn.name)
        return inv

    def type_graph(
        self, types: Iterable[str]
    ) -> tuple[list[frozenset[str]], list[frozenset[str]]]:
        """Layer the library by reachability from the given types.

        Returns ``(type_levels, func_levels)``: level 0 of the types is the
        starting set; functions at level ``k`` need only types available up
        to level ``k`` and produce the types of level ``k + 1``.
        """
        start = frozenset(types)
        all_types = set(start)
        all_funcs: set[str] = set()
        type_levels = [start]
        func_levels: list[frozenset[str]] = []
        while True:
            new_funcs: set[str] = set()
            new_types: set[str] = set()
            for fn in self._functions.values():
                if fn.name in all_funcs:
                    continue
                if set(fn.ptypes) <= all_types:
                    new_funcs.add(fn.name)
                    new_types.add(fn.rtype)
            if not new_funcs:
                break
            all_funcs |= new_funcs
            func_levels.append(frozenset(new_funcs))
            all_types |= new_types
            type_levels.append(frozenset(new_types))
        logger.info("The TypeGraph is %s", type_levels)
        logger.info("The FuncGraph is %s", func_levels)
        return type_levels, func_levels


@dataclass(frozen=True)
class RewardTime:
    """A reward found at a point in time, with the function that found it."""

    reward: float
    time: int
    source: str


@dataclass(frozen=True)
class PowerOfTwoRecord:
    """One evaluation of the power-of-two target."""

    value: float
    reward: float
    time: int


class RewardTracker:
    """Accumulates rewards and the history of the power-of-two target."""

    def __init__(self) -> None:
        self.buckets: dict[int, float] = {}
        self.rewards: list[RewardTime] = []
        self.total = 0.0
        self.time = 0
        self.history: list[PowerOfTwoRecord] = []

    def found_reward(self, reward: float, source: str) -> None:
        self.total += reward
        self.rewards.append(RewardTime(reward, self.time, source))

    def is_power_of_two(self, n: int) -> bool:
        """Check ``n``; repeated hits on the same value earn less reward."""
        count = self.buckets.get(n, 0.0)
        self.buckets[n] = count + 1.0

        if n > 0:
            exponent = math.log2(float(n))
        elif n == 0:
            exponent = -math.inf
        else:
            exponent = math.nan

        reward = 0.0
        is_power = False
        if math.floor(exponent) == exponent if math.isfinite(exponent) else exponent == -math.inf:
            reward = 1.0 / (count + 1)
            self.found_reward(reward, "isPowerOfTwo")
            is_power = True
        self.history.append(PowerOfTwoRecord(float(n), reward, self.time))
        return is_power


def sign(x: int) -> int:
    """Return -1, 0 or 1 according to the sign of ``x``."""
    if x < 0:
        return -1
    if x == 0:
        return 0
    return 1


def basic_math_library(library: Library) -> Library:
    """Add ``one``, ``add`` and ``mul`` over ints."""
    library.add(lambda: 1, "one", [], "int")
    library.add(lambda a, b: a + b, "add", ["int", "int"], "int")
    library.add(lambda a, b: a * b, "mul", ["int", "int"], "int")
    return library


def peano_library(library: Library) -> Library:
    """Add ``succ`` and ``zero`` over ints."""
    library.add(lambda a: a + 1, "succ", ["int"], "int")
    library.add(lambda: 0, "zero", [], "int")
    return library


def add_power_of_two(library: Library, tracker: RewardTracker) -> Library:
    """Add the rewarding ``isPowerOfTwo`` target bound to ``tracker``."""
    library.add(tracker.is_power_of_two, "isPowerOfTwo", ["int"], "bool")
    return library