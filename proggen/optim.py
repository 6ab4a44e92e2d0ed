"""Searching over programs: minimisation, rewiring, shuffling and mutation."""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

from proggen.library import Library
from proggen.program import (
    InvalidProgramError,
    Statement,
    copy_program,
    format_program,
    uniquify_syms,
    validate,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MAX_SHUFFLES = 1000


class Mutation(enum.IntEnum):
    """How a genetic round builds the next population."""

    NO_MUT = 0
    MUT = 1
    REGEN = 2


@dataclass
class GPParams:
    """Parameters of a genetic programming campaign."""

    n_rounds: int = 1000
    n_programs: int = 20
    ltype: Mutation = Mutation.NO_MUT

    @property
    def n_keep(self) -> int:
        """How many of the best programs survive each round."""
        return self.n_programs // 2


def _rng(rng: random.Random | None) -> random.Random:
    return rng if rng is not None else random.Random()


def _defined_in_order(program: Sequence[Statement]) -> bool:
    """Quiet validity check used while searching many candidate orders."""
    if not program or program[0].fn.value is None:
        return False
    present: set[str] = set()
    for stmt in program:
        if any(arg not in present for arg in stmt.argsyms):
            return False
        present.add(stmt.outsym)
    return True


def delta_debug(items: Sequence[T], test: Callable[[list[T]], bool]) -> list[T]:
    """Shrink ``items`` to a 1-minimal subsequence on which ``test`` holds.

    Chunks of decreasing size are removed while ``test`` still passes.
    Raises :class:`ValueError` if ``test`` fails on the full input.
    """
    current = list(items)
    if not test(current):
        raise ValueError("the input doesn't meet the condition")
    n = 2
    while n <= len(current):
        length = len(current)
        for i in range(n):
            start, stop = i * length // n, (i + 1) * length // n
            candidate = current[:start] + current[stop:]
            if test(candidate):
                current = candidate
                n = 2
                break
        else:
            if n == length:
                break
            n = min(2 * n, length)
    return current


def rewire(
    program: Sequence[Statement], rng: random.Random | None = None
) -> tuple[list[Statement], bool]:
    """Reconnect every argument to a random earlier symbol of the right type.

    Returns the new program and whether a complete rewiring was found; on
    failure the partially rewired copy, still valid, is returned.
    """
    rng = _rng(rng)
    result = copy_program(program)
    catalog: dict[str, list[str]] = {}
    for stmt in result:
        for j, ptype in enumerate(stmt.fn.ptypes):
            options = catalog.get(ptype)
            if not options:
                validate(result, "The program is invalid.")
                return result, False
            stmt.argsyms[j] = rng.choice(options)
        catalog.setdefault(stmt.fn.rtype, []).append(stmt.outsym)
    validate(result, "The program is invalid.")
    return result, True


def reshuffle(
    program: Sequence[Statement], rng: random.Random | None = None
) -> list[Statement]:
    """Randomly reorder the lines of a program, keeping it valid.

    Gives up after a fixed number of attempts and returns a copy in the
    original order.
    """
    rng = _rng(rng)
    if not _defined_in_order(program):
        raise InvalidProgramError("cannot reshuffle an invalid program")
    candidate = copy_program(program)
    for _ in range(_MAX_SHUFFLES + 1):
        rng.shuffle(candidate)
        if _defined_in_order(candidate):
            return candidate
    return copy_program(program)


def point_mutate(
    program: Sequence[Statement],
    library: Library,
    rng: random.Random | None = None,
) -> tuple[list[Statement], bool]:
    """Swap one call for another library function with the same signature.

    Returns the new program and whether a replacement was made.
    """
    rng = _rng(rng)
    inverse = library.inverse()
    result = copy_program(program)
    replaceables: dict[int, list[str]] = {}
    for line, stmt in enumerate(result):
        options = {
            name
            for name in inverse.provides.get(stmt.fn.rtype, set())
            if library[name].ptypes == stmt.fn.ptypes
        }
        options.discard(stmt.fn.name)
        logger.info(
            "The fn %s on line %d is replaceable by: %s",
            stmt.fn.name,
            line,
            sorted(options),
        )
        if options:
            replaceables[line] = sorted(options)
    if not replaceables:
        logger.info("No replaceable lines!")
        return result, False
    line = rng.choice(sorted(replaceables))
    new_name = rng.choice(replaceables[line])
    logger.info(
        "Replacing %s with %s at line %d.", result[line].fn.name, new_name, line
    )
    result[line].fn = library[new_name]
    validate(result, "Mutation produced invalid program.")
    return result, True


def interleave(
    a: Sequence[Statement],
    b: Sequence[Statement],
    rng: random.Random | None = None,
) -> list[Statement]:
    """Merge two programs by drawing lines from either at random.

    Symbols of ``b`` are renamed apart from those of ``a``. A drawn line is
    only taken once every argument type can be wired to an existing symbol.
    """
    rng = _rng(rng)
    validate(a, "Fail on a.")
    validate(b, "Fail on b.")
    left = copy_program(a)
    right = uniquify_syms(copy_program(b), left)
    validate(left, "Fail on l.")
    validate(right, "Fail on m.")

    catalog: dict[str, list[str]] = {}
    merged: list[Statement] = []
    while len(merged) < len(left):
        source = left if (rng.random() < 0.5 and left) or not right else right
        stmt = source[0]
        if any(not catalog.get(ptype) for ptype in stmt.fn.ptypes):
            continue
        for j, ptype in enumerate(stmt.fn.ptypes):
            stmt.argsyms[j] = rng.choice(catalog[ptype])
        source.pop(0)
        catalog.setdefault(stmt.fn.rtype, []).append(stmt.outsym)
        merged.append(stmt)
    if len(merged) == 0:
        raise InvalidProgramError("interleaving produced an empty program")
    validate(merged, "Fail on newly minted prog.\n" + format_program(merged))
    return merged


def prune(program: Sequence[Statement]) -> list[Statement]:
    """Return the program's statements unchanged."""
    return list(program)


def grow(program: Sequence[Statement]) -> list[Statement]:
    """Return the program's statements unchanged."""
    return list(program)