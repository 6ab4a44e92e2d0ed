"""Straight-line programs: statements, validity checks and symbol renaming."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from proggen.library import Function

logger = logging.getLogger(__name__)


@dataclass
class Statement:
    """One line of a program: ``outsym = fn(*argsyms)``."""

    fn: Function
    outsym: str
    argsyms: list[str] = field(default_factory=list)

    def copy(self) -> Statement:
        return Statement(self.fn, self.outsym, list(self.argsyms))


class InvalidProgramError(ValueError):
    """Raised when a program refers to a symbol before it is defined."""


class GenSym:
    """Generates fresh symbol names ``<prefix>0``, ``<prefix>1``, ..."""

    def __init__(self, prefix: str = "v") -> None:
        self.prefix = prefix
        self.index = 0

    def unique(self, taken: Iterable[str]) -> str:
        """Return the next generated name that is not in ``taken``."""
        taken = set(taken)
        while True:
            name = f"{self.prefix}{self.index}"
            self.index += 1
            if name not in taken:
                return name


def is_valid(program: Sequence[Statement]) -> bool:
    """True if every argument refers to a symbol defined on an earlier line."""
    if not program:
        logger.error("fail isValid: program len = 0")
        return False
    if program[0].fn.value is None:
        logger.error("fail isValid: begins with nil")
        return False
    present: set[str] = set()
    for line, stmt in enumerate(program):
        for arg in stmt.argsyms:
            if arg not in present:
                logger.error("missing arg: %s on line: %d", arg, line)
                logger.error("the catalog is: %s", sorted(present))
                return False
        present.add(stmt.outsym)
    return True


def validate(program: Sequence[Statement], message: str) -> None:
    """Raise :class:`InvalidProgramError` with ``message`` if invalid."""
    if not is_valid(program):
        logger.error("%s\n%s", message, format_program(program))
        raise InvalidProgramError(message)


def copy_program(program: Sequence[Statement]) -> list[Statement]:
    """Copy a valid program so its statements can be changed independently."""
    validate(program, "The program is invalid.")
    return [stmt.copy() for stmt in program]


def call_syms(program: Iterable[Statement]) -> list[str]:
    """Names of the functions called, line by line."""
    return [stmt.fn.name for stmt in program]


def sym_set(program: Iterable[Statement]) -> set[str]:
    """All symbols used by a program, as outputs or as arguments."""
    syms: set[str] = set()
    for stmt in program:
        syms.add(stmt.outsym)
        syms.update(stmt.argsyms)
    return syms


def rename_syms(
    program: Iterable[Statement], renames: Mapping[str, str]
) -> list[Statement]:
    """Return a copy of ``program`` with symbols replaced per ``renames``."""
    return [
        Statement(
            stmt.fn,
            renames.get(stmt.outsym, stmt.outsym),
            [renames.get(arg, arg) for arg in stmt.argsyms],
        )
        for stmt in program
    ]


def uniquify_syms(
    to_change: Sequence[Statement], fixed: Iterable[Statement]
) -> list[Statement]:
    """Rename every symbol of ``to_change`` so none is used in ``fixed``."""
    taken = sym_set(fixed)
    gensym = GenSym()
    renames = {sym: gensym.unique(taken) for sym in sorted(sym_set(to_change))}
    return rename_syms(to_change, renames)


def format_program(program: Iterable[Statement]) -> str:
    """Render one ``out = fn(args)`` line per statement."""
    return "\n".join(
        f"{stmt.outsym} = {stmt.fn.name}({', '.join(stmt.argsyms)})"
        for stmt in program
    )