# proggen

`proggen` works with small typed straight-line programs built from a
library of functions. It checks them for validity, rewires, reshuffles,
point-mutates and interleaves them, and shrinks sequences to a minimal one
that still shows a property of interest with delta debugging.

A program is a list of `Statement`s (`proggen.program`). Each statement
holds a library `Function`, an output symbol and a list of argument
symbols. A program is valid when it is not empty, its first function has an
implementation, and every argument refers to a symbol defined on an
earlier line.

## Function libraries

A `Library` (`proggen.library`) maps names to typed `Function`s. Two
ready-made sets can be loaded into one:

```python
from proggen.library import Library, basic_math_library, peano_library

lib = Library()
basic_math_library(lib)        # one, add, mul
"add" in lib                   # True
lib["add"](2, 3)               # 5

peano = Library()
peano_library(peano)           # zero, succ
```

Your own functions are added with their parameter types and return type;
`add` returns the new entry, and removing an absent name does nothing:

```python
lib.add(lambda a, b: a - b, "sub", ["int", "int"], "int")
lib.remove("sub")
```

`Library.inverse()` returns a `LibraryInverse` that gives, for each type,
the names of the functions that provide it and of those that require it.
`Library.type_graph(types)` returns two lists: the types reachable level by
level from the given starting types, and the functions that become callable
at each level.

`sign(x)` returns -1, 0 or 1.

## Rewards

A `RewardTracker` collects rewards (`RewardTime` entries and a running
`total`) and a `history` of `PowerOfTwoRecord`s. `add_power_of_two(library,
tracker)` adds an `isPowerOfTwo` function from `int` to `bool`; the reward
for a power of two is `1 / (times this value was seen before + 1)`.

## Working with programs

`proggen.program` provides `is_valid`, `validate` (raises
`InvalidProgramError`), `copy_program`, `call_syms`, `sym_set`,
`rename_syms`, `uniquify_syms`, `format_program` and the `GenSym` name
generator.

`proggen.optim` holds the search operators. Each works on a copy and leaves
its input alone; random choices come from the `random.Random` you pass in:

- `rewire(program, rng)` keeps the line order and redraws every argument
  from the earlier symbols of the right type. It returns the program and
  whether a full rewiring was found.
- `reshuffle(program, rng)` reorders the lines into another valid order,
  falling back to the original order after a fixed number of attempts. An
  invalid input raises `InvalidProgramError`.
- `point_mutate(program, library, rng)` swaps one call for another library
  function with the same parameter and return types, and returns the
  program and whether a swap was made.
- `interleave(a, b, rng)` merges two programs, renaming the symbols of `b`
  apart from those of `a`.
- `prune(program)` and `grow(program)` return the statements unchanged.

`Mutation` and `GPParams` describe the settings of a genetic campaign.

## Delta debugging

`delta_debug(items, test)` reduces a sequence to a 1-minimal subsequence for
which `test` still holds, and raises `ValueError` if `test` fails on the
full input:

```python
from proggen.optim import delta_debug

items = [0] * 2500
items[0], items[1000], items[2000], items[2499] = 1, 2, 3, 5

def keeps_all(seq):
    return all(x in seq for x in (1, 2, 3, 5))

delta_debug(items, keeps_all)   # [1, 2, 3, 5]
```

It takes any sequence, a list of statements included.

## Analysis

`proggen.depth` gives `depth_map(program)`, the data-flow depth of each
output symbol, and `get_depth`. `DepthStats.update(program, values)`
counts, per depth, how many values were seen and how many distinct integers
among them; `DepthStats.report()` returns them as a tab-separated table.
`mean(values)` returns NaN for no values.

## Grid world

`proggen.pits` provides a grid `Map` (reading outside it yields -1, writing
outside it raises `IndexError`), `new_map(rng)` for a 10x10 map with walls,
`start`, `observe`, `distance_reward`, and `PitsWorld`, whose `move` rewards
visits to rarely visited cells through a `RewardTracker`.
`add_pitsworld(library, world, rng)` adds `start`, `move`, `newMap` and
`observe` to a library.

## Storage

`proggen.storage` writes results to SQLite files: `connect`,
`create_tables`, `save_peano` (returns the rows written), `save_pow2` and
`save_genetic` (each returns a random campaign id from `random_string`).
`save_genetic` expects the `history_power_of_two` table to have a `mut`
column. `Cheating` names the experiment variants stored by `save_peano`.

## What it does not do

The package does not sample random programs from a library and has no
program evaluator, so there is no ready-made genetic loop or experiment
driver: you supply programs and the code that runs them. It has no
command-line program and draws nothing on screen.