"""Sample programs that demonstrate each optimisation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from lndwcc.compiler import CompileOptions


@dataclass(frozen=True)
class Example:
    """A sample program together with the optimisations it is meant to show off."""

    title: str
    desc: str
    input: str
    options: CompileOptions


def preloaded_examples() -> List[Example]:
    """Return the built-in examples in display order."""
    return [
        Example(
            title="examples.basic.title",
            desc="examples.basic.desc",
            input="3 + 2 + 1",
            options=CompileOptions(),
        ),
        Example(
            title="examples.complex.title",
            desc="examples.complex.desc",
            input="1000 * 2 + 4 * 5 + (15 / 3) + x * 13 - y * 2",
            options=CompileOptions(do_constant_folding=True),
        ),
        Example(
            title="examples.ram_opt.title",
            desc="examples.ram_opt.desc",
            input="(1000 + 2) * (4 * 5 + (15 / 3) + 17 * 13 - 8 * 2)",
            options=CompileOptions(run_cache_optimization=True),
        ),
        Example(
            title="examples.shift_mul.title",
            desc="examples.shift_mul.desc",
            input="16 / 2 * 4 / 4",
            options=CompileOptions(run_cache_optimization=True, do_shift_replacement=True),
        ),
        Example(
            title="examples.factorization.title",
            desc="examples.factorization.desc",
            input="t * 16 + t * (3 + 2)",
            options=CompileOptions(
                run_cache_optimization=True, do_common_factor_elimination=True
            ),
        ),
    ]