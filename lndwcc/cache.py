"""Optimisation passes that work on the instruction list."""

from __future__ import annotations

from typing import Iterable, List

from lndwcc.isa import Inst, Load, Write


def run_cache_optimization(instructions: Iterable[Inst]) -> List[Inst]:
    """Drop writes to RAM cells that are never loaded again."""
    program = list(instructions)
    loaded = {inst.addr for inst in program if isinstance(inst, Load)}
    return [
        inst for inst in program if not isinstance(inst, Write) or inst.addr in loaded
    ]