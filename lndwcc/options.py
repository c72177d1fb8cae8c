"""Hardware configuration of the register machine."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional

_UNSIGNED = re.compile(r"\+?[0-9]+")


def _parse_unsigned(text: str, bits: int) -> Optional[int]:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value < (1 << bits) else None


@dataclass(frozen=True)
class InterpreterOptions:
    """Number of registers and RAM cells available to programs."""

    num_registers: int = 6
    num_cachelines: int = 16

    def with_registers(self, text: str) -> InterpreterOptions:
        """Return options with the register count read from text; unchanged if it does not parse."""
        value = _parse_unsigned(text, 8)
        return self if value is None else replace(self, num_registers=value)

    def with_cachelines(self, text: str) -> InterpreterOptions:
        """Return options with the RAM size read from text; unchanged if it does not parse."""
        value = _parse_unsigned(text, 64)
        return self if value is None else replace(self, num_cachelines=value)