"""Process identity captured once at entry."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Sequence, Tuple

_EXECUTABLE_SUFFIXES = (".exe", ".py")


def get_progname(argv0: str) -> str:
    """Strip directory and executable extension from ``argv[0]``."""
    base = os.path.basename(str(argv0 or "").replace("\\", "/"))
    for suffix in _EXECUTABLE_SUFFIXES:
        if base.lower().endswith(suffix) and len(base) > len(suffix):
            base = base[: -len(suffix)]
            break
    return base or "dbserver"


@dataclass(frozen=True)
class ProcessIdentity:
    program_name: str
    raw_argv: Tuple[str, ...]

    @classmethod
    def from_argv(cls, argv: Sequence[str]) -> "ProcessIdentity":
        # Copy first: later code may rewrite sys.argv for the ps display.
        saved = tuple(str(a) for a in argv)
        return cls(program_name=get_progname(saved[0] if saved else ""), raw_argv=saved)

    @property
    def argc(self) -> int:
        return len(self.raw_argv)
