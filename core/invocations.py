"""Per-role handoff payloads. Each carries exactly what its role needs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from core.classifier import Role


@dataclass(frozen=True)
class SupervisorInvocation:
    argv: List[str]
    role: Role = field(default=Role.SUPERVISOR, init=False)


@dataclass(frozen=True)
class ForkedWorkerInvocation:
    argv: List[str]
    role: Role = field(default=Role.FORKED_WORKER, init=False)


@dataclass(frozen=True)
class BootstrapInvocation:
    argv: List[str]
    role: Role = field(default=Role.BOOTSTRAP, init=False)


@dataclass(frozen=True)
class ConfigDescribeInvocation:
    role: Role = field(default=Role.CONFIG_DESCRIBE, init=False)

    @property
    def argv(self) -> List[str]:
        return []


@dataclass(frozen=True)
class SingleUserInvocation:
    argv: List[str]
    username: str
    dbname: Optional[str] = None
    role: Role = field(default=Role.SINGLE_USER, init=False)

    @property
    def database(self) -> str:
        """Database to open; the account name unless one was given."""
        return self.dbname or self.username


Invocation = Union[
    SupervisorInvocation,
    ForkedWorkerInvocation,
    BootstrapInvocation,
    ConfigDescribeInvocation,
    SingleUserInvocation,
]
