"""Role selection from the first command-line argument.

Only ``argv[1]`` (and ``argv[2]`` for ``-C``) is inspected: everything after
the selector belongs to the selected role's own option grammar.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

HELP_TOKENS = frozenset({"--help", "-?"})
VERSION_TOKENS = frozenset({"--version", "-V"})
DESCRIBE_CONFIG_TOKEN = "--describe-config"
SHOW_PARAMETER_TOKEN = "-C"
BOOT_TOKEN = "--boot"
SINGLE_USER_TOKEN = "--single"


class Role(str, Enum):
    SUPERVISOR = "supervisor"
    FORKED_WORKER = "forked-worker"
    BOOTSTRAP = "bootstrap"
    CONFIG_DESCRIBE = "describe-config"
    SINGLE_USER = "single-user"


@dataclass(frozen=True)
class DispatchDecision:
    selected_role: Role = Role.SUPERVISOR
    wants_help: bool = False
    wants_version: bool = False
    skip_privilege_check: bool = False


def classify(
    argv: Sequence[str],
    is_forked_worker_token: Optional[Callable[[str], bool]] = None,
) -> DispatchDecision:
    """Decide what this invocation should do. Pure: no side effects."""
    if len(argv) < 2:
        return DispatchDecision()

    first = argv[1]
    # Standard options are answered before insisting on not being root.
    if first in HELP_TOKENS:
        return DispatchDecision(wants_help=True, skip_privilege_check=True)
    if first in VERSION_TOKENS:
        return DispatchDecision(wants_version=True, skip_privilege_check=True)

    # Read-only requests may run as root. "-C" only bypasses the check in
    # first position, so another mode's -C switch is never mistaken for it.
    if first == DESCRIBE_CONFIG_TOKEN:
        return DispatchDecision(selected_role=Role.CONFIG_DESCRIBE, skip_privilege_check=True)
    if first == SHOW_PARAMETER_TOKEN and len(argv) > 2:
        return DispatchDecision(selected_role=Role.SUPERVISOR, skip_privilege_check=True)

    if is_forked_worker_token is not None and is_forked_worker_token(first):
        return DispatchDecision(selected_role=Role.FORKED_WORKER)
    if first == BOOT_TOKEN:
        return DispatchDecision(selected_role=Role.BOOTSTRAP)
    if first == SINGLE_USER_TOKEN:
        return DispatchDecision(selected_role=Role.SINGLE_USER)
    return DispatchDecision()
