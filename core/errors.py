"""Bootstrap failure kinds.

Components raise these instead of exiting; ``main.run`` is the single place
that turns them into a process exit.
"""

from __future__ import annotations

from utils.constants import EXIT_FAILURE


class BootstrapError(Exception):
    """Base class for every startup failure that ends the process."""

    exit_code = EXIT_FAILURE


class ConfigError(BootstrapError):
    """The bootstrap configuration file could not be loaded."""


class PlatformInitError(BootstrapError):
    """A mandatory platform normalization step failed."""


class FatalStartupError(BootstrapError):
    """Unrecoverable startup condition, reported through the structured logger."""


class PrivilegeViolation(BootstrapError):
    """The process identity is not allowed to run the selected role."""


class RoleUnavailable(BootstrapError):
    """The selected role has no usable entry point."""


class RoleContractViolation(BootstrapError):
    """A role entry point returned control instead of ending the process."""

    def __init__(self, role: str):
        super().__init__(f"entry point for role {role} returned")
        self.role = role
