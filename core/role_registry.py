"""Declarative role entry-point registration with @role_entry decorator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from core.classifier import Role

logger = logging.getLogger(__name__)

# Handler signature: def handler(invocation) -> NoReturn
RoleHandler = Callable[[Any], None]


@dataclass
class RoleSpec:
    """Metadata for a built-in role entry point."""

    role: Role
    description: str
    handler: RoleHandler


class RoleRegistry:
    """Central store of built-in role entry points."""

    def __init__(self) -> None:
        self._roles: Dict[Role, RoleSpec] = {}

    def register(self, spec: RoleSpec) -> None:
        if spec.role in self._roles:
            logger.warning("Role %s registered twice, overwriting", spec.role.value)
        self._roles[spec.role] = spec

    def get(self, role: Role) -> Optional[RoleSpec]:
        return self._roles.get(role)


# ── Module-level singleton used by the @role_entry decorator ──
registry = RoleRegistry()


def role_entry(role: Role, description: str = ""):
    """Decorator that registers a function as the built-in entry point of *role*.

    Usage::

        @role_entry(Role.CONFIG_DESCRIBE, "describe configuration parameters")
        def describe_config(invocation) -> None:
            ...
    """

    def decorator(func: RoleHandler) -> RoleHandler:
        registry.register(RoleSpec(role=role, description=description, handler=func))
        return func

    return decorator
