"""Resolve the entry point that takes over the process for a role.

A role is bound either in the ``roles`` config section or by a built-in
registered with ``@role_entry``:

    roles:
      supervisor:
        entry_point: "myserver.supervisor:main"   # called in-process
      bootstrap:
        command: ["/usr/lib/myserver/boot"]       # replaces this process

In-process entry points read the resolved locale settings from
``core.runtime.current_runtime().locale``; exec'd commands get them through
the exported ``LC_*`` variables and ``DBSERVER_TRUST_STRXFRM``.
"""

from __future__ import annotations

import importlib
import logging
import os
from typing import Callable, List, MutableMapping, Optional

from core.classifier import Role
from core.errors import RoleUnavailable
from core.role_registry import RoleHandler, RoleRegistry
from core.runtime import current_runtime
from utils.constants import DBNAME_ENV_VAR, ROLE_ENV_VAR, TRUST_STRXFRM_ENV_VAR, USERNAME_ENV_VAR

logger = logging.getLogger(__name__)


def load_entry_point(spec: str) -> RoleHandler:
    """Import ``"package.module:attr"`` and return the callable."""
    module_name, sep, attr_path = str(spec).partition(":")
    if not sep or not module_name or not attr_path:
        raise RoleUnavailable(f"invalid entry point {spec!r}: expected 'module:callable'")
    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise RoleUnavailable(f"cannot import entry point module {module_name!r}: {e}") from e
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise RoleUnavailable(f"entry point {spec!r} not found") from e
    if not callable(target):
        raise RoleUnavailable(f"entry point {spec!r} is not callable")
    return target


def exec_handler(
    command: List[str],
    execvp: Callable[[str, List[str]], None] = os.execvp,
    environ: Optional[MutableMapping[str, str]] = None,
) -> RoleHandler:
    """Build a handler that replaces the process image with *command*."""

    def _handler(invocation) -> None:
        env = os.environ if environ is None else environ
        env[ROLE_ENV_VAR] = invocation.role.value
        username = getattr(invocation, "username", None)
        if username:
            env[USERNAME_ENV_VAR] = username
            env[DBNAME_ENV_VAR] = invocation.database
        context = current_runtime()
        if context is not None and context.locale is not None:
            env[TRUST_STRXFRM_ENV_VAR] = "1" if context.locale.trust_strxfrm else "0"
        args = [*command, *invocation.argv[1:]]
        logger.debug("exec %s for role %s", args, invocation.role.value)
        try:
            execvp(args[0], args)
        except OSError as e:
            raise RoleUnavailable(f"could not execute {args[0]!r}: {e}") from e

    return _handler


def resolve_handler(role: Role, roles_cfg: dict, registry: RoleRegistry) -> RoleHandler:
    binding = (roles_cfg or {}).get(role.value) or {}
    if not isinstance(binding, dict):
        raise RoleUnavailable(f"roles.{role.value} must be a mapping")

    entry_point = binding.get("entry_point")
    command = binding.get("command")
    if entry_point and command:
        raise RoleUnavailable(f"roles.{role.value}: set either entry_point or command, not both")
    if entry_point:
        return load_entry_point(str(entry_point))
    if command:
        if isinstance(command, str):
            command = [command]
        return exec_handler([str(c) for c in command])

    spec = registry.get(role)
    if spec is not None:
        return spec.handler
    raise RoleUnavailable(f"no entry point configured for role {role.value}")
