#!/usr/bin/env python3
"""
DB Server - process bootstrap and role dispatch

Every server process starts here: primary supervisor, single-user backend,
bootstrap mode, configuration description, or a re-executed child worker.
The startup order below is fixed:

1. platform normalization (before any shared state or I/O is used)
2. runtime foundation (structured error reporting from here on)
3. locale pinning (before any user-visible message is formatted)
4. argument classification and the privilege guard
5. handoff to the selected role, which never returns
"""
import os
import sys

import roles  # noqa: F401  (registers built-in role entry points)
from core.classifier import classify
from core.dispatcher import dispatch
from core.errors import (
    ConfigError,
    FatalStartupError,
    PlatformInitError,
    PrivilegeViolation,
    RoleContractViolation,
    RoleUnavailable,
)
from core.identity import ProcessIdentity
from core.locale_resolver import resolve_locales
from core.platform import detect_platform
from core.privilege import enforce
from core.runtime import init_runtime


def _write_stderr(message: str) -> None:
    sys.stderr.write(message)
    sys.stderr.flush()


def run(argv=None, platform=None) -> int:
    """Bootstrap the process and dispatch; returns an exit status.

    Only help/version and startup failures come back here. A successful
    handoff ends the process inside the role.
    """
    identity = ProcessIdentity.from_argv(sys.argv if argv is None else argv)
    progname = identity.program_name
    platform = platform or detect_platform()

    try:
        platform.normalize_platform(progname)
        context = init_runtime(identity)
        platform.apply_config(context.config.get("platform") or {}, progname)
    except (PlatformInitError, ConfigError) as e:
        _write_stderr(f"{progname}: {e}\n")
        return e.exit_code

    try:
        context.locale = resolve_locales(platform)
    except FatalStartupError as e:
        context.report_fatal(str(e))
        return e.exit_code

    # Standard options are recognized before insisting on not being root.
    decision = classify(identity.raw_argv, platform.is_forked_worker_token)
    try:
        enforce(decision.skip_privilege_check, platform, progname)
    except PrivilegeViolation as e:
        _write_stderr(str(e))
        return e.exit_code

    try:
        return dispatch(decision, identity, context.config)
    except RoleUnavailable as e:
        context.report_error(str(e))
        return e.exit_code
    except RoleContractViolation:
        os.abort()
        raise


if __name__ == "__main__":
    raise SystemExit(run())
