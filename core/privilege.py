"""Refuse to start the server under a privileged account."""

from __future__ import annotations

from core.errors import PrivilegeViolation
from utils.i18n import _

ROOT_EXECUTION_MESSAGE = (
    '"root" execution of the server is not permitted.\n'
    "The server must be started under an unprivileged user ID to prevent\n"
    "possible system security compromise.  See the documentation for\n"
    "more information on how to properly start the server.\n"
)

ADMIN_EXECUTION_MESSAGE = (
    "Execution of the server by a user with administrative permissions is not\n"
    "permitted.\n"
    "The server must be started under an unprivileged user ID to prevent\n"
    "possible system security compromises.  See the documentation for\n"
    "more information on how to properly start the server.\n"
)


def enforce(skip: bool, platform, progname: str) -> None:
    """Raise PrivilegeViolation unless the process identity is safe.

    With *skip* set the identity is never queried at all.
    """
    if skip:
        return

    state = platform.query_privilege_identity()
    if state.is_superuser:
        if platform.has_real_effective_distinction:
            raise PrivilegeViolation(_(ROOT_EXECUTION_MESSAGE))
        raise PrivilegeViolation(_(ADMIN_EXECUTION_MESSAGE))

    # A setuid binary started from a root shell could switch back to root.
    if platform.has_real_effective_distinction and state.real_uid != state.effective_uid:
        raise PrivilegeViolation(_("{progname}: real and effective user IDs must match\n").format(progname=progname))
