"""Hand the process over to exactly one role entry point."""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, Sequence, TextIO

from core.classifier import DispatchDecision, Role
from core.errors import RoleContractViolation, RoleUnavailable
from core.identity import ProcessIdentity
from core.invocations import (
    BootstrapInvocation,
    ConfigDescribeInvocation,
    ForkedWorkerInvocation,
    Invocation,
    SingleUserInvocation,
    SupervisorInvocation,
)
from core.role_bindings import resolve_handler
from core.role_registry import RoleRegistry, registry as default_registry
from utils.constants import BACKEND_VERSION_STRING, BUG_REPORT_ADDRESS, EXIT_OK
from utils.helpers import get_os_username
from utils.i18n import _
from utils.ps_status import set_ps_display

logger = logging.getLogger(__name__)

# Single-user switches that consume a value ("-D DIR" or "-DDIR").
SINGLE_USER_VALUE_OPTIONS = frozenset("BcCDdfhkNoprStvW")


def help_text(progname: str) -> str:
    # Keep in step with the options accepted by the supervisor and single-user roles.
    parts = [
        _("{progname} is the DB Server.\n\n").format(progname=progname),
        _("Usage:\n  {progname} [OPTION]...\n\n").format(progname=progname),
        _("Options:\n"),
        _("  -B NBUFFERS        number of shared buffers\n"),
        _("  -c NAME=VALUE      set run-time parameter\n"),
        _("  -C NAME            print value of run-time parameter, then exit\n"),
        _("  -d 1-5             debugging level\n"),
        _("  -D DATADIR         database directory\n"),
        _("  -e                 use European date input format (DMY)\n"),
        _("  -F                 turn fsync off\n"),
        _("  -h HOSTNAME        host name or IP address to listen on\n"),
        _("  -i                 enable TCP/IP connections\n"),
        _("  -k DIRECTORY       Unix-domain socket location\n"),
        _("  -l                 enable SSL connections\n"),
        _("  -N MAX-CONNECT     maximum number of allowed connections\n"),
        _('  -o OPTIONS         pass "OPTIONS" to each server process (obsolete)\n'),
        _("  -p PORT            port number to listen on\n"),
        _("  -s                 show statistics after each query\n"),
        _("  -S WORK-MEM        set amount of memory for sorts (in kB)\n"),
        _("  -V, --version      output version information, then exit\n"),
        _("  --NAME=VALUE       set run-time parameter\n"),
        _("  --describe-config  describe configuration parameters, then exit\n"),
        _("  -?, --help         show this help, then exit\n"),
        _("\nDeveloper options:\n"),
        _("  -f s|i|n|m|h       forbid use of some plan types\n"),
        _("  -n                 do not reinitialize shared memory after abnormal exit\n"),
        _("  -O                 allow system table structure changes\n"),
        _("  -P                 disable system indexes\n"),
        _("  -t pa|pl|ex        show timings after each query\n"),
        _("  -T                 send SIGSTOP to all backend processes if one dies\n"),
        _("  -W NUM             wait NUM seconds to allow attach from a debugger\n"),
        _("\nOptions for single-user mode:\n"),
        _("  --single           selects single-user mode (must be first argument)\n"),
        _("  DBNAME             database name (defaults to user name)\n"),
        _("  -d 0-5             override debugging level\n"),
        _("  -E                 echo statement before execution\n"),
        _("  -j                 do not use newline as interactive query delimiter\n"),
        _("  -r FILENAME        send stdout and stderr to given file\n"),
        _("\nOptions for bootstrapping mode:\n"),
        _("  --boot             selects bootstrapping mode (must be first argument)\n"),
        _("  DBNAME             database name (mandatory argument in bootstrapping mode)\n"),
        _("  -r FILENAME        send stdout and stderr to given file\n"),
        _("  -x NUM             internal use\n"),
        _(
            "\nPlease read the documentation for the complete list of run-time\n"
            "configuration settings and how to set them on the command line or in\n"
            "the configuration file.\n\n"
            "Report bugs to <{address}>.\n"
        ).format(address=BUG_REPORT_ADDRESS),
    ]
    return "".join(parts)


def single_user_dbname(argv: Sequence[str]) -> Optional[str]:
    """Return the DBNAME operand of a single-user command line, if any.

    Options come first; the first non-option argument after them names the
    database. ``--NAME=VALUE`` settings and ``--`` are understood.
    """
    args = list(argv[2:])
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--":
            i += 1
            break
        if arg.startswith("--"):
            # "--NAME VALUE" takes the next argument as its value.
            i += 1 if "=" in arg else 2
            continue
        if not arg.startswith("-") or arg == "-":
            return arg
        for pos, letter in enumerate(arg[1:], start=1):
            if letter in SINGLE_USER_VALUE_OPTIONS:
                if pos == len(arg) - 1:
                    i += 1
                break
        i += 1
    return args[i] if i < len(args) else None


def build_invocation(
    decision: DispatchDecision,
    argv: Sequence[str],
    progname: str,
    username_lookup: Optional[Callable[[], Optional[str]]] = None,
) -> Invocation:
    args = list(argv)
    role = decision.selected_role
    if role is Role.SINGLE_USER:
        username = (username_lookup or get_os_username)()
        if not username:
            raise RoleUnavailable(f"{progname}: could not look up effective user ID: user does not exist")
        return SingleUserInvocation(argv=args, username=username, dbname=single_user_dbname(args))
    if role is Role.BOOTSTRAP:
        return BootstrapInvocation(argv=args)
    if role is Role.CONFIG_DESCRIBE:
        return ConfigDescribeInvocation()
    if role is Role.FORKED_WORKER:
        return ForkedWorkerInvocation(argv=args)
    return SupervisorInvocation(argv=args)


def dispatch(
    decision: DispatchDecision,
    identity: ProcessIdentity,
    config: dict,
    registry: Optional[RoleRegistry] = None,
    out: Optional[TextIO] = None,
    username_lookup: Optional[Callable[[], Optional[str]]] = None,
) -> int:
    """Print help/version and return 0, or hand off to the selected role.

    A role entry point never returns; if one does, RoleContractViolation is
    raised.
    """
    stream = out or sys.stdout
    if decision.wants_help:
        stream.write(help_text(identity.program_name))
        stream.flush()
        return EXIT_OK
    if decision.wants_version:
        stream.write(BACKEND_VERSION_STRING)
        stream.flush()
        return EXIT_OK

    role = decision.selected_role
    invocation = build_invocation(decision, identity.raw_argv, identity.program_name, username_lookup)
    handler = resolve_handler(role, config.get("roles") or {}, registry or default_registry)

    set_ps_display(identity.program_name, role.value, config.get("ps_display") or {})
    logger.debug("handing off to %s role", role.value)
    handler(invocation)
    raise RoleContractViolation(role.value)
