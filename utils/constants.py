"""
Centralized constants for the dbserver bootstrap.

Collects fixed strings, exit codes, and build-time switches that the
bootstrap components share.
"""

# ── Version ──
VERSION = "0.1.0"
BACKEND_VERSION_STRING = f"dbserver (DB Server) {VERSION}\n"

# ── Exit codes owned by the bootstrap ──
EXIT_OK = 0
EXIT_FAILURE = 1

# ── Build-time switches ──
# Fork/exec child workers re-enter through "--fork*" tokens. Always on for
# Windows; on POSIX only when the server is built for exec-style children.
EXEC_BACKEND = False
FORK_TOKEN_PREFIX = "--fork"

# ── Environment ──
CONFIG_ENV_VAR = "DBSERVER_CONFIG"
DEFAULT_CONFIG_FILE = "dbserver.yaml"
ROLE_ENV_VAR = "DBSERVER_ROLE"
USERNAME_ENV_VAR = "DBSERVER_USERNAME"
DBNAME_ENV_VAR = "DBSERVER_DBNAME"
TRUST_STRXFRM_ENV_VAR = "DBSERVER_TRUST_STRXFRM"

# ── Locale ──
FALLBACK_LOCALE = "C"
LC_ALL_ENV_VAR = "LC_ALL"

# ── Messages ──
TEXT_DOMAIN = "dbserver"
LOCALEDIR_ENV_VAR = "DBSERVER_LOCALEDIR"
BUG_REPORT_ADDRESS = "dbserver-bugs@lists.dbserver.org"
