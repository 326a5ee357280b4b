"""Built-in configuration-description role (``--describe-config``).

Prints one tab-separated line per recognized setting so that tooling can
discover what the server's startup configuration accepts.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, TextIO

from core.classifier import Role
from core.role_registry import role_entry
from utils.constants import EXIT_OK


@dataclass(frozen=True)
class ConfigParameter:
    name: str
    context: str
    group: str
    vartype: str
    default: str
    short_desc: str


CONFIG_PARAMETERS: List[ConfigParameter] = [
    ConfigParameter("logging.level", "startup", "Reporting and Logging", "enum", "INFO",
                    "Minimum severity written to the server log."),
    ConfigParameter("logging.file", "startup", "Reporting and Logging", "string", "",
                    "Also append log records to this file."),
    ConfigParameter("logging.format", "startup", "Reporting and Logging", "string",
                    "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                    "Layout of each log record."),
    ConfigParameter("platform.crash_dump_dir", "startup", "Developer Options", "string", "",
                    "Directory receiving tracebacks of fatal faults."),
    ConfigParameter("platform.exec_backend", "startup", "Developer Options", "bool", "off",
                    "Accept --fork* arguments that start re-executed child workers."),
    ConfigParameter("ps_display.update_process_title", "startup", "Process Title", "bool", "on",
                    "Show the selected role in the process title."),
    ConfigParameter("ps_display.cluster_name", "startup", "Process Title", "string", "",
                    "Name prefixed to the process title."),
    ConfigParameter("messages.locale_dir", "startup", "Client Connection Defaults", "string", "",
                    "Directory holding translated message catalogs; DBSERVER_LOCALEDIR or <prefix>/share/locale when empty."),
]
CONFIG_PARAMETERS.extend(
    ConfigParameter(f"roles.{role.value}.{key}", "startup", "Role Entry Points", vartype, "", desc)
    for role in Role
    for key, vartype, desc in (
        ("entry_point", "string", f"module:callable run in-process for the {role.value} role."),
        ("command", "list", f"Program executed in place of this process for the {role.value} role."),
    )
)


def describe_config_parameters() -> List[ConfigParameter]:
    return list(CONFIG_PARAMETERS)


def write_parameter_table(out: TextIO) -> None:
    for param in describe_config_parameters():
        out.write(
            "\t".join(
                [param.name, param.context, param.group, param.vartype, param.default, param.short_desc]
            )
            + "\n"
        )
    out.flush()


@role_entry(Role.CONFIG_DESCRIBE, "describe configuration parameters, then exit")
def describe_config(invocation) -> None:
    write_parameter_table(sys.stdout)
    raise SystemExit(EXIT_OK)
