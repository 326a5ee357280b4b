"""Process-wide runtime foundation: configuration and structured error reporting.

Before ``init_runtime`` only raw writes to stderr are allowed. Afterwards,
every component reports through ``logging``.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from core.identity import ProcessIdentity
from core.locale_resolver import LocaleSettings
from utils.helpers import load_runtime_config
from utils.i18n import init_message_catalog

logger = logging.getLogger(__name__)


@dataclass
class RuntimeContext:
    """Top-level context created once per process.

    Role entry points reach it through ``current_runtime()``; ``locale`` is
    filled in once the locale resolver has run.
    """

    identity: ProcessIdentity
    config: Dict[str, Any] = field(default_factory=dict)
    locale_dir: Optional[str] = None
    locale: Optional[LocaleSettings] = None

    def report_fatal(self, message: str) -> None:
        logger.critical("FATAL: %s", message)

    def report_error(self, message: str) -> None:
        logger.error("ERROR: %s", message)


_TOP_CONTEXT: Optional[RuntimeContext] = None


def setup_logging(config: dict) -> None:
    """Setup logging based on configuration"""
    log_config = config.get('logging', {})
    level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)
    fmt = log_config.get('format') or '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'

    # stdout is reserved for --help/--version and role output.
    handlers = [logging.StreamHandler(sys.stderr)]
    log_file = log_config.get('file')
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)


def init_runtime(identity: ProcessIdentity, config: Optional[dict] = None) -> RuntimeContext:
    """Establish the top-level context exactly once.

    Raises ConfigError when the configuration file cannot be read; at that
    point structured reporting is not available yet.
    """
    global _TOP_CONTEXT
    if _TOP_CONTEXT is not None:
        return _TOP_CONTEXT

    if config is None:
        config = load_runtime_config()
    setup_logging(config)
    locale_dir = init_message_catalog((config.get("messages") or {}).get("locale_dir"))
    _TOP_CONTEXT = RuntimeContext(identity=identity, config=config, locale_dir=locale_dir)
    logger.debug("runtime initialized for %s", identity.program_name)
    return _TOP_CONTEXT


def current_runtime() -> Optional[RuntimeContext]:
    return _TOP_CONTEXT


def reset_runtime() -> None:
    """Drop the top-level context. Used by tests."""
    global _TOP_CONTEXT
    _TOP_CONTEXT = None
