"""
Message catalogs for startup diagnostics and the usage text.

Bound right after the runtime foundation comes up so that messages emitted
during the rest of startup (locale failures, the privilege guard, --help)
can be localized. LC_MESSAGES itself is resolved later by the locale
resolver; gettext consults the environment on every lookup.
"""
import gettext
import logging
import os
import sys
from typing import MutableMapping, Optional

from utils.constants import LOCALEDIR_ENV_VAR, TEXT_DOMAIN

logger = logging.getLogger(__name__)


def default_locale_dir() -> str:
    """``<prefix>/share/locale`` of the running interpreter's installation."""
    return os.path.join(sys.prefix, "share", "locale")


def init_message_catalog(
    locale_dir: Optional[str] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> str:
    """Bind the text domain and return the catalog directory in use.

    Precedence: explicit *locale_dir*, then ``DBSERVER_LOCALEDIR``, then the
    installation default. The choice is exported so re-executed children
    look in the same place.
    """
    env = os.environ if environ is None else environ
    localedir = locale_dir or env.get(LOCALEDIR_ENV_VAR) or default_locale_dir()
    gettext.bindtextdomain(TEXT_DOMAIN, localedir)
    gettext.textdomain(TEXT_DOMAIN)
    env.setdefault(LOCALEDIR_ENV_VAR, localedir)
    logger.debug("message catalogs for %s in %s", TEXT_DOMAIN, localedir)
    return localedir


def _(message: str) -> str:
    return gettext.dgettext(TEXT_DOMAIN, message)
