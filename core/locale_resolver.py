"""Deterministic locale setup for every server process.

Collation, ctype and messages follow the environment. Monetary, numeric and
time are always pinned to "C": the formatting code that depends on them is
only correct in that locale, and they are switched transiently where a
localized rendering is needed.
"""

from __future__ import annotations

import locale
import logging
import os
from dataclasses import dataclass
from typing import Callable, Dict, MutableMapping, Optional, Tuple

from core.errors import FatalStartupError
from utils.constants import FALLBACK_LOCALE, LC_ALL_ENV_VAR
from utils.i18n import _

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocaleCategory:
    name: str
    constant: Optional[int]
    from_environment: bool


CATEGORIES: Tuple[LocaleCategory, ...] = (
    LocaleCategory("LC_COLLATE", locale.LC_COLLATE, True),
    LocaleCategory("LC_CTYPE", locale.LC_CTYPE, True),
    # Not every platform defines LC_MESSAGES.
    LocaleCategory("LC_MESSAGES", getattr(locale, "LC_MESSAGES", None), True),
    LocaleCategory("LC_MONETARY", locale.LC_MONETARY, False),
    LocaleCategory("LC_NUMERIC", locale.LC_NUMERIC, False),
    LocaleCategory("LC_TIME", locale.LC_TIME, False),
)


@dataclass(frozen=True)
class LocaleCategoryBinding:
    category: str
    requested: str
    resolved: str
    used_fallback: bool = False


@dataclass(frozen=True)
class LocaleSettings:
    bindings: Tuple[LocaleCategoryBinding, ...]
    trust_strxfrm: bool = True

    def get(self, category: str) -> LocaleCategoryBinding:
        for binding in self.bindings:
            if binding.category == category:
                return binding
        raise KeyError(category)

    def as_dict(self) -> Dict[str, str]:
        return {b.category: b.resolved for b in self.bindings}


# (left, right) pairs whose strxfrm keys must order like strcoll does.
_STRXFRM_SAMPLES = (
    ("a", "b"),
    ("ab", "b"),
    ("abc", "abd"),
    ("a", "A"),
    ("", "a"),
    ("z9", "z10"),
)


def _sign(value) -> int:
    return (value > 0) - (value < 0)


def check_strxfrm_bug(
    strxfrm: Callable[[str], str] = locale.strxfrm,
    strcoll: Callable[[str, str], int] = locale.strcoll,
) -> bool:
    """Return True when strxfrm sort keys agree with strcoll in this locale."""
    for left, right in _STRXFRM_SAMPLES:
        key_left, key_right = strxfrm(left), strxfrm(right)
        actual = (key_left > key_right) - (key_left < key_right)
        if actual != _sign(strcoll(left, right)):
            logger.warning(
                "strxfrm() disagrees with strcoll() for %r vs %r; sort keys will not be trusted",
                left,
                right,
            )
            return False
    return True


class LocaleResolver:
    """Apply a permanent setting per category, falling back to "C"."""

    def __init__(
        self,
        setlocale: Callable[[int, str], str] = locale.setlocale,
        environ: Optional[MutableMapping[str, str]] = None,
        explicit_categories: Tuple[str, ...] = (),
        strxfrm_check: Callable[[], bool] = check_strxfrm_bug,
    ):
        self._setlocale = setlocale
        self._strxfrm_check = strxfrm_check
        self._environ = os.environ if environ is None else environ
        self.explicit_categories = tuple(explicit_categories)

    def perm_setlocale(self, category: LocaleCategory, value: str) -> Optional[str]:
        """Set *category* and export it to the environment; None on failure."""
        if category.constant is None:
            # Nothing to hand to the C library: accept any explicit name.
            if not value:
                return None
            result = value
        else:
            try:
                result = self._setlocale(category.constant, value)
            except locale.Error:
                return None
            if result is None:
                return None
        # Children and re-executed workers inherit the setting from here.
        self._environ[category.name] = result
        return result

    def requested_value(self, category: LocaleCategory) -> str:
        if not category.from_environment:
            return FALLBACK_LOCALE
        if category.name in self.explicit_categories:
            return self._environ.get(category.name, "")
        return ""

    def resolve(self, category: LocaleCategory, requested: str) -> LocaleCategoryBinding:
        result = self.perm_setlocale(category, requested)
        if result is not None:
            return LocaleCategoryBinding(category.name, requested, result)

        logger.debug("locale %r rejected for %s, using %s", requested, category.name, FALLBACK_LOCALE)
        result = self.perm_setlocale(category, FALLBACK_LOCALE)
        if result is None:
            raise FatalStartupError(
                _('could not adopt "{requested}" locale nor {fallback} locale for {category}').format(
                    requested=requested, fallback=FALLBACK_LOCALE, category=category.name
                )
            )
        return LocaleCategoryBinding(category.name, requested, result, used_fallback=True)

    def resolve_all(self) -> LocaleSettings:
        bindings = tuple(self.resolve(c, self.requested_value(c)) for c in CATEGORIES)

        # Absorbed; the per-category variables exported above must win from now on.
        self._environ.pop(LC_ALL_ENV_VAR, None)

        return LocaleSettings(bindings=bindings, trust_strxfrm=self._strxfrm_check())


def resolve_locales(
    platform,
    environ: Optional[MutableMapping[str, str]] = None,
    setlocale: Callable[[int, str], str] = locale.setlocale,
    strxfrm_check: Callable[[], bool] = check_strxfrm_bug,
) -> LocaleSettings:
    resolver = LocaleResolver(
        setlocale=setlocale,
        environ=environ,
        explicit_categories=platform.explicit_locale_categories,
        strxfrm_check=strxfrm_check,
    )
    settings = resolver.resolve_all()
    logger.debug("locale settings: %s", settings.as_dict())
    return settings
