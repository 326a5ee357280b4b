"""Platform normalization and platform-specific capabilities.

Each supported OS family gets one ``PlatformSupport`` implementation;
``detect_platform`` picks it at startup so the bootstrap never branches on
``os.name`` inline.
"""

from __future__ import annotations

import faulthandler
import logging
import os
import socket
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO, Tuple

from core.errors import PlatformInitError
from utils.constants import EXEC_BACKEND, FORK_TOKEN_PREFIX

logger = logging.getLogger(__name__)

# Windows SetErrorMode flags: no critical-error or GP-fault popup boxes.
SEM_FAILCRITICALERRORS = 0x0001
SEM_NOGPFAULTERRORBOX = 0x0002

# ── Fallback memory barrier ──

_barrier_lock: Optional[threading.Lock] = None


def init_barrier_lock() -> None:
    global _barrier_lock
    if _barrier_lock is None:
        _barrier_lock = threading.Lock()


def memory_barrier() -> None:
    """Full barrier emulated by taking and releasing the fallback lock."""
    if _barrier_lock is None:
        raise RuntimeError("memory barrier used before platform normalization")
    with _barrier_lock:
        pass


@dataclass(frozen=True)
class PrivilegeState:
    """Snapshot of the process identity at check time."""

    is_superuser: bool
    effective_uid: Optional[int] = None
    real_uid: Optional[int] = None


class PlatformSupport:
    """Capabilities the bootstrap needs from the host OS."""

    name = "generic"
    has_real_effective_distinction = False
    # Locale categories whose value must be read from the environment
    # explicitly because the OS default lookup ignores it.
    explicit_locale_categories: Tuple[str, ...] = ()

    def __init__(self, exec_backend: bool = EXEC_BACKEND):
        self.exec_backend = bool(exec_backend)
        self._crash_log: Optional[TextIO] = None

    def normalize_platform(self, progname: str) -> None:
        """Run the early OS adjustments. Raises PlatformInitError on failure."""
        self.install_crash_handler(progname)
        init_barrier_lock()

    def apply_config(self, platform_cfg: dict, progname: str) -> None:
        """Apply ``platform.*`` settings once the config file has been read."""
        exec_backend = platform_cfg.get("exec_backend")
        if exec_backend is not None:
            self.exec_backend = bool(exec_backend)
        dump_dir = platform_cfg.get("crash_dump_dir")
        if dump_dir:
            self.install_crash_handler(progname, dump_dir=str(dump_dir))

    def install_crash_handler(self, progname: str, dump_dir: Optional[str] = None) -> bool:
        """Best effort: dump Python tracebacks on fatal signals."""
        try:
            if dump_dir:
                path = Path(dump_dir) / f"{progname}-{os.getpid()}.crash.log"
                path.parent.mkdir(parents=True, exist_ok=True)
                crash_log = open(path, "a", encoding="utf-8")
                faulthandler.enable(file=crash_log)
                if self._crash_log is not None:
                    self._crash_log.close()
                self._crash_log = crash_log
                logger.debug("fault tracebacks go to %s", path)
            else:
                faulthandler.enable()
        except (OSError, ValueError, RuntimeError) as e:
            # stderr may be detached (no fileno) under some service managers.
            logger.debug("crash handler not installed: %s", e)
            return False
        return True

    def query_privilege_identity(self) -> PrivilegeState:
        raise NotImplementedError

    def is_forked_worker_token(self, arg: str) -> bool:
        return self.exec_backend and str(arg).startswith(FORK_TOKEN_PREFIX)


class PosixPlatform(PlatformSupport):
    name = "posix"
    has_real_effective_distinction = True

    def query_privilege_identity(self) -> PrivilegeState:
        euid = os.geteuid()
        return PrivilegeState(is_superuser=euid == 0, effective_uid=euid, real_uid=os.getuid())


class WindowsPlatform(PlatformSupport):
    name = "windows"
    explicit_locale_categories = ("LC_COLLATE", "LC_CTYPE")

    def __init__(self, exec_backend: bool = True):
        # No fork() here: child workers are always re-executed.
        super().__init__(exec_backend=True)

    def normalize_platform(self, progname: str) -> None:
        self.make_streams_unbuffered()
        self.start_network()
        self.suppress_fault_dialogs()
        super().normalize_platform(progname)

    def apply_config(self, platform_cfg: dict, progname: str) -> None:
        super().apply_config(platform_cfg, progname)
        self.exec_backend = True

    @staticmethod
    def make_streams_unbuffered() -> None:
        for stream in (sys.stdout, sys.stderr):
            reconfigure = getattr(stream, "reconfigure", None)
            if reconfigure is not None:
                reconfigure(write_through=True)

    @staticmethod
    def start_network() -> None:
        # Python runs WSAStartup on first socket use; open one to surface errors now.
        try:
            probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            raise PlatformInitError(f"WSAStartup failed: {e.errno}") from e
        probe.close()

    @staticmethod
    def suppress_fault_dialogs() -> bool:
        try:
            import ctypes

            windll = getattr(ctypes, "windll", None)
            if windll is None:
                return False
            windll.kernel32.SetErrorMode(SEM_FAILCRITICALERRORS | SEM_NOGPFAULTERRORBOX)
        except (ImportError, OSError, AttributeError) as e:
            logger.debug("SetErrorMode unavailable: %s", e)
            return False
        return True

    def query_privilege_identity(self) -> PrivilegeState:
        return PrivilegeState(is_superuser=_is_windows_admin())

    def is_forked_worker_token(self, arg: str) -> bool:
        return str(arg).startswith(FORK_TOKEN_PREFIX)


def _is_windows_admin() -> bool:
    import ctypes

    windll = getattr(ctypes, "windll", None)
    if windll is None:
        return False
    return bool(windll.shell32.IsUserAnAdmin())


def detect_platform(exec_backend: bool = EXEC_BACKEND, os_name: Optional[str] = None) -> PlatformSupport:
    if (os_name or os.name) == "nt":
        return WindowsPlatform()
    return PosixPlatform(exec_backend=exec_backend)
