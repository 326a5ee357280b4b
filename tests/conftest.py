"""Global fixtures for the dbserver bootstrap test suite."""

from typing import Dict, List, Optional

import pytest

from core.platform import PlatformSupport, PrivilegeState, init_barrier_lock
from core.runtime import reset_runtime


# ── FakePlatform ──


class FakePlatform(PlatformSupport):
    """Test double with a simulated process identity."""

    name = "fake"
    has_real_effective_distinction = True

    def __init__(self, euid: int = 1000, uid: Optional[int] = None, exec_backend: bool = False):
        super().__init__(exec_backend=exec_backend)
        self.euid = euid
        self.uid = euid if uid is None else uid
        self.normalized_as: Optional[str] = None
        self.identity_queries = 0

    def normalize_platform(self, progname: str) -> None:
        self.normalized_as = progname
        init_barrier_lock()

    def query_privilege_identity(self) -> PrivilegeState:
        self.identity_queries += 1
        return PrivilegeState(is_superuser=self.euid == 0, effective_uid=self.euid, real_uid=self.uid)


class AdminPlatform(FakePlatform):
    """Platform without a real/effective uid distinction."""

    name = "fake-admin"
    has_real_effective_distinction = False

    def __init__(self, is_admin: bool = True):
        super().__init__()
        self.is_admin = is_admin

    def query_privilege_identity(self) -> PrivilegeState:
        self.identity_queries += 1
        return PrivilegeState(is_superuser=self.is_admin)


# ── FakeSetlocale ──


class FakeSetlocale:
    """Stand-in for locale.setlocale that never touches the real process locale."""

    def __init__(self, valid=("C", "en_US.UTF-8", "sv_SE.UTF-8"), os_default: str = "en_US.UTF-8"):
        self.valid = set(valid)
        self.os_default = os_default
        self.calls: List[tuple] = []
        self.current: Dict[int, str] = {}

    def __call__(self, category: int, value: str) -> str:
        import locale

        self.calls.append((category, value))
        name = self.os_default if value == "" else value
        if name not in self.valid:
            raise locale.Error("unsupported locale setting")
        self.current[category] = name
        return name


# ── Fixtures ──


@pytest.fixture(autouse=True)
def fresh_runtime(monkeypatch):
    """Every test starts without a top-level runtime context."""
    # Set then delete so the catalog directory exported by init_runtime is removed afterwards.
    monkeypatch.setenv("DBSERVER_LOCALEDIR", "unset")
    monkeypatch.delenv("DBSERVER_LOCALEDIR")
    reset_runtime()
    yield
    reset_runtime()


@pytest.fixture
def fake_platform():
    return FakePlatform()


@pytest.fixture
def root_platform():
    return FakePlatform(euid=0)


@pytest.fixture
def fake_setlocale():
    return FakeSetlocale()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No config file in reach and no locale overrides from the host."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DBSERVER_CONFIG", raising=False)
    for name in ("LC_ALL", "LC_COLLATE", "LC_CTYPE", "LC_MESSAGES", "LC_MONETARY", "LC_NUMERIC", "LC_TIME"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def make_platform():
    """Factory for FakePlatform with a chosen identity."""
    return FakePlatform


@pytest.fixture
def make_admin_platform():
    return AdminPlatform


@pytest.fixture
def make_setlocale():
    return FakeSetlocale
