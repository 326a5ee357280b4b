"""Tests for core/privilege.py — refusing privileged execution."""

import os
from unittest.mock import patch

import pytest

from core.errors import PrivilegeViolation
from core.platform import PosixPlatform
from core.privilege import ADMIN_EXECUTION_MESSAGE, ROOT_EXECUTION_MESSAGE, enforce


def test_skip_never_queries_identity(make_platform):
    platform = make_platform(euid=0)
    enforce(True, platform, "dbserver")
    assert platform.identity_queries == 0


def test_skip_ignores_uid_mismatch(make_platform):
    platform = make_platform(euid=1000, uid=0)
    enforce(True, platform, "dbserver")
    assert platform.identity_queries == 0


def test_root_is_refused(root_platform):
    with pytest.raises(PrivilegeViolation) as exc:
        enforce(False, root_platform, "dbserver")
    assert str(exc.value) == ROOT_EXECUTION_MESSAGE
    assert exc.value.exit_code == 1


def test_real_and_effective_uid_must_match(make_platform):
    platform = make_platform(euid=1000, uid=1001)
    with pytest.raises(PrivilegeViolation, match="dbserver: real and effective user IDs must match"):
        enforce(False, platform, "dbserver")


def test_setuid_from_root_shell_is_refused(make_platform):
    platform = make_platform(euid=1000, uid=0)
    with pytest.raises(PrivilegeViolation, match="must match"):
        enforce(False, platform, "dbserver")


def test_unprivileged_user_passes(fake_platform):
    enforce(False, fake_platform, "dbserver")
    assert fake_platform.identity_queries == 1


def test_administrator_is_refused(make_admin_platform):
    platform = make_admin_platform(is_admin=True)
    with pytest.raises(PrivilegeViolation) as exc:
        enforce(False, platform, "dbserver")
    assert str(exc.value) == ADMIN_EXECUTION_MESSAGE


def test_non_admin_without_uid_distinction_passes(make_admin_platform):
    platform = make_admin_platform(is_admin=False)
    enforce(False, platform, "dbserver")
    assert platform.identity_queries == 1


@pytest.mark.skipif(os.name == "nt", reason="POSIX uid APIs")
def test_posix_platform_reads_real_and_effective_uid():
    with patch("os.geteuid", return_value=0), patch("os.getuid", return_value=1000):
        state = PosixPlatform().query_privilege_identity()
    assert state.is_superuser is True
    assert state.effective_uid == 0
    assert state.real_uid == 1000


@pytest.mark.skipif(os.name == "nt", reason="POSIX uid APIs")
def test_posix_root_refused_end_to_end():
    with patch("os.geteuid", return_value=0), patch("os.getuid", return_value=0):
        with pytest.raises(PrivilegeViolation, match='"root" execution'):
            enforce(False, PosixPlatform(), "dbserver")
