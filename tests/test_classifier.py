"""Tests for core/classifier.py — role selection from argv."""

import pytest

from core.classifier import DispatchDecision, Role, classify


def _forks(arg: str) -> bool:
    return arg.startswith("--fork")


def test_no_arguments_selects_supervisor_with_privilege_check():
    decision = classify(["prog"])
    assert decision == DispatchDecision(selected_role=Role.SUPERVISOR)
    assert decision.skip_privilege_check is False
    assert not decision.wants_help and not decision.wants_version


@pytest.mark.parametrize("token", ["--help", "-?"])
def test_help_tokens_ignore_later_arguments(token):
    decision = classify(["prog", token, "--version", "--boot"])
    assert decision.wants_help is True
    assert decision.wants_version is False
    assert decision.skip_privilege_check is True


@pytest.mark.parametrize("token", ["--version", "-V"])
def test_version_tokens(token):
    decision = classify(["prog", token, "--help"])
    assert decision.wants_version is True
    assert decision.wants_help is False
    assert decision.skip_privilege_check is True


def test_describe_config_skips_privilege_check():
    decision = classify(["prog", "--describe-config"])
    assert decision.selected_role is Role.CONFIG_DESCRIBE
    assert decision.skip_privilege_check is True


def test_show_parameter_in_first_position_skips_privilege_check():
    decision = classify(["prog", "-C", "shared_buffers"])
    assert decision.selected_role is Role.SUPERVISOR
    assert decision.skip_privilege_check is True


def test_show_parameter_without_name_does_not_skip():
    assert classify(["prog", "-C"]).skip_privilege_check is False


def test_show_parameter_in_later_position_does_not_skip():
    decision = classify(["prog", "-D", "/data", "-C", "shared_buffers"])
    assert decision.skip_privilege_check is False
    assert decision.selected_role is Role.SUPERVISOR


def test_fork_prefix_selects_forked_worker_when_supported():
    assert classify(["prog", "--forkbackend", "123"], _forks).selected_role is Role.FORKED_WORKER
    assert classify(["prog", "--fork"], _forks).selected_role is Role.FORKED_WORKER


def test_fork_prefix_ignored_without_exec_backend():
    assert classify(["prog", "--forkbackend"]).selected_role is Role.SUPERVISOR
    assert classify(["prog", "--forkbackend"], lambda _arg: False).selected_role is Role.SUPERVISOR


def test_boot_and_single_tokens():
    assert classify(["prog", "--boot", "-x", "1", "template1"]).selected_role is Role.BOOTSTRAP
    assert classify(["prog", "--single", "mydb"]).selected_role is Role.SINGLE_USER


def test_role_tokens_keep_privilege_check():
    for token in ("--boot", "--single"):
        assert classify(["prog", token]).skip_privilege_check is False
    assert classify(["prog", "--forkchild"], _forks).skip_privilege_check is False


@pytest.mark.parametrize("token", ["--HELP", "--vers", "--sing", "--single-user", "-c", "--Boot", "-v"])
def test_no_abbreviation_or_case_folding(token):
    decision = classify(["prog", token])
    assert decision == DispatchDecision()


def test_later_positions_never_select_a_role():
    decision = classify(["prog", "-D", "/data", "--single"])
    assert decision.selected_role is Role.SUPERVISOR


def test_classify_does_not_modify_argv():
    argv = ["prog", "--single", "db"]
    classify(argv, _forks)
    assert argv == ["prog", "--single", "db"]
