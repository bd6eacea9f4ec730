import pytest

from pyratfem import config, ContractViolation
from pyratfem.utils import contracts


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PYRATFEM_CHECK_CONTRACTS", "no")
    monkeypatch.setenv("PYRATFEM_DISABLE_SECOND_DERIVATIVES", "yes")
    monkeypatch.delenv("PYRATFEM_DISABLE_HIGHER_ORDER", raising=False)
    s = config.Settings.from_env()
    assert s.check_contracts is False
    assert s.second_derivatives is False
    assert s.higher_order_shapes is True


def test_empty_environment_keeps_defaults(monkeypatch):
    monkeypatch.setenv("PYRATFEM_CHECK_CONTRACTS", "")
    assert config.Settings.from_env().check_contracts is True


def test_override_restores_previous_settings():
    before = config.settings()
    with config.override(check_contracts=False) as s:
        assert s.check_contracts is False
        assert config.settings() is s
    assert config.settings() == before


def test_override_rejects_unknown_flags():
    with pytest.raises(KeyError):
        with config.override(fast_math=True):
            pass


def test_contract_checks_follow_switch():
    with pytest.raises(ContractViolation):
        contracts.check(False, "boom")
    with pytest.raises(ContractViolation, match="expected 3, got 4"):
        contracts.check_equal(4, 3, "count")
    with config.override(check_contracts=False):
        contracts.check(False, "ignored")
        contracts.check_equal(4, 3, "ignored")
        with pytest.raises(ContractViolation):
            contracts.fail("always")
