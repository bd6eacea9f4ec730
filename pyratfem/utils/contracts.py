"""pyratfem.utils.contracts
Precondition checks that can be switched off for performance runs.

``check`` and ``check_equal`` honour ``settings().check_contracts``;
``fail`` always raises.
"""
from pyratfem import config
from pyratfem.errors import ContractViolation


def check(condition, message: str) -> None:
    if config.settings().check_contracts and not condition:
        raise ContractViolation(message)


def check_equal(actual, expected, what: str) -> None:
    if config.settings().check_contracts and actual != expected:
        raise ContractViolation(f"{what}: expected {expected}, got {actual}")


def fail(message: str):
    raise ContractViolation(message)
