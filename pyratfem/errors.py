"""pyratfem.errors
Exception types raised by the rational basis evaluators.
"""


class PyRatFemError(Exception):
    """Base class for all pyratfem errors."""


class ContractViolation(PyRatFemError, AssertionError):
    """An internal precondition does not hold (bad index, count mismatch, unbound weights)."""


class UnsupportedOperation(PyRatFemError, NotImplementedError):
    """The requested entry point has no meaning for this basis family."""


class CapabilityError(PyRatFemError, RuntimeError):
    """The operation is gated by a capability flag that is switched off."""
