"""pyratfem: rational (NURBS-style) Bernstein finite-element bases."""
from pyratfem.core import Mesh, Node, Element
from pyratfem.errors import (PyRatFemError, ContractViolation, UnsupportedOperation,
                             CapabilityError)
from pyratfem.fem.interface import BasisSpec
from pyratfem.fem.weights import get_weights
from pyratfem.fem.rational import (RationalBasis, evaluate_value, evaluate_gradient_component,
                                   evaluate_second_derivative_component)
from pyratfem.fem.tabulate import tabulate, RationalTabulation

__version__ = "0.1.0"

__all__ = [
    "Mesh", "Node", "Element", "BasisSpec", "get_weights",
    "RationalBasis", "evaluate_value", "evaluate_gradient_component",
    "evaluate_second_derivative_component", "tabulate", "RationalTabulation",
    "PyRatFemError", "ContractViolation", "UnsupportedOperation", "CapabilityError",
]
