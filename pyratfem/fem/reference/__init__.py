# pyratfem.fem.reference
"""
Order-agnostic reference-element factory for the underlying (non-rational)
polynomial families.
"""
import logging
from functools import lru_cache
import numpy as np

from pyratfem.core.topology import ELEMENT_DIM
from pyratfem.fem.components import decode_second_deriv, multi_index, check_direction

logger = logging.getLogger(__name__)

FAMILIES = ("bernstein", "lagrange")
_TENSOR_CELLS = {"line", "quad", "hex"}


def _frozen(values) -> np.ndarray:
    out = np.asarray(values, dtype=float).ravel()
    out.setflags(write=False)
    return out


class Ref:
    """Tabulator of one polynomial family on one reference cell.

    All methods take the point as a tuple of floats and return read-only
    arrays indexed by local basis function.
    """

    def __init__(self, element_type, poly_order, family, shape_lambda, deriv_lambdas,
                 max_deriv_order):
        self.element_type = element_type
        self.poly_order = poly_order
        self.family = family
        self.dim = ELEMENT_DIM[element_type]
        self.max_deriv_order = max_deriv_order
        self.shape_lambda = shape_lambda
        self.deriv_lambdas = deriv_lambdas
        self.n_functions = self.shape((0.0,) * self.dim).shape[0]

    def __repr__(self):
        return (f"<Ref {self.family} {self.element_type} p={self.poly_order} "
                f"n={self.n_functions}>")

    @lru_cache(maxsize=None)
    def shape(self, xi):
        return _frozen(self.shape_lambda(*xi))

    @lru_cache(maxsize=None)
    def derivative(self, xi, alpha):
        if alpha not in self.deriv_lambdas:
            raise ValueError(f"Derivative order {alpha} not computed. "
                             f"Adjust max_deriv_order >= {sum(alpha)}.")
        return _frozen(self.deriv_lambdas[alpha](*xi))

    def first_deriv(self, xi, j):
        check_direction(self.dim, j)
        return self.derivative(xi, multi_index(self.dim, j))

    def second_deriv(self, xi, k):
        j1, j2 = decode_second_deriv(self.dim, k)
        return self.derivative(xi, multi_index(self.dim, j1, j2))

    @lru_cache(maxsize=None)
    def grad(self, xi):
        G = np.column_stack([self.first_deriv(xi, j) for j in range(self.dim)])
        G.setflags(write=False)
        return G

    @lru_cache(maxsize=None)
    def hess(self, xi):
        H = np.empty((self.n_functions, self.dim, self.dim), dtype=float)
        for a in range(self.dim):
            for b in range(a, self.dim):
                d = self.derivative(xi, multi_index(self.dim, a, b))
                H[:, a, b] = d
                H[:, b, a] = d
        H.setflags(write=False)
        return H


@lru_cache(maxsize=None)
def get_reference(element_type: str, poly_order: int = 1, family: str = "lagrange",
                  max_deriv_order: int = 2):
    if element_type not in ELEMENT_DIM:
        raise KeyError(element_type)
    if family not in FAMILIES:
        raise KeyError(family)
    if poly_order < 0:
        raise ValueError("poly_order must be non-negative.")
    dim = ELEMENT_DIM[element_type]
    logger.debug(f"Generating {family} basis on '{element_type}', order {poly_order}, "
                 f"derivatives up to {max_deriv_order}.")
    if element_type in _TENSOR_CELLS:
        from pyratfem.fem.reference.tensor import tensor_qn
        shape_l, deriv_lambdas = tensor_qn(family, dim, poly_order, max_deriv_order)
    elif family == "bernstein":
        from pyratfem.fem.reference.bernstein import simplex_bn
        shape_l, deriv_lambdas = simplex_bn(dim, poly_order, max_deriv_order)
    else:
        from pyratfem.fem.reference.lagrange import simplex_pn
        shape_l, deriv_lambdas = simplex_pn(dim, poly_order, max_deriv_order)

    return Ref(element_type, poly_order, family, shape_l, deriv_lambdas, max_deriv_order)


def n_functions(element_type: str, poly_order: int) -> int:
    """Closed-form basis size; both families have the same count."""
    n = poly_order
    return {
        "line": n + 1,
        "quad": (n + 1) ** 2,
        "hex": (n + 1) ** 3,
        "tri": (n + 1) * (n + 2) // 2,
        "tet": (n + 1) * (n + 2) * (n + 3) // 6,
    }[element_type]
