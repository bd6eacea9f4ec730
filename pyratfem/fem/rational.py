"""pyratfem.fem.rational
Rational Bernstein shape functions.

A rational basis function is the ratio of one weighted underlying basis
function to the weighted sum of all of them::

    R_i = w_i B_i / S,      S = sum_k w_k B_k

with the nodal weights ``w`` read from the element's weight field.  First and
second parametric derivatives follow from the quotient rule; the formulas are
written once and shared by every dimension through the linear component
table in :mod:`pyratfem.fem.components`.

A zero weighted sum is not trapped: the result is NaN or Inf.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from pyratfem import config
from pyratfem.errors import UnsupportedOperation
from pyratfem.fem import interface
from pyratfem.fem.components import check_direction, decode_second_deriv
from pyratfem.fem.interface import BasisSpec, RATIONAL_FAMILIES
from pyratfem.fem.weights import get_weights
from pyratfem.utils import contracts

_NEEDS_ELEMENT = "Rational bases require the real element to query nodal weighting."


# ----------------------------------------------------------------------
# quotient-rule kernels (scalar, also compiled by pyratfem.fem.tabulate)
# ----------------------------------------------------------------------
def quotient_value(S, N):
    return N / S


def quotient_first(S, dS, N, dN):
    """d(N/S) = (S dN - N dS) / S^2."""
    return (S * dN - N * dS) / S / S


def quotient_second(S, Sa, Sb, H, N, Na, Nb, Nab):
    """d2(N/S)/(dxa dxb) for any pair of directions (a == b allowed)."""
    return (S * Nab - Na * Sb - N * H - Nb * Sa + 2.0 * Sa * N * Sb / S) / S / S


def quotient_second_1d(S, dS, H, N, dN, Nxx):
    """Second derivative of N/S in one variable, written as the derivative of the gradient."""
    return (S * S * (S * Nxx - N * H) - (S * dN - N * dS) * 2.0 * S * dS) / (S * S * S * S)


class RationalBasis:
    """Rational basis of a given parametric dimension over an underlying family.

    ``shape``, ``shape_deriv`` and ``shape_second_deriv`` evaluate one basis
    function ``i`` of order ``order`` on element ``eid`` of ``mesh``.  When
    ``add_p_level`` is true the element's p-level is added to the order.
    """

    def __init__(self, dim: int, underlying_family: str = "bernstein"):
        if dim not in (1, 2, 3):
            raise ValueError(f"Unsupported dimension {dim}.")
        self.dim = dim
        self.underlying_family = underlying_family

    def __repr__(self):
        return f"<RationalBasis {self.dim}D over '{self.underlying_family}'>"

    # ------------------------------------------------------------------
    # shared set-up
    # ------------------------------------------------------------------
    def _bind(self, mesh, eid, order, add_p_level, i=None):
        config.require_capability("higher_order_shapes", "Rational basis evaluation")
        elem = mesh.element(eid)
        contracts.check_equal(elem.dim, self.dim, f"parametric dimension of element {eid}")
        extra_order = elem.p_level if add_p_level else 0
        spec = BasisSpec(self.underlying_family, order, self.dim)
        ref = interface.reference_for(spec, extra_order, elem)
        contracts.check_equal(ref.n_functions, elem.n_nodes,
                              f"shape functions vs nodes on element {eid}")
        if i is not None:
            contracts.check(0 <= i < ref.n_functions,
                            f"Basis index {i} out of range for {ref.n_functions} functions.")
        weights = get_weights(mesh, eid)
        return ref, weights

    # ------------------------------------------------------------------
    # evaluation
    # ------------------------------------------------------------------
    def shape(self, mesh, eid: int, order: int, i: int, point: Sequence[float],
              add_p_level: bool = True) -> float:
        ref, w = self._bind(mesh, eid, order, add_p_level, i)
        weighted = w * ref.shape(interface.as_point(point, self.dim))
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(quotient_value(weighted.sum(), weighted[i]))

    def shape_deriv(self, mesh, eid: int, order: int, i: int, j: int,
                    point: Sequence[float], add_p_level: bool = True) -> float:
        check_direction(self.dim, j)
        ref, w = self._bind(mesh, eid, order, add_p_level, i)
        xi = interface.as_point(point, self.dim)
        weighted = w * ref.shape(xi)
        weighted_grad = w * ref.first_deriv(xi, j)
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(quotient_first(weighted.sum(), weighted_grad.sum(),
                                        weighted[i], weighted_grad[i]))

    def shape_second_deriv(self, mesh, eid: int, order: int, i: int, k: int,
                           point: Sequence[float], add_p_level: bool = True) -> float:
        config.require_capability("second_derivatives", "Second derivative evaluation")
        j1, j2 = decode_second_deriv(self.dim, k)
        ref, w = self._bind(mesh, eid, order, add_p_level, i)
        xi = interface.as_point(point, self.dim)
        weighted = w * ref.shape(xi)
        weighted_grada = w * ref.first_deriv(xi, j1)
        weighted_gradb = weighted_grada if j1 == j2 else w * ref.first_deriv(xi, j2)
        weighted_hess = w * ref.second_deriv(xi, k)
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(quotient_second(
                weighted.sum(), weighted_grada.sum(), weighted_gradb.sum(), weighted_hess.sum(),
                weighted[i], weighted_grada[i], weighted_gradb[i], weighted_hess[i]))

    # ------------------------------------------------------------------
    # element-type-only entry points
    # ------------------------------------------------------------------
    def shape_by_type(self, element_type: str, order: int, i: int, point):
        raise UnsupportedOperation(_NEEDS_ELEMENT)

    def shape_deriv_by_type(self, element_type: str, order: int, i: int, j: int, point):
        raise UnsupportedOperation(_NEEDS_ELEMENT)

    def shape_second_deriv_by_type(self, element_type: str, order: int, i: int, k: int, point):
        raise UnsupportedOperation(_NEEDS_ELEMENT)


_BASES = {dim: RationalBasis(dim) for dim in (1, 2, 3)}


def rational_basis(spec: BasisSpec) -> RationalBasis:
    if not spec.is_rational:
        raise ValueError(f"'{spec.family}' is not a rational family.")
    if RATIONAL_FAMILIES[spec.family] == "bernstein":
        return _BASES[spec.dim]
    return RationalBasis(spec.dim, RATIONAL_FAMILIES[spec.family])


# ----------------------------------------------------------------------
# BasisSpec-driven entry points
# ----------------------------------------------------------------------
def evaluate_value(mesh, eid, spec: BasisSpec, i, point, use_p_level=True) -> float:
    return rational_basis(spec).shape(mesh, eid, spec.order, i, point, use_p_level)


def evaluate_gradient_component(mesh, eid, spec: BasisSpec, i, j, point,
                                use_p_level=True) -> float:
    return rational_basis(spec).shape_deriv(mesh, eid, spec.order, i, j, point, use_p_level)


def evaluate_second_derivative_component(mesh, eid, spec: BasisSpec, i, k, point,
                                         use_p_level=True) -> float:
    return rational_basis(spec).shape_second_deriv(mesh, eid, spec.order, i, k, point,
                                                   use_p_level)


def evaluate_value_by_type(element_type: str, spec: BasisSpec, i, point):
    return rational_basis(spec).shape_by_type(element_type, spec.order, i, point)
