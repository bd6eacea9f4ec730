"""pyratfem.fem.tabulate
Batched evaluation of every rational basis function of an element at many points.

The underlying basis is tabulated once per point through the cached
reference tabulators; the weighted sums and quotient-rule algebra then run
in a single numba kernel.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import numba
import numpy as np

from pyratfem import config
from pyratfem.fem import interface
from pyratfem.fem.components import SECOND_DERIV_COMPONENTS
from pyratfem.fem.interface import BasisSpec
from pyratfem.fem.rational import quotient_first, quotient_second
from pyratfem.fem.weights import get_weights
from pyratfem.utils import contracts

logger = logging.getLogger(__name__)

_quotient_first = numba.njit(quotient_first, error_model="numpy")
_quotient_second = numba.njit(quotient_second, error_model="numpy")


@numba.njit(cache=True, error_model="numpy")
def _tabulate_rational(w, B, dB, d2B, pairs, R, dR, d2R):
    """
    Fills R (nQ, nS), dR (nQ, nS, dim) and d2R (nQ, nS, nC) from the
    underlying tables B, dB, d2B of the same shapes and nodal weights w (nS,).
    pairs (nC, 2) holds the direction pair of each second-derivative component.
    """
    nQ, nS = B.shape
    dim = dB.shape[2]
    nC = d2B.shape[2]
    S_grad = np.empty(dim)
    S_hess = np.empty(nC)
    for q in range(nQ):
        S = 0.0
        for k in range(nS):
            S += w[k] * B[q, k]
        for a in range(dim):
            acc = 0.0
            for k in range(nS):
                acc += w[k] * dB[q, k, a]
            S_grad[a] = acc
        for c in range(nC):
            acc = 0.0
            for k in range(nS):
                acc += w[k] * d2B[q, k, c]
            S_hess[c] = acc

        for k in range(nS):
            N = w[k] * B[q, k]
            R[q, k] = N / S
            for a in range(dim):
                dR[q, k, a] = _quotient_first(S, S_grad[a], N, w[k] * dB[q, k, a])
            for c in range(nC):
                j1 = pairs[c, 0]
                j2 = pairs[c, 1]
                d2R[q, k, c] = _quotient_second(S, S_grad[j1], S_grad[j2], S_hess[c], N,
                                                w[k] * dB[q, k, j1], w[k] * dB[q, k, j2],
                                                w[k] * d2B[q, k, c])


@dataclass
class RationalTabulation:
    points: np.ndarray          # (nQ, dim)
    phi: np.ndarray             # (nQ, nS)
    dphi: Optional[np.ndarray]  # (nQ, nS, dim)
    d2phi: Optional[np.ndarray] # (nQ, nS, nC), linear component numbering

    @property
    def n_functions(self) -> int:
        return self.phi.shape[1]

    def hessian(self) -> np.ndarray:
        """Expand d2phi to the full symmetric (nQ, nS, dim, dim) array."""
        if self.d2phi is None:
            raise ValueError("Second derivatives were not tabulated.")
        dim = self.points.shape[1]
        H = np.empty(self.phi.shape + (dim, dim))
        for c, (a, b) in enumerate(SECOND_DERIV_COMPONENTS[dim]):
            H[..., a, b] = self.d2phi[..., c]
            H[..., b, a] = self.d2phi[..., c]
        return H


def tabulate(mesh, eid: int, spec: BasisSpec, points, add_p_level: bool = True,
             deriv_order: int = 2) -> RationalTabulation:
    """Evaluate all rational basis functions of element ``eid`` at ``points``.

    ``points`` is (nQ, dim) or a single point; ``deriv_order`` in {0, 1, 2}
    selects how many derivative levels are filled.
    """
    if not spec.is_rational:
        raise ValueError(f"'{spec.family}' is not a rational family.")
    if deriv_order not in (0, 1, 2):
        raise ValueError("deriv_order must be 0, 1 or 2.")
    config.require_capability("higher_order_shapes", "Rational basis evaluation")
    if deriv_order == 2:
        config.require_capability("second_derivatives", "Second derivative evaluation")

    elem = mesh.element(eid)
    dim = spec.dim
    contracts.check_equal(elem.dim, dim, f"parametric dimension of element {eid}")
    extra_order = elem.p_level if add_p_level else 0
    ref = interface.reference_for(spec.underlying, extra_order, elem)
    contracts.check_equal(ref.n_functions, elem.n_nodes,
                          f"shape functions vs nodes on element {eid}")
    w = np.ascontiguousarray(get_weights(mesh, eid), dtype=float)

    pts = np.atleast_2d(np.asarray(points, dtype=float))
    if pts.shape[1] != dim:
        raise ValueError(f"Points must have {dim} coordinates, got shape {pts.shape}.")
    xis = [tuple(float(c) for c in p) for p in pts]
    nQ, nS = len(xis), ref.n_functions

    pairs_list = SECOND_DERIV_COMPONENTS[dim] if deriv_order == 2 else ()
    n_dir = dim if deriv_order >= 1 else 0
    B = np.array([ref.shape(xi) for xi in xis]).reshape(nQ, nS)
    dB = np.zeros((nQ, nS, n_dir))
    d2B = np.zeros((nQ, nS, len(pairs_list)))
    for q, xi in enumerate(xis):
        if n_dir:
            dB[q] = ref.grad(xi)
        for c in range(len(pairs_list)):
            d2B[q, :, c] = ref.second_deriv(xi, c)
    pairs = np.array(pairs_list, dtype=np.int64).reshape(-1, 2)

    R = np.empty((nQ, nS))
    dR = np.empty((nQ, nS, n_dir))
    d2R = np.empty((nQ, nS, len(pairs_list)))
    logger.debug(f"Tabulating {spec.family} p={spec.order} on element {eid}: "
                 f"{nQ} points, {nS} functions, derivatives up to {deriv_order}.")
    _tabulate_rational(w, B, dB, d2B, pairs, R, dR, d2R)

    return RationalTabulation(points=pts,
                              phi=R,
                              dphi=dR if deriv_order >= 1 else None,
                              d2phi=d2R if deriv_order == 2 else None)
