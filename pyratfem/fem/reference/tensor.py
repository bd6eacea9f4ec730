from functools import lru_cache, reduce
from itertools import product
import numpy as np

from pyratfem.fem.reference.bernstein import _bernstein_basis_1d
from pyratfem.fem.reference.lagrange import _lagrange_basis_1d

_BASIS_1D = {
    "bernstein": _bernstein_basis_1d,
    "lagrange": _lagrange_basis_1d,
}


@lru_cache(maxsize=None)
def tensor_qn(family: str, dim: int, n: int, max_deriv_order: int = 2):
    """
    Tensor-product basis of degree n per direction on [-1,1]^dim.
    Returns: (shape_fn, deriv_fns) where
      shape_fn(*xi) -> ( (n+1)^dim, )
      deriv_fns[alpha](*xi) -> ( (n+1)^dim, ), sum(alpha) <= max_deriv_order
    Stacking order is last coordinate outer, first coordinate inner:
    index = c*(n+1)^2 + b*(n+1) + a
    """
    dL = _BASIS_1D[family](n, max_deriv_order)[1]

    def _eval_1d(vals, z):
        # vals is a list of 1D lambdas; output shape (n+1,)
        return np.array([f(z) for f in vals], dtype=float)

    def _combine(factors):
        # factors are per-direction (xi, eta, zeta); the last one varies slowest
        return reduce(np.multiply.outer, reversed(factors)).reshape(-1)

    def shape(*xi):
        return _combine([_eval_1d(dL[0], z) for z in xi])

    derivs = {}
    for alpha in product(range(max_deriv_order + 1), repeat=dim):
        if sum(alpha) > max_deriv_order:
            continue
        def make(alpha=alpha):
            def d(*xi):
                return _combine([_eval_1d(dL[a], z) for a, z in zip(alpha, xi)])
            return d
        derivs[alpha] = make()
    return shape, derivs
