"""pyratfem.fem.reference.bernstein
Bernstein polynomials on the reference cells.

1D: degree-n Bernstein polynomials on [-1, 1] (t = (x+1)/2), used through
the tensor-product builder for line/quad/hex.
Simplices: barycentric Bernstein polynomials on the unit triangle/tetrahedron.
"""
from functools import lru_cache
from math import comb, factorial
import sympy as sp


@lru_cache(maxsize=None)
def _bernstein_basis_1d(n: int, max_deriv_order: int):
    """Return 1D Bernstein basis + derivatives as NUMPY-callable lambdas."""
    if n < 0:
        raise ValueError("Polynomial order n must be non-negative.")
    x = sp.symbols('x')
    t = (x + 1) / 2
    B = []
    dB = {k: [] for k in range(max_deriv_order + 1)}
    for a in range(n + 1):
        Ba = sp.expand(comb(n, a) * t**a * (1 - t)**(n - a))
        B.append(sp.lambdify(x, Ba, 'numpy'))
        for k in range(max_deriv_order + 1):
            dB[k].append(sp.lambdify(x, sp.diff(Ba, x, k), 'numpy'))
    return B, dB


def simplex_lattice(dim: int, n: int):
    """Exponent tuples (a, b[, c]) in local ordering: first index fastest."""
    if dim == 2:
        return [(a, b) for b in range(n + 1) for a in range(n + 1 - b)]
    if dim == 3:
        return [(a, b, c) for c in range(n + 1) for b in range(n + 1 - c)
                for a in range(n + 1 - b - c)]
    raise ValueError(f"No simplex of dimension {dim}.")


@lru_cache(maxsize=None)
def simplex_bn(dim: int, n: int, max_deriv_order: int = 2):
    """
    Bernstein basis of degree n on the unit triangle (dim=2) or tetrahedron (dim=3).

    Returns: (shape_fn, deriv_fns) where
      shape_fn(*xi) -> (N, 1)
      deriv_fns[alpha](*xi) -> (N, 1), sum(alpha) <= max_deriv_order
    """
    if n < 0:
        raise ValueError("Polynomial order n must be non-negative.")
    syms = sp.symbols("xi eta zeta")[:dim]
    lam = 1 - sum(syms)
    basis = []
    for exps in simplex_lattice(dim, n):
        rest = n - sum(exps)
        coeff = factorial(n) // factorial(rest)
        term = lam**rest
        for s, e in zip(syms, exps):
            coeff //= factorial(e)
            term *= s**e
        basis.append(sp.expand(coeff * term))

    shape_lambda = sp.lambdify(syms, sp.Matrix(basis), "numpy")
    deriv_lambdas = {}
    for alpha in _multi_indices(dim, max_deriv_order):
        derivs = [_diff(phi, syms, alpha) for phi in basis]
        deriv_lambdas[alpha] = sp.lambdify(syms, sp.Matrix(derivs), "numpy")
    return shape_lambda, deriv_lambdas


def _multi_indices(dim, max_order):
    if dim == 2:
        return [(i, j) for i in range(max_order + 1) for j in range(max_order + 1)
                if i + j <= max_order]
    return [(i, j, k) for i in range(max_order + 1) for j in range(max_order + 1)
            for k in range(max_order + 1) if i + j + k <= max_order]


def _diff(expr, syms, alpha):
    for s, a in zip(syms, alpha):
        if a:
            expr = sp.diff(expr, s, a)
    return sp.expand(expr)
