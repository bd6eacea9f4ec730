"""pyratfem.fem.reference.lagrange
Equispaced Lagrange polynomials, the non-weighted comparison family.
"""
from functools import lru_cache
import sympy as sp
import numpy as np

from pyratfem.fem.reference.bernstein import simplex_lattice, _multi_indices, _diff


@lru_cache(maxsize=None)
def _lagrange_basis_1d(n: int, max_deriv_order: int):
    """Return 1D Lagrange basis + derivatives as NUMPY-callable lambdas."""
    if n < 0:
        raise ValueError("Polynomial order n must be non-negative.")
    x = sp.symbols('x')
    if n == 0:
        one = sp.lambdify(x, sp.S(1), 'numpy')
        zero = sp.lambdify(x, sp.S(0), 'numpy')
        return [one], {k: [one if k == 0 else zero] for k in range(max_deriv_order + 1)}
    nodes = np.linspace(-1.0, 1.0, n + 1)
    L = []
    dL = {k: [] for k in range(max_deriv_order + 1)}
    for i, xi in enumerate(nodes):
        num = 1
        den = 1.0
        for j, xj in enumerate(nodes):
            if i == j:
                continue
            num *= (x - xj)
            den *= (xi - xj)
        Li = sp.simplify(num / den)
        # lambdify shape & all required derivatives (SymPy → numpy functions)
        L.append(sp.lambdify(x, Li, 'numpy'))
        for k in range(max_deriv_order + 1):
            dL[k].append(sp.lambdify(x, sp.diff(Li, x, k), 'numpy'))
    return L, dL


@lru_cache(maxsize=None)
def simplex_pn(dim: int, n: int, max_deriv_order: int = 2):
    """
    Lagrange P_n basis on the unit triangle (dim=2) or tetrahedron (dim=3).

    Nodes sit on the lattice ``exps / n`` in the same order as the Bernstein
    simplex basis, so both families number their functions alike.
    """
    if n < 0:
        raise ValueError("Polynomial order n must be non-negative.")
    syms = sp.symbols("xi eta zeta")[:dim]
    lattice = simplex_lattice(dim, n)
    if n == 0:
        basis = [sp.S(1)]
    else:
        nodes = [tuple(sp.Rational(e, n) for e in exps) for exps in lattice]
        # Monomials of total degree <= n, same count as lattice points.
        monomials = []
        for exps in lattice:
            m = sp.S(1)
            for s, e in zip(syms, exps):
                m *= s**e
            monomials.append(m)
        V = sp.zeros(len(nodes), len(nodes))
        for r, node in enumerate(nodes):
            for c, mono in enumerate(monomials):
                V[r, c] = mono.subs(dict(zip(syms, node)))
        try:
            coeffs = (V.T).inv()
        except ValueError:
            raise RuntimeError(f"Vandermonde matrix is singular for simplex P{n} in {dim}D.")
        mono_col = sp.Matrix(monomials)
        basis = [sp.expand((coeffs.row(k) * mono_col)[0, 0]) for k in range(len(nodes))]

    shape_lambda = sp.lambdify(syms, sp.Matrix(basis), "numpy")
    deriv_lambdas = {alpha: sp.lambdify(syms, sp.Matrix([_diff(phi, syms, alpha) for phi in basis]), "numpy")
                     for alpha in _multi_indices(dim, max_deriv_order)}
    return shape_lambda, deriv_lambdas
