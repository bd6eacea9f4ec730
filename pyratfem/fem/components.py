"""pyratfem.fem.components
Linear second-derivative component numbering, per parametric dimension.

Only the upper triangle of the Hessian is numbered; ``(j2, j1)`` is the
same component as ``(j1, j2)``.
"""
from pyratfem.errors import ContractViolation

SECOND_DERIV_COMPONENTS = {
    1: ((0, 0),),
    2: ((0, 0), (0, 1), (1, 1)),
    3: ((0, 0), (0, 1), (1, 1), (0, 2), (1, 2), (2, 2)),
}


def n_second_deriv_components(dim: int) -> int:
    return len(SECOND_DERIV_COMPONENTS[dim])


def decode_second_deriv(dim: int, k: int):
    """Return the direction pair ``(j1, j2)`` for linear component *k*."""
    table = SECOND_DERIV_COMPONENTS.get(dim)
    if table is None:
        raise ContractViolation(f"Unsupported parametric dimension {dim}.")
    if not 0 <= k < len(table):
        raise ContractViolation(
            f"Invalid second derivative component {k} in {dim}D (valid: 0..{len(table) - 1}).")
    return table[k]


def check_direction(dim: int, j: int) -> None:
    if not 0 <= j < dim:
        raise ContractViolation(f"Invalid derivative direction {j} in {dim}D (valid: 0..{dim - 1}).")


def multi_index(dim: int, *directions) -> tuple:
    """Multi-index ``alpha`` for a derivative taken along ``directions``."""
    alpha = [0] * dim
    for j in directions:
        alpha[j] += 1
    return tuple(alpha)
