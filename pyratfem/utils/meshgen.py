"""pyratfem.utils.meshgen
Tiny mesh builders for tests and examples.
"""
import numpy as np
from typing import Optional, Sequence, Tuple

from pyratfem.core.mesh import Mesh
from pyratfem.core.topology import Node, ELEMENT_DIM
from pyratfem.fem.reference.bernstein import simplex_lattice

__all__ = ["reference_lattice", "single_element_mesh", "structured_line"]


def reference_lattice(element_type: str, poly_order: int) -> np.ndarray:
    """Node positions of one element, in local basis order."""
    dim = ELEMENT_DIM[element_type]
    n = poly_order
    if element_type in ("line", "quad", "hex"):
        pts1d = np.linspace(-1.0, 1.0, n + 1) if n > 0 else np.zeros(1)
        grids = np.meshgrid(*([pts1d] * dim), indexing="ij")
        # last coordinate outer, first coordinate inner
        return np.column_stack([g.transpose().ravel() for g in grids])
    if n == 0:
        return np.full((1, dim), 1.0 / (dim + 1))
    return np.array(simplex_lattice(dim, n), dtype=float) / n


def _nodes_from_coords(coords: np.ndarray):
    padded = np.zeros((coords.shape[0], 3))
    padded[:, :coords.shape[1]] = coords
    return [Node(id=i, x=c[0], y=c[1], z=c[2]) for i, c in enumerate(padded)]


def single_element_mesh(element_type: str, poly_order: int,
                        weights: Optional[Sequence[float]] = None,
                        p_level: int = 0) -> Mesh:
    """
    One element covering its reference cell.

    When ``weights`` is given it is stored as weight field 0 and bound to
    the element.
    """
    coords = reference_lattice(element_type, poly_order)
    mesh = Mesh(_nodes_from_coords(coords), np.arange(coords.shape[0])[None, :],
                element_type=element_type, poly_order=poly_order)
    if p_level:
        mesh.set_p_level(p_level)
    if weights is not None:
        mesh.add_weight_field(weights)
    return mesh


def structured_line(length: float, *, nx: int, poly_order: int,
                    offset: float = 0.0) -> Tuple[list, np.ndarray]:
    """
    Nodes and connectivity of ``nx`` line elements of order ``poly_order``
    on [offset, offset + length]. Neighbouring elements share end nodes.
    """
    if poly_order < 1:
        raise ValueError("Polynomial order must be a positive integer.")
    n_nodes = poly_order * nx + 1
    xs = np.linspace(offset, offset + length, n_nodes)
    nodes = [Node(id=i, x=float(x)) for i, x in enumerate(xs)]
    elements = np.array([[e * poly_order + a for a in range(poly_order + 1)]
                         for e in range(nx)], dtype=int)
    return nodes, elements
