import logging
import numpy as np
from typing import List, Optional, Sequence, Iterable

from pyratfem.core.topology import Node, Element, ELEMENT_DIM

logger = logging.getLogger(__name__)


class Mesh:
    """
    Node/element container carrying the rational weight fields.

    Only the pieces the rational evaluators read are modelled: the node
    list, the element list (node ids in local basis order, type, order and
    p-level), and a list of nodal weight fields.  A weight field is a
    read-only float array with one entry per mesh node; elements refer to
    the field they use through ``Element.weight_index``.
    """

    def __init__(self,
                 nodes: List['Node'],
                 element_connectivity: np.ndarray,
                 *,
                 element_type: str = 'quad',
                 poly_order: int = 1):
        if element_type not in ELEMENT_DIM:
            raise KeyError(element_type)
        self.element_type = element_type
        self.poly_order = poly_order
        self.spatial_dim = ELEMENT_DIM[element_type]
        self.nodes_list: List['Node'] = list(nodes)
        self.nodes = np.array([n.id for n in self.nodes_list])
        self.nodes_x_y_pos = np.array([[n.x, n.y, n.z] for n in self.nodes_list],
                                      dtype=float)[:, :self.spatial_dim]
        self.elements_connectivity = np.asarray(element_connectivity, dtype=int)
        if self.elements_connectivity.ndim == 1:
            self.elements_connectivity = self.elements_connectivity[None, :]
        self.elements_list: List['Element'] = [
            Element(id=eid,
                    nodes=tuple(int(n) for n in conn),
                    element_type=element_type,
                    poly_order=poly_order)
            for eid, conn in enumerate(self.elements_connectivity)
        ]
        self.n_elements = len(self.elements_list)
        self._weight_fields: List[np.ndarray] = []

    def __repr__(self):
        return (f"<Mesh n_nodes={len(self.nodes_list)}, n_elements={self.n_elements}, "
                f"type='{self.element_type}', order={self.poly_order}, "
                f"weight_fields={len(self._weight_fields)}>")

    # ------------------------------------------------------------------
    # element access
    # ------------------------------------------------------------------
    def element(self, eid: int) -> Element:
        return self.elements_list[eid]

    def set_p_level(self, p_level: int, elements: Optional[Iterable[int]] = None):
        """Set the polynomial enrichment of the given elements (all by default)."""
        if p_level < 0:
            raise ValueError("p_level must be non-negative.")
        ids = range(self.n_elements) if elements is None else elements
        for eid in ids:
            self.elements_list[eid].p_level = int(p_level)

    # ------------------------------------------------------------------
    # rational weights
    # ------------------------------------------------------------------
    @property
    def n_weight_fields(self) -> int:
        return len(self._weight_fields)

    def add_weight_field(self, weights: Sequence[float],
                         elements: Optional[Iterable[int]] = None) -> int:
        """
        Store one positive weight per node and bind it to ``elements``.

        This is the entry point for the rational enrichment step. The array
        is copied and frozen, so the evaluators only ever read it. Returns
        the index of the new field.
        """
        w = np.array(weights, dtype=float).reshape(-1)
        if w.shape[0] != len(self.nodes_list):
            raise ValueError(f"Expected {len(self.nodes_list)} nodal weights, got {w.shape[0]}.")
        if not np.all(np.isfinite(w)) or np.any(w <= 0.0):
            raise ValueError("Rational weights must be finite and strictly positive.")
        w.setflags(write=False)
        index = len(self._weight_fields)
        self._weight_fields.append(w)
        for node, value in zip(self.nodes_list, w):
            node.weight = float(value)
        ids = range(self.n_elements) if elements is None else elements
        for eid in ids:
            self.elements_list[eid].weight_index = index
        logger.debug(f"Stored weight field {index} (min={w.min():.4g}, max={w.max():.4g}).")
        return index

    def weight_field(self, index: int) -> np.ndarray:
        return self._weight_fields[index]
