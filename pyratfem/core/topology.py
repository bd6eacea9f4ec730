import numpy as np
from dataclasses import dataclass, field
from typing import Tuple, Optional

# Parametric dimension of each supported reference cell.
ELEMENT_DIM = {'line': 1, 'quad': 2, 'tri': 2, 'hex': 3, 'tet': 3}


class Node:
    def __init__(self, id, x, y=0.0, z=0.0, tag=None, weight=None):
        self.id = id
        self.x = x
        self.y = y
        self.z = z
        self.tag = tag
        self.weight = weight    # rational weight, set by the enrichment step

    def __repr__(self):
        w = "None" if self.weight is None else f"{self.weight:.3f}"
        return f"Node {self.id}({self.x:.3f}, {self.y:.3f}, {self.z:.3f}, w={w}, tag='{self.tag}')"

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return (np.isclose(self.x, other.x) and np.isclose(self.y, other.y)
                and np.isclose(self.z, other.z))

    def __ne__(self, other):
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self):
        return hash((self.x, self.y, self.z))

    def __getitem__(self, idx):
        if   idx == 0: return self.x
        elif idx == 1: return self.y
        elif idx == 2: return self.z
        raise IndexError("Node supports indices 0 (x), 1 (y) and 2 (z)")

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z


@dataclass(slots=True)
class Element:
    id: int                     # Element ID
    nodes: Tuple[int, ...]      # Global node indices, in local basis order
    element_type: str = "quad"
    poly_order: int = 1
    p_level: int = 0            # polynomial enrichment on top of poly_order
    weight_index: Optional[int] = None   # mesh weight field bound to this element
    tag: str = ""

    @property
    def dim(self) -> int:
        return ELEMENT_DIM[self.element_type]

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    def contains_node(self, node_id: int) -> bool:
        """Check if the element contains a specific node."""
        return node_id in self.nodes

    def is_rational(self) -> bool:
        return self.weight_index is not None
