"""pyratfem.fem.weights
Read access to the rational weights of an element's nodes.
"""
import numpy as np

from pyratfem.errors import ContractViolation


def get_weights(mesh, eid: int) -> np.ndarray:
    """Return the weights of element ``eid``'s nodes, in local node order.

    The element must be bound to one of the mesh weight fields; rational
    bases have no value without them.
    """
    elem = mesh.element(eid)
    index = elem.weight_index
    if index is None or not 0 <= index < mesh.n_weight_fields:
        raise ContractViolation(
            f"Element {eid} has no rational weight field bound "
            f"(weight_index={index}); rational bases need nodal weights.")
    w = mesh.weight_field(index)[list(elem.nodes)]
    w.setflags(write=False)
    return w
