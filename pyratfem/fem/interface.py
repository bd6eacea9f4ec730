"""pyratfem.fem.interface
Family-independent access to the underlying (non-rational) bases.

Every call is parameterized by a ``BasisSpec``, the extra order coming from
p-refinement, and the element whose reference cell is evaluated.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from pyratfem import config
from pyratfem.core.topology import Element, ELEMENT_DIM
from pyratfem.fem.reference import get_reference, FAMILIES

RATIONAL_FAMILIES = {"rational_bernstein": "bernstein"}


@dataclass(frozen=True)
class BasisSpec:
    family: str
    order: int
    dim: int

    def __post_init__(self):
        if self.family not in FAMILIES and self.family not in RATIONAL_FAMILIES:
            raise KeyError(f"Unknown basis family '{self.family}'.")
        if self.order < 0:
            raise ValueError("Basis order must be non-negative.")
        if self.dim not in (1, 2, 3):
            raise ValueError(f"Unsupported dimension {self.dim}.")

    @classmethod
    def for_element(cls, family: str, order: int, elem: Element) -> "BasisSpec":
        return cls(family, order, ELEMENT_DIM[elem.element_type])

    @property
    def is_rational(self) -> bool:
        return self.family in RATIONAL_FAMILIES

    @property
    def underlying(self) -> "BasisSpec":
        """The polynomial basis a rational family is built from (self otherwise)."""
        if not self.is_rational:
            return self
        return BasisSpec(RATIONAL_FAMILIES[self.family], self.order, self.dim)

    @property
    def needs_higher_order(self) -> bool:
        return self.family != "lagrange"


def as_point(point: Sequence[float], dim: int) -> tuple:
    """Normalise a point to a hashable tuple of ``dim`` floats."""
    xi = tuple(float(c) for c in np.ravel(point))
    if len(xi) < dim:
        raise ValueError(f"Point {point!r} has {len(xi)} coordinates, need {dim}.")
    return xi[:dim]


def reference_for(spec: BasisSpec, extra_order: int, elem: Element, max_deriv_order: int = 2):
    if spec.is_rational:
        raise ValueError(f"'{spec.family}' is not a polynomial family; use spec.underlying.")
    if spec.needs_higher_order:
        config.require_capability("higher_order_shapes", f"The '{spec.family}' family")
    if ELEMENT_DIM[elem.element_type] != spec.dim:
        raise ValueError(f"Basis dimension {spec.dim} does not match "
                         f"'{elem.element_type}' element.")
    return get_reference(elem.element_type, spec.order + extra_order, spec.family,
                         max_deriv_order)


def n_shape_functions(spec: BasisSpec, extra_order: int, elem: Element) -> int:
    return reference_for(spec, extra_order, elem).n_functions


def all_shapes(spec, extra_order, elem, point) -> np.ndarray:
    return reference_for(spec, extra_order, elem).shape(as_point(point, spec.dim))


def all_shape_derivs(spec, extra_order, elem, j, point) -> np.ndarray:
    return reference_for(spec, extra_order, elem).first_deriv(as_point(point, spec.dim), j)


def all_shape_second_derivs(spec, extra_order, elem, k, point) -> np.ndarray:
    config.require_capability("second_derivatives", "Second derivative evaluation")
    return reference_for(spec, extra_order, elem).second_deriv(as_point(point, spec.dim), k)


def shape(spec, extra_order, elem, i, point) -> float:
    return float(all_shapes(spec, extra_order, elem, point)[i])


def shape_deriv(spec, extra_order, elem, i, j, point) -> float:
    return float(all_shape_derivs(spec, extra_order, elem, j, point)[i])


def shape_second_deriv(spec, extra_order, elem, i, k, point) -> float:
    return float(all_shape_second_derivs(spec, extra_order, elem, k, point)[i])
