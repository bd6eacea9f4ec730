import numpy as np
import pytest
from numpy.testing import assert_allclose

from pyratfem import (BasisSpec, tabulate, evaluate_value, evaluate_gradient_component,
                      evaluate_second_derivative_component, CapabilityError)
from pyratfem import config
from pyratfem.fem.reference import n_functions
from pyratfem.utils.meshgen import single_element_mesh


@pytest.mark.parametrize("cell,order,points", [
    ("line", 3, [[-1.0], [0.2], [0.9]]),
    ("quad", 2, [[0.1, -0.5], [1.0, 1.0]]),
    ("tri", 2, [[0.2, 0.3], [0.0, 1.0]]),
    ("hex", 2, [[0.1, 0.2, -0.3], [-1.0, 0.5, 0.0]]),
])
def test_batched_tabulation_matches_scalar_calls(cell, order, points, rng):
    n = n_functions(cell, order)
    mesh = single_element_mesh(cell, order, weights=rng.uniform(0.5, 2.0, n))
    spec = BasisSpec.for_element("rational_bernstein", order, mesh.element(0))
    tab = tabulate(mesh, 0, spec, points)
    nC = tab.d2phi.shape[2]
    assert tab.phi.shape == (len(points), n)
    assert tab.dphi.shape == (len(points), n, spec.dim)
    for q, xi in enumerate(points):
        for i in range(n):
            assert np.isclose(tab.phi[q, i], evaluate_value(mesh, 0, spec, i, xi), rtol=1e-13)
            for j in range(spec.dim):
                assert np.isclose(tab.dphi[q, i, j],
                                  evaluate_gradient_component(mesh, 0, spec, i, j, xi),
                                  rtol=1e-12, atol=1e-14)
            for k in range(nC):
                assert np.isclose(tab.d2phi[q, i, k],
                                  evaluate_second_derivative_component(mesh, 0, spec, i, k, xi),
                                  rtol=1e-12, atol=1e-13)
    assert_allclose(tab.phi.sum(axis=1), 1.0, atol=1e-13)


def test_hessian_expansion_is_symmetric(rng):
    mesh = single_element_mesh("hex", 1, weights=rng.uniform(0.5, 2.0, 8))
    spec = BasisSpec("rational_bernstein", 1, 3)
    tab = tabulate(mesh, 0, spec, [[0.1, 0.2, 0.3]])
    H = tab.hessian()
    assert H.shape == (1, 8, 3, 3)
    assert_allclose(H, np.swapaxes(H, -1, -2))
    assert_allclose(H[..., 1, 2], tab.d2phi[..., 4])


def test_derivative_levels_can_be_skipped():
    mesh = single_element_mesh("quad", 1, weights=[1.0, 2.0, 3.0, 4.0])
    spec = BasisSpec("rational_bernstein", 1, 2)
    tab = tabulate(mesh, 0, spec, [0.0, 0.0], deriv_order=0)
    assert tab.dphi is None and tab.d2phi is None
    assert_allclose(tab.phi[0], np.array([1.0, 2.0, 3.0, 4.0]) / 10.0)
    with pytest.raises(ValueError):
        tab.hessian()
    with config.override(second_derivatives=False):
        tab = tabulate(mesh, 0, spec, [[0.0, 0.0]], deriv_order=1)
        assert tab.dphi.shape == (1, 4, 2)
        with pytest.raises(CapabilityError):
            tabulate(mesh, 0, spec, [[0.0, 0.0]])


def test_zero_weighted_sum_in_batch():
    mesh = single_element_mesh("line", 1, weights=[1.0, 3.0])
    spec = BasisSpec("rational_bernstein", 1, 1)
    tab = tabulate(mesh, 0, spec, [[-2.0], [0.0]])
    assert not np.all(np.isfinite(tab.phi[0]))
    assert np.all(np.isfinite(tab.phi[1]))


def test_rejects_bad_input():
    mesh = single_element_mesh("line", 1, weights=[1.0, 3.0])
    with pytest.raises(ValueError):
        tabulate(mesh, 0, BasisSpec("bernstein", 1, 1), [[0.0]])
    with pytest.raises(ValueError):
        tabulate(mesh, 0, BasisSpec("rational_bernstein", 1, 1), [[0.0, 0.0]])
    with pytest.raises(ValueError):
        tabulate(mesh, 0, BasisSpec("rational_bernstein", 1, 1), [[0.0]], deriv_order=3)
