import numpy as np
import pytest

from pyratfem import (BasisSpec, RationalBasis, evaluate_value, evaluate_gradient_component,
                      evaluate_second_derivative_component, get_weights,
                      ContractViolation, UnsupportedOperation, CapabilityError)
from pyratfem import config
from pyratfem.fem import interface
from pyratfem.fem.rational import evaluate_value_by_type
from pyratfem.utils.meshgen import single_element_mesh


@pytest.fixture
def hex_mesh():
    return single_element_mesh("hex", 1, weights=np.linspace(1.0, 2.0, 8))


@pytest.mark.parametrize("dim", [1, 2, 3])
def test_element_type_only_entry_points_are_fatal(dim):
    basis = RationalBasis(dim)
    cell = {1: "line", 2: "quad", 3: "hex"}[dim]
    point = (0.0,) * dim
    with pytest.raises(UnsupportedOperation, match="real element"):
        basis.shape_by_type(cell, 2, 0, point)
    with pytest.raises(UnsupportedOperation):
        basis.shape_deriv_by_type(cell, 2, 0, 0, point)
    with pytest.raises(UnsupportedOperation):
        basis.shape_second_deriv_by_type(cell, 2, 0, 0, point)
    with pytest.raises(UnsupportedOperation):
        evaluate_value_by_type(cell, BasisSpec("rational_bernstein", 2, dim), 0, point)


def test_1d_gradient_direction_must_be_zero():
    mesh = single_element_mesh("line", 2, weights=[1.0, 2.0, 1.0])
    spec = BasisSpec("rational_bernstein", 2, 1)
    evaluate_gradient_component(mesh, 0, spec, 0, 0, (0.1,))
    with pytest.raises(ContractViolation):
        evaluate_gradient_component(mesh, 0, spec, 0, 1, (0.1,))
    with pytest.raises(ContractViolation):
        evaluate_second_derivative_component(mesh, 0, spec, 0, 1, (0.1,))


@pytest.mark.parametrize("j", [-1, 3, 7])
def test_3d_invalid_direction(hex_mesh, j):
    spec = BasisSpec("rational_bernstein", 1, 3)
    with pytest.raises(ContractViolation):
        evaluate_gradient_component(hex_mesh, 0, spec, 0, j, (0.0, 0.0, 0.0))


@pytest.mark.parametrize("k", [-1, 6, 9])
def test_3d_invalid_second_derivative_component(hex_mesh, k):
    spec = BasisSpec("rational_bernstein", 1, 3)
    with pytest.raises(ContractViolation):
        evaluate_second_derivative_component(hex_mesh, 0, spec, 0, k, (0.0, 0.0, 0.0))


def test_component_decoding_is_fatal_even_without_contract_checks(hex_mesh):
    spec = BasisSpec("rational_bernstein", 1, 3)
    with config.override(check_contracts=False):
        with pytest.raises(ContractViolation):
            evaluate_second_derivative_component(hex_mesh, 0, spec, 0, 6, (0.0, 0.0, 0.0))


def test_element_without_weight_field():
    mesh = single_element_mesh("quad", 1)
    spec = BasisSpec("rational_bernstein", 1, 2)
    with pytest.raises(ContractViolation, match="weight"):
        get_weights(mesh, 0)
    with pytest.raises(ContractViolation):
        evaluate_value(mesh, 0, spec, 0, (0.0, 0.0))


def test_node_count_mismatch_without_contract_checks():
    mesh = single_element_mesh("line", 2, weights=[1.0, 2.0, 1.0], p_level=1)
    spec = BasisSpec("rational_bernstein", 2, 1)
    with config.override(check_contracts=False):
        # weights and underlying values no longer line up
        with pytest.raises(ValueError):
            evaluate_value(mesh, 0, spec, 0, (0.0,))


def test_basis_index_out_of_range(hex_mesh):
    spec = BasisSpec("rational_bernstein", 1, 3)
    with pytest.raises(ContractViolation):
        evaluate_value(hex_mesh, 0, spec, 8, (0.0, 0.0, 0.0))


def test_dimension_mismatch(hex_mesh):
    basis = RationalBasis(2)
    with pytest.raises(ContractViolation):
        basis.shape(hex_mesh, 0, 1, 0, (0.0, 0.0))


def test_second_derivative_capability(hex_mesh):
    spec = BasisSpec("rational_bernstein", 1, 3)
    with config.override(second_derivatives=False):
        assert np.isfinite(evaluate_gradient_component(hex_mesh, 0, spec, 0, 1, (0.1, 0.2, 0.3)))
        with pytest.raises(CapabilityError):
            evaluate_second_derivative_component(hex_mesh, 0, spec, 0, 1, (0.1, 0.2, 0.3))


def test_higher_order_capability(hex_mesh):
    spec = BasisSpec("rational_bernstein", 1, 3)
    with config.override(higher_order_shapes=False):
        with pytest.raises(CapabilityError):
            evaluate_value(hex_mesh, 0, spec, 0, (0.0, 0.0, 0.0))
        # the Lagrange family stays available
        lag = BasisSpec("lagrange", 1, 3)
        assert interface.n_shape_functions(lag, 0, hex_mesh.element(0)) == 8


def test_basis_spec_validation():
    with pytest.raises(KeyError):
        BasisSpec("hierarchic", 2, 2)
    with pytest.raises(ValueError):
        BasisSpec("bernstein", -1, 2)
    with pytest.raises(ValueError):
        BasisSpec("bernstein", 1, 4)
    assert BasisSpec("rational_bernstein", 2, 3).underlying == BasisSpec("bernstein", 2, 3)


def test_rational_spec_is_not_a_polynomial_family(hex_mesh):
    spec = BasisSpec("rational_bernstein", 1, 3)
    with pytest.raises(ValueError):
        interface.n_shape_functions(spec, 0, hex_mesh.element(0))
