# conftest.py
import numpy as np
import pytest

from pyratfem import config


@pytest.fixture(autouse=True)
def default_settings():
    """Run every test with the default capability flags and contract checks on."""
    with config.override(check_contracts=True, higher_order_shapes=True,
                         second_derivatives=True):
        yield


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
