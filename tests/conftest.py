"""
conftest.py - Shared test fixtures for moransi

pytest reads this file before running any test. Every fixture defined
here is injected by name into the tests that ask for it:

    @pytest.fixture
    def my_fixture():
        return something_useful

    def test_something(my_fixture):
        assert my_fixture == expected
"""

import numpy as np
import pytest

from moransi.data import make_test_grid


# ===========================================================================
# Reference grid with known results
# ===========================================================================


@pytest.fixture
def clustered_grid():
    """
    5×5 grid made of two diagonal blocks of 1s:

        1 1 0 0 0
        1 1 0 0 0
        0 0 1 1 1
        0 0 1 1 1
        0 0 1 1 1

    Strong positive autocorrelation. Known queen results:
      global I = 0.386663, E[I] = -0.041667
      local I at (0, 0) = 2.658462
    """
    return make_test_grid("clustered", 5)


# ===========================================================================
# Other structured grids
# ===========================================================================


@pytest.fixture
def checkerboard_grid():
    """4×4 checkerboard → perfect dispersion under rook connectivity (I = -1)."""
    return make_test_grid("dispersed", 4)


@pytest.fixture
def uniform_grid():
    """5×5 grid where every cell holds the same value → zero variance."""
    return [[0.1] * 5 for _ in range(5)]


@pytest.fixture
def random_grid():
    """30×30 grid of seeded random floats (900 cells)."""
    rng = np.random.default_rng(42)
    return rng.normal(size=(30, 30))


@pytest.fixture
def gradient_grid():
    """12×20 smooth left-to-right gradient plus a little noise."""
    rng = np.random.default_rng(7)
    base = np.tile(np.linspace(0, 1, 20), (12, 1))
    return base + rng.normal(scale=0.05, size=base.shape)
