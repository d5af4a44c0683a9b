"""
test_processing.py - Tests for grid coarse-graining

How to run:
    pytest tests/test_processing.py -v
"""

import numpy as np
import pytest

from moransi import InvalidInputError, global_morans_i
from moransi.processing import block_reduce_sum, coarse_grain, multi_scale_coarsen


class TestBlockReduceSum:

    def test_sums_blocks(self):
        arr = np.arange(16).reshape(4, 4)
        out = block_reduce_sum(arr, 2)
        assert out.tolist() == [[10.0, 18.0], [42.0, 50.0]]

    def test_trailing_cells_dropped(self):
        """A 5×5 matrix with block size 2 only uses the top-left 4×4."""
        out = block_reduce_sum(np.ones((5, 5)), 2)
        assert out.shape == (2, 2)
        assert np.all(out == 4.0)

    def test_block_size_one_is_identity(self):
        arr = np.random.default_rng(1).normal(size=(3, 4))
        assert np.array_equal(block_reduce_sum(arr, 1), arr)

    @pytest.mark.parametrize("block_size", [0, -1, 1.5, True])
    def test_bad_block_size_raises(self, block_size):
        with pytest.raises(InvalidInputError):
            block_reduce_sum(np.ones((4, 4)), block_size)


class TestCoarseGrain:

    def test_threshold_on_block_sums(self):
        """
        Block sums [[4, 0], [0, 1]] → threshold (4 - 0) / 2 = 2
        → only the top-left block reaches it.
        """
        matrix = [
            [1, 1, 0, 0],
            [1, 1, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 1],
        ]
        assert coarse_grain(matrix, 2) == [[1, 0], [0, 0]]

    def test_equal_blocks_all_one(self):
        """Identical block sums → threshold 0 → nothing is below it."""
        assert coarse_grain(np.ones((4, 4)), 2) == [[1, 1], [1, 1]]

    def test_non_square_shape(self):
        out = coarse_grain(np.ones((4, 6)), 2)
        assert len(out) == 2
        assert all(len(row) == 3 for row in out)

    def test_block_larger_than_matrix(self):
        assert coarse_grain(np.ones((3, 3)), 4) == []

    def test_empty_matrix(self):
        assert coarse_grain(np.zeros((0, 0)), 2) == []

    def test_output_feeds_global_statistic(self):
        """A coarse-grained image is a valid grid for Moran's I."""
        image = np.zeros((20, 20))
        image[:10, :10] = 1.0
        image[10:, 10:] = 1.0
        binary = coarse_grain(image, 2)
        result = global_morans_i(binary)
        assert result.morans_i > 0


class TestMultiScale:

    def test_sorted_unique_block_sizes(self):
        out = multi_scale_coarsen(np.ones((8, 8)), [4, 2, 2, 1])
        assert [b for b, _ in out] == [1, 2, 4]
        assert len(out[-1][1]) == 2
