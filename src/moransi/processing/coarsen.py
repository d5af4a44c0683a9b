"""
coarsen.py - Coarse-graining of raster grids before analysis

Renormalization-style block reduction: non-overlapping block_size x
block_size blocks are summed and thresholded into a binary grid, which
can then be fed to global_morans_i / local_morans_i to compare
autocorrelation across scales.
"""

import numpy as np

from ..data.config import InvalidInputError


def block_reduce_sum(arr: np.ndarray, block_size: int) -> np.ndarray:
    """
    Sum non-overlapping blocks of a 2D array.

    Trailing rows/columns that do not fill a whole block are dropped.

    Parameters
    ----------
    arr : np.ndarray
        2D numeric array.
    block_size : int
        Edge length of the square blocks.

    Returns
    -------
    np.ndarray
        Array of shape (rows // block_size, cols // block_size).
    """
    if isinstance(block_size, bool) or not isinstance(block_size, (int, np.integer)) or block_size < 1:
        raise InvalidInputError(f"block_size must be a positive integer, got {block_size!r}")

    arr = np.asarray(arr, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 0))
    if arr.ndim != 2:
        raise InvalidInputError(f"Matrix must be 2D, got {arr.ndim} dimension(s)")

    r, c = arr.shape
    r2, c2 = r - (r % block_size), c - (c % block_size)
    trimmed = arr[:r2, :c2]
    return trimmed.reshape(r2 // block_size, block_size, c2 // block_size, block_size).sum(axis=(1, 3))


def coarse_grain(matrix, block_size: int) -> list[list[int]]:
    """
    Reduce a matrix to a binary grid by block-sum thresholding.

    Each block sum below (max_sum - min_sum) / 2 becomes 0, every other
    block becomes 1.

    Parameters
    ----------
    matrix : array-like
        2D numeric matrix (e.g. an image).
    block_size : int
        Edge length of the square blocks.

    Returns
    -------
    list of lists of int
        Binary grid of shape (rows // block_size, cols // block_size);
        empty when the matrix is smaller than one block.

    Examples
    --------
    >>> coarse_grain([[1, 1, 0, 0], [1, 1, 0, 0], [0, 0, 0, 0], [0, 0, 0, 1]], 2)
    [[1, 0], [0, 0]]
    """
    sums = block_reduce_sum(matrix, block_size)
    if sums.size == 0:
        return []

    threshold = (sums.max() - sums.min()) / 2
    return np.where(sums < threshold, 0, 1).astype(int).tolist()


def multi_scale_coarsen(matrix, block_sizes) -> list[tuple[int, list[list[int]]]]:
    """
    Coarse-grain a matrix at several block sizes.

    Returns
    -------
    list of (block_size, binary grid), sorted by block size, duplicates
    removed.
    """
    return [(b, coarse_grain(matrix, b)) for b in sorted(set(int(x) for x in block_sizes))]
