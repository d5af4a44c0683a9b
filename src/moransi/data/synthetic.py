"""
synthetic.py - Small synthetic grids with known spatial structure

Handy for demos and tests: a clustered grid has strong positive
autocorrelation, a checkerboard strong negative autocorrelation.
"""

import numpy as np

from .config import InvalidInputError

PATTERNS = ("clustered", "dispersed", "random")


def make_test_grid(pattern: str = "clustered", size: int = 5, seed: int | None = None) -> list[list[int]]:
    """
    Build a square binary grid with a known spatial pattern.

    Parameters
    ----------
    pattern : str
        'clustered' : two diagonal blocks of 1s (top-left and bottom-right,
                      split at size // 2)
        'dispersed' : checkerboard, (row + col) % 2
        'random'    : independent 0/1 draws
    size : int
        Number of rows and columns.
    seed : int, optional
        Random seed, only used for 'random'.

    Returns
    -------
    list of lists of int
    """
    if not isinstance(size, int) or size < 1:
        raise InvalidInputError(f"size must be a positive integer, got {size!r}")

    half = size // 2
    r, c = np.indices((size, size))

    if pattern == "clustered":
        grid = ((r < half) & (c < half)) | ((r >= half) & (c >= half))
    elif pattern == "dispersed":
        grid = (r + c) % 2
    elif pattern == "random":
        rng = np.random.default_rng(seed)
        grid = rng.integers(0, 2, size=(size, size))
    else:
        raise InvalidInputError(f"Unknown pattern: {pattern!r}. Use one of {PATTERNS}.")

    return np.asarray(grid, dtype=int).tolist()
