"""
grid.py - Flatten a 2D grid into index-addressable arrays

Every cell of a rows x cols grid gets the canonical linear index
``idx = row * cols + col``. Values and coordinates are stored as
index-aligned numpy arrays so the spatial engines can address cells
without touching the original nested structure.
"""

from dataclasses import dataclass

import numpy as np

from .config import InvalidInputError


@dataclass(frozen=True, eq=False)
class GridData:
    """
    Row-major view of a rectangular grid.

    Attributes
    ----------
    values : np.ndarray
        1D float64 array of cell values, length rows * cols.
    coords : np.ndarray
        Integer array of shape (rows * cols, 2) with (row, col) per cell.
    rows : int
        Number of grid rows.
    cols : int
        Number of grid columns.
    """

    values: np.ndarray
    coords: np.ndarray
    rows: int
    cols: int

    def __post_init__(self):
        """Validate that values and coordinates are index-aligned."""
        n = self.rows * self.cols
        if len(self.values) != n or len(self.coords) != n:
            raise InvalidInputError(
                f"Grid arrays have inconsistent lengths: values={len(self.values)}, "
                f"coords={len(self.coords)}, expected {n}"
            )

    def __len__(self) -> int:
        return len(self.values)

    @property
    def n_cells(self) -> int:
        return len(self.values)

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    def coordinate(self, idx: int) -> tuple[int, int]:
        """(row, col) of a linear index."""
        row, col = self.coords[idx]
        return int(row), int(col)

    def to_array(self) -> np.ndarray:
        """Values reshaped back to (rows, cols)."""
        return self.values.reshape(self.rows, self.cols)


def _check_rows(grid) -> None:
    """Reject empty and ragged nested sequences before numpy sees them."""
    if len(grid) == 0:
        raise InvalidInputError("Grid is empty: at least 1 row is required")

    lengths = []
    for row in grid:
        if isinstance(row, (str, bytes)) or not hasattr(row, "__len__"):
            raise InvalidInputError("Grid must be a sequence of rows (2D)")
        if any(isinstance(value, (str, bytes)) for value in row):
            raise InvalidInputError("Grid values must be numeric, got a string cell")
        lengths.append(len(row))

    if len(set(lengths)) != 1:
        raise InvalidInputError(f"Grid rows have inconsistent lengths: {sorted(set(lengths))}")
    if lengths[0] == 0:
        raise InvalidInputError("Grid is empty: at least 1 column is required")


def flatten_grid(grid) -> GridData:
    """
    Convert a 2D grid into flat values plus a coordinate lookup.

    Parameters
    ----------
    grid : sequence of sequences or np.ndarray
        Rectangular grid of real numbers (e.g. an image or raster).

    Returns
    -------
    GridData

    Raises
    ------
    InvalidInputError
        If the grid is empty, ragged, not 2D, non-numeric or contains
        NaN/infinite values.

    Examples
    --------
    >>> data = flatten_grid([[1, 2, 3], [4, 5, 6]])
    >>> data.values
    array([1., 2., 3., 4., 5., 6.])
    >>> data.coordinate(4)
    (1, 1)
    """
    if isinstance(grid, np.ndarray):
        if grid.dtype.kind in ('U', 'S'):
            raise InvalidInputError(f"Grid values must be numeric, got dtype {grid.dtype}")
    else:
        _check_rows(grid)

    try:
        arr = np.asarray(grid, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Grid values must be numeric: {exc}") from exc

    if arr.ndim != 2:
        raise InvalidInputError(f"Grid must be 2D, got {arr.ndim} dimension(s)")
    rows, cols = arr.shape
    if rows == 0 or cols == 0:
        raise InvalidInputError(f"Grid is empty: shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError("Grid contains NaN or infinite values")

    row_idx, col_idx = np.divmod(np.arange(rows * cols), cols)
    coords = np.column_stack([row_idx, col_idx])

    return GridData(
        values=arr.ravel().copy(),
        coords=coords,
        rows=rows,
        cols=cols,
    )
