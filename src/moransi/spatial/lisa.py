"""
lisa.py - Local Moran's I (LISA)

Per-cell decomposition of global autocorrelation. Every cell gets a
local index, a normal-approximation z-score and p-value, and a cluster
label relative to the global mean:

    hh : high value, high neighbors  -> hot cluster
    ll : low value,  low neighbors   -> cold cluster
    hl : high value, low neighbors   -> high outlier
    lh : low value,  high neighbors  -> low outlier
    ns : not significant

Large grids are evaluated in contiguous chunks of cell indices fanned
out over a joblib worker pool. Chunks only read the shared arrays and
are concatenated back in index order, so chunked and sequential runs
return identical results.

Example
-------
>>> from moransi.data import make_test_grid
>>> grid = make_test_grid('clustered', 5)
>>> lisa = local_morans_i(grid)
>>> lisa[0][0].local_i
2.658462
>>> df = lisa_to_dataframe(lisa)
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd
from joblib import Parallel, delayed, effective_n_jobs
from scipy import sparse

from ..data.config import MoransConfig, resolve_config
from .distribution import two_tailed_p_value
from .statistics import _prepare_inputs

logger = logging.getLogger(__name__)

CLUSTER_TYPES = ('hh', 'll', 'hl', 'lh', 'ns')


@dataclass(frozen=True)
class LocalMoranResult:
    """LISA values of a single cell."""
    local_i: float
    z_score: float
    p_value: float
    cluster_type: str

    def to_dict(self) -> dict:
        return asdict(self)


# ========== Shared helpers ==========

def _classify_lisa(
    values: np.ndarray,
    neighbor_mean: np.ndarray,
    global_mean: float,
    pvalues: np.ndarray,
    alpha: float = 0.05,
) -> np.ndarray:
    """Classify cells into hh / ll / hl / lh, or ns when p >= alpha."""
    high = values > global_mean
    high_neighbors = neighbor_mean > global_mean
    sig = pvalues < alpha

    cluster_type = np.full(len(values), 'ns', dtype=object)
    cluster_type[sig & high & high_neighbors] = 'hh'
    cluster_type[sig & ~high & ~high_neighbors] = 'll'
    cluster_type[sig & high & ~high_neighbors] = 'hl'
    cluster_type[sig & ~high & high_neighbors] = 'lh'
    return cluster_type


def _local_variance(k: np.ndarray, n: int, b2: float) -> np.ndarray:
    """Finite-sample variance of local I for cells with k binary neighbors."""
    term1 = k * (n - b2) / (n - 1)
    term2 = k * k * (2 * b2 - n) / ((n - 1) * (n - 2))
    if n > 3:
        correction = k * k / ((n - 1) * (n - 1))
    else:
        correction = np.zeros_like(k)
    return np.maximum(0.0, term1 + term2 - correction)


def _lisa_chunk(
    start: int,
    stop: int,
    adjacency: sparse.csr_matrix,
    values: np.ndarray,
    deviations: np.ndarray,
    mean: float,
    variance: float,
    n: int,
    kurtosis: float,
    alpha: float,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Compute LISA for the cells start..stop-1.

    Reads the shared inputs only; returns (local_i, z_score, p_value,
    cluster_type) arrays of length stop - start.
    """
    rows = adjacency[start:stop]
    k = np.diff(rows.indptr).astype(np.float64)

    weighted_sum = rows.dot(deviations)
    if variance > 0:
        local_i = deviations[start:stop] * weighted_sum / variance
    else:
        local_i = np.zeros(stop - start)

    expected_local = -1.0 / (n - 1)
    local_var = _local_variance(k, n, kurtosis)

    with np.errstate(divide='ignore', invalid='ignore'):
        z_score = np.where(
            local_var > 0,
            (local_i - expected_local) / np.sqrt(local_var),
            0.0,
        )
    p_value = two_tailed_p_value(z_score)

    neighbor_sum = rows.dot(values)
    neighbor_mean = np.divide(
        neighbor_sum, k, out=np.zeros_like(neighbor_sum), where=k > 0
    )
    cluster_type = _classify_lisa(values[start:stop], neighbor_mean, mean, p_value, alpha)

    return local_i, z_score, p_value, cluster_type


def _chunk_bounds(n: int, chunk_size: int) -> list[tuple[int, int]]:
    """Contiguous [start, stop) ranges covering 0..n-1."""
    return [(start, min(start + chunk_size, n)) for start in range(0, n, chunk_size)]


# ========== local_morans_i ==========

def local_morans_i(
    grid,
    connectivity: str | None = None,
    parallel: bool | None = None,
    chunk_size: int | None = None,
    n_jobs: int | None = None,
    config: MoransConfig | None = None,
) -> list[list[LocalMoranResult]]:
    """
    Compute local Moran's I (LISA) for every cell of a grid.

    I_i = z_i * sum_j w_ij z_j / m2

    with z the deviations from the global mean, w_ij = 1 for neighbors
    and m2 the sample variance sum(z^2) / (n - 1).

    Parameters
    ----------
    grid : sequence of sequences or np.ndarray
        Rectangular grid of numbers.
    connectivity : str, optional
        'queen' (default) or 'rook'.
    parallel : bool, optional
        Evaluate chunks on a worker pool (default True). Only used when
        the grid has more than chunk_size cells.
    chunk_size : int, optional
        Cells per chunk (default 1000).
    n_jobs : int, optional
        Worker count; defaults to the number of available cores. Never
        more workers than chunks.
    config : MoransConfig, optional
        Base options; explicit keyword arguments take precedence.

    Returns
    -------
    list of lists of LocalMoranResult
        Same rows x cols shape as the input grid.

    Raises
    ------
    InvalidInputError
        If the grid is empty, ragged, or has fewer than 3 cells.
    """
    cfg = resolve_config(
        config,
        connectivity=connectivity,
        parallel=parallel,
        chunk_size=chunk_size,
        n_jobs=n_jobs,
    )
    data, graph, mean, z = _prepare_inputs(grid, cfg, min_cells=3, statistic="Local Moran's I")
    n = data.n_cells
    values = data.values
    variance = float(z.dot(z)) / (n - 1)

    args = (graph.adjacency, values, z, mean, variance, n, cfg.kurtosis, cfg.alpha)

    if cfg.parallel and n > cfg.chunk_size:
        chunks = _chunk_bounds(n, cfg.chunk_size)
        workers = min(effective_n_jobs(cfg.n_jobs if cfg.n_jobs is not None else -1), len(chunks))
        logger.debug("LISA: %d cells in %d chunks on %d workers", n, len(chunks), workers)
        parts = Parallel(n_jobs=workers, prefer="threads")(
            delayed(_lisa_chunk)(start, stop, *args) for start, stop in chunks
        )
    else:
        parts = [_lisa_chunk(0, n, *args)]

    local_i, z_score, p_value, cluster_type = (
        np.concatenate([part[field] for part in parts]) for field in range(4)
    )

    d = cfg.decimals
    flat = [
        LocalMoranResult(
            local_i=round(float(li), d),
            z_score=round(float(zs), d),
            p_value=round(float(pv), d),
            cluster_type=str(ct),
        )
        for li, zs, pv, ct in zip(local_i, z_score, p_value, cluster_type)
    ]
    results = [flat[r * data.cols:(r + 1) * data.cols] for r in range(data.rows)]

    counts = cluster_counts(results)
    logger.info(
        "Local Moran's I / LISA (%s, %dx%d): hh=%d, ll=%d, hl=%d, lh=%d, ns=%d",
        cfg.connectivity, data.rows, data.cols,
        counts['hh'], counts['ll'], counts['hl'], counts['lh'], counts['ns'],
    )
    return results


# ========== Result helpers ==========

def cluster_counts(results: list[list[LocalMoranResult]]) -> dict[str, int]:
    """Number of cells per cluster type (all five types present)."""
    counts = Counter(cell.cluster_type for row in results for cell in row)
    return {ct: counts.get(ct, 0) for ct in CLUSTER_TYPES}


def lisa_to_dataframe(results: list[list[LocalMoranResult]]) -> pd.DataFrame:
    """
    Flatten a 2D LISA result into a table.

    Parameters
    ----------
    results : list of lists of LocalMoranResult
        Output of local_morans_i.

    Returns
    -------
    pd.DataFrame
        Columns: row, col, local_i, z_score, p_value, cluster_type
        (row-major order).
    """
    records = [
        {'row': r, 'col': c, **cell.to_dict()}
        for r, row in enumerate(results)
        for c, cell in enumerate(row)
    ]
    columns = ['row', 'col', 'local_i', 'z_score', 'p_value', 'cluster_type']
    df = pd.DataFrame.from_records(records, columns=columns)
    df['cluster_type'] = pd.Categorical(df['cluster_type'], categories=list(CLUSTER_TYPES))
    return df
