# src/moransi/spatial/__init__.py

"""
Spatial autocorrelation on regular grids.

Modules
-------
- graph: Neighbor graph construction (queen / rook)
- distribution: Normal CDF approximation and two-tailed p-values
- statistics: Global Moran's I
- lisa: Local Moran's I (LISA) and cluster classification

Quick Start
-----------
>>> import moransi as mi
>>>
>>> grid = mi.data.make_test_grid('clustered', size=5)
>>>
>>> # Global statistic
>>> result = mi.spatial.global_morans_i(grid, connectivity='queen')
>>> result.morans_i, result.p_value
(0.386663, 0.000459)
>>>
>>> # Local statistic, one record per cell
>>> lisa = mi.spatial.local_morans_i(grid, parallel=True, chunk_size=1000)
>>> lisa[3][3].cluster_type
'hh'
>>> df = mi.spatial.lisa_to_dataframe(lisa)

Neighbor Graph
--------------
build_neighbor_graph
    Build the binary adjacency of a rows x cols grid
GridNeighborGraph
    Sparse adjacency container (neighbors, degrees, summary)

Statistics
----------
global_morans_i
    Moran's I with exact finite-sample variance
weights_moments
    S0, S1, S2 of the weights matrix
local_morans_i
    Per-cell LISA with hh / ll / hl / lh / ns labels
cluster_counts
    Cells per cluster type
lisa_to_dataframe
    LISA result as a pandas DataFrame

Notes
-----
- Weights are binary (1 for each neighbor pair); no row standardization.
- p-values use an approximate error function (about 1e-3 relative error).
"""

from .graph import (
    GridNeighborGraph,
    build_neighbor_graph,
)

from .distribution import (
    erf_approx,
    standard_normal_cdf,
    two_tailed_p_value,
)

from .statistics import (
    GlobalMoranResult,
    global_morans_i,
    weights_moments,
)

from .lisa import (
    CLUSTER_TYPES,
    LocalMoranResult,
    local_morans_i,
    cluster_counts,
    lisa_to_dataframe,
)

__all__ = [
    # Classes
    'GridNeighborGraph',
    'GlobalMoranResult',
    'LocalMoranResult',

    # Graph construction
    'build_neighbor_graph',

    # Distribution
    'erf_approx',
    'standard_normal_cdf',
    'two_tailed_p_value',

    # Statistics
    'global_morans_i',
    'weights_moments',
    'local_morans_i',
    'cluster_counts',
    'lisa_to_dataframe',
    'CLUSTER_TYPES',
]
