# src/moransi/processing/__init__.py

"""
processing - Grid preprocessing before spatial analysis

coarse_grain
    Block-sum thresholding into a binary grid
block_reduce_sum
    Sum of non-overlapping square blocks
multi_scale_coarsen
    coarse_grain at several block sizes
"""

from .coarsen import (
    block_reduce_sum,
    coarse_grain,
    multi_scale_coarsen,
)

__all__ = [
    'block_reduce_sum',
    'coarse_grain',
    'multi_scale_coarsen',
]
