# src/moransi/data/__init__.py

"""
data - Input handling for moransi

config    : MoransConfig and the exception hierarchy
grid      : Grid flattening (values + coordinate lookup)
synthetic : Synthetic test grids
"""

from .config import (
    CONNECTIVITY_MODES,
    MoransConfig,
    MoransIError,
    InvalidInputError,
    resolve_config,
)
from .grid import GridData, flatten_grid
from .synthetic import make_test_grid

__all__ = [
    'CONNECTIVITY_MODES',
    'MoransConfig',
    'MoransIError',
    'InvalidInputError',
    'resolve_config',
    'GridData',
    'flatten_grid',
    'make_test_grid',
]
