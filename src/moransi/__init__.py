# src/moransi/__init__.py

"""
moransi - Moran's I spatial autocorrelation for grids and images
"""

# Core entry points
from .data.config import MoransConfig, MoransIError, InvalidInputError
from .spatial.statistics import GlobalMoranResult, global_morans_i
from .spatial.lisa import LocalMoranResult, local_morans_i

# Import submodules
from . import data
from . import processing
from . import spatial

__version__ = '0.1.1'

__all__ = [
    # Core classes
    'MoransConfig',
    'MoransIError',
    'InvalidInputError',
    'GlobalMoranResult',
    'LocalMoranResult',

    # Entry points
    'global_morans_i',
    'local_morans_i',

    # Submodules
    'data',
    'processing',
    'spatial',
]
