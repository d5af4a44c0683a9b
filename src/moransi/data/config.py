"""
config.py - Configuration and exceptions for moransi

Contains:
- MoransConfig: Options shared by the global and local statistics
- MoransIError: Base exception
- InvalidInputError: Raised when a grid or an option is unusable
"""

from dataclasses import dataclass, fields, replace as _replace

import numpy as np

CONNECTIVITY_MODES = ("queen", "rook")


def _is_integer(value) -> bool:
    """Python or numpy integer, but not a bool."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_real(value) -> bool:
    """Python or numpy real number, but not a bool."""
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool)


class MoransIError(Exception):
    """Base exception for moransi errors."""

    pass


class InvalidInputError(MoransIError, ValueError):
    """Raised when input validation fails, before any computation starts."""

    pass


@dataclass(frozen=True)
class MoransConfig:
    """Options for Moran's I computations."""

    # Neighborhood
    connectivity: str = "queen"  # 'queen' (8 neighbors) or 'rook' (4 neighbors)

    # Execution (local statistic only)
    parallel: bool = True
    chunk_size: int = 1000
    n_jobs: int | None = None  # None = number of available cores

    # Statistics
    alpha: float = 0.05  # significance level for cluster classification
    kurtosis: float = 3.0  # b2, assumes normally distributed values
    decimals: int = 6

    def __post_init__(self):
        """Validate all settings."""
        if self.connectivity not in CONNECTIVITY_MODES:
            raise InvalidInputError(
                f"Invalid connectivity: {self.connectivity!r}. Use 'queen' or 'rook'."
            )
        if not isinstance(self.parallel, (bool, np.bool_)):
            raise InvalidInputError(f"parallel must be True or False, got {self.parallel!r}")
        if not _is_integer(self.chunk_size) or self.chunk_size < 1:
            raise InvalidInputError(f"chunk_size must be a positive integer, got {self.chunk_size!r}")
        if self.n_jobs is not None and (not _is_integer(self.n_jobs) or self.n_jobs == 0):
            raise InvalidInputError(f"n_jobs must be a non-zero integer or None, got {self.n_jobs!r}")
        if not _is_real(self.alpha) or not 0.0 < self.alpha < 1.0:
            raise InvalidInputError(f"alpha must be a number in (0, 1), got {self.alpha!r}")
        if not _is_real(self.kurtosis) or not np.isfinite(self.kurtosis):
            raise InvalidInputError(f"kurtosis must be a finite number, got {self.kurtosis!r}")
        if not _is_integer(self.decimals) or self.decimals < 0:
            raise InvalidInputError(f"decimals must be a non-negative integer, got {self.decimals!r}")

    def replace(self, **changes) -> "MoransConfig":
        """
        Return a validated copy with some settings changed.

        Parameters
        ----------
        **changes
            Field names and new values.

        Returns
        -------
        MoransConfig
        """
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise InvalidInputError(f"Unknown option(s): {sorted(unknown)}")
        return _replace(self, **changes)


def resolve_config(config: MoransConfig | None = None, **options) -> MoransConfig:
    """
    Merge explicit keyword options into a config.

    Options left as None keep the config's (or the default) value.

    Parameters
    ----------
    config : MoransConfig, optional
        Base configuration. Defaults to MoransConfig().
    **options
        Overrides, e.g. connectivity='rook'.

    Returns
    -------
    MoransConfig
    """
    base = config if config is not None else MoransConfig()
    changes = {k: v for k, v in options.items() if v is not None}
    return base.replace(**changes) if changes else base
