"""
distribution.py - Normal-approximation helpers for significance tests

The error function uses the closed-form approximation with a = 0.147,
accurate to roughly 1e-3 relative error. p-values computed here will not
match reference statistical packages to the last digit.
"""

import math

import numpy as np

_ERF_A = 0.147


def erf_approx(x):
    """
    Approximate error function.

    erf(x) ~ sign(x) * sqrt(1 - exp(-x^2 * (4/pi + a*x^2) / (1 + a*x^2)))

    Parameters
    ----------
    x : float or np.ndarray

    Returns
    -------
    float or np.ndarray, same shape as x
    """
    x = np.asarray(x, dtype=np.float64)
    x2 = x * x
    exp_term = np.exp(-x2 * (4 / math.pi + _ERF_A * x2) / (1 + _ERF_A * x2))
    sign = np.where(x >= 0, 1.0, -1.0)
    result = sign * np.sqrt(1 - exp_term)
    return float(result) if result.ndim == 0 else result


def standard_normal_cdf(z):
    """Standard normal CDF, 0.5 * (1 + erf(z / sqrt(2)))."""
    return 0.5 * (1 + erf_approx(np.asarray(z, dtype=np.float64) / math.sqrt(2)))


def two_tailed_p_value(z):
    """Two-tailed p-value, 2 * (1 - Phi(|z|))."""
    return 2 * (1 - standard_normal_cdf(np.abs(z)))
