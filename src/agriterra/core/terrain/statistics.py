"""
Descriptive statistics for slope samples.
"""

import math
from typing import Any, Sequence, Union

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from agriterra.models.terrain import ConfidenceInterval

# Student's t is used up to this sample size, the normal quantile above it
T_DISTRIBUTION_MAX_N = 6

Values = Union[Sequence[float], NDArray[np.floating[Any]]]


def _as_array(values: Values) -> NDArray[np.floating[Any]]:
    array = np.asarray(values, dtype=float)
    if array.size == 0:
        raise ValueError("Input array cannot be empty")
    return array


def mean(values: Values) -> float:
    """Arithmetic mean."""
    return float(np.mean(_as_array(values)))


def median(values: Values) -> float:
    """Median."""
    return float(np.median(_as_array(values)))


def std_dev(values: Values) -> float:
    """Population standard deviation."""
    return float(np.std(_as_array(values)))


def mean_absolute_deviation(values: Values) -> float:
    """Mean absolute deviation from the mean."""
    array = _as_array(values)
    return float(np.mean(np.abs(array - array.mean())))


def confidence_interval(values: Values, level: float = 0.95) -> ConfidenceInterval:
    """
    Confidence interval of the mean.

    Uses Student's t quantile for n <= 6 and the normal quantile otherwise,
    with the sample (n - 1) variance. A single value yields a degenerate
    interval at the value itself.

    Args:
        values: Sample values
        level: Confidence level in (0, 1)

    Returns:
        ConfidenceInterval
    """
    array = _as_array(values)
    n = array.size
    sample_mean = float(array.mean())

    if n == 1:
        return ConfidenceInterval(
            mean=sample_mean,
            lower=sample_mean,
            upper=sample_mean,
            level=level,
            margin_of_error=0.0,
        )

    quantile = 1.0 - (1.0 - level) / 2.0
    if n <= T_DISTRIBUTION_MAX_N:
        critical = float(stats.t.ppf(quantile, df=n - 1))
    else:
        critical = float(stats.norm.ppf(quantile))

    std_err = math.sqrt(float(np.var(array, ddof=1)) / n)
    margin = critical * std_err

    return ConfidenceInterval(
        mean=sample_mean,
        lower=sample_mean - margin,
        upper=sample_mean + margin,
        level=level,
        margin_of_error=margin,
    )
