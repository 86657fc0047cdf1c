"""Class break computation for choropleth levels.

Jenks natural breaks (Fisher's optimal partition of sorted data) with an
equal-interval fallback. See:

- https://en.wikipedia.org/wiki/Jenks_natural_breaks_optimization
- https://www.macwright.org/2013/02/18/literate-jenks.html
"""

import logging
import math

import numpy as np

from .values import coerce_value

logger = logging.getLogger(__name__)

DEFAULT_CLASS_COUNT = 6

# Above this many observations the O(n^2 k) optimization is skipped. Cost grows
# with n^2: about 1 s at this size for k=6, about 6.5 s at 10 000.
MAX_JENKS_OBSERVATIONS = 4000

# Relative size below which a negative segment variance is rounding noise.
VARIANCE_TOLERANCE = 1e-9

JENKS = 'jenks'
DISTINCT = 'distinct'
EQUAL_INTERVAL = 'equal_interval'


def _check_class_count(class_count):
    if int(class_count) != class_count or class_count < 1:
        raise ValueError(f"class_count must be a positive integer, got {class_count!r}")
    return int(class_count)


def positive_finite(observations):
    """Return the finite, strictly positive observations as a float array."""
    observations = list(observations)
    try:
        data = np.asarray(observations, dtype=float).ravel()
    except (TypeError, ValueError, OverflowError):
        # Values that do not fit a float (e.g. huge ints) are dropped one by one.
        data = np.array([v for v in map(coerce_value, observations) if v is not None],
                        dtype=float)
    return data[np.isfinite(data) & (data > 0)]


def make_monotonic(breaks):
    """Raise any break that dips below its predecessor to the predecessor's value."""
    return np.maximum.accumulate(np.asarray(breaks, dtype=float)).tolist()


def equal_interval_breaks(observations, class_count):
    """Split [min, max] into `class_count` equal-width classes.

    Returns None for empty input.
    """
    class_count = _check_class_count(class_count)
    data = positive_finite(observations)
    if data.size == 0:
        return None
    lo, hi = float(data.min()), float(data.max())
    breaks = [lo + (hi - lo) * i / class_count for i in range(class_count + 1)]
    breaks[-1] = hi
    return make_monotonic(breaks)


def distinct_value_breaks(observations, class_count):
    """Breaks for data with no more distinct values than classes.

    The distinct sorted values, padded with the maximum to `class_count + 1`
    entries.
    """
    class_count = _check_class_count(class_count)
    unique = np.unique(positive_finite(observations))
    if unique.size == 0:
        return None
    breaks = unique.tolist()[:class_count + 1]
    breaks += [breaks[-1]] * (class_count + 1 - len(breaks))
    return breaks


def jenks_matrices(data, n_classes):
    """Compute the lower class limit and variance tables for sorted `data`.

    Both tables are (n + 1) x (n_classes + 1) and 1-indexed on both axes:
    `variance[i, c]` is the smallest total within-class sum of squared
    deviations splitting the first `i` values into `c` classes, and
    `lower_class_limits[i, c]` is the first position of the last of those
    classes.
    """
    n = len(data)
    # Shifting by the mean leaves variances unchanged and limits cancellation.
    shifted = data - data.mean()
    s1 = np.concatenate(([0.0], np.cumsum(shifted)))
    s2 = np.concatenate(([0.0], np.cumsum(shifted ** 2)))

    lower_class_limits = np.zeros((n + 1, n_classes + 1), dtype=np.int64)
    variance = np.full((n + 1, n_classes + 1), np.inf)
    variance[0, 0] = 0.0

    counts = np.arange(1, n + 1)
    variance[1:, 1] = np.maximum(s2[1:] - s1[1:] ** 2 / counts, 0.0)
    lower_class_limits[1:, 1] = 1

    for c in range(2, n_classes + 1):
        for i in range(c, n + 1):
            # Candidate lower limits j = i, i-1, ..., c; argmin keeps the first
            # minimum so ties go to the largest j.
            j = np.arange(i, c - 1, -1)
            length = i - j + 1
            seg_sum = s1[i] - s1[j - 1]
            seg_sq = s2[i] - s2[j - 1]
            seg_var = seg_sq - seg_sum ** 2 / length
            noise = seg_var < 0
            if noise.any():
                tolerance = VARIANCE_TOLERANCE * np.maximum(seg_sq, 1.0)
                feasible = seg_var >= -tolerance
                seg_var = np.where(noise & feasible, 0.0, seg_var)
                seg_var = np.where(feasible, seg_var, np.inf)
            totals = seg_var + variance[j - 1, c - 1]
            best = int(np.argmin(totals))
            if np.isfinite(totals[best]):
                variance[i, c] = totals[best]
                lower_class_limits[i, c] = j[best]

    return lower_class_limits, variance


def extract_breaks(data, lower_class_limits, n_classes):
    """Backtrack the lower class limits into `n_classes + 1` break values.

    `breaks[c]` is the last value of class `c`; `breaks[0]` is the minimum.
    """
    breaks = [0.0] * (n_classes + 1)
    breaks[0] = float(data[0])
    end = len(data)
    for c in range(n_classes, 0, -1):
        if end < 1:
            raise ArithmeticError("class limits do not cover the data")
        breaks[c] = float(data[end - 1])
        lower = int(lower_class_limits[end, c])
        if lower < 1:
            raise ArithmeticError(f"no feasible partition for class {c}")
        end = lower - 1
    return breaks


def jenks_breaks(observations, class_count):
    """Find Jenks natural breaks for `observations`.

    Requires more distinct values than classes. Raises ArithmeticError when
    no consistent partition comes out of the tables.
    """
    class_count = _check_class_count(class_count)
    data = np.sort(positive_finite(observations))
    if np.unique(data).size <= class_count:
        raise ValueError("jenks_breaks needs more distinct values than classes")
    lower_class_limits, variance = jenks_matrices(data, class_count)
    if not np.isfinite(variance[len(data), class_count]):
        raise ArithmeticError("optimal partition is not finite")
    breaks = extract_breaks(data, lower_class_limits, class_count)
    if not all(math.isfinite(b) for b in breaks):
        raise ArithmeticError("non-finite break value")
    return make_monotonic(breaks)


def breaks_with_method(observations, class_count=DEFAULT_CLASS_COUNT,
                       max_observations=MAX_JENKS_OBSERVATIONS):
    """Compute breaks and report which method produced them.

    Returns:
        tuple: (breaks or None, one of 'jenks', 'distinct', 'equal_interval'
        or None when there are no observations).
    """
    class_count = _check_class_count(class_count)
    data = positive_finite(observations)
    if data.size == 0:
        return None, None

    if np.unique(data).size <= class_count:
        return distinct_value_breaks(data, class_count), DISTINCT

    if max_observations is not None and data.size > max_observations:
        logger.info(
            f"{data.size} observations exceed {max_observations}, "
            f"using equal-interval breaks")
        return equal_interval_breaks(data, class_count), EQUAL_INTERVAL

    try:
        return jenks_breaks(data, class_count), JENKS
    except (ArithmeticError, ValueError, MemoryError) as exc:
        logger.warning(f"Jenks optimization failed ({exc}), using equal-interval breaks")
        return equal_interval_breaks(data, class_count), EQUAL_INTERVAL


def compute_breaks(observations, class_count=DEFAULT_CLASS_COUNT,
                   max_observations=MAX_JENKS_OBSERVATIONS):
    """Compute `class_count + 1` non-decreasing class breaks.

    Returns None when there are no positive finite observations.
    """
    breaks, _ = breaks_with_method(observations, class_count, max_observations)
    return breaks

