"""Map attribute values to class levels given a set of breaks.

Level 0 means no positive value; levels 1..k are the classes bounded
(inclusively) by consecutive breaks. A value equal to an interior break
belongs to the lower class.
"""

from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from .breaks import positive_finite
from .values import as_accessor, coerce_value

LEVEL_KEY = 'level'


def _check_breaks(breaks):
    if len(breaks) < 2:
        raise ValueError(f"breaks need at least two values, got {len(breaks)}")


def level_for_value(value, breaks: Optional[Sequence[float]]) -> int:
    """Return the level of a single raw value."""
    value = coerce_value(value)
    if value is None or not breaks:
        return 0
    _check_breaks(breaks)
    for i in range(len(breaks) - 1):
        if breaks[i] <= value <= breaks[i + 1]:
            return i + 1
    # Drift past either end clamps to the nearest class.
    if value < breaks[0]:
        return 1
    return len(breaks) - 1


def levels_for_array(values, breaks: Optional[Sequence[float]]) -> np.ndarray:
    """Vectorized `level_for_value` over already numeric values (NaN allowed)."""
    values = np.asarray(values, dtype=float)
    levels = np.zeros(values.shape, dtype=np.int64)
    if not breaks:
        return levels
    _check_breaks(breaks)
    upper = np.asarray(breaks[1:], dtype=float)
    valid = np.isfinite(values) & (values > 0)
    # First class whose upper break is >= value; clamp overflow to the last class.
    idx = np.searchsorted(upper, values[valid], side='left')
    levels[valid] = np.minimum(idx, len(upper) - 1) + 1
    return levels


def assign_levels(features, attribute, breaks, level_key=LEVEL_KEY) -> List[int]:
    """Assign a level to every feature.

    Args:
        features: Iterable of GeoJSON-like feature records.
        attribute: Property key or accessor callable for the classified value.
        breaks: Breaks from `compute_breaks`, or None for empty input.
        level_key: Property to write each level into. Pass None to leave
            the features untouched.

    Returns:
        list: The level of each feature, in input order.
    """
    accessor = as_accessor(attribute)
    levels = []
    for feature in features:
        level = level_for_value(accessor(feature), breaks)
        if level_key is not None:
            feature.setdefault('properties', {})
            if feature['properties'] is None:
                feature['properties'] = {}
            feature['properties'][level_key] = level
        levels.append(level)
    return levels


class LegendEntry(NamedTuple):
    level: int
    lower: float
    upper: float
    label: str


def legend_entries(breaks, fmt='{:,.1f}') -> List[LegendEntry]:
    """One legend row per class, labelled `lower – upper`."""
    if not breaks:
        return []
    _check_breaks(breaks)
    entries = []
    for i in range(len(breaks) - 1):
        lower, upper = float(breaks[i]), float(breaks[i + 1])
        if lower == upper:
            label = fmt.format(lower)
        else:
            label = f"{fmt.format(lower)} – {fmt.format(upper)}"
        entries.append(LegendEntry(i + 1, lower, upper, label))
    return entries


def goodness_of_variance_fit(observations, breaks):
    """Goodness of variance fit (1 - SDCM / SDAM) of a classification.

    Returns None without observations or breaks, 1.0 when the data has no
    variance.
    """
    data = positive_finite(observations)
    if data.size == 0 or not breaks:
        return None
    sdam = float(((data - data.mean()) ** 2).sum())
    if sdam == 0:
        return 1.0
    levels = levels_for_array(data, breaks)
    sdcm = 0.0
    for level in np.unique(levels):
        members = data[levels == level]
        sdcm += float(((members - members.mean()) ** 2).sum())
    return 1.0 - sdcm / sdam
