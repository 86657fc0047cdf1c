"""Classification of a feature collection into levels."""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Hashable, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from .breaks import DEFAULT_CLASS_COUNT, MAX_JENKS_OBSERVATIONS, breaks_with_method
from .levels import LEVEL_KEY, assign_levels, levels_for_array
from .values import as_accessor, coerce_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    """Breaks plus the level of every classified feature.

    Never mutated after creation; classify again when the data or class
    count changes.
    """
    breaks: Optional[Tuple[float, ...]]
    levels: Mapping[Hashable, int]
    class_count: int
    method: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    positive_count: int = 0

    def __post_init__(self):
        if self.breaks is not None:
            object.__setattr__(self, 'breaks', tuple(float(b) for b in self.breaks))
        object.__setattr__(self, 'levels', MappingProxyType(dict(self.levels)))

    @property
    def is_empty(self):
        return self.breaks is None

    def level_of(self, feature_id) -> int:
        return self.levels.get(feature_id, 0)

    def summary(self):
        """Statistics for legends and color domains."""
        return {
            'min': self.min,
            'max': self.max,
            'positiveCount': self.positive_count,
        }


def _default_feature_id(feature, position):
    if hasattr(feature, 'get') and feature.get('id') is not None:
        return feature['id']
    return position


def _level_mapping(ids, levels):
    """Map ids to levels; a repeated id keeps the level of its last feature."""
    mapping = dict(zip(ids, levels))
    if len(mapping) < len(levels):
        logger.warning(
            f"{len(levels) - len(mapping)} features share an id with an earlier feature, "
            f"only the last level per id is kept")
    return mapping


def numeric_values(series):
    """Coerce a Series to floats the way `coerce_value` does; excluded entries become NaN."""
    if pd.api.types.is_bool_dtype(series):
        return np.full(len(series), np.nan)
    if not pd.api.types.is_numeric_dtype(series):
        series = series.map(coerce_value)
    return pd.to_numeric(series, errors='coerce').to_numpy(dtype=float, na_value=np.nan)


def classify(features, attribute, class_count=DEFAULT_CLASS_COUNT, feature_id=None,
             level_key=LEVEL_KEY, max_observations=MAX_JENKS_OBSERVATIONS):
    """Classify a feature collection into `class_count` natural-break levels.

    Args:
        features: Sequence of GeoJSON-like features (dicts with `properties`).
        attribute: Property key or `(feature) -> number | None` accessor.
        class_count: Number of classes; level 0 comes on top of these.
        feature_id: Optional `(feature, position) -> id` function; defaults
            to the feature's `id` member, else its position.
        level_key: Property that receives each feature's level; None leaves
            the features untouched.
        max_observations: Above this many positive values, equal-interval
            breaks are used instead of Jenks.

    Returns:
        ClassificationResult
    """
    features = list(features)
    accessor = as_accessor(attribute)
    feature_id = feature_id or _default_feature_id

    values = [coerce_value(accessor(f)) for f in features]
    positives = [v for v in values if v is not None]
    breaks, method = breaks_with_method(positives, class_count, max_observations)
    if breaks is None:
        logger.info("No positive values to classify, every feature gets level 0")

    levels = assign_levels(features, accessor, breaks, level_key=level_key)
    ids = [feature_id(f, i) for i, f in enumerate(features)]
    return ClassificationResult(
        breaks=breaks,
        levels=_level_mapping(ids, levels),
        class_count=class_count,
        method=method,
        min=min(positives) if positives else None,
        max=max(positives) if positives else None,
        positive_count=len(positives),
    )


def classify_series(series, breaks):
    """Levels for a pandas Series, coercing non-numeric entries to level 0."""
    return pd.Series(levels_for_array(numeric_values(series), breaks),
                     index=series.index, name=LEVEL_KEY)


def classify_frame(frame, column, class_count=DEFAULT_CLASS_COUNT, level_column=LEVEL_KEY,
                   max_observations=MAX_JENKS_OBSERVATIONS):
    """Classify `frame[column]`, keyed by the frame index.

    Works on DataFrames and GeoDataFrames alike.

    Returns:
        tuple: (copy of `frame` with a `level_column`, ClassificationResult)
    """
    numeric = numeric_values(frame[column])
    positives = numeric[np.isfinite(numeric) & (numeric > 0)]
    breaks, method = breaks_with_method(positives, class_count, max_observations)
    if breaks is None:
        logger.info(f"No positive values in '{column}', every row gets level 0")

    levels = levels_for_array(numeric, breaks)
    out = frame.copy()
    out[level_column] = levels
    result = ClassificationResult(
        breaks=breaks,
        levels=_level_mapping(frame.index, levels.tolist()),
        class_count=class_count,
        method=method,
        min=float(positives.min()) if positives.size else None,
        max=float(positives.max()) if positives.size else None,
        positive_count=int(positives.size),
    )
    return out, result
