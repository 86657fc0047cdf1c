"""Natural-breaks classification of district values into map levels."""

from .breaks import (
    DEFAULT_CLASS_COUNT,
    MAX_JENKS_OBSERVATIONS,
    breaks_with_method,
    compute_breaks,
    equal_interval_breaks,
    jenks_breaks,
)
from .levels import (
    LEVEL_KEY,
    LegendEntry,
    assign_levels,
    goodness_of_variance_fit,
    legend_entries,
    level_for_value,
)
from .result import ClassificationResult, classify, classify_frame, classify_series
from .values import coerce_value, extract_observations, property_accessor
