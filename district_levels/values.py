"""Pull numeric observations out of GeoJSON-like feature records."""

import math
from numbers import Number


def coerce_value(raw):
    """Coerce a raw attribute value to a positive finite float.

    Returns None for missing, non-numeric, non-finite or non-positive values,
    which marks the record as excluded from the observation set.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    elif not isinstance(raw, Number):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def property_accessor(key):
    """Return a `(record) -> value | None` reader for `record['properties'][key]`."""
    def read(record):
        properties = record.get('properties') if hasattr(record, 'get') else None
        if not properties:
            return None
        return coerce_value(properties.get(key))
    return read


def as_accessor(attribute):
    """Accept either an attribute key or an accessor callable."""
    if callable(attribute):
        return attribute
    return property_accessor(attribute)


def extract_observations(records, attribute):
    """Collect the positive finite observations for `attribute` from `records`.

    Args:
        records: Iterable of feature records.
        attribute: Property key, or a callable mapping a record to a number
            (or None when the record has no usable value).

    Returns:
        list: Observations in record order, duplicates retained.
    """
    accessor = as_accessor(attribute)
    observations = []
    for record in records:
        value = coerce_value(accessor(record))
        if value is not None:
            observations.append(value)
    return observations
