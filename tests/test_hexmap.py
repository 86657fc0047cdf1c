"""Tests for hex district loading helpers and the map scripts."""

import json

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import Polygon

from district_levels import classify_frame
from district_levels.hexmap import combine_hex_districts, merge_district_values


def hexagon(x, y, size=1.0):
    return Polygon([(x + size, y), (x + size / 2, y + size), (x - size / 2, y + size),
                    (x - size, y), (x - size / 2, y - size), (x + size / 2, y - size)])


@pytest.fixture
def hex_layers():
    voting = gpd.GeoDataFrame(
        {
            'GEOID': ['0601', '0602', '0200', '3600'],
            'STATEAB': ['CA', 'CA', 'AK', 'NY'],
            'STATENAME': ['California', 'California', 'Alaska', 'New York'],
            'CDLABEL': ['CA-1', 'CA-2', 'AK', 'NY-0'],
        },
        geometry=[hexagon(0, 0), hexagon(2, 0), hexagon(4, 0), hexagon(6, 0)],
    )
    nonvoting = gpd.GeoDataFrame(
        {
            'GEOID': ['1198', '7298'],
            'ABBREV': ['DC', 'PR'],
            'NAME': ['District of Columbia', 'Puerto Rico'],
        },
        geometry=[hexagon(8, 0), hexagon(10, 0)],
    )
    return voting, nonvoting


@pytest.fixture
def snap_df():
    return pd.DataFrame({
        'congressional_district_geoid': [601, 602, 201, 1101],
        'state_fips': [6, 6, 2, 11],
        'snap_millions': [120.0, 480.0, 95.0, 0.0],
    })


def test_combine_adds_dc_and_fixes_at_large_ids(hex_layers):
    combined = combine_hex_districts(*hex_layers)
    assert isinstance(combined, gpd.GeoDataFrame)
    assert combined['cd_id'].tolist() == [601, 602, 201, 3600, 1101]
    dc = combined[combined['cd_id'] == 1101].iloc[0]
    assert dc['STATEAB'] == 'DC'
    assert dc['CDLABEL'] == 'DC'


def test_merge_and_classify(hex_layers, snap_df):
    combined = combine_hex_districts(*hex_layers)
    merged = merge_district_values(combined, snap_df, ['state_fips', 'snap_millions'])
    assert len(merged) == len(combined)
    assert merged['snap_millions'].notna().sum() == 4

    classified, result = classify_frame(merged, 'snap_millions', class_count=6)
    assert result.method == 'distinct'
    levels = dict(zip(classified['cd_id'], classified['level']))
    # NY has no data and DC has zero benefits.
    assert levels[3600] == 0
    assert levels[1101] == 0
    # Padded breaks: a value equal to a break takes the lower level.
    assert levels[201] == 1
    assert levels[601] == 1
    assert levels[602] == 2


def test_breaks_payload(hex_layers, snap_df):
    from convert_hex_to_geojson import breaks_payload

    combined = combine_hex_districts(*hex_layers)
    merged = merge_district_values(combined, snap_df, ['snap_millions'])
    _, result = classify_frame(merged, 'snap_millions', class_count=2)
    payload = breaks_payload(result, 'snap_millions')

    assert payload == {
        'column': 'snap_millions',
        'classCount': 2,
        'method': 'jenks',
        'breaks': [95.0, 120.0, 480.0],
        'min': 95.0,
        'max': 480.0,
        'positiveCount': 3,
    }
    json.dumps(payload)


def test_plot_levels(hex_layers, snap_df):
    import matplotlib.pyplot as plt
    from plot_snap_hexmap import NO_DATA_COLOR, level_colors, plot_levels

    colors = level_colors(6)
    assert len(colors) == 7
    assert colors[0] == NO_DATA_COLOR

    combined = combine_hex_districts(*hex_layers)
    merged = merge_district_values(combined, snap_df, ['snap_millions'])
    classified, result = classify_frame(merged, 'snap_millions', class_count=6)
    fig, ax = plot_levels(classified, result, 'SNAP', 'SNAP ($M)')

    labels = [t.get_text() for t in ax.get_legend().get_texts()]
    assert labels[0] == 'No Data'
    assert len(labels) == 1 + 6
    plt.close(fig)
