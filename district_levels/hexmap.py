"""Hex congressional district geometry and per-district value joins."""

import geopandas as gpd
import pandas as pd

# Shapefile GEOIDs for at-large districts, mapped to the ids used in the data.
SINGLE_DISTRICT_STATES = {
    200: 201,   # Alaska
    1000: 1001, # Delaware
    3800: 3801, # North Dakota
    4600: 4601, # South Dakota
    5000: 5001, # Vermont
    5600: 5601, # Wyoming
    1198: 1101  # DC (from 1198 in shapefile to 1101 in PolicyEngine data)
}

DC_GEOID = '1198'


def combine_hex_districts(hex_gdf, nonvoting_gdf):
    """Append DC from the non-voting hex layer and add a `cd_id` column."""
    dc_gdf = nonvoting_gdf[nonvoting_gdf['GEOID'] == DC_GEOID].copy()
    # Match the voting district columns
    dc_gdf['STATEAB'] = dc_gdf['ABBREV']
    dc_gdf['STATENAME'] = dc_gdf['NAME']
    dc_gdf['CDLABEL'] = dc_gdf['ABBREV']

    combined = pd.concat([hex_gdf, dc_gdf], ignore_index=True)
    combined['cd_id'] = combined['GEOID'].astype(int).replace(SINGLE_DISTRICT_STATES)
    return gpd.GeoDataFrame(combined, geometry=hex_gdf.geometry.name, crs=hex_gdf.crs)


def load_hex_districts(hex_path='HexCDv31/HexCDv31.shp',
                       nonvoting_path='HexDDv20/HexDDv20.shp'):
    """Load the voting district hexes plus DC."""
    hex_gdf = gpd.read_file(hex_path)
    nonvoting_gdf = gpd.read_file(nonvoting_path)
    return combine_hex_districts(hex_gdf, nonvoting_gdf)


def merge_district_values(hex_gdf, values_df, columns, key='congressional_district_geoid'):
    """Left-join per-district `columns` of `values_df` onto the hexes by `cd_id`."""
    wanted = [key] + [c for c in columns if c != key]
    merged = hex_gdf.merge(values_df[wanted], left_on='cd_id', right_on=key, how='left')
    return gpd.GeoDataFrame(merged, geometry=hex_gdf.geometry.name, crs=hex_gdf.crs)
