import argparse
import json

import pandas as pd

from district_levels import DEFAULT_CLASS_COUNT, classify_frame
from district_levels.hexmap import load_hex_districts, merge_district_values


def breaks_payload(result, column):
    """Breaks and summary statistics for the map front end."""
    return {
        'column': column,
        'classCount': result.class_count,
        'method': result.method,
        'breaks': list(result.breaks) if result.breaks is not None else None,
        **result.summary(),
    }


def main():
    parser = argparse.ArgumentParser(
        description="Write hex congressional districts as GeoJSON with a per-district level"
    )
    parser.add_argument('--data', default='snap_by_congressional_district.csv',
                        help="Per-district CSV (default: snap_by_congressional_district.csv)")
    parser.add_argument('--column', default='total_weighted_snap',
                        help="Column to classify (default: total_weighted_snap)")
    parser.add_argument('--hex', default='HexCDv31/HexCDv31.shp')
    parser.add_argument('--nonvoting', default='HexDDv20/HexDDv20.shp')
    parser.add_argument('--classes', type=int, default=DEFAULT_CLASS_COUNT)
    parser.add_argument('--out', default='hex_congressional_districts.geojson')
    parser.add_argument('--breaks-out', default='hex_congressional_districts_breaks.json')
    args = parser.parse_args()

    combined_gdf = load_hex_districts(args.hex, args.nonvoting)

    values_df = pd.read_csv(args.data)
    merged_gdf = merge_district_values(combined_gdf, values_df, [args.column])
    classified_gdf, result = classify_frame(merged_gdf, args.column, args.classes)

    # Convert to GeoJSON
    classified_gdf.to_file(args.out, driver='GeoJSON')
    with open(args.breaks_out, 'w') as f:
        json.dump(breaks_payload(result, args.column), f, indent=2)

    print(f"Converted {len(classified_gdf)} districts to GeoJSON")
    print(f"Saved as: {args.out}")
    print(f"Breaks ({result.method}): {result.breaks}")
    print(f"Saved breaks as: {args.breaks_out}")


if __name__ == '__main__':
    main()
