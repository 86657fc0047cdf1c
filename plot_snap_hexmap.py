import argparse

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch
import pandas as pd

from district_levels import DEFAULT_CLASS_COUNT, classify_frame, legend_entries
from district_levels.hexmap import load_hex_districts, merge_district_values

NO_DATA_COLOR = 'lightgray'


def level_colors(class_count, cmap='YlOrRd'):
    """Colors for levels 0..class_count; level 0 is the no-data gray."""
    ramp = plt.get_cmap(cmap)(np.linspace(0.15, 1.0, class_count))
    return [NO_DATA_COLOR] + [tuple(c) for c in ramp]


def plot_levels(gdf, result, title, legend_title, cmap='YlOrRd', level_column='level'):
    """Draw the hexes colored by level with a class legend."""
    colors = level_colors(result.class_count, cmap)
    fig, ax = plt.subplots(1, 1, figsize=(20, 12))

    gdf.plot(
        column=level_column,
        ax=ax,
        cmap=ListedColormap(colors),
        vmin=0,
        vmax=result.class_count,
        edgecolor='black',
        linewidth=0.3,
    )

    handles = [Patch(facecolor=NO_DATA_COLOR, edgecolor='black', label='No Data')]
    for entry in legend_entries(result.breaks):
        handles.append(Patch(facecolor=colors[entry.level], edgecolor='black', label=entry.label))
    ax.legend(handles=handles, title=legend_title, loc='lower left', frameon=False)

    ax.set_title(title, fontsize=20, fontweight='bold', pad=20)
    ax.axis('off')
    plt.tight_layout()
    return fig, ax


def main():
    parser = argparse.ArgumentParser(
        description="Plot SNAP benefits by congressional district as natural-break levels"
    )
    parser.add_argument('--data', default='snap_by_congressional_district.csv',
                        help="Per-district CSV (default: snap_by_congressional_district.csv)")
    parser.add_argument('--hex', default='HexCDv31/HexCDv31.shp',
                        help="Voting district hex shapefile")
    parser.add_argument('--nonvoting', default='HexDDv20/HexDDv20.shp',
                        help="Non-voting district hex shapefile (for DC)")
    parser.add_argument('--classes', type=int, default=DEFAULT_CLASS_COUNT,
                        help=f"Number of classes (default: {DEFAULT_CLASS_COUNT})")
    parser.add_argument('--out', default='snap_benefits_by_district.png',
                        help="Output image (default: snap_benefits_by_district.png)")
    parser.add_argument('--show', action='store_true', help="Open the plot window")
    args = parser.parse_args()

    # Load the SNAP data from CSV
    snap_df = pd.read_csv(args.data)

    # Convert benefits to millions for easier visualization
    snap_df['snap_millions'] = snap_df['total_weighted_snap'] / 1e6

    hex_gdf = load_hex_districts(args.hex, args.nonvoting)
    merged_gdf = merge_district_values(hex_gdf, snap_df, ['state_fips', 'snap_millions'])

    classified_gdf, result = classify_frame(merged_gdf, 'snap_millions', args.classes)

    plot_levels(
        classified_gdf,
        result,
        title='SNAP Benefits by Congressional District',
        legend_title='SNAP Benefits ($ Millions)',
    )
    plt.savefig(args.out, dpi=300, bbox_inches='tight')
    print(f"Map saved as {args.out}")

    # Print summary statistics
    print("\n=== Summary Statistics ===")
    print(f"Districts with SNAP data: {snap_df.shape[0]}")
    print(f"Total districts in shapefile: {hex_gdf.shape[0]}")
    print(f"Districts matched: {merged_gdf['snap_millions'].notna().sum()}")

    summary = result.summary()
    if result.is_empty:
        print("No positive SNAP values, nothing classified")
    else:
        print(f"Range: ${summary['min']:.1f}M - ${summary['max']:.1f}M "
              f"across {summary['positiveCount']} districts")
        print(f"\nClass breaks ({result.method}):")
        for entry in legend_entries(result.breaks):
            count = int((classified_gdf['level'] == entry.level).sum())
            print(f"  Level {entry.level}: ${entry.label}M ({count} districts)")
    print(f"  Level 0 (no data): {int((classified_gdf['level'] == 0).sum())} districts")

    if args.show:
        plt.show()


if __name__ == '__main__':
    main()
