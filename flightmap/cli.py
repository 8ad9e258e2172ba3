# cli.py
import argparse
import json
import os
import sys

from flightmap.arcs import PROJECTIONS, arcs_to_frame, build_arcs
from flightmap.config import (
    AIRLINE_KPIS_FILE, AIRPORT_KPIS_FILE, ARCS_FILE, DATAPOINTS_FILE, FLIGHTS_FILE, load_settings,
)
from flightmap.graph import GROUP_KEYS, build_flights, flights_to_dict
from flightmap.kpis import (
    calculate_airline_kpis, calculate_airport_kpis, distance_summary, find_busiest_airports,
)
from flightmap.load import datapoints_to_frame, frame_to_datapoints, load_route_data, validate_route_frame
from flightmap.visualize import plot_airport_volume, plot_arcs, plot_distance_histogram, plot_route_map


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='flightmap',
        description="Load flight route data, build the route graph and render route arcs.",
    )
    parser.add_argument('input', nargs='?', default=settings.data_dir,
                        help="Route file (.csv/.xlsx) or directory of route files.")
    parser.add_argument('-o', '--output-dir', default=settings.output_dir,
                        help="Directory for the generated CSV, JSON and plot files.")
    parser.add_argument('--group-by', default=settings.group_key, choices=GROUP_KEYS,
                        help="Datapoint field used to group flights.")
    parser.add_argument('--projection', default=settings.projection, choices=PROJECTIONS)
    parser.add_argument('--width', type=float, default=settings.canvas_width)
    parser.add_argument('--height', type=float, default=settings.canvas_height)
    parser.add_argument('--dedupe', action='store_true',
                        help="Draw each origin/destination airport pair only once.")
    parser.add_argument('--max-map-routes', type=int, default=2000,
                        help="Cap on the number of routes drawn on the world map.")
    parser.add_argument('--no-plots', action='store_true', help="Skip HTML plot generation.")
    return parser


def run_pipeline(args) -> dict:
    """
    Runs load -> validate -> graph -> arcs -> kpis -> plots and writes every
    stage's output under args.output_dir. Returns the distance summary.
    """
    raw_df = load_route_data(args.input)
    routes_df = validate_route_frame(raw_df)
    datapoints = frame_to_datapoints(routes_df)

    flights = build_flights(datapoints, key=args.group_by)
    arcs = build_arcs(flights, args.width, args.height, projection=args.projection, dedupe=args.dedupe)

    output_dir = args.output_dir
    if not os.path.exists(output_dir):
        os.makedirs(output_dir)

    datapoints_to_frame(datapoints).to_csv(os.path.join(output_dir, DATAPOINTS_FILE), index=False)
    with open(os.path.join(output_dir, FLIGHTS_FILE), 'w', encoding='utf-8') as f:
        json.dump(flights_to_dict(flights), f, indent=2)
    arcs_to_frame(arcs).to_csv(os.path.join(output_dir, ARCS_FILE), index=False)

    airport_kpis = calculate_airport_kpis(routes_df)
    airline_kpis = calculate_airline_kpis(routes_df)
    airport_kpis.to_csv(os.path.join(output_dir, AIRPORT_KPIS_FILE), index=False)
    airline_kpis.to_csv(os.path.join(output_dir, AIRLINE_KPIS_FILE), index=False)
    print(f"\nSaved pipeline outputs to {output_dir}")

    if not args.no_plots:
        plots_dir = os.path.join(output_dir, 'plots')
        if not os.path.exists(plots_dir):
            os.makedirs(plots_dir)
        plot_route_map(flights, os.path.join(plots_dir, '05_route_map.html'), max_routes=args.max_map_routes)
        plot_arcs(arcs, args.width, args.height, os.path.join(plots_dir, '05_arcs.html'))
        plot_airport_volume(airport_kpis, os.path.join(plots_dir, '05_airport_volume.html'))
        plot_distance_histogram(routes_df, os.path.join(plots_dir, '05_distance_histogram.html'))

    print("\n--- Busiest Airports (by total routes) ---")
    print(find_busiest_airports(airport_kpis)[['airport', 'city', 'total_routes', 'destinations']])

    summary = distance_summary(routes_df)
    print("\n--- Distance Summary ---")
    print(summary)
    return summary


def main(argv=None):
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}")
        sys.exit(1)

    args = build_parser(settings).parse_args(argv)

    try:
        run_pipeline(args)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except KeyError as e:
        print(f"Error: {e.args[0] if e.args else e}")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
