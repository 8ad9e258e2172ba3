import pandas as pd
import os


def calculate_airport_kpis(df: pd.DataFrame) -> pd.DataFrame:
    """
    Calculates per-airport traffic KPIs from validated route data.

    Args:
        df: The validated route DataFrame (one row per datapoint).

    Returns:
        A DataFrame with one row per airport:
        - departures
        - arrivals
        - total_routes
        - destinations (distinct airports served from here)
        - average_outbound_distance
    """
    print("Calculating airport KPIs...")

    df = df.copy()
    df['distance'] = pd.to_numeric(df['distance'], errors='coerce')

    # --- Departure KPIs ---
    departure_kpis = df.groupby('from_airport').agg(
        city=('from_city', 'first'),
        country=('from_country', 'first'),
        departures=('to_airport', 'count'),
        destinations=('to_airport', 'nunique'),
        average_outbound_distance=('distance', 'mean'),
    ).reset_index()
    departure_kpis.rename(columns={'from_airport': 'airport'}, inplace=True)

    # --- Arrival KPIs ---
    arrival_kpis = df.groupby('to_airport').agg(
        arrival_city=('to_city', 'first'),
        arrival_country=('to_country', 'first'),
        arrivals=('from_airport', 'count'),
    ).reset_index()
    arrival_kpis.rename(columns={'to_airport': 'airport'}, inplace=True)

    # --- Merge KPIs ---
    airport_summary = pd.merge(departure_kpis, arrival_kpis, on='airport', how='outer')

    # airports that only receive flights take their names from the arrival side
    airport_summary['city'] = airport_summary['city'].fillna(airport_summary['arrival_city'])
    airport_summary['country'] = airport_summary['country'].fillna(airport_summary['arrival_country'])
    airport_summary.drop(columns=['arrival_city', 'arrival_country'], inplace=True)

    for col in ('departures', 'arrivals', 'destinations'):
        airport_summary[col] = airport_summary[col].fillna(0).astype(int)

    airport_summary['total_routes'] = airport_summary['departures'] + airport_summary['arrivals']
    airport_summary['average_outbound_distance'] = airport_summary['average_outbound_distance'].round(2)

    airport_summary = airport_summary[[
        'airport', 'city', 'country', 'departures', 'arrivals', 'total_routes',
        'destinations', 'average_outbound_distance',
    ]]

    print("Airport KPIs calculated successfully.")
    return airport_summary


def calculate_airline_kpis(df: pd.DataFrame) -> pd.DataFrame:
    """
    Calculates per-airline network KPIs.

    Returns:
        A DataFrame with airline, airline_country, routes, airports
        (distinct airports touched), total_distance and average_distance,
        sorted by routes descending.
    """
    print("Calculating airline KPIs...")

    df = df.copy()
    df['distance'] = pd.to_numeric(df['distance'], errors='coerce')

    airline_kpis = df.groupby('airline').agg(
        airline_country=('airline_country', 'first'),
        routes=('from_airport', 'count'),
        total_distance=('distance', 'sum'),
        average_distance=('distance', 'mean'),
    ).reset_index()

    # distinct airports across both endpoints
    endpoints = pd.concat([
        df[['airline', 'from_airport']].rename(columns={'from_airport': 'airport'}),
        df[['airline', 'to_airport']].rename(columns={'to_airport': 'airport'}),
    ])
    airports = endpoints.groupby('airline')['airport'].nunique().rename('airports').reset_index()
    airline_kpis = pd.merge(airline_kpis, airports, on='airline', how='left')

    airline_kpis['total_distance'] = airline_kpis['total_distance'].round(2)
    airline_kpis['average_distance'] = airline_kpis['average_distance'].round(2)

    airline_kpis = airline_kpis[[
        'airline', 'airline_country', 'routes', 'airports', 'total_distance', 'average_distance',
    ]].sort_values(by=['routes', 'airline'], ascending=[False, True]).reset_index(drop=True)

    print("Airline KPIs calculated successfully.")
    return airline_kpis


def find_busiest_airports(airport_kpis: pd.DataFrame, top_n: int = 5) -> pd.DataFrame:
    """
    Identifies the airports with the most routes (departures plus arrivals).

    Args:
        airport_kpis: The DataFrame from calculate_airport_kpis.
        top_n: The number of airports to return.
    """
    return airport_kpis.sort_values(by=['total_routes', 'airport'], ascending=[False, True]).head(top_n)


def find_longest_routes(df: pd.DataFrame, top_n: int = 5) -> pd.DataFrame:
    """Returns the top_n routes by distance, one row per airport pair."""
    routes = df.drop_duplicates(subset=['from_airport', 'to_airport'])
    cols = ['airline', 'from_airport', 'from_city', 'to_airport', 'to_city', 'distance']
    return routes.sort_values(by='distance', ascending=False).head(top_n)[cols].reset_index(drop=True)


def distance_summary(df: pd.DataFrame) -> dict:
    distance = pd.to_numeric(df['distance'], errors='coerce').dropna()
    if distance.empty:
        return {'count': 0, 'min': None, 'max': None, 'mean': None, 'median': None}
    return {
        'count': int(distance.count()),
        'min': float(distance.min()),
        'max': float(distance.max()),
        'mean': round(float(distance.mean()), 2),
        'median': float(distance.median()),
    }


if __name__ == '__main__':
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    output_path = os.path.join(project_root, 'outputs')

    datapoints_path = os.path.join(output_path, '01_datapoints.csv')
    if not os.path.exists(datapoints_path):
        print(f"Error: Input file not found at {datapoints_path}")
        print("Please run `flightmap` (flightmap/cli.py) first.")
    else:
        routes_df = pd.read_csv(datapoints_path)
        airport_kpis_df = calculate_airport_kpis(routes_df)

        print("\n--- Busiest Airports (by total routes) ---")
        print(find_busiest_airports(airport_kpis_df)[['airport', 'city', 'total_routes', 'destinations']])

        print("\n--- Longest Routes ---")
        print(find_longest_routes(routes_df))
