import pandas as pd
import pytest

from flightmap.schema import Datapoint

ROWS = [
    {
        'airline': 'British Airways', 'airline_country': 'United Kingdom', 'distance': 5540.0,
        'from_airport': 'LHR', 'from_city': 'London', 'from_country': 'United Kingdom',
        'from_lat': 51.47, 'from_long': -0.4543,
        'to_airport': 'JFK', 'to_city': 'New York', 'to_country': 'United States',
        'to_lat': 40.6413, 'to_long': -73.7781,
    },
    {
        'airline': 'British Airways', 'airline_country': 'United Kingdom', 'distance': 344.0,
        'from_airport': 'LHR', 'from_city': 'London', 'from_country': 'United Kingdom',
        'from_lat': 51.47, 'from_long': -0.4543,
        'to_airport': 'CDG', 'to_city': 'Paris', 'to_country': 'France',
        'to_lat': 49.0097, 'to_long': 2.5479,
    },
    {
        'airline': 'Air France', 'airline_country': 'France', 'distance': 5837.0,
        'from_airport': 'CDG', 'from_city': 'Paris', 'from_country': 'France',
        'from_lat': 49.0097, 'from_long': 2.5479,
        'to_airport': 'JFK', 'to_city': 'New York', 'to_country': 'United States',
        'to_lat': 40.6413, 'to_long': -73.7781,
    },
    {
        'airline': 'Virgin Atlantic', 'airline_country': 'United Kingdom', 'distance': 5540.0,
        'from_airport': 'LHR', 'from_city': 'London', 'from_country': 'United Kingdom',
        'from_lat': 51.47, 'from_long': -0.4543,
        'to_airport': 'JFK', 'to_city': 'New York', 'to_country': 'United States',
        'to_lat': 40.6413, 'to_long': -73.7781,
    },
]


@pytest.fixture
def route_rows():
    return [dict(r) for r in ROWS]


@pytest.fixture
def routes_df(route_rows):
    return pd.DataFrame(route_rows)


@pytest.fixture
def datapoints(route_rows):
    return [Datapoint.from_dict(r) for r in route_rows]


@pytest.fixture
def routes_csv(tmp_path, routes_df):
    path = tmp_path / 'routes.csv'
    routes_df.to_csv(path, index=False)
    return path
