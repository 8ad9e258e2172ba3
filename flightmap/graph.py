import pandas as pd
from typing import Dict, Iterable, List

from flightmap.schema import Datapoint, Flight, FlightNode, Flights

GROUP_KEYS = ('from_airport', 'from_city', 'to_airport', 'to_city', 'airline')


def datapoint_to_flight(dp: Datapoint) -> Flight:
    return Flight(from_node=dp.origin(), to_node=dp.destination(), distance=dp.distance)


def build_flights(datapoints: Iterable[Datapoint], key: str = 'from_airport') -> Flights:
    """
    Groups datapoints into an adjacency list of flights.

    Args:
        datapoints: Route records, in the order they should appear.
        key: The Datapoint field to group on. One of GROUP_KEYS.

    Returns:
        A mapping from key value to the flights sharing it. Keys and the
        flights under each key keep their input order.
    """
    if key not in GROUP_KEYS:
        raise ValueError(f"Unsupported group key '{key}'. Expected one of {GROUP_KEYS}")

    print(f"Building flight graph grouped by '{key}'...")
    flights: Flights = {}
    for dp in datapoints:
        flights.setdefault(getattr(dp, key), []).append(datapoint_to_flight(dp))

    total = sum(len(v) for v in flights.values())
    print(f"Built {total} flights across {len(flights)} keys.")
    return flights


def build_flights_undirected(datapoints: Iterable[Datapoint], by: str = 'airport') -> Flights:
    """
    Lists every flight under both of its endpoints, so each key maps to all
    flights touching that airport (or city). A flight whose endpoints share
    the key is listed once.
    """
    if by not in ('airport', 'city'):
        raise ValueError(f"Unsupported endpoint attribute '{by}'. Expected 'airport' or 'city'")

    flights: Flights = {}
    for dp in datapoints:
        flight = datapoint_to_flight(dp)
        origin_key = getattr(flight.from_node, by)
        dest_key = getattr(flight.to_node, by)
        flights.setdefault(origin_key, []).append(flight)
        if dest_key != origin_key:
            flights.setdefault(dest_key, []).append(flight)
    return flights


def dedupe_routes(flights: Flights) -> Flights:
    """Keeps the first flight for each (origin, destination) airport pair per key."""
    deduped: Flights = {}
    for key, key_flights in flights.items():
        seen = set()
        kept = []
        for flight in key_flights:
            pair = (flight.from_node.airport, flight.to_node.airport)
            if pair not in seen:
                seen.add(pair)
                kept.append(flight)
        deduped[key] = kept
    return deduped


def flights_to_frame(flights: Flights) -> pd.DataFrame:
    """Flattens an adjacency list into one row per flight with its group key."""
    rows = []
    for key, key_flights in flights.items():
        for flight in key_flights:
            rows.append({
                'key': key,
                'from_airport': flight.from_node.airport,
                'from_city': flight.from_node.city,
                'from_country': flight.from_node.country,
                'from_lat': flight.from_node.lat,
                'from_long': flight.from_node.long,
                'to_airport': flight.to_node.airport,
                'to_city': flight.to_node.city,
                'to_country': flight.to_node.country,
                'to_lat': flight.to_node.lat,
                'to_long': flight.to_node.long,
                'distance': flight.distance,
            })
    columns = ['key', 'from_airport', 'from_city', 'from_country', 'from_lat', 'from_long',
               'to_airport', 'to_city', 'to_country', 'to_lat', 'to_long', 'distance']
    return pd.DataFrame(rows, columns=columns)


def flights_to_dict(flights: Flights) -> Dict[str, List[dict]]:
    """Plain-dict form of an adjacency list, suitable for JSON output."""
    return {key: [f.to_dict() for f in key_flights] for key, key_flights in flights.items()}


def flights_from_dict(data: Dict[str, List[dict]]) -> Flights:
    return {key: [Flight.from_dict(f) for f in key_flights] for key, key_flights in data.items()}


def airport_index(datapoints: Iterable[Datapoint]) -> Dict[str, FlightNode]:
    """Maps each airport code to its node, first occurrence wins."""
    index: Dict[str, FlightNode] = {}
    for dp in datapoints:
        for node in (dp.origin(), dp.destination()):
            index.setdefault(node.airport, node)
    return index
