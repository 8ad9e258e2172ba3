import math
from typing import Iterable, List, Tuple

import numpy as np
import pandas as pd

from flightmap.schema import Arc, Flight, Flights

EARTH_RADIUS_KM = 6371.0
MERCATOR_MAX_LAT = 85.05112878
PROJECTIONS = ('equirectangular', 'mercator')


def haversine_km(lat1, long1, lat2, long2):
    """
    Great-circle distance in kilometres between two lat/long points.
    Works on scalars and on numpy arrays / pandas Series alike.
    """
    lat1, long1, lat2, long2 = map(np.radians, (lat1, long1, lat2, long2))
    dlat = lat2 - lat1
    dlong = long2 - long1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlong / 2) ** 2
    return 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def _mercator_y(lat: float) -> float:
    lat = max(-MERCATOR_MAX_LAT, min(MERCATOR_MAX_LAT, lat))
    return math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))


def project(lat: float, long: float, width: float, height: float,
            projection: str = 'equirectangular') -> Tuple[float, float]:
    """
    Projects a lat/long pair onto a width x height canvas with the origin in
    the top-left corner (y grows southwards).

    Args:
        lat: Latitude in degrees.
        long: Longitude in degrees.
        width: Canvas width.
        height: Canvas height.
        projection: 'equirectangular' or 'mercator'.

    Returns:
        The (x, y) plane coordinates.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Canvas size must be positive, got {width}x{height}")

    x = (long + 180.0) / 360.0 * width

    if projection == 'equirectangular':
        y = (90.0 - lat) / 180.0 * height
    elif projection == 'mercator':
        y_max = _mercator_y(MERCATOR_MAX_LAT)
        y = (y_max - _mercator_y(lat)) / (2 * y_max) * height
    else:
        raise ValueError(f"Unknown projection '{projection}'. Expected one of {PROJECTIONS}")

    return x, y


def flight_to_arc(flight: Flight, width: float, height: float,
                  projection: str = 'equirectangular') -> Arc:
    x1, y1 = project(flight.from_node.lat, flight.from_node.long, width, height, projection)
    x2, y2 = project(flight.to_node.lat, flight.to_node.long, width, height, projection)
    return Arc(x1=x1, y1=y1, x2=x2, y2=y2, distance=flight.distance)


def build_arcs(flights: Flights, width: float, height: float,
               projection: str = 'equirectangular', dedupe: bool = False) -> List[Arc]:
    """
    Converts an adjacency list of flights into plotting arcs.

    Arcs come out in key order, then flight order within each key. With
    dedupe=True an (origin airport, destination airport) pair is drawn once
    even when several airlines fly it or it is listed under two keys.
    """
    print(f"Building arcs ({projection}, {width}x{height})...")
    arcs = []
    seen = set()
    for key_flights in flights.values():
        for flight in key_flights:
            if dedupe:
                pair = (flight.from_node.airport, flight.to_node.airport)
                if pair in seen:
                    continue
                seen.add(pair)
            arcs.append(flight_to_arc(flight, width, height, projection))
    print(f"Built {len(arcs)} arcs.")
    return arcs


def great_circle_points(flight: Flight, n_points: int = 20) -> List[Tuple[float, float]]:
    """
    Samples n_points (lat, long) pairs along the great circle between the
    flight's endpoints, endpoints included.
    """
    if n_points < 2:
        raise ValueError("n_points must be at least 2")

    lat1, long1 = math.radians(flight.from_node.lat), math.radians(flight.from_node.long)
    lat2, long2 = math.radians(flight.to_node.lat), math.radians(flight.to_node.long)

    p1 = np.array([math.cos(lat1) * math.cos(long1), math.cos(lat1) * math.sin(long1), math.sin(lat1)])
    p2 = np.array([math.cos(lat2) * math.cos(long2), math.cos(lat2) * math.sin(long2), math.sin(lat2)])
    omega = math.acos(max(-1.0, min(1.0, float(np.dot(p1, p2)))))

    points = []
    for t in np.linspace(0.0, 1.0, n_points):
        if omega < 1e-12:
            p = p1
        else:
            p = (math.sin((1 - t) * omega) * p1 + math.sin(t * omega) * p2) / math.sin(omega)
        lat = math.degrees(math.atan2(p[2], math.hypot(p[0], p[1])))
        long = math.degrees(math.atan2(p[1], p[0]))
        points.append((lat, long))

    # keep the exact endpoints rather than their round-tripped values
    points[0] = (flight.from_node.lat, flight.from_node.long)
    points[-1] = (flight.to_node.lat, flight.to_node.long)
    return points


def arcs_to_frame(arcs: Iterable[Arc]) -> pd.DataFrame:
    return pd.DataFrame([arc.to_dict() for arc in arcs], columns=['x1', 'y1', 'x2', 'y2', 'distance'])
