# flightmap/schema.py

import math
from dataclasses import dataclass, asdict
from numbers import Real
from typing import Any, Dict, List, Mapping


class SchemaError(ValueError):
    """Raised when a record does not match its declared shape or bounds."""


DATAPOINT_STR_FIELDS = [
    'airline', 'airline_country',
    'from_airport', 'from_city', 'from_country',
    'to_airport', 'to_city', 'to_country',
]
DATAPOINT_NUM_FIELDS = ['distance', 'from_lat', 'from_long', 'to_lat', 'to_long']
DATAPOINT_FIELDS = [
    'airline', 'airline_country', 'distance',
    'from_airport', 'from_city', 'from_country', 'from_lat', 'from_long',
    'to_airport', 'to_city', 'to_country', 'to_lat', 'to_long',
]

FLIGHT_NODE_STR_FIELDS = ['city', 'airport', 'country']
FLIGHT_NODE_NUM_FIELDS = ['lat', 'long']
ARC_NUM_FIELDS = ['x1', 'y1', 'x2', 'y2', 'distance']


def is_number(value: Any) -> bool:
    # bool is a subclass of int but never a valid coordinate or distance
    return isinstance(value, Real) and not isinstance(value, bool)


def check_kinds(record: Any, str_fields: List[str], num_fields: List[str]) -> None:
    for field in str_fields:
        value = getattr(record, field)
        if not isinstance(value, str):
            raise SchemaError(f"Field '{field}' must be a string, got {type(value).__name__}")
    for field in num_fields:
        value = getattr(record, field)
        if not is_number(value):
            raise SchemaError(f"Field '{field}' must be a number, got {type(value).__name__}")


def check_latitude(lat: float) -> None:
    if not math.isfinite(lat) or not -90.0 <= lat <= 90.0:
        raise SchemaError(f"Latitude out of range [-90, 90]: {lat}")


def check_longitude(long: float) -> None:
    if not math.isfinite(long) or not -180.0 <= long <= 180.0:
        raise SchemaError(f"Longitude out of range [-180, 180]: {long}")


def check_distance(distance: float) -> None:
    if not math.isfinite(distance) or distance < 0:
        raise SchemaError(f"Distance must be a finite non-negative number: {distance}")


@dataclass(frozen=True)
class FlightNode:
    city: str
    airport: str
    country: str
    lat: float
    long: float

    def __post_init__(self):
        check_kinds(self, FLIGHT_NODE_STR_FIELDS, FLIGHT_NODE_NUM_FIELDS)
        check_latitude(self.lat)
        check_longitude(self.long)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Flight:
    """A directed edge between two airports.

    Serialised with the keys ``from`` and ``to``; the attributes carry a
    ``_node`` suffix because ``from`` is a Python keyword.
    """
    from_node: FlightNode
    to_node: FlightNode
    distance: float

    def __post_init__(self):
        for name in ('from_node', 'to_node'):
            if not isinstance(getattr(self, name), FlightNode):
                raise SchemaError(f"Flight {name} must be a FlightNode, got {type(getattr(self, name)).__name__}")
        check_kinds(self, [], ['distance'])
        check_distance(self.distance)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'from': self.from_node.to_dict(),
            'to': self.to_node.to_dict(),
            'distance': self.distance,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Flight':
        if not conforms_to_flight(data):
            raise SchemaError(f"Value is not a valid flight: {data!r}")
        return cls(
            from_node=FlightNode(**data['from']),
            to_node=FlightNode(**data['to']),
            distance=float(data['distance']),
        )


# Adjacency list: airport or city key -> outgoing (or related) flights
Flights = Dict[str, List[Flight]]


@dataclass(frozen=True)
class Arc:
    x1: float
    y1: float
    x2: float
    y2: float
    distance: float

    def __post_init__(self):
        check_kinds(self, [], ARC_NUM_FIELDS)
        for name in ('x1', 'y1', 'x2', 'y2'):
            if not math.isfinite(getattr(self, name)):
                raise SchemaError(f"Arc coordinate {name} must be finite")
        check_distance(self.distance)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class Datapoint:
    airline: str
    airline_country: str
    distance: float
    from_airport: str
    from_city: str
    from_country: str
    from_lat: float
    from_long: float
    to_airport: str
    to_city: str
    to_country: str
    to_lat: float
    to_long: float

    def __post_init__(self):
        check_kinds(self, DATAPOINT_STR_FIELDS, DATAPOINT_NUM_FIELDS)
        check_distance(self.distance)
        check_latitude(self.from_lat)
        check_longitude(self.from_long)
        check_latitude(self.to_lat)
        check_longitude(self.to_long)

    def origin(self) -> FlightNode:
        return FlightNode(
            city=self.from_city,
            airport=self.from_airport,
            country=self.from_country,
            lat=self.from_lat,
            long=self.from_long,
        )

    def destination(self) -> FlightNode:
        return FlightNode(
            city=self.to_city,
            airport=self.to_airport,
            country=self.to_country,
            lat=self.to_lat,
            long=self.to_long,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'Datapoint':
        """
        Builds a Datapoint from a row mapping such as a DataFrame record.
        Numeric fields may be given as numeric strings; extra keys are ignored.
        """
        missing = [f for f in DATAPOINT_FIELDS if f not in row]
        if missing:
            raise SchemaError(f"Missing datapoint fields: {missing}")

        values = {}
        for field in DATAPOINT_STR_FIELDS:
            value = row[field]
            if not isinstance(value, str):
                raise SchemaError(f"Field '{field}' must be a string, got {type(value).__name__}")
            values[field] = value.strip()

        for field in DATAPOINT_NUM_FIELDS:
            value = row[field]
            if isinstance(value, bool):
                raise SchemaError(f"Field '{field}' must be a number, got bool")
            try:
                values[field] = float(value)
            except (TypeError, ValueError):
                raise SchemaError(f"Field '{field}' must be a number, got {value!r}") from None

        return cls(**values)


def _conforms(value: Any, str_fields: List[str], num_fields: List[str]) -> bool:
    if not isinstance(value, Mapping):
        return False
    if set(value.keys()) != set(str_fields) | set(num_fields):
        return False
    if not all(isinstance(value[f], str) for f in str_fields):
        return False
    return all(is_number(value[f]) for f in num_fields)


def conforms_to_datapoint(value: Any) -> bool:
    return _conforms(value, DATAPOINT_STR_FIELDS, DATAPOINT_NUM_FIELDS)


def conforms_to_flight_node(value: Any) -> bool:
    return _conforms(value, FLIGHT_NODE_STR_FIELDS, FLIGHT_NODE_NUM_FIELDS)


def conforms_to_flight(value: Any) -> bool:
    if not isinstance(value, Mapping) or set(value.keys()) != {'from', 'to', 'distance'}:
        return False
    return (
        conforms_to_flight_node(value['from'])
        and conforms_to_flight_node(value['to'])
        and is_number(value['distance'])
    )


def conforms_to_flights(value: Any) -> bool:
    """
    Checks a plain ``{key: [flight, ...]}`` mapping. Keys must be strings and
    every value a list or tuple of conforming flights.
    """
    if not isinstance(value, Mapping):
        return False
    for key, flights in value.items():
        if not isinstance(key, str) or not isinstance(flights, (list, tuple)):
            return False
        if not all(conforms_to_flight(f) for f in flights):
            return False
    return True


def conforms_to_arc(value: Any) -> bool:
    return _conforms(value, [], ARC_NUM_FIELDS)
