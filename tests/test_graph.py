import json

import pytest

from flightmap.graph import (
    airport_index, build_flights, build_flights_undirected, datapoint_to_flight, dedupe_routes,
    flights_from_dict, flights_to_dict, flights_to_frame,
)
from flightmap.schema import conforms_to_flights


def test_datapoint_to_flight(datapoints):
    flight = datapoint_to_flight(datapoints[1])

    assert flight.from_node.airport == 'LHR'
    assert flight.to_node.city == 'Paris'
    assert flight.distance == 344.0


def test_build_flights_groups_by_origin_in_order(datapoints):
    flights = build_flights(datapoints)

    assert list(flights.keys()) == ['LHR', 'CDG']
    assert [f.to_node.airport for f in flights['LHR']] == ['JFK', 'CDG', 'JFK']
    assert sum(len(v) for v in flights.values()) == len(datapoints)


@pytest.mark.parametrize('key, expected', [
    ('from_city', ['London', 'Paris']),
    ('to_airport', ['JFK', 'CDG']),
    ('airline', ['British Airways', 'Air France', 'Virgin Atlantic']),
])
def test_build_flights_other_keys(datapoints, key, expected):
    assert list(build_flights(datapoints, key=key).keys()) == expected


def test_build_flights_unknown_key(datapoints):
    with pytest.raises(ValueError, match='distance'):
        build_flights(datapoints, key='distance')


def test_build_flights_empty():
    assert build_flights([]) == {}


def test_build_flights_undirected(datapoints):
    flights = build_flights_undirected(datapoints)

    assert len(flights['JFK']) == 3
    assert len(flights['CDG']) == 2
    assert len(flights['LHR']) == 3

    with pytest.raises(ValueError):
        build_flights_undirected(datapoints, by='country')


def test_dedupe_routes(datapoints):
    deduped = dedupe_routes(build_flights(datapoints))

    assert [f.to_node.airport for f in deduped['LHR']] == ['JFK', 'CDG']
    assert len(deduped['CDG']) == 1


def test_flights_to_frame(datapoints):
    df = flights_to_frame(build_flights(datapoints))

    assert len(df) == 4
    assert df['key'].tolist() == ['LHR', 'LHR', 'LHR', 'CDG']
    assert df.loc[3, 'to_city'] == 'New York'


def test_flights_dict_is_json_and_conforms(datapoints):
    flights = build_flights(datapoints)

    data = json.loads(json.dumps(flights_to_dict(flights)))

    assert conforms_to_flights(data)
    assert data['CDG'][0]['from']['airport'] == 'CDG'
    assert flights_from_dict(data) == flights


def test_airport_index(datapoints):
    index = airport_index(datapoints)

    assert sorted(index) == ['CDG', 'JFK', 'LHR']
    assert index['JFK'].city == 'New York'
