import numpy as np
import pandas as pd
import pytest

from flightmap.load import (
    clean_col_names, datapoints_to_frame, fill_missing_distance, frame_to_datapoints,
    load_datapoints, load_route_data, read_output_csv, validate_route_frame,
)
from flightmap.schema import DATAPOINT_FIELDS


def test_clean_col_names_normalises_and_aliases():
    df = pd.DataFrame(columns=['Airline', 'From Airport', 'from_lon', 'To-Lat ', 'To Longitude', 'Unnamed: 7'])

    cleaned = clean_col_names(df)

    assert cleaned.columns.tolist() == ['airline', 'from_airport', 'from_long', 'to_lat', 'to_long', '']


def test_clean_col_names_keeps_canonical_over_alias():
    df = pd.DataFrame(columns=['from_long', 'from_lon'])

    assert clean_col_names(df).columns.tolist() == ['from_long', 'from_lon']


def test_load_route_data_from_file(routes_csv):
    df = load_route_data(str(routes_csv))

    assert len(df) == 4
    assert set(DATAPOINT_FIELDS) <= set(df.columns)


def test_load_route_data_combines_directory(tmp_path, routes_df):
    routes_df.iloc[:2].to_csv(tmp_path / 'a.csv', index=False)
    routes_df.iloc[2:].to_csv(tmp_path / 'b.csv', index=False)
    (tmp_path / 'notes.txt').write_text('not route data')

    df = load_route_data(str(tmp_path))

    assert len(df) == 4
    assert df['airline'].tolist() == routes_df['airline'].tolist()


def test_load_route_data_skips_unreadable_file(tmp_path, routes_df, capsys):
    routes_df.to_csv(tmp_path / 'good.csv', index=False)
    (tmp_path / 'empty.csv').write_text('')

    df = load_route_data(str(tmp_path))

    assert len(df) == 4
    assert 'empty.csv' in capsys.readouterr().out


def test_load_route_data_missing_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_route_data(str(tmp_path))


def test_validate_route_frame_requires_columns(routes_df):
    with pytest.raises(KeyError, match='to_lat'):
        validate_route_frame(routes_df.drop(columns=['to_lat']))


def test_validate_route_frame_drops_invalid_rows(routes_df):
    df = routes_df.astype({'from_lat': object, 'airline': object})
    df.loc[0, 'from_lat'] = 123.0
    df.loc[1, 'airline'] = '  '
    df.loc[2, 'to_long'] = np.nan

    valid = validate_route_frame(df)

    assert len(valid) == 1
    assert valid.loc[0, 'airline'] == 'Virgin Atlantic'
    assert valid.columns.tolist() == DATAPOINT_FIELDS


def test_validate_route_frame_coerces_numbers_and_strips(routes_df):
    df = routes_df.astype(str)
    df.loc[0, 'airline'] = '  British Airways '
    df.loc[1, 'distance'] = 'unknown'

    valid = validate_route_frame(df)

    assert len(valid) == 4
    assert valid.loc[0, 'airline'] == 'British Airways'
    assert valid['from_lat'].dtype == float
    # unparseable distance is recomputed from coordinates
    assert valid.loc[1, 'distance'] == pytest.approx(347.5, abs=5)


def test_validate_route_frame_rejects_negative_distance(routes_df):
    df = routes_df.copy()
    df.loc[3, 'distance'] = -10

    assert len(validate_route_frame(df)) == 3


def test_fill_missing_distance_without_column(routes_df):
    df = fill_missing_distance(routes_df.drop(columns=['distance']))

    assert df['distance'].notna().all()
    # London - New York great circle is about 5540 km
    assert df.loc[0, 'distance'] == pytest.approx(5540, rel=0.01)


def test_frame_datapoints_round_trip(routes_df):
    valid = validate_route_frame(routes_df)

    records = frame_to_datapoints(valid)

    assert len(records) == 4
    assert records[2].airline == 'Air France'
    pd.testing.assert_frame_equal(datapoints_to_frame(records), valid, check_dtype=False)


def test_load_datapoints(routes_csv):
    records = load_datapoints(str(routes_csv))

    assert [r.to_airport for r in records] == ['JFK', 'CDG', 'JFK', 'JFK']


def test_read_output_csv_keeps_codes_as_text(tmp_path, routes_df):
    df = routes_df.copy()
    df['from_airport'] = '1001'
    df['to_airport'] = '0042'
    path = tmp_path / '01_datapoints.csv'
    df.to_csv(path, index=False)
    kpi_path = tmp_path / '04_airport_kpis.csv'
    pd.DataFrame({'airport': ['1001', '0042'], 'total_routes': [4, 4]}).to_csv(kpi_path, index=False)

    routes = read_output_csv(str(path))
    kpis = read_output_csv(str(kpi_path))

    assert routes.loc[0, 'from_airport'] == '1001'
    assert routes.loc[0, 'to_airport'] == '0042'
    assert routes['distance'].dtype == float
    assert kpis['airport'].tolist() == ['1001', '0042']
    assert kpis['total_routes'].tolist() == [4, 4]
