import pandas as pd
import numpy as np
import glob
import os
import re
from typing import Iterable, List

from flightmap.arcs import haversine_km
from flightmap.schema import (
    Datapoint, SchemaError, DATAPOINT_FIELDS, DATAPOINT_NUM_FIELDS, DATAPOINT_STR_FIELDS,
)

SUPPORTED_EXTENSIONS = ('.csv', '.xlsx')

# Alternative headers seen in public route datasets -> canonical column names
COLUMN_ALIASES = {
    'carrier': 'airline',
    'airline_name': 'airline',
    'country': 'airline_country',
    'source_airport': 'from_airport',
    'origin': 'from_airport',
    'origin_airport': 'from_airport',
    'destination_airport': 'to_airport',
    'dest_airport': 'to_airport',
    'destination': 'to_airport',
    'from_latitude': 'from_lat',
    'from_lon': 'from_long',
    'from_lng': 'from_long',
    'from_longitude': 'from_long',
    'to_latitude': 'to_lat',
    'to_lon': 'to_long',
    'to_lng': 'to_long',
    'to_longitude': 'to_long',
    'distance_km': 'distance',
}


def clean_col_names(df: pd.DataFrame) -> pd.DataFrame:
    """
    Cleans and standardizes DataFrame column names.
    - Converts to lowercase
    - Replaces spaces and special characters with underscores
    - Strips leading/trailing whitespace and underscores
    - Maps known alternative headers to the canonical route columns
    """
    rename_map = {}
    for col in df.columns:
        new_col = str(col).lower()
        new_col = re.sub(r'[^a-zA-Z0-9]', '_', new_col)
        new_col = re.sub(r'_+', '_', new_col)
        new_col = re.sub(r'unnamed_\d+', '', new_col)
        new_col = new_col.strip('_')
        rename_map[col] = new_col
    df = df.rename(columns=rename_map)

    # only alias a header when the canonical name is not already present
    aliases = {c: COLUMN_ALIASES[c] for c in df.columns
               if c in COLUMN_ALIASES and COLUMN_ALIASES[c] not in df.columns}
    df = df.rename(columns=aliases)

    cols = pd.Series(df.columns)
    for dup in cols[cols.duplicated()].unique():
        cols[cols[cols == dup].index.values.tolist()] = [dup + '.' + str(i) if i != 0 else dup for i in range(sum(cols == dup))]
    df.columns = cols

    return df


def _find_route_files(path: str) -> List[str]:
    if os.path.isfile(path):
        return [path]
    files = []
    for ext in SUPPORTED_EXTENSIONS:
        files.extend(glob.glob(os.path.join(path, f"*{ext}")))
    return sorted(files)


def _read_table(path: str) -> pd.DataFrame:
    if path.lower().endswith('.xlsx'):
        return pd.read_excel(path)
    return pd.read_csv(path)


def load_route_data(path: str) -> pd.DataFrame:
    """
    Loads flight route data from a single .csv/.xlsx file or from every such
    file in a directory, combined into a single DataFrame.

    Args:
        path: A route file, or a directory containing route files.

    Returns:
        A pandas DataFrame with the combined data and cleaned column names.
    """
    print(f"Searching for route files in: {path}")
    route_files = _find_route_files(path)

    if not route_files:
        raise FileNotFoundError(f"No route files ({', '.join(SUPPORTED_EXTENSIONS)}) found at: {path}")

    print(f"Found {len(route_files)} files: {route_files}")

    all_dfs = []
    for f in route_files:
        try:
            df = clean_col_names(_read_table(f))
        except Exception as e:
            print(f"Could not read or process file {f}: {e}")
            continue

        if df.empty:
            print(f"Warning: {f} contains no rows. Skipping file.")
            continue
        all_dfs.append(df)

    if not all_dfs:
        raise FileNotFoundError(f"None of the route files at {path} could be read.")

    combined_df = pd.concat(all_dfs, ignore_index=True)

    print("Successfully loaded and combined data.")
    print(f"Total rows: {len(combined_df)}")
    print("Columns:", combined_df.columns.tolist())

    return combined_df


def fill_missing_distance(df: pd.DataFrame) -> pd.DataFrame:
    """
    Fills missing distances with the great-circle distance (km) between the
    row's coordinates. Rows without usable coordinates keep NaN.
    """
    df = df.copy()
    if 'distance' not in df.columns:
        df['distance'] = np.nan
    df['distance'] = pd.to_numeric(df['distance'], errors='coerce')

    missing = df['distance'].isna()
    if missing.any():
        coords = df.loc[missing, ['from_lat', 'from_long', 'to_lat', 'to_long']].apply(pd.to_numeric, errors='coerce')
        df.loc[missing, 'distance'] = haversine_km(
            coords['from_lat'], coords['from_long'], coords['to_lat'], coords['to_long']
        ).round(1)
        print(f"Filled {int(df.loc[missing, 'distance'].notna().sum())} missing distances from coordinates.")
    return df


def validate_route_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Checks the required columns, coerces types and drops rows that cannot
    form a valid Datapoint.

    Args:
        df: The raw route DataFrame from load_route_data.

    Returns:
        A DataFrame holding exactly the datapoint columns, every row valid.
    """
    print("Validating route data...")

    missing_cols = [c for c in DATAPOINT_FIELDS if c not in df.columns and c != 'distance']
    if missing_cols:
        raise KeyError(f"Route data is missing required columns: {missing_cols}")

    df = fill_missing_distance(df)
    df = df[DATAPOINT_FIELDS].copy()

    for col in DATAPOINT_NUM_FIELDS:
        df[col] = pd.to_numeric(df[col], errors='coerce')

    for col in DATAPOINT_STR_FIELDS:
        df[col] = df[col].where(df[col].isna(), df[col].astype(str).str.strip())
        df[col] = df[col].replace(['', 'nan', 'None', '-', '\\N'], np.nan)

    before = len(df)
    df = df.dropna(subset=DATAPOINT_FIELDS)

    in_bounds = (
        df['from_lat'].between(-90, 90) & df['to_lat'].between(-90, 90)
        & df['from_long'].between(-180, 180) & df['to_long'].between(-180, 180)
        & (df['distance'] >= 0) & np.isfinite(df['distance'])
    )
    df = df[in_bounds].reset_index(drop=True)

    dropped = before - len(df)
    if dropped:
        print(f"Warning: dropped {dropped} invalid or incomplete rows.")
    print(f"Total rows after validation: {len(df)}")

    return df


def frame_to_datapoints(df: pd.DataFrame) -> List[Datapoint]:
    """Converts a validated route DataFrame into Datapoint records."""
    records = []
    for row in df.to_dict(orient='records'):
        try:
            records.append(Datapoint.from_dict(row))
        except SchemaError as e:
            print(f"Warning: skipping row {row}: {e}")
    return records


def datapoints_to_frame(records: Iterable[Datapoint]) -> pd.DataFrame:
    return pd.DataFrame([r.to_dict() for r in records], columns=DATAPOINT_FIELDS)


def load_datapoints(path: str) -> List[Datapoint]:
    """Loads, validates and converts route files in one step."""
    return frame_to_datapoints(validate_route_frame(load_route_data(path)))


# Columns that are identifiers or names, even when every value looks numeric
TEXT_COLUMNS = DATAPOINT_STR_FIELDS + ['key', 'airport', 'city', 'country']


def read_output_csv(path: str) -> pd.DataFrame:
    """Reads a pipeline CSV output, keeping code and name columns as strings."""
    header = pd.read_csv(path, nrows=0).columns
    return pd.read_csv(path, dtype={c: str for c in header if c in TEXT_COLUMNS})
