# Paths and pipeline settings, overridable through the environment or a .env file.

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from flightmap.arcs import PROJECTIONS
from flightmap.graph import GROUP_KEYS

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_DATA_DIR = os.path.join(PROJECT_ROOT, 'data')
DEFAULT_OUTPUT_DIR = os.path.join(PROJECT_ROOT, 'outputs')

DATAPOINTS_FILE = '01_datapoints.csv'
FLIGHTS_FILE = '02_flights.json'
ARCS_FILE = '03_arcs.csv'
AIRPORT_KPIS_FILE = '04_airport_kpis.csv'
AIRLINE_KPIS_FILE = '04_airline_kpis.csv'
PLOTS_DIR = 'plots'


@dataclass
class Settings:
    data_dir: str = DEFAULT_DATA_DIR
    output_dir: str = DEFAULT_OUTPUT_DIR
    canvas_width: float = 960.0
    canvas_height: float = 480.0
    projection: str = 'equirectangular'
    group_key: str = 'from_airport'

    @property
    def plots_dir(self) -> str:
        return os.path.join(self.output_dir, PLOTS_DIR)

    def output_file(self, name: str) -> str:
        return os.path.join(self.output_dir, name)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_choice(name: str, default: str, choices) -> str:
    value = os.getenv(name, default)
    if value not in choices:
        raise ValueError(f"{name} must be one of {choices}, got '{value}'")
    return value


def load_settings() -> Settings:
    """Reads settings from FLIGHTMAP_* environment variables, loading .env first."""
    load_dotenv()
    defaults = Settings()
    return Settings(
        data_dir=os.getenv('FLIGHTMAP_DATA_DIR', defaults.data_dir),
        output_dir=os.getenv('FLIGHTMAP_OUTPUT_DIR', defaults.output_dir),
        canvas_width=_env_float('FLIGHTMAP_CANVAS_WIDTH', defaults.canvas_width),
        canvas_height=_env_float('FLIGHTMAP_CANVAS_HEIGHT', defaults.canvas_height),
        projection=_env_choice('FLIGHTMAP_PROJECTION', defaults.projection, PROJECTIONS),
        group_key=_env_choice('FLIGHTMAP_GROUP_KEY', defaults.group_key, GROUP_KEYS),
    )
