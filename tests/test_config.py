import os
from unittest.mock import patch

import pytest

from flightmap.config import DEFAULT_OUTPUT_DIR, Settings, load_settings


@pytest.fixture(autouse=True)
def no_dotenv():
    with patch('flightmap.config.load_dotenv'):
        yield


def test_defaults(monkeypatch):
    for name in list(os.environ):
        if name.startswith('FLIGHTMAP_'):
            monkeypatch.delenv(name)

    settings = load_settings()

    assert settings == Settings()
    assert settings.output_dir == DEFAULT_OUTPUT_DIR
    assert settings.plots_dir == os.path.join(DEFAULT_OUTPUT_DIR, 'plots')


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv('FLIGHTMAP_OUTPUT_DIR', str(tmp_path))
    monkeypatch.setenv('FLIGHTMAP_CANVAS_WIDTH', '1200')
    monkeypatch.setenv('FLIGHTMAP_PROJECTION', 'mercator')
    monkeypatch.setenv('FLIGHTMAP_GROUP_KEY', 'from_city')

    settings = load_settings()

    assert settings.output_file('03_arcs.csv') == os.path.join(str(tmp_path), '03_arcs.csv')
    assert settings.canvas_width == 1200.0
    assert settings.projection == 'mercator'
    assert settings.group_key == 'from_city'


@pytest.mark.parametrize('value', ['wide', '0', '-480'])
def test_invalid_canvas_size(monkeypatch, value):
    monkeypatch.setenv('FLIGHTMAP_CANVAS_HEIGHT', value)

    with pytest.raises(ValueError, match='FLIGHTMAP_CANVAS_HEIGHT'):
        load_settings()


@pytest.mark.parametrize('name, value', [
    ('FLIGHTMAP_PROJECTION', 'orthographic'),
    ('FLIGHTMAP_GROUP_KEY', 'distance'),
])
def test_invalid_choice(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        load_settings()
