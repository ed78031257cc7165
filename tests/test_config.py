"""Tests for configuration management."""

import json

import pytest
from pydantic import ValidationError

from covid19_dashboard.config import ChartConfig, Settings


def test_settings_defaults(settings) -> None:
  assert settings.source_id == 'open-JHU'
  assert settings.region_scope == 'Illinois'
  assert settings.subset_name == 'Illinois'
  assert settings.county_state == 'IL'
  assert settings.excluded_region_keys == ['17999']
  assert settings.default_scale_max == 2
  assert settings.mapbox_api_token is None
  assert settings.has_maps() is False
  assert settings.carousels('illinois') == []


def test_settings_from_env(monkeypatch) -> None:
  charts = {
    'illinois': [[
      {'title': 'Cases', 'type': 'image', 'prop': 'img_cases'},
      {'title': 'Daily', 'type': 'lineChart', 'prop': 'idph_daily_chart_data', 'xTitle': 'Date', 'yTitle': 'Cases'},
    ]],
  }
  monkeypatch.setenv('MAPBOX_API_TOKEN', 'pk.test')
  monkeypatch.setenv('SUBSET_NAME', 'Ohio')
  monkeypatch.setenv('CHARTS_CONFIG', json.dumps(charts))
  settings = Settings(_env_file=None)

  assert settings.has_maps() is True
  assert settings.subset_name == 'Ohio'
  carousel = settings.carousels('illinois')[0]
  assert [chart.type for chart in carousel] == ['image', 'lineChart']
  assert carousel[1].x_title == 'Date'
  assert carousel[1].y_title == 'Cases'
  assert settings.carousels('world') == []


def test_data_location_joins_paths(settings) -> None:
  assert settings.data_location('/map_data/a.json') == 'https://data.example.org/covid/map_data/a.json'


def test_chart_config_rejects_unknown_type() -> None:
  with pytest.raises(ValidationError):
    ChartConfig.model_validate({'title': 'Bars', 'type': 'barChart', 'prop': 'top10_chart_data'})


def test_scale_max_must_be_positive(monkeypatch) -> None:
  monkeypatch.setenv('DEFAULT_SCALE_MAX', '0')
  with pytest.raises(ValidationError):
    Settings(_env_file=None)
