"""Pytest fixtures shared by the dashboard tests."""

import pytest

from covid19_dashboard.config import Settings
from covid19_dashboard.models import FeatureCollection, RawRecord


@pytest.fixture
def cook_record() -> RawRecord:
  return RawRecord.model_validate({
    'project_id': 'open-JHU',
    'province_state': 'Illinois',
    'FIPS': '17031',
    'date': ['2020-03-01', '2020-03-02'],
    'confirmed': [5, 7],
    'deaths': [0, 1],
  })


@pytest.fixture
def raw_records(cook_record):
  return [
    cook_record,
    RawRecord.model_validate({
      'project_id': 'open-JHU',
      'province_state': 'Indiana',
      'FIPS': 18089,
      'date': ['2020-03-02'],
      'confirmed': [3],
      'deaths': [0],
    }),
    RawRecord.model_validate({
      'project_id': 'other-project',
      'province_state': 'Illinois',
      'FIPS': '17043',
      'date': ['2020-03-02'],
      'confirmed': [40],
      'deaths': [2],
    }),
  ]


@pytest.fixture
def counties() -> FeatureCollection:
  return FeatureCollection.model_validate({
    'type': 'FeatureCollection',
    'features': [
      {
        'type': 'Feature',
        'geometry': {'type': 'Polygon', 'coordinates': [[[-87.9, 41.6], [-87.5, 41.6], [-87.5, 42.1], [-87.9, 41.6]]]},
        'properties': {'FIPS': '17031', 'STATE': 'IL', 'COUNTYNAME': 'Cook'},
      },
      {
        'type': 'Feature',
        'geometry': {'type': 'Polygon', 'coordinates': [[[-88.3, 41.7], [-87.9, 41.7], [-87.9, 42.0], [-88.3, 41.7]]]},
        'properties': {'FIPS': '17043', 'STATE': 'IL', 'COUNTYNAME': 'DuPage'},
      },
    ],
  })


@pytest.fixture
def world_geojson() -> FeatureCollection:
  return FeatureCollection.model_validate({
    'type': 'FeatureCollection',
    'features': [
      {'type': 'Feature', 'geometry': None, 'properties': {
        'province_state': 'Illinois', 'country_region': 'US', 'confirmed': 100, 'deaths': 4, 'recovered': None,
      }},
      {'type': 'Feature', 'geometry': None, 'properties': {
        'province_state': 'Ohio', 'country_region': 'US', 'confirmed': '20', 'deaths': 1, 'recovered': 'null',
      }},
      {'type': 'Feature', 'geometry': None, 'properties': {
        'province_state': None, 'country_region': 'Italy', 'confirmed': 50, 'deaths': 'n/a', 'recovered': 10,
      }},
    ],
  })


@pytest.fixture
def location_data() -> dict:
  return {
    '2020-03-02': {'confirmed': '<5', 'deaths': 0, 'recovered': 0},
    '2020-03-01': {'confirmed': 10, 'deaths': 1, 'recovered': 2},
  }


@pytest.fixture
def settings(monkeypatch) -> Settings:
  for name in ('DATA_URL', 'MAPBOX_API_TOKEN', 'MAPBOX_TOKEN', 'CHARTS_CONFIG'):
    monkeypatch.delenv(name, raising=False)
  return Settings(_env_file=None, data_url='https://data.example.org/covid')
