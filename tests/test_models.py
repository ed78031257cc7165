"""Tests for record validation and value coercion."""

import numpy as np
import pandas as pd
import pytest

from covid19_dashboard.models import (
  FeatureCollection,
  FeatureProperties,
  LocationSeries,
  RawRecord,
  coerce_count,
  to_utc_timestamp,
)


@pytest.mark.parametrize('value, expected', [
  (7, 7),
  (7.0, 7),
  (2.5, 2.5),
  ('12', 12),
  (np.int64(3), 3),
  ('<5', None),
  ('null', None),
  ('', None),
  (None, None),
  (True, None),
  (float('inf'), None),
  ({'a': 1}, None),
])
def test_coerce_count(value, expected) -> None:
  assert coerce_count(value) == expected


def test_to_utc_timestamp() -> None:
  assert to_utc_timestamp('2020-03-02') == pd.Timestamp('2020-03-02', tz='UTC')
  assert to_utc_timestamp('2020-03-02T06:00:00+06:00') == pd.Timestamp('2020-03-02', tz='UTC')
  assert to_utc_timestamp('not a date') is None
  assert to_utc_timestamp(None) is None


def test_raw_record_reads_source_field_names() -> None:
  record = RawRecord.model_validate({
    'project_id': 'open-JHU',
    'province_state': 'Illinois',
    'FIPS': 17031.0,
    'date': ['2020-03-01'],
    'confirmed': [1],
    'deaths': [0],
    'country_region': 'US',
  })

  assert record.source_id == 'open-JHU'
  assert record.region_scope == 'Illinois'
  assert record.region_key == '17031'
  assert record.dates == ['2020-03-01']


def test_raw_record_non_text_fields_become_unset() -> None:
  record = RawRecord.model_validate({'project_id': 3, 'province_state': {'name': 'Illinois'}, 'FIPS': '17031'})

  assert record.source_id is None
  assert record.region_scope is None
  assert record.region_key == '17031'


def test_raw_record_missing_sequences_are_empty() -> None:
  record = RawRecord.model_validate({'project_id': 'open-JHU', 'date': None})

  assert record.dates == []
  assert record.confirmed == []
  assert record.region_key is None


def test_feature_properties_keep_unset_apart_from_zero() -> None:
  properties = FeatureProperties.model_validate({
    'FIPS': '17031', 'COUNTYNAME': 'Cook', 'confirmed': 0, 'deaths': 'null',
  })

  assert properties.confirmed == 0
  assert properties.deaths is None
  assert properties.recovered is None
  assert properties.extra('COUNTYNAME') == 'Cook'
  assert properties.extra('STATE', 'IL') == 'IL'


def test_feature_collection_defaults_and_geojson() -> None:
  collection = FeatureCollection.model_validate({
    'type': 'FeatureCollection',
    'features': [{'type': 'Feature', 'geometry': None, 'properties': None}],
  })
  geojson = collection.to_geojson()

  assert geojson['type'] == 'FeatureCollection'
  assert geojson['features'][0]['properties']['confirmed'] is None


def test_location_series_keeps_placeholders(location_data) -> None:
  series = LocationSeries(title='Cook', data=location_data)

  assert series.data['2020-03-02']['confirmed'] == '<5'
