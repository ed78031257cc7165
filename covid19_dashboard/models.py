"""Typed records for the dashboard datasets.

Metric fields are `Optional`: `None` means the source has no value for the
region, which renders as "no data" rather than as zero cases.
"""

import math
from numbers import Number
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Count = Optional[Union[int, float]]


def coerce_count(value: Any) -> Count:
  if value is None or isinstance(value, bool):
    return None
  if not isinstance(value, (Number, str, np.number)):
    return None
  number = pd.to_numeric(value, errors='coerce')
  if pd.isna(number):
    return None
  number = float(number)
  if not math.isfinite(number):
    return None
  return int(number) if number.is_integer() else number


def to_utc_timestamp(value: Any) -> Optional[pd.Timestamp]:
  if value is None or isinstance(value, bool):
    return None
  try:
    stamp = pd.to_datetime(value, utc=True, errors='coerce')
  except (TypeError, ValueError, OverflowError):
    return None
  if not isinstance(stamp, pd.Timestamp) or pd.isna(stamp):
    return None
  return stamp


def _text(value: Any) -> Optional[str]:
  return value if isinstance(value, str) else None


def _region_key(value: Any) -> Optional[str]:
  if value is None:
    return None
  if isinstance(value, float) and value.is_integer():
    value = int(value)
  return str(value)


class RawRecord(BaseModel):
  """One location's time series as delivered by the data commons."""

  model_config = ConfigDict(populate_by_name=True, extra='ignore', frozen=True)

  source_id: Optional[str] = Field(default=None, validation_alias=AliasChoices('source_id', 'project_id'))
  region_scope: Optional[str] = Field(default=None, validation_alias=AliasChoices('region_scope', 'province_state'))
  region_key: Optional[str] = Field(default=None, validation_alias=AliasChoices('region_key', 'FIPS'))
  dates: List[Any] = Field(default_factory=list, validation_alias=AliasChoices('dates', 'date'))
  confirmed: List[Any] = Field(default_factory=list)
  deaths: List[Any] = Field(default_factory=list)

  @field_validator('region_key', mode='before')
  @classmethod
  def _key_as_str(cls, value: Any) -> Optional[str]:
    return _region_key(value)

  @field_validator('source_id', 'region_scope', mode='before')
  @classmethod
  def _text_only(cls, value: Any) -> Optional[str]:
    return _text(value)

  @field_validator('dates', 'confirmed', 'deaths', mode='before')
  @classmethod
  def _none_as_empty(cls, value: Any) -> Any:
    return [] if value is None else value


class MetricSnapshot(BaseModel):
  model_config = ConfigDict(frozen=True)

  confirmed: Count = None
  deaths: Count = None

  @field_validator('confirmed', 'deaths', mode='before')
  @classmethod
  def _coerce(cls, value: Any) -> Count:
    return coerce_count(value)


RegionSnapshot = Dict[str, MetricSnapshot]


class FeatureProperties(BaseModel):
  """Properties bag of a map feature.

  Known fields are typed; anything else the source carries (`COUNTYNAME`,
  `STATE`, `country_region`, ...) is kept as an extra field.
  """

  model_config = ConfigDict(populate_by_name=True, extra='allow', frozen=True)

  region_key: Optional[str] = Field(default=None, validation_alias=AliasChoices('region_key', 'FIPS'))
  region_scope: Optional[str] = Field(default=None, validation_alias=AliasChoices('region_scope', 'province_state'))
  confirmed: Count = None
  deaths: Count = None
  recovered: Count = None

  @field_validator('region_key', mode='before')
  @classmethod
  def _key_as_str(cls, value: Any) -> Optional[str]:
    return _region_key(value)

  @field_validator('region_scope', mode='before')
  @classmethod
  def _text_only(cls, value: Any) -> Optional[str]:
    return _text(value)

  @field_validator('confirmed', 'deaths', 'recovered', mode='before')
  @classmethod
  def _coerce(cls, value: Any) -> Count:
    return coerce_count(value)

  def extra(self, name: str, default: Any = None) -> Any:
    return (self.model_extra or {}).get(name, default)


class Feature(BaseModel):
  model_config = ConfigDict(frozen=True, extra='allow')

  type: str = 'Feature'
  geometry: Optional[Dict[str, Any]] = None
  properties: FeatureProperties = Field(default_factory=FeatureProperties)

  @field_validator('geometry', mode='before')
  @classmethod
  def _mapping_only(cls, value: Any) -> Any:
    return value if isinstance(value, dict) else None

  @field_validator('properties', mode='before')
  @classmethod
  def _none_as_empty(cls, value: Any) -> Any:
    return {} if value is None else value


class FeatureCollection(BaseModel):
  model_config = ConfigDict(frozen=True, extra='allow')

  type: str = 'FeatureCollection'
  features: List[Feature] = Field(default_factory=list)

  def to_geojson(self) -> dict:
    return self.model_dump(mode='json', by_alias=True)


class MetricTotals(BaseModel):
  global_sum: Union[int, float] = 0
  subset_sum: Union[int, float] = 0


class AggregateTotals(BaseModel):
  confirmed: MetricTotals = Field(default_factory=MetricTotals)
  deaths: MetricTotals = Field(default_factory=MetricTotals)
  recovered: MetricTotals = Field(default_factory=MetricTotals)


class SeriesPoint(BaseModel):
  date: str
  confirmed: Union[int, float] = 0
  deaths: Union[int, float] = 0
  recovered: Union[int, float] = 0


class FormattedSeries(BaseModel):
  points: List[SeriesPoint] = Field(default_factory=list)
  maxes: Dict[str, Union[int, float]] = Field(
    default_factory=lambda: {'confirmed': 0, 'deaths': 0, 'recovered': 0}
  )

  def to_frame(self) -> pd.DataFrame:
    return pd.DataFrame(
      [point.model_dump() for point in self.points],
      columns=['date', 'confirmed', 'deaths', 'recovered'],
    )


class LocationSeries(BaseModel):
  """One location's history; values may be placeholders like "<5"."""

  title: str = ''
  data: Dict[str, Any] = Field(default_factory=dict)
