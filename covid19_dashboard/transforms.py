import logging
import math
from numbers import Number
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import DEFAULT_SCALE_MAX, METRICS
from .models import (
  AggregateTotals,
  FeatureCollection,
  FormattedSeries,
  MetricSnapshot,
  MetricTotals,
  RawRecord,
  RegionSnapshot,
  SeriesPoint,
  to_utc_timestamp,
)

logger = logging.getLogger(__name__)

def utc_now() -> pd.Timestamp:
  return pd.Timestamp.now(tz='UTC')


def resolve_target_timestamp(
  records: Sequence[RawRecord],
  now: Optional[pd.Timestamp] = None,
) -> pd.Timestamp:
  """Latest date of the first record, or `now` when there is nothing to look at."""
  fallback = to_utc_timestamp(now) if now is not None else utc_now()
  if not records:
    return fallback
  stamps = [s for s in (to_utc_timestamp(d) for d in records[0].dates) if s is not None]
  return max(stamps) if stamps else fallback


def build_region_snapshot(
  records: Iterable[RawRecord],
  target: Any,
  source_id: str,
  region_scope: str,
) -> RegionSnapshot:
  target_stamp = to_utc_timestamp(target)
  snapshot: RegionSnapshot = {}
  if target_stamp is None:
    logger.warning("Unparseable snapshot date %r, returning an empty snapshot", target)
    return snapshot

  for record in records:
    if record.source_id != source_id:
      continue
    if record.region_scope != region_scope:
      continue
    if record.region_key is None:
      continue
    for date, confirmed, deaths in zip(record.dates, record.confirmed, record.deaths):
      if to_utc_timestamp(date) != target_stamp:
        continue
      # last write wins for duplicate region keys
      snapshot[record.region_key] = MetricSnapshot(confirmed=confirmed, deaths=deaths)

  logger.debug(
    "Snapshot for %s/%s at %s has %d regions",
    source_id, region_scope, target_stamp.date(), len(snapshot),
  )
  return snapshot


def filter_features(
  collection: FeatureCollection,
  state: str,
  excluded_keys: Iterable[str] = (),
) -> FeatureCollection:
  excluded = set(excluded_keys)
  features = [
    feature for feature in collection.features
    if feature.properties.extra('STATE') == state
    and feature.properties.region_key not in excluded
  ]
  return collection.model_copy(update={'features': features})


def annotate_features(collection: FeatureCollection, snapshot: RegionSnapshot) -> FeatureCollection:
  features = []
  for feature in collection.features:
    metrics = snapshot.get(feature.properties.region_key)
    if metrics is None:
      features.append(feature)
      continue
    properties = feature.properties.model_copy(
      update={'confirmed': metrics.confirmed, 'deaths': metrics.deaths}
    )
    features.append(feature.model_copy(update={'properties': properties}))
  return collection.model_copy(update={'features': features})


def scale_domain_max(collection: FeatureCollection, fallback: float = DEFAULT_SCALE_MAX) -> float:
  values = [
    feature.properties.confirmed for feature in collection.features
    if feature.properties.confirmed is not None
  ]
  max_value = max(values, default=0)
  return max_value if max_value > 0 else fallback


class AnnotatedMapCache:
  """Keeps the last annotated collection until its inputs change.

  The key holds the identity and length of the raw records, the snapshot
  filters and the identity of the geometry. An empty cached collection is
  always recomputed. Streamlit sessions share one instance, so the key and
  its value are published together as a single tuple.
  """

  def __init__(self):
    self._entry: Optional[Tuple[Tuple, FeatureCollection]] = None
    self.misses = 0

  def get(
    self,
    records: Sequence[RawRecord],
    target: Any,
    source_id: str,
    region_scope: str,
    collection: FeatureCollection,
  ) -> FeatureCollection:
    key = (id(records), len(records), to_utc_timestamp(target), source_id, region_scope, id(collection))
    entry = self._entry
    if entry is not None and entry[0] == key and entry[1].features:
      return entry[1]
    self.misses += 1
    snapshot = build_region_snapshot(records, target, source_id, region_scope)
    value = annotate_features(collection, snapshot)
    self._entry = (key, value)
    return value


def aggregate_totals(collection: FeatureCollection, subset_name: str) -> AggregateTotals:
  sums = {metric: {'global_sum': 0, 'subset_sum': 0} for metric in METRICS}
  for feature in collection.features:
    properties = feature.properties
    in_subset = properties.region_scope == subset_name
    for metric in METRICS:
      value = getattr(properties, metric)
      if not value:
        continue
      sums[metric]['global_sum'] += value
      if in_subset:
        sums[metric]['subset_sum'] += value
  return AggregateTotals(**{metric: MetricTotals(**sums[metric]) for metric in METRICS})


def chart_value(value: Any) -> Number:
  """Numeric value for plotting; placeholders such as "<5" plot as 0."""
  if isinstance(value, bool) or not isinstance(value, Number):
    return 0
  if isinstance(value, np.generic):
    value = value.item()
  if isinstance(value, float) and not math.isfinite(value):
    return 0
  return value


def _date_sort_key(item: Tuple[int, str]) -> Tuple[bool, int, int]:
  position, date = item
  stamp = to_utc_timestamp(date)
  if stamp is None:
    return (True, 0, position)
  return (False, stamp.value, position)


def format_location_series(data: Mapping[str, Any]) -> FormattedSeries:
  maxes = {metric: 0 for metric in METRICS}
  points = []
  for _, date in sorted(enumerate(data), key=_date_sort_key):
    raw = data[date]
    if not isinstance(raw, Mapping):
      raw = {}
    values = {}
    for metric in METRICS:
      value = chart_value(raw.get(metric))
      maxes[metric] = max(maxes[metric], value)
      values[metric] = value
    points.append(SeriesPoint(date=str(date), **values))
  return FormattedSeries(points=points, maxes=maxes)
