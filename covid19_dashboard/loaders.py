import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List
from urllib.error import URLError
from urllib.request import urlopen

from pydantic import ValidationError

from .config import DATA_LOCATIONS, IMAGE_LOCATIONS, Settings
from .errors import DataLoadError
from .models import FeatureCollection, LocationSeries, RawRecord

logger = logging.getLogger(__name__)


def empty_dataset(name: str) -> Any:
  if name == 'jhu_geojson_latest':
    return {'type': 'FeatureCollection', 'features': []}
  if name == 'jhu_json_by_level_latest':
    return {'country': {}, 'state': {}, 'county': {}}
  if name.startswith('seir_'):
    return {}
  return []


def fetch_json(url: str, timeout: float, name: str = 'data') -> Any:
  try:
    with urlopen(url, timeout=timeout) as response:
      return json.load(response)
  except (URLError, OSError) as e:
    raise DataLoadError(name, url, str(e)) from e
  except ValueError as e:
    raise DataLoadError(name, url, f"invalid JSON: {e}") from e


def load_dashboard_data(settings: Settings) -> Dict[str, Any]:
  datasets = {}
  for name, path in DATA_LOCATIONS.items():
    url = settings.data_location(path)
    try:
      datasets[name] = fetch_json(url, settings.http_timeout_seconds, name)
    except DataLoadError as e:
      logger.warning("%s; using an empty %s", e, name)
      datasets[name] = empty_dataset(name)
    else:
      logger.info("Loaded %s from %s", name, url)
  return datasets


def image_urls(settings: Settings) -> Dict[str, str]:
  return {name: settings.data_location(path) for name, path in IMAGE_LOCATIONS.items()}


def load_geometry(path: str) -> FeatureCollection:
  source = Path(path)
  try:
    with source.open(encoding='utf-8') as handle:
      raw = json.load(handle)
  except OSError as e:
    raise DataLoadError('geometry', str(source), str(e)) from e
  except ValueError as e:
    raise DataLoadError('geometry', str(source), f"invalid JSON: {e}") from e
  return FeatureCollection.model_validate(raw)


def load_location_series(settings: Settings, level: str, location_id: str, title: str = '') -> LocationSeries:
  path = settings.location_series_template.format(level=level, location_id=location_id)
  url = settings.data_location(path)
  raw = fetch_json(url, settings.http_timeout_seconds, f"{level} {location_id} time series")
  if not isinstance(raw, dict):
    raise DataLoadError('time series', url, f"expected an object, got {type(raw).__name__}")
  return LocationSeries(title=title or str(location_id), data=raw)


def parse_raw_records(rows: Iterable[Any]) -> List[RawRecord]:
  records = []
  skipped = 0
  for row in rows:
    try:
      records.append(RawRecord.model_validate(row))
    except ValidationError as e:
      skipped += 1
      logger.debug("Skipping malformed time series row: %s", e)
  if skipped:
    logger.warning("Skipped %d malformed time series rows", skipped)
  return records


def load_raw_records(settings: Settings) -> List[RawRecord]:
  url = settings.data_location(settings.time_series_path)
  rows = fetch_json(url, settings.http_timeout_seconds, 'time series')
  if not isinstance(rows, list):
    raise DataLoadError('time series', url, f"expected a list, got {type(rows).__name__}")
  return parse_raw_records(rows)
