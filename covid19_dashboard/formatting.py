from numbers import Number
from typing import Any, Iterable, List, Mapping

from .models import FeatureProperties, to_utc_timestamp

MONTH_NAMES = (
  'Jan', 'Feb', 'Mar',
  'April', 'May', 'Jun',
  'Jul', 'Aug', 'Sept',
  'Oct', 'Nov', 'Dec',
)


def number_with_commas(value: Any) -> str:
  if isinstance(value, bool) or not isinstance(value, Number):
    return str(value)
  return f"{value:,}"


def format_tooltip_date(date: Any) -> str:
  stamp = to_utc_timestamp(date)
  if stamp is None:
    return str(date)
  return f"{MONTH_NAMES[stamp.month - 1]} {stamp.day}, {stamp.year}"


def format_axis_tick(date: Any) -> str:
  stamp = to_utc_timestamp(date)
  if stamp is None:
    return str(date)
  return f"{stamp.month}/{stamp.day}"


def tooltip_lines(data: Mapping[str, Any], date: str, metrics: Iterable[str]) -> List[str]:
  """Tooltip text for one date of a location series.

  Reads the raw values so a suppressed count shows as "<5" and not as the
  0 it is plotted at.
  """
  raw = data.get(date)
  if not isinstance(raw, Mapping):
    raw = {}
  lines = [format_tooltip_date(date)]
  for metric in metrics:
    lines.append(f"{metric}: {number_with_commas(raw.get(metric))}")
  return lines


def _present(value: Any) -> bool:
  return bool(value) and value != 'null'


def hover_label(properties: FeatureProperties) -> str:
  location = properties.extra('country_region') or 'USA'
  state = properties.extra('STATE') or properties.region_scope
  county = properties.extra('COUNTYNAME')
  if _present(state):
    location = f"{state}, {location}"
  if _present(county):
    location = f"{county}, {location}"
  cases = properties.confirmed if properties.confirmed is not None else 0
  return f"{location}: {number_with_commas(cases)} cases"
