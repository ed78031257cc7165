from typing import Any, Dict, List, Mapping, Optional

import altair as alt
import numpy as np
import pandas as pd
import pydeck as pdk

from .config import ChartConfig
from .formatting import format_tooltip_date, hover_label, number_with_commas
from .models import FeatureCollection, FormattedSeries, to_utc_timestamp

METRIC_COLORS = {
  'confirmed': '#8884d8',
  'recovered': '#00B957',
  'deaths': '#aa5e79',
}
NO_DATA_RGBA = [220, 220, 220, 60]
BASE_RGBA = np.array([255, 240, 245, 90])
PEAK_RGBA = np.array([170, 94, 121, 220])
ILLINOIS_VIEW = pdk.ViewState(latitude=40, longitude=-90, zoom=6, bearing=0, pitch=0)
WORLD_VIEW = pdk.ViewState(latitude=10, longitude=0, zoom=0.8)
MAPBOX_STYLE = 'mapbox://styles/mapbox/streets-v11'


def _chart_dates(values: pd.Series) -> pd.Series:
  stamps = pd.to_datetime(values.map(to_utc_timestamp), utc=True)
  return stamps.dt.tz_localize(None)


def location_series_chart(
  formatted: FormattedSeries,
  raw_data: Optional[Mapping[str, Any]] = None,
) -> Optional[alt.Chart]:
  frame = formatted.to_frame()
  if frame.empty:
    return None

  metrics = ['confirmed', 'deaths']
  if formatted.maxes.get('recovered'):
    metrics.insert(1, 'recovered')

  long = frame.melt(id_vars='date', value_vars=metrics, var_name='metric', value_name='count')
  raw_data = raw_data or {}

  def raw_label(row: pd.Series) -> str:
    raw = raw_data.get(row['date'])
    value = raw.get(row['metric'], row['count']) if isinstance(raw, Mapping) else row['count']
    return number_with_commas(value)

  long['value_label'] = long.apply(raw_label, axis=1)
  long['date_label'] = long['date'].map(format_tooltip_date)
  long['date'] = _chart_dates(long['date'])

  top = max(formatted.maxes.values(), default=0)
  y_scale = alt.Scale(domain=[0, top]) if top else alt.Undefined

  return alt.Chart(long).mark_line().encode(
    x=alt.X('date:T', title=None, axis=alt.Axis(format='%-m/%-d', labelAngle=-60)),
    y=alt.Y('count:Q', title=None, scale=y_scale, axis=alt.Axis(format=',')),
    color=alt.Color(
      'metric:N',
      scale=alt.Scale(domain=metrics, range=[METRIC_COLORS[m] for m in metrics]),
      legend=alt.Legend(title=None, orient='bottom'),
    ),
    tooltip=[
      alt.Tooltip('date_label:N', title='Date'),
      alt.Tooltip('metric:N', title='Metric'),
      alt.Tooltip('value_label:N', title='Value'),
    ],
  ).properties(height=300)


def records_line_chart(rows: List[Mapping[str, Any]], config: ChartConfig) -> Optional[alt.Chart]:
  """Line chart for a `lineChart` carousel entry.

  Rows are `{"date": ..., <series>: <value>, ...}`; every non-date column
  becomes a line.
  """
  frame = pd.DataFrame(list(rows))
  if frame.empty or 'date' not in frame.columns:
    return None
  series = [c for c in frame.columns if c != 'date']
  if not series:
    return None
  long = frame.melt(id_vars='date', value_vars=series, var_name='series', value_name='value')
  long['value'] = pd.to_numeric(long['value'], errors='coerce')
  long['date'] = _chart_dates(long['date'])
  return alt.Chart(long).mark_line().encode(
    x=alt.X('date:T', title=config.x_title or None),
    y=alt.Y('value:Q', title=config.y_title or None),
    color=alt.Color('series:N', legend=alt.Legend(title=None, orient='bottom')),
    tooltip=[
      alt.Tooltip('date:T', title='Date'),
      'series:N',
      alt.Tooltip('value:Q', format=','),
    ],
  ).properties(height=280, title=config.title)


def seir_chart_data(observed: Mapping[str, Any], simulated: Mapping[str, Any]) -> List[Dict[str, Any]]:
  if not observed or not simulated:
    return []
  return [
    {'data': observed, 'name': 'Observed Cases'},
    {'data': simulated, 'name': 'Simulated Cases'},
  ]


def seir_rows(chart_data: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
  """Flattens `seir_chart_data` output into `records_line_chart` rows."""
  by_date: Dict[str, Dict[str, Any]] = {}
  for series in chart_data:
    for date, value in series['data'].items():
      by_date.setdefault(date, {'date': date})[series['name']] = value
  return list(by_date.values())


def fill_color(confirmed: Any, max_value: float) -> List[int]:
  if confirmed is None:
    return list(NO_DATA_RGBA)
  max_log = np.log1p(max_value) if max_value > 0 else 0
  if confirmed <= 0 or max_log == 0:
    intensity = 0
  else:
    intensity = min(np.log1p(confirmed) / max_log, 1)
  return (BASE_RGBA + (PEAK_RGBA - BASE_RGBA) * intensity).astype(int).tolist()


def choropleth_geojson(collection: FeatureCollection, max_value: float) -> dict:
  geojson = collection.to_geojson()
  for feature, source in zip(geojson['features'], collection.features):
    properties = feature['properties']
    properties['fill_color'] = fill_color(source.properties.confirmed, max_value)
    properties['hover'] = hover_label(source.properties)
  return geojson


def choropleth_deck(
  collection: FeatureCollection,
  max_value: float,
  view_state: pdk.ViewState = ILLINOIS_VIEW,
  mapbox_token: Optional[str] = None,
) -> pdk.Deck:
  layer = pdk.Layer(
    'GeoJsonLayer',
    data=choropleth_geojson(collection, max_value),
    pickable=True,
    stroked=True,
    get_line_color=[255, 255, 255],
    get_fill_color='properties.fill_color',
    auto_highlight=True,
  )
  return pdk.Deck(
    layers=[layer],
    initial_view_state=view_state,
    map_provider='mapbox' if mapbox_token else None,
    map_style=MAPBOX_STYLE if mapbox_token else None,
    api_keys={'mapbox': mapbox_token} if mapbox_token else None,
    tooltip={
      'html': '{hover}',
      'style': {'color': 'white'},
    },
  )
