# Streamlit dashboard for covid-19

'''
  |-----------------------------------|
  | Title                             |
  |-----------------------------------|
  | Illinois Tab | World Tab          |
  |-----------------------------------|
  |   # of cases   |   # of deaths    |
  |-----------------------------------|
  |                         |  Chart  |
  |                         | Carousel|
  |           Map           |---------|
  |                         |  Chart  |
  |                         | Carousel|
  |-----------------------------------|
  | Location drill-down               |
  |-----------------------------------|

  Charts in each carousel come from CHARTS_CONFIG (see covid19_dashboard.config).
'''
import logging

import streamlit as st
from pydantic import ValidationError

from covid19_dashboard.charts import (
  ILLINOIS_VIEW,
  WORLD_VIEW,
  choropleth_deck,
  location_series_chart,
  records_line_chart,
  seir_chart_data,
  seir_rows,
)
from covid19_dashboard.config import METRICS, get_settings
from covid19_dashboard.errors import DataLoadError
from covid19_dashboard.formatting import format_axis_tick, number_with_commas, tooltip_lines
from covid19_dashboard.loaders import (
  image_urls,
  load_dashboard_data,
  load_geometry,
  load_location_series,
  load_raw_records,
)
from covid19_dashboard.log import configure_logging
from covid19_dashboard.models import FeatureCollection
from covid19_dashboard.transforms import (
  AnnotatedMapCache,
  aggregate_totals,
  filter_features,
  format_location_series,
  resolve_target_timestamp,
  scale_domain_max,
)

SETTINGS = get_settings()
configure_logging(SETTINGS.log_level, SETTINGS.log_json)
logger = logging.getLogger('covid19_dashboard.app')

st.set_page_config(page_title="COVID-19 Dashboard", layout="wide")

TAB_TITLES = ("COVID-19 in Illinois", "COVID-19 in the world")
LEVELS = ('country', 'state', 'county')


@st.cache_data(ttl=3600)
def get_dashboard_data() -> dict:
  return load_dashboard_data(SETTINGS)


@st.cache_resource(ttl=3600)
def get_raw_records() -> list:
  try:
    return load_raw_records(SETTINGS)
  except DataLoadError as e:
    logger.warning("%s; the Illinois map will be empty", e)
    return []


@st.cache_resource
def get_counties() -> FeatureCollection:
  try:
    counties = load_geometry(SETTINGS.county_geojson_path)
  except DataLoadError as e:
    logger.warning("%s; the Illinois map will be empty", e)
    return FeatureCollection()
  return filter_features(counties, SETTINGS.county_state, SETTINGS.excluded_region_keys)


@st.cache_resource
def get_map_cache() -> AnnotatedMapCache:
  return AnnotatedMapCache()


@st.cache_data(ttl=3600)
def get_location_series(level: str, location_id: str, title: str):
  return load_location_series(SETTINGS, level, location_id, title)


DASHBOARD_DATA = get_dashboard_data()


def parse_world_geojson(raw) -> FeatureCollection:
  try:
    return FeatureCollection.model_validate(raw)
  except ValidationError as e:
    logger.warning("Malformed jhu_geojson_latest, using an empty collection: %s", e)
    return FeatureCollection()


WORLD_GEOJSON = parse_world_geojson(DASHBOARD_DATA['jhu_geojson_latest'])
TOTALS = aggregate_totals(WORLD_GEOJSON, SETTINGS.subset_name)
IMAGES = image_urls(SETTINGS)
SEIR_DATA = seir_chart_data(
  DASHBOARD_DATA['seir_observed_chart_data'],
  DASHBOARD_DATA['seir_simulated_chart_data'],
)

if not SETTINGS.has_maps():
  logger.warning('MAPBOX_API_TOKEN environment variable not set, will not display maps.')


def render_counts(counts):
  cols = st.columns(len(counts))
  for col, (label, value) in zip(cols, counts):
    col.metric(label, number_with_commas(value))


def render_carousel(carousel_config):
  tabs = st.tabs([chart.title for chart in carousel_config])
  for tab, chart in zip(tabs, carousel_config):
    with tab:
      if chart.description:
        st.caption(chart.description)
      if chart.type == 'image':
        url = IMAGES.get(chart.prop)
        if url:
          st.image(url, use_container_width=True)
        else:
          st.info(f"Unknown image '{chart.prop}'.")
        continue
      rows = seir_rows(SEIR_DATA) if chart.prop == 'seir_chart_data' else DASHBOARD_DATA.get(chart.prop, [])
      line_chart = records_line_chart(rows, chart)
      if line_chart is None:
        st.info("No data available for this chart yet.")
      else:
        st.altair_chart(line_chart, use_container_width=True)


def render_visualizations(tab_id, deck_factory):
  carousels = SETTINGS.carousels(tab_id)
  if carousels:
    map_col, charts_col = st.columns((2, 1))
  else:
    map_col, charts_col = st.container(), None

  if SETTINGS.has_maps():
    map_col.pydeck_chart(deck_factory())

  if charts_col is not None:
    with charts_col:
      for carousel_config in carousels:
        render_carousel(carousel_config)


def illinois_deck():
  records = get_raw_records()
  target = resolve_target_timestamp(records)
  counties = get_map_cache().get(
    records, target, SETTINGS.source_id, SETTINGS.region_scope, get_counties(),
  )
  max_value = scale_domain_max(counties, SETTINGS.default_scale_max)
  return choropleth_deck(counties, max_value, ILLINOIS_VIEW, SETTINGS.mapbox_api_token)


def world_deck():
  max_value = scale_domain_max(WORLD_GEOJSON, SETTINGS.default_scale_max)
  return choropleth_deck(WORLD_GEOJSON, max_value, WORLD_VIEW, SETTINGS.mapbox_api_token)


def render_illinois_tab():
  render_counts([
    ("Total Confirmed", TOTALS.confirmed.subset_sum),
    ("Total Deaths", TOTALS.deaths.subset_sum),
  ])
  render_visualizations('illinois', illinois_deck)


def render_world_tab():
  render_counts([
    ("Total Confirmed", TOTALS.confirmed.global_sum),
    ("Total Deaths", TOTALS.deaths.global_sum),
    ("Total Recovered", TOTALS.recovered.global_sum),
  ])
  render_visualizations('world', world_deck)


def location_options():
  by_level = DASHBOARD_DATA['jhu_json_by_level_latest']
  options = []
  for level in LEVELS:
    for location_id, info in (by_level.get(level) or {}).items():
      title = location_id
      if isinstance(info, dict):
        title = info.get('title') or info.get('name') or location_id
      options.append((level, str(location_id), str(title)))
  return options


def render_location_drilldown():
  options = location_options()
  if not options:
    return
  st.divider()
  selected = st.selectbox(
    "Location history",
    options,
    index=None,
    format_func=lambda option: f"{option[2]} ({option[0]})",
    placeholder="Pick a country, state or county",
  )
  if selected is None:
    return

  level, location_id, title = selected
  try:
    series = get_location_series(level, location_id, title)
  except DataLoadError as e:
    logger.warning("%s", e)
    st.warning(f"Could not load the history of {title}.")
    return

  st.subheader(series.title)
  formatted = format_location_series(series.data)
  chart = location_series_chart(formatted, series.data)
  if chart is None:
    st.info("No history available for this location.")
    return
  st.altair_chart(chart, use_container_width=True)

  dates = [point.date for point in formatted.points]
  date = st.select_slider("Date", options=dates, value=dates[-1], format_func=format_axis_tick)
  shown = [m for m in METRICS if m != 'recovered' or formatted.maxes['recovered']]
  st.markdown("  \n".join(tooltip_lines(series.data, date, shown)))


st.title("COVID-19 Dashboard")
tab_illinois, tab_world = st.tabs(TAB_TITLES)
with tab_illinois:
  render_illinois_tab()
with tab_world:
  render_world_tab()
render_location_drilldown()
