"""Dashboard configuration.

Settings come from the environment (or a `.env` file) through
pydantic-settings. `charts_config` is JSON, for example::

  CHARTS_CONFIG='{"illinois": [[{"title": "Cases", "type": "image", "prop": "imgCases"}]]}'

Each tab holds a list of carousels and each carousel a list of charts.
"""

from functools import lru_cache
from typing import Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Dataset name -> path relative to `Settings.data_url`
DATA_LOCATIONS = {
  'jhu_geojson_latest': 'map_data/jhu_geojson_latest.json',
  'jhu_json_by_level_latest': 'map_data/jhu_json_by_level_latest.json',
  'top10_chart_data': 'top10.txt',
  'seir_observed_chart_data': 'observed_cases.txt',
  'seir_simulated_chart_data': 'simulated_cases.txt',
  'idph_daily_chart_data': 'idph_daily.txt',
}
IMAGE_LOCATIONS = {
  'img_cases': 'charts_data/cases.png',
  'img_cases_forecast': 'charts_data/casesForecast.png',
  'img_deaths': 'charts_data/deaths.png',
  'img_deaths_forecast': 'charts_data/deathsForecast.png',
  'img_rt': 'charts_data/Rt.png',
  'img_rt_june1': 'charts_data/Rt_June_1.png',
}

METRICS = ('confirmed', 'deaths', 'recovered')
# choropleth scale maximum when no region has a positive count
DEFAULT_SCALE_MAX = 2


class ChartConfig(BaseModel):
  model_config = ConfigDict(populate_by_name=True, extra='forbid')

  title: str
  description: Optional[str] = None
  x_title: Optional[str] = Field(default=None, validation_alias=AliasChoices('x_title', 'xTitle'))
  y_title: Optional[str] = Field(default=None, validation_alias=AliasChoices('y_title', 'yTitle'))
  type: Literal['lineChart', 'image']
  # dataset or image name, a key of DATA_LOCATIONS or IMAGE_LOCATIONS
  prop: str


CarouselConfig = List[ChartConfig]


class Settings(BaseSettings):
  """Dashboard settings loaded from environment variables."""

  # Data sources
  data_url: str = Field(default='')
  county_geojson_path: str = Field(default='data/il_counties.geojson')
  time_series_path: str = Field(default='map_data/jhu_time_series_latest.json')
  location_series_template: str = Field(default='time_series/{level}/{location_id}.json')
  http_timeout_seconds: float = Field(default=15.0)

  # Maps are hidden when no token is set
  mapbox_api_token: Optional[str] = Field(
    default=None,
    validation_alias=AliasChoices('MAPBOX_API_TOKEN', 'MAPBOX_TOKEN'),
  )

  # Data filters
  source_id: str = Field(default='open-JHU')
  region_scope: str = Field(default='Illinois')
  subset_name: str = Field(default='Illinois')
  county_state: str = Field(default='IL')
  excluded_region_keys: List[str] = Field(default_factory=lambda: ['17999'])
  default_scale_max: float = Field(default=DEFAULT_SCALE_MAX, gt=0)

  charts_config: Dict[Literal['illinois', 'world'], List[CarouselConfig]] = Field(default_factory=dict)

  log_level: str = Field(default='INFO')
  log_json: bool = Field(default=False, description='Emit logs as JSON lines')

  model_config = SettingsConfigDict(
    env_file='.env',
    env_file_encoding='utf-8',
    extra='ignore',
    populate_by_name=True,
  )

  def data_location(self, path: str) -> str:
    return f"{self.data_url.rstrip('/')}/{path.lstrip('/')}"

  def has_maps(self) -> bool:
    return bool(self.mapbox_api_token)

  def carousels(self, tab_id: str) -> List[CarouselConfig]:
    return self.charts_config.get(tab_id, [])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()
