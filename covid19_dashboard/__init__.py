"""Data shaping, charts and loaders behind the COVID-19 Streamlit dashboard."""

__version__ = "0.1.0"
