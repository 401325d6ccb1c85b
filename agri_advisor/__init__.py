"""Agri Advisor: weather-aware farming advice relay."""

__version__ = "1.0.0"
