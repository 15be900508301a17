"""Configuration system for ecg-delineator."""

from .loaders import ConfigLoader
from .models import BaselineFilter, BaselineFilterOptions, Settings

__all__ = [
    "BaselineFilter",
    "BaselineFilterOptions",
    "ConfigLoader",
    "Settings",
]
