"""
Configuration module.

Handles loading of tracker settings from YAML and environment variables.
"""

from .loader import ConfigLoader
from .models import TrackerConfig

__all__ = ["ConfigLoader", "TrackerConfig"]
