"""Configuration management for termmon.

Loads and validates YAML-based configuration with Pydantic models.
"""

from termmon.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
