"""
Config Module

YAML and environment configuration loading and validation.
"""

from .loader import ChartConfig, ConfigLoader

__all__ = [
    "ChartConfig",
    "ConfigLoader",
]
