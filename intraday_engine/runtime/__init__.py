"""
Runtime Module

Chart coordinator and runtime entry point.
"""

from .coordinator import ChartCoordinator

__all__ = [
    "ChartCoordinator",
]
