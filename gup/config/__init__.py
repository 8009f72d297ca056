"""
Configuration for gup.
"""

from .parser import LATEST_SENTINEL, UpdaterConfig, load_config

__all__ = ["LATEST_SENTINEL", "UpdaterConfig", "load_config"]
