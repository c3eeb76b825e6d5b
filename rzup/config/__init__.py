"""
Configuration for rzup.
"""

from .parser import RzupConfig, load_config

__all__ = ["RzupConfig", "load_config"]
