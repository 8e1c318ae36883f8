"""
Configuration Adapters - Load configuration from various sources.
"""

from .environment import EnvironmentConfigProvider

__all__ = ["EnvironmentConfigProvider"]

