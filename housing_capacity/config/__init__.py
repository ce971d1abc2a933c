"""Configuration management for the capacity allocation system."""

from .config_manager import ConfigManager, SystemConfig

__all__ = ['ConfigManager', 'SystemConfig']
