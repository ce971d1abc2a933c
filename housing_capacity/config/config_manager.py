"""Configuration manager for system parameters."""

import json
import os
from typing import Any, Dict
from dataclasses import dataclass, asdict, fields
import logging

from ..utils.error_handling import ConfigurationError

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("memory", "json")


@dataclass
class SystemConfig:
    """System-wide configuration parameters."""
    
    # Storage settings
    storage_backend: str = "memory"
    data_dir: str = "data"
    
    # Allocation settings
    strict_traffic_reference: bool = True
    warn_on_limit_below_usage: bool = True
    
    # Dashboard settings
    dashboard_refresh_rate_seconds: int = 5
    high_utilization_threshold: float = 0.9
    
    # Logging settings
    log_level: str = "INFO"
    log_file_path: str = "logs/capacity_system.log"
    
    def validate(self) -> None:
        """Validate configuration values."""
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"storage_backend must be one of {STORAGE_BACKENDS}",
                config_section="storage_backend"
            )
        if not isinstance(self.data_dir, str) or not self.data_dir:
            raise ConfigurationError("data_dir must be a non-empty string", config_section="data_dir")
        if not (0.0 < self.high_utilization_threshold <= 1.0):
            raise ConfigurationError(
                "high_utilization_threshold must be in (0, 1]",
                config_section="high_utilization_threshold"
            )


class ConfigManager:
    """Loads, updates and saves the system configuration file."""
    
    def __init__(self, config_file: str = "config/system_config.json"):
        self.config_file = config_file
        self.system_config = SystemConfig()
        self._load_config()
    
    def _load_config(self) -> None:
        """Load configuration from file if it exists."""
        if not os.path.exists(self.config_file):
            logger.info("No config file found, using default configuration")
            self.save_config()
            return
        
        try:
            with open(self.config_file, 'r') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading configuration: {e}")
            logger.info("Using default configuration")
            return
        
        self._apply(config_data.get('system', {}))
        logger.info(f"Configuration loaded from {self.config_file}")
    
    def _apply(self, values: Dict[str, Any]) -> None:
        known = {f.name for f in fields(SystemConfig)}
        for key, value in values.items():
            if key in known:
                setattr(self.system_config, key, value)
            else:
                logger.warning(f"Unknown system config parameter: {key}")
        self.system_config.validate()
    
    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            config_dir = os.path.dirname(self.config_file)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            
            with open(self.config_file, 'w') as f:
                json.dump({'system': asdict(self.system_config)}, f, indent=2)
            
            logger.info(f"Configuration saved to {self.config_file}")
        
        except OSError as e:
            logger.error(f"Error saving configuration: {e}")
    
    def get_system_config(self) -> SystemConfig:
        """Get system configuration."""
        return self.system_config
    
    def update_system_config(self, **kwargs) -> None:
        """Update system configuration parameters."""
        for key, value in kwargs.items():
            if hasattr(self.system_config, key):
                setattr(self.system_config, key, value)
                logger.info(f"Updated system config: {key} = {value}")
            else:
                logger.warning(f"Unknown system config parameter: {key}")
        self.system_config.validate()
