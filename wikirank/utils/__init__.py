"""
Utility modules for wikirank.
"""

from .config import Config, ConfigManager, load_config, get_config, validate_config

__all__ = ['Config', 'ConfigManager', 'load_config', 'get_config', 'validate_config']
