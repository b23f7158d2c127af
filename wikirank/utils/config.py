"""
Configuration management for crawls and rank computations.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    seed_page: str
    keywords: List[str]
    max_pages: int
    output_file: str = 'data/graph.txt'
    base_url: str = 'https://en.wikipedia.org'
    user_agent: str = 'wikirank/1.0'
    request_timeout: int = 30
    throttle_every: int = 200
    throttle_pause: float = 2.0
    respect_robots_txt: bool = True


@dataclass
class PageRankConfig:
    """Configuration for the rank computation."""
    edge_list_file: str = 'data/graph.txt'
    epsilon: float = 0.0001
    top_k: int = 10
    max_iterations: Optional[int] = None


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = 'INFO'
    file: str = 'logs/wikirank.log'
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    json: bool = False


@dataclass
class MonitoringConfig:
    """Configuration for monitoring."""
    metrics_enabled: bool = False
    prometheus_port: int = 8000


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig
    pagerank: PageRankConfig = field(default_factory=PageRankConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as file:
            config_data = yaml.safe_load(file) or {}

        self._config = self.from_dict(config_data)
        self._validate_config()
        return self._config

    @staticmethod
    def from_dict(config_data: Dict[str, Any]) -> Config:
        """Build a Config from already-parsed YAML data."""
        if 'crawler' not in config_data:
            raise ValueError("Configuration must contain a 'crawler' section")

        return Config(
            crawler=CrawlerConfig(**config_data['crawler']),
            pagerank=PageRankConfig(**(config_data.get('pagerank') or {})),
            logging=LoggingConfig(**(config_data.get('logging') or {})),
            monitoring=MonitoringConfig(**(config_data.get('monitoring') or {}))
        )

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ValueError("Configuration not loaded")
        validate_config(self._config)
        logging.info("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ValueError("Configuration not loaded. Call load_config() first.")
        return self._config


def validate_config(config: Config):
    """Raise ValueError for any out-of-range setting."""
    crawler = config.crawler

    if not crawler.seed_page or not crawler.seed_page.strip():
        raise ValueError("A seed page must be provided")

    if not crawler.keywords or not all(k.strip() for k in crawler.keywords):
        raise ValueError("At least one non-empty keyword must be provided")

    if crawler.max_pages < 1:
        raise ValueError("max_pages must be at least 1")

    if crawler.throttle_every < 1:
        raise ValueError("throttle_every must be at least 1")

    if crawler.throttle_pause < 0:
        raise ValueError("throttle_pause must be non-negative")

    if config.pagerank.epsilon <= 0:
        raise ValueError("epsilon must be positive")

    if config.pagerank.top_k < 1:
        raise ValueError("top_k must be at least 1")

    if config.pagerank.max_iterations is not None and config.pagerank.max_iterations < 1:
        raise ValueError("max_iterations must be at least 1 when set")


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> Config:
    """Get the global configuration instance."""
    return config_manager.config


def load_config(config_path: str = "config.yaml") -> Config:
    """Load configuration from file."""
    global config_manager
    config_manager = ConfigManager(config_path)
    return config_manager.load_config()
