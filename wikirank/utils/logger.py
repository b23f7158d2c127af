"""
Logging setup for crawls and rank computations.

Crawl records carry the seed page, and page-level events the page they concern,
as record attributes. The JSON formatter lifts those attributes into top-level
fields so a crawl log can be filtered by page.
"""

import json
import logging
import logging.handlers
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import psutil


# Third-party loggers that are only useful at WARNING and above during a crawl
QUIET_LOGGERS = ('aiohttp', 'asyncio', 'chardet', 'charset_normalizer')


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with crawl context as top-level fields."""

    context_fields = ('seed', 'page', 'event_type', 'stat_name', 'stat_value')

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for key in self.context_fields:
            if hasattr(record, key):
                entry[key] = getattr(record, key)

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)


class CrawlerLogAdapter(logging.LoggerAdapter):
    """Attaches the crawl's context (e.g. its seed) to every record."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs['extra'] = {**self.extra, **kwargs.get('extra', {})}
        return msg, kwargs

    def log_page_event(self, level: int, page: str, message: str):
        self.log(level, message, extra={'page': page, 'event_type': 'page_event'})

    def log_crawler_stat(self, stat_name: str, value: Any):
        self.info(f"Stat: {stat_name} = {value}",
                  extra={'stat_name': stat_name, 'stat_value': value,
                         'event_type': 'crawler_stat'})


def setup_logging(config: Dict[str, Any], enable_json: bool = False) -> logging.Logger:
    """
    Configure the root logger with a console handler and a rotating log file.

    Args:
        config: Logging configuration (``level``, ``file``, ``format``)
        enable_json: Emit JSON records instead of the text format

    Returns:
        The root logger
    """
    log_file = Path(config.get('file', 'logs/wikirank.log'))
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.get('level', 'INFO').upper()))
    root_logger.handlers.clear()

    if enable_json:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=20 * 1024 * 1024,  # 20MB
        backupCount=3,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(f"Logging to {log_file} at level {config.get('level', 'INFO')}")
    return root_logger


def get_crawler_logger(name: str, **context) -> CrawlerLogAdapter:
    """Get a logger whose records all carry ``context`` (e.g. ``seed=...``)."""
    return CrawlerLogAdapter(logging.getLogger(name), context)


def log_system_info(logger: Optional[logging.Logger] = None):
    """Log host platform and memory."""
    logger = logger or logging.getLogger(__name__)
    memory = psutil.virtual_memory()
    logger.info(f"Host: {platform.platform()}, Python {platform.python_version()}")
    logger.info(f"CPU cores: {psutil.cpu_count()}, "
                f"memory: {memory.available / 1024**3:.1f} of {memory.total / 1024**3:.1f} GB free")
