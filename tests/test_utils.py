"""Logging and monitoring utility tests."""

import json
import logging

from wikirank.utils.logger import JSONFormatter, get_crawler_logger, setup_logging
from wikirank.utils.monitoring import MetricsCollector, initialize_monitoring


def make_record(name="wikirank.crawler", level=logging.INFO, msg="hello", **extra):
    record = logging.LogRecord(name, level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_crawl_context():
    output = JSONFormatter().format(make_record(seed="/wiki/Tennis", page="/wiki/Ball"))

    entry = json.loads(output)
    assert entry["message"] == "hello"
    assert entry["level"] == "INFO"
    assert entry["seed"] == "/wiki/Tennis"
    assert entry["page"] == "/wiki/Ball"


def test_setup_logging_writes_json_records_to_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    log_file = tmp_path / "logs" / "wikirank.log"
    try:
        setup_logging({"level": "DEBUG", "file": str(log_file)}, enable_json=True)
        get_crawler_logger("wikirank.test", seed="/wiki/Tennis").log_page_event(
            logging.DEBUG, "/wiki/Ball", "expanding"
        )
        for handler in root.handlers:
            handler.flush()

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    page_entry = entries[-1]
    assert page_entry["message"] == "expanding"
    assert page_entry["seed"] == "/wiki/Tennis"
    assert page_entry["page"] == "/wiki/Ball"
    assert page_entry["event_type"] == "page_event"
    assert logging.getLogger("aiohttp").level == logging.WARNING


def test_crawler_logger_attaches_context(caplog):
    logger = get_crawler_logger("wikirank.test", seed="/wiki/Tennis")

    with caplog.at_level(logging.INFO, logger="wikirank.test"):
        logger.log_crawler_stat("edges_emitted", 4)

    record = caplog.records[-1]
    assert record.seed == "/wiki/Tennis"
    assert record.stat_name == "edges_emitted"
    assert record.stat_value == 4
    assert "edges_emitted = 4" in record.getMessage()


def test_metrics_collector_tracks_counters_and_gauges():
    collector = MetricsCollector()

    collector.increment_counter("edges_emitted_total")
    collector.increment_counter("edges_emitted_total")
    collector.set_gauge("frontier_size", 7)

    assert collector.get_metric("edges_emitted_total").current_value == 2
    assert collector.get_current_values()["frontier_size"] == 7
    assert collector.prometheus_registry.get_sample_value("wikirank_edges_emitted_total") == 2
    assert collector.prometheus_registry.get_sample_value("wikirank_frontier_size") == 7


def test_monitor_records_pagerank():
    monitor = initialize_monitoring()

    monitor.record_pagerank(iterations=12, elapsed=0.5)

    registry = monitor.metrics.prometheus_registry
    assert registry.get_sample_value("wikirank_pagerank_iterations") == 12
    assert registry.get_sample_value("wikirank_pagerank_seconds_count") == 1
    assert monitor.get_summary()["metrics"]["pagerank_iterations"] == 12
