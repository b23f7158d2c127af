"""
Monitoring and metrics collection for crawls and rank computations.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server


@dataclass
class MetricPoint:
    """Individual metric data point."""
    timestamp: float
    value: float
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass
class Metric:
    """Metric container with history."""
    name: str
    description: str
    metric_type: str  # counter, gauge, histogram
    points: List[MetricPoint] = field(default_factory=list)
    current_value: float = 0.0


class MetricsCollector:
    """
    Keeps an in-process history of every metric and mirrors the known ones
    into a private Prometheus registry.
    """

    max_points = 1000

    def __init__(self, prometheus_port: int = 8000):
        self.logger = logging.getLogger(__name__)
        self.metrics: Dict[str, Metric] = {}
        self.prometheus_port = prometheus_port
        self.prometheus_registry = CollectorRegistry()
        self.prometheus_metrics = self._setup_prometheus()

    def _setup_prometheus(self) -> Dict[str, Any]:
        registry = self.prometheus_registry
        return {
            'pages_requested_total': Counter(
                'wikirank_pages_requested_total',
                'Total number of page requests issued by the crawler',
                ['kind'],
                registry=registry
            ),
            'pages_admitted_total': Counter(
                'wikirank_pages_admitted_total',
                'Pages that matched every keyword and entered the graph',
                registry=registry
            ),
            'pages_rejected_total': Counter(
                'wikirank_pages_rejected_total',
                'Pages fetched that did not match the keywords',
                registry=registry
            ),
            'edges_emitted_total': Counter(
                'wikirank_edges_emitted_total',
                'Edges recorded in the edge list',
                registry=registry
            ),
            'throttle_pauses_total': Counter(
                'wikirank_throttle_pauses_total',
                'Number of politeness pauses taken',
                registry=registry
            ),
            'frontier_size': Gauge(
                'wikirank_frontier_size',
                'Pages waiting in the crawl frontier',
                registry=registry
            ),
            'pagerank_iterations': Gauge(
                'wikirank_pagerank_iterations',
                'Power iterations used by the last rank computation',
                registry=registry
            ),
            'pagerank_seconds': Histogram(
                'wikirank_pagerank_seconds',
                'Wall time of rank computations',
                registry=registry
            ),
        }

    def start_prometheus_server(self):
        """Expose the registry over HTTP."""
        start_http_server(self.prometheus_port, registry=self.prometheus_registry)
        self.logger.info(f"Prometheus metrics server started on port {self.prometheus_port}")

    def record_metric(self, name: str, value: float, labels: Optional[Dict[str, str]] = None,
                      description: str = "", metric_type: str = "gauge", delta: float = 0.0):
        """Record a metric value."""
        labels = labels or {}

        if name not in self.metrics:
            self.metrics[name] = Metric(
                name=name,
                description=description,
                metric_type=metric_type
            )

        metric = self.metrics[name]
        metric.points.append(MetricPoint(timestamp=time.time(), value=value, labels=labels))
        metric.current_value = value
        if len(metric.points) > self.max_points:
            metric.points = metric.points[-self.max_points:]

        prom_metric = self.prometheus_metrics.get(name)
        if prom_metric is None:
            return
        target = prom_metric.labels(**labels) if labels else prom_metric
        if metric_type == 'counter':
            target.inc(delta)
        elif metric_type == 'histogram':
            target.observe(value)
        else:
            target.set(value)

    def increment_counter(self, name: str, labels: Optional[Dict[str, str]] = None,
                          description: str = "", amount: float = 1):
        """Increment a counter metric."""
        current_value = self.metrics[name].current_value if name in self.metrics else 0
        self.record_metric(name, current_value + amount, labels, description, "counter", amount)

    def set_gauge(self, name: str, value: float, labels: Optional[Dict[str, str]] = None,
                  description: str = ""):
        self.record_metric(name, value, labels, description, "gauge")

    def observe_histogram(self, name: str, value: float, labels: Optional[Dict[str, str]] = None,
                          description: str = ""):
        self.record_metric(name, value, labels, description, "histogram")

    def get_metric(self, name: str) -> Optional[Metric]:
        return self.metrics.get(name)

    def get_current_values(self) -> Dict[str, float]:
        """Get current values of all metrics."""
        return {name: metric.current_value for name, metric in self.metrics.items()}


class CrawlerMonitor:
    """High-level monitoring interface used by the crawler and rank engine."""

    def __init__(self, metrics_collector: MetricsCollector):
        self.metrics = metrics_collector
        self.start_time = time.time()

    def record_page_request(self, kind: str):
        """Record a collaborator request; ``kind`` is ``links`` or ``content``."""
        self.metrics.increment_counter('pages_requested_total', {'kind': kind},
                                       'Page requests')

    def record_page_admitted(self, page: str):
        self.metrics.increment_counter('pages_admitted_total', description='Pages admitted')

    def record_page_rejected(self, page: str):
        self.metrics.increment_counter('pages_rejected_total', description='Pages rejected')

    def record_edge(self):
        self.metrics.increment_counter('edges_emitted_total', description='Edges emitted')

    def record_throttle_pause(self):
        self.metrics.increment_counter('throttle_pauses_total', description='Throttle pauses')

    def update_frontier_size(self, size: int):
        self.metrics.set_gauge('frontier_size', size, description='Pages in frontier')

    def record_pagerank(self, iterations: int, elapsed: float):
        self.metrics.set_gauge('pagerank_iterations', iterations,
                               description='PageRank iterations')
        self.metrics.observe_histogram('pagerank_seconds', elapsed,
                                       description='PageRank wall time')

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of all metrics."""
        current_values = self.metrics.get_current_values()
        runtime = time.time() - self.start_time
        requests = current_values.get('pages_requested_total', 0)

        return {
            'runtime_seconds': runtime,
            'metrics': current_values,
            'rates': {
                'requests_per_second': requests / runtime if runtime > 0 else 0,
            }
        }


def initialize_monitoring(enable_server: bool = False, prometheus_port: int = 8000) -> CrawlerMonitor:
    """Create a monitor, optionally exposing its metrics over HTTP."""
    metrics_collector = MetricsCollector(prometheus_port)
    if enable_server:
        metrics_collector.start_prometheus_server()
    return CrawlerMonitor(metrics_collector)
