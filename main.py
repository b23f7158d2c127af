#!/usr/bin/env python3
"""
Command line entry point for wikirank.
"""

import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import yaml

from wikirank.crawler import GraphCrawler, WikiContentMatcher, WikiFetcher, WikiLinkExtractor
from wikirank.ranking import PageRankEngine, RankMetric, RankQuery
from wikirank.utils.config import Config, load_config, validate_config
from wikirank.utils.logger import log_system_info, setup_logging
from wikirank.utils.monitoring import CrawlerMonitor, initialize_monitoring


class WikirankApp:
    """Main application class."""

    def __init__(self):
        self.crawler: Optional[GraphCrawler] = None
        self.monitor: Optional[CrawlerMonitor] = None
        self.logger = logging.getLogger(__name__)

    def setup(self, config: Config):
        """Configure logging and monitoring."""
        setup_logging(asdict(config.logging), enable_json=config.logging.json)
        log_system_info()
        self.monitor = initialize_monitoring(
            enable_server=config.monitoring.metrics_enabled,
            prometheus_port=config.monitoring.prometheus_port
        )

    def setup_signal_handlers(self):
        """Stop the crawl between pages on SIGINT/SIGTERM."""
        def signal_handler(signum, frame):
            self.logger.info(f"Received signal {signum}, stopping after current page...")
            if self.crawler:
                self.crawler.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    async def crawl(self, config: Config):
        """Crawl from the configured seed and write the edge list."""
        crawler_config = config.crawler
        self.logger.info("=== CRAWL STARTING ===")
        self.logger.info(f"Seed page: {crawler_config.seed_page}")
        self.logger.info(f"Keywords: {crawler_config.keywords}")
        self.logger.info(f"Max pages: {crawler_config.max_pages}")
        self.logger.info(f"Output: {crawler_config.output_file}")

        async with WikiFetcher(
            base_url=crawler_config.base_url,
            user_agent=crawler_config.user_agent,
            request_timeout=crawler_config.request_timeout,
            respect_robots_txt=crawler_config.respect_robots_txt
        ) as fetcher:
            self.crawler = GraphCrawler(
                seed=crawler_config.seed_page,
                keywords=crawler_config.keywords,
                max_pages=crawler_config.max_pages,
                output=crawler_config.output_file,
                link_extractor=WikiLinkExtractor(fetcher),
                content_matcher=WikiContentMatcher(fetcher),
                throttle_every=crawler_config.throttle_every,
                throttle_pause=crawler_config.throttle_pause,
                monitor=self.monitor
            )
            self.setup_signal_handlers()
            await self.crawler.crawl()
            self.logger.info(f"Crawl stats: {self.crawler.get_stats()}")
            self.logger.info(f"Fetcher stats: {fetcher.get_stats()}")

    def rank(self, config: Config):
        """Compute PageRank over the configured edge list and print a summary."""
        pagerank_config = config.pagerank
        self.logger.info("=== PAGERANK STARTING ===")
        self.logger.info(f"Edge list: {pagerank_config.edge_list_file}")
        self.logger.info(f"Epsilon: {pagerank_config.epsilon}")

        engine = PageRankEngine.from_file(
            pagerank_config.edge_list_file,
            pagerank_config.epsilon,
            max_iterations=pagerank_config.max_iterations,
            monitor=self.monitor
        )
        print_report(engine, pagerank_config.top_k)

    async def run(self, config: Config, command: str) -> int:
        """Run a command; returns the process exit status."""
        try:
            self.setup(config)
            if command in ('crawl', 'run'):
                await self.crawl(config)
            if command in ('rank', 'run'):
                self.rank(config)
        except Exception as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            return 1
        finally:
            if self.monitor:
                self.logger.info(f"Metrics summary: {self.monitor.get_summary()}")
            self.logger.info("=== WIKIRANK FINISHED ===")

        return 0


def print_report(engine: PageRankEngine, top_k: int):
    """Print graph counts and the top pages for every metric."""
    print(f"Vertices:   {engine.num_vertices()}")
    print(f"Edges:      {engine.num_edges()}")
    print(f"Iterations: {engine.num_iterations()}")

    titles = {
        RankMetric.PAGE_RANK: 'PageRank',
        RankMetric.IN_DEGREE: 'In-degree',
        RankMetric.OUT_DEGREE: 'Out-degree',
    }
    for metric, rows in RankQuery(engine).report(top_k).items():
        print()
        print(f"Top {len(rows)} by {titles[metric]}:")
        for position, (page, score) in enumerate(rows, start=1):
            value = f"{score:.6f}" if metric is RankMetric.PAGE_RANK else f"{int(score)}"
            print(f"{position:>4}. {page}  {value}")


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command line overrides on top of the loaded configuration."""
    if getattr(args, 'seed', None):
        config.crawler.seed_page = args.seed
    if getattr(args, 'keywords', None):
        config.crawler.keywords = args.keywords
    if getattr(args, 'max_pages', None) is not None:
        config.crawler.max_pages = args.max_pages
    if getattr(args, 'output', None):
        config.crawler.output_file = args.output
        config.pagerank.edge_list_file = args.output
    if getattr(args, 'edges', None):
        config.pagerank.edge_list_file = args.edges
    if getattr(args, 'epsilon', None) is not None:
        config.pagerank.epsilon = args.epsilon
    if getattr(args, 'top_k', None) is not None:
        config.pagerank.top_k = args.top_k

    validate_config(config)
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Topic-bounded wiki crawler with PageRank scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py crawl                                  # Crawl with config.yaml
  python main.py crawl --seed /wiki/Tennis --keywords tennis racket --max-pages 100
  python main.py rank --edges data/graph.txt --top-k 20
  python main.py run --config my_config.yaml           # Crawl, then rank
        """
    )
    parser.add_argument(
        '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version='wikirank 1.0.0'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    crawl_args = argparse.ArgumentParser(add_help=False)
    crawl_args.add_argument('--seed', help='Relative path of the seed page, e.g. /wiki/Tennis')
    crawl_args.add_argument('--keywords', nargs='+', help='Keywords every page must contain')
    crawl_args.add_argument('--max-pages', type=int, help='Maximum number of pages in the graph')
    crawl_args.add_argument('--output', help='Edge list file to write')

    rank_args = argparse.ArgumentParser(add_help=False)
    rank_args.add_argument('--edges', help='Edge list file to rank')
    rank_args.add_argument('--epsilon', type=float, help='Convergence threshold')
    rank_args.add_argument('--top-k', type=int, help='Number of pages to list per metric')

    subparsers.add_parser('crawl', parents=[crawl_args], help='Crawl and write an edge list')
    subparsers.add_parser('rank', parents=[rank_args], help='Rank pages of an edge list')
    subparsers.add_parser('run', parents=[crawl_args, rank_args], help='Crawl, then rank')

    return parser


def main():
    """Main entry point."""
    args = build_parser().parse_args()

    if not Path(args.config).exists():
        print(f"Error: Configuration file '{args.config}' not found.")
        print("Please create a config.yaml file or specify a different path with --config")
        return 1

    try:
        config = apply_overrides(load_config(args.config), args)
    except (ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Invalid configuration: {e}")
        return 1

    app = WikirankApp()
    try:
        return asyncio.run(app.run(config, args.command))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1


if __name__ == '__main__':
    sys.exit(main())
