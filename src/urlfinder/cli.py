"""Command line interface for URLFinder."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import List, Optional, Sequence

from .core.config import DEFAULT_OUTPUT_DIR, DEFAULT_THREADS, DEFAULT_TIMEOUT, load_configuration
from .core.ruleset import ConfigError, load_ruleset
from .recon.crawler import crawl_targets

BANNER_WIDTH = 50


def _version() -> str:
    try:
        return metadata.version("urlfinder")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def print_banner() -> None:
    print("=" * BANNER_WIDTH)
    print(f" URLFinder v{_version()}")
    print("=" * BANNER_WIDTH)
    print(" Extracts URLs, JavaScript assets and sensitive")
    print(" information from web pages")
    print()


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="URLFinder")
    parser.add_argument("-u", "--url", help="Target URL")
    parser.add_argument("-f", "--file", help="File with one target URL per line")
    parser.add_argument("-F", "--ff", dest="unified_file", help="File of URLs reported as a single batch")
    parser.add_argument("-a", "--user-agent", help="Custom User-Agent")
    parser.add_argument("-b", "--base-url", help="Base URL used to resolve relative discoveries")
    parser.add_argument("-c", "--cookie", help="Cookie header value")
    parser.add_argument("-d", "--domain", help="Only crawl hosts matching this regex")
    parser.add_argument("-i", "--config", help="YAML ruleset file")
    parser.add_argument(
        "-m",
        "--mode",
        type=int,
        choices=(1, 2, 3),
        default=1,
        help="Crawl mode: 1=normal, 2=deep, 3=deep with sensitive info",
    )
    parser.add_argument("--max", dest="max_count", type=int, help="Maximum number of URLs to fetch")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT_DIR, help="Output directory")
    parser.add_argument("-s", "--status", help="Status codes to keep, e.g. 200,301 or all")
    parser.add_argument("-t", "--threads", type=int, default=DEFAULT_THREADS, help="Concurrent requests")
    parser.add_argument("--time", dest="timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout (s)")
    parser.add_argument("-x", "--proxy", help="Upstream proxy, e.g. http://127.0.0.1:8080")
    parser.add_argument(
        "-z",
        "--fuzz",
        type=int,
        choices=(1, 2, 3),
        help="Fuzz mode: 1=404 URL paths, 2=JS paths, 3=both",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    if not (args.url or args.file or args.unified_file):
        parser.error("a target URL (-u) or URL file (-f/-F) is required")
    return args


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def read_url_file(path: str) -> List[str]:
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read URL file {path}: {exc}") from exc
    return [line.strip() for line in content.splitlines() if line.strip()]


def collect_targets(args: argparse.Namespace) -> List[str]:
    urls: List[str] = []
    if args.url:
        urls.append(args.url)
    if args.file:
        urls.extend(read_url_file(args.file))
    if args.unified_file:
        urls.extend(read_url_file(args.unified_file))
    return urls


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    configure_logging(args.verbose)
    print_banner()

    try:
        config = load_configuration(
            threads=args.threads,
            timeout=args.timeout,
            mode=args.mode,
            fuzz_mode=args.fuzz,
            base_url=args.base_url,
            user_agent=args.user_agent,
            cookie=args.cookie,
            proxy=args.proxy,
            domain=args.domain,
            status=args.status,
            max_count=args.max_count,
            output_dir=args.output,
            config_path=args.config,
        )
        ruleset = load_ruleset(config.config_path)
        targets = collect_targets(args)
    except ConfigError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 2

    print(f"[*] Crawling {len(targets)} URL(s) in mode {int(config.mode)}")
    report = crawl_targets(config, ruleset, targets)

    paths = report.save(config.output_dir)
    for kind, path in paths.items():
        print(f"[+] {kind.upper()} report saved to {path}")

    print(f"[+] Done, {len(report.results)} URL(s) processed")
    if report.follow_ups:
        print(f"    New URLs discovered    : {len(report.follow_ups)}")
    return 0


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
