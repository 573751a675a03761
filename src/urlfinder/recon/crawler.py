"""Crawler that fetches the seed URLs and classifies what they expose."""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Dict, Iterable, Optional

from ..core.config import RunConfig
from ..core.models import SKIPPED_STATUS, CrawlResult
from ..core.report import ScanReport
from ..core.ruleset import Ruleset
from .classifier import DiscoveryClassifier
from .extractor import Extractor
from .fetcher import FetchError, Fetcher
from .state import DedupSet, DedupState
from .targeting import TargetFilter

logger = logging.getLogger(__name__)


class Crawler:
    """Runs the fetch, extract and classify pipeline over a set of seeds.

    Seeds are processed once each; URLs classified as new are collected in
    :attr:`ScanReport.follow_ups` and never fetched by this class.
    """

    def __init__(
        self,
        config: RunConfig,
        ruleset: Ruleset,
        *,
        state: Optional[DedupState] = None,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self.config = config
        self.ruleset = ruleset
        self.state = state or DedupState()
        self.fetcher = fetcher or Fetcher(config, ruleset.headers)
        self.extractor = Extractor(ruleset, base_url=config.base_url)
        self.classifier = DiscoveryClassifier.from_ruleset(self.state, ruleset)
        self._target_filter = TargetFilter(
            domain_pattern=config.domain,
            status_codes=config.status_codes,
        )

    @property
    def crawled_count(self) -> int:
        return self.state.fetched_count

    def crawl(self, url: str) -> CrawlResult:
        """Fetches ``url`` and extracts its discoveries.

        Returns a zero-status result when the domain gate or the max count
        rejects the URL. Raises :class:`FetchError` on transport failures.
        """

        if not self._target_filter.is_allowed(url):
            logger.debug("Skipping %s: outside domain %s", url, self.config.domain)
            return CrawlResult.skipped(url)
        if not self.state.claim_fetch(self.config.max_count):
            logger.debug("Skipping %s: max count %s reached", url, self.config.max_count)
            return CrawlResult.skipped(url)

        fetched = self.fetcher.fetch(url)
        if not self._target_filter.is_status_allowed(fetched.status):
            return CrawlResult.from_fetch(fetched)

        return self.extractor.extract_result(fetched, self.config.mode)

    def run(self, urls: Iterable[str]) -> ScanReport:
        seeds = list(urls)
        report = ScanReport()
        completed: Dict[int, CrawlResult] = {}

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.threads) as executor:
            futures = {executor.submit(self.crawl, url): index for index, url in enumerate(seeds)}
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                try:
                    result = future.result()
                except FetchError as exc:
                    logger.error("Error crawling %s: %s", exc.url, exc.cause)
                    continue

                completed[index] = result
                if result.status == SKIPPED_STATUS:
                    continue
                report.follow_ups.extend(
                    self.classifier.process(result, self.config.mode, self.config.fuzz_mode)
                )

        report.results = [
            completed[index]
            for index in sorted(completed)
            if self._keep_in_report(completed[index])
        ]
        logger.info(
            "Crawled %d URL(s), %d visited, %d JS, %d fuzz candidates",
            self.crawled_count,
            self.state.count(DedupSet.VISITED),
            self.state.count(DedupSet.JS_VISITED),
            self.state.count(DedupSet.FUZZ_VISITED),
        )
        return report

    def _keep_in_report(self, result: CrawlResult) -> bool:
        return self._target_filter.is_status_allowed(result.status) and self._target_filter.is_allowed(
            result.url
        )

    def close(self) -> None:
        self.fetcher.close()


def crawl_targets(config: RunConfig, ruleset: Ruleset, urls: Iterable[str]) -> ScanReport:
    crawler = Crawler(config, ruleset)
    try:
        return crawler.run(urls)
    finally:
        crawler.close()
