"""Decides which discoveries of a crawl result are new for the run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..core.models import CrawlResult, FuzzMode, Mode
from ..core.ruleset import Ruleset
from .fuzz import JsFuzzer, UrlFuzzer
from .state import DedupSet, DedupState

logger = logging.getLogger(__name__)

URL_FUZZ_MODES = frozenset({FuzzMode.URL_ONLY, FuzzMode.BOTH})
JS_FUZZ_MODES = frozenset({FuzzMode.JS_ONLY, FuzzMode.BOTH})


@dataclass(slots=True)
class DiscoveryClassifier:
    """Filters discoveries through the shared :class:`DedupState`."""

    state: DedupState
    url_fuzzer: UrlFuzzer
    js_fuzzer: JsFuzzer

    @classmethod
    def from_ruleset(cls, state: DedupState, ruleset: Ruleset) -> "DiscoveryClassifier":
        return cls(
            state=state,
            url_fuzzer=UrlFuzzer(ruleset.url_fuzz_paths),
            js_fuzzer=JsFuzzer(ruleset.js_fuzz_paths),
        )

    def process(
        self,
        result: CrawlResult,
        mode: Mode,
        fuzz_mode: Optional[FuzzMode] = None,
    ) -> List[str]:
        """Returns the URLs from ``result`` that no earlier call has returned.

        URL fuzzing only fires for pages that answered 404, while JS fuzzing
        runs for every result.
        """

        new_urls: List[str] = []
        self.state.try_insert(DedupSet.VISITED, result.url)

        new_urls.extend(self._claim(DedupSet.VISITED, result.urls))

        if mode >= Mode.DEEP:
            new_urls.extend(self._claim(DedupSet.JS_VISITED, result.js_urls))

        if mode == Mode.DEEP_SAFE and result.sensitive_info:
            logger.warning(
                "[!] Found sensitive information in %s: %s",
                result.url,
                list(result.sensitive_info),
            )

        if fuzz_mode in URL_FUZZ_MODES and result.status == 404:
            candidates = self.url_fuzzer.generate([result], result.url)
            new_urls.extend(self._claim(DedupSet.FUZZ_VISITED, candidates))

        if fuzz_mode in JS_FUZZ_MODES:
            candidates = self.js_fuzzer.generate([result])
            new_urls.extend(self._claim(DedupSet.FUZZ_VISITED, candidates))

        return new_urls

    def _claim(self, which: DedupSet, items: Iterable[str]) -> List[str]:
        return [item for item in items if self.state.try_insert(which, item)]
