"""Regex extraction of URLs, JS assets and sensitive strings from a page body."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Tuple

from ..core.models import CrawlResult, FetchResult, Mode
from ..core.ruleset import Ruleset
from .utils import UrlError, normalize_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawExtraction:
    """Matches taken straight from the body, before filtering."""

    urls: Tuple[str, ...] = ()
    js_urls: Tuple[str, ...] = ()
    sensitive_info: Tuple[str, ...] = ()


def _find_all(patterns: Iterable[Pattern[str]], body: str) -> Tuple[str, ...]:
    matches: List[str] = []
    for pattern in patterns:
        matches.extend(match.group(0) for match in pattern.finditer(body))
    return tuple(matches)


def extract(body: str, mode: Mode, ruleset: Ruleset) -> RawExtraction:
    """Applies the pattern categories enabled by ``mode`` to ``body``.

    Every pattern of a category runs and every match is kept, duplicates
    included.
    """

    urls = _find_all(ruleset.url_patterns, body)
    js_urls: Tuple[str, ...] = ()
    sensitive_info: Tuple[str, ...] = ()

    if mode >= Mode.DEEP:
        js_urls = _find_all(ruleset.js_patterns, body)
    if mode == Mode.DEEP_SAFE:
        sensitive_info = _find_all(ruleset.sensitive_patterns, body)

    return RawExtraction(urls=urls, js_urls=js_urls, sensitive_info=sensitive_info)


class Extractor:
    """Turns a fetched page into a :class:`CrawlResult`."""

    def __init__(self, ruleset: Ruleset, base_url: Optional[str] = None) -> None:
        self.ruleset = ruleset
        self.base_url = base_url

    def extract_result(self, fetch: FetchResult, mode: Mode) -> CrawlResult:
        raw = extract(fetch.body, mode, self.ruleset)
        base = self.base_url or fetch.url

        urls = self._resolve(raw.urls, base, self.ruleset.is_url_filtered)
        js_urls = self._resolve(raw.js_urls, base, self.ruleset.is_js_filtered)

        return CrawlResult.from_fetch(
            fetch,
            urls=urls,
            js_urls=js_urls,
            sensitive_info=raw.sensitive_info,
        )

    @staticmethod
    def _resolve(values: Iterable[str], base: str, is_filtered) -> Tuple[str, ...]:
        resolved: List[str] = []
        for value in values:
            if is_filtered(value):
                continue
            try:
                resolved.append(normalize_url(value, base))
            except UrlError:
                logger.debug("Dropping %r: cannot resolve against %s", value, base)
        return tuple(resolved)
