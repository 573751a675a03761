"""Fuzz candidate generation from discovered page and script URLs."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Set
from urllib.parse import urlsplit

from ..core.models import CrawlResult

ORIGIN_PATTERN = re.compile(r"(https?://[^/]+)/")


def base_paths(url: str) -> Set[str]:
    """Returns the directory base and the bare origin of ``url``.

    The directory form is only produced when the path has at least two
    segments, e.g. ``http://h/a/b.js`` gives ``http://h/a`` and ``http://h``.
    """

    paths: Set[str] = set()

    try:
        parsed = urlsplit(url)
    except ValueError:
        parsed = None
    if parsed is not None and parsed.scheme and parsed.netloc:
        segments = parsed.path.lstrip("/").split("/") if parsed.path else []
        if len(segments) > 1:
            directory = "/".join(segments[:-1])
            paths.add(f"{parsed.scheme}://{parsed.netloc}/{directory}")

    match = ORIGIN_PATTERN.search(url)
    if match:
        paths.add(match.group(1))

    return paths


def join_fuzz_path(base: str, suffix: str) -> str:
    return f"{base.rstrip('/')}/{suffix.lstrip('/')}"


def _expand(bases: Iterable[str], suffixes: Sequence[str]) -> List[str]:
    return [join_fuzz_path(base, suffix) for base in sorted(set(bases)) for suffix in suffixes]


class UrlFuzzer:
    """Probes sibling paths of pages that answered 404."""

    def __init__(self, fuzz_paths: Sequence[str]) -> None:
        self.fuzz_paths = tuple(fuzz_paths)

    def generate(
        self,
        results: Iterable[CrawlResult],
        fallback_target: str,
        fallback_domain: Optional[str] = None,
    ) -> List[str]:
        host = fallback_domain
        if not host:
            try:
                host = urlsplit(fallback_target).hostname
            except ValueError:
                host = None
        if not host:
            return []

        bases: Set[str] = set()
        for result in results:
            if result.status != 404:
                continue
            bases.update(base_paths(result.url))

        return _expand(bases, self.fuzz_paths)


class JsFuzzer:
    """Probes sibling script files next to every discovered JS URL."""

    def __init__(self, fuzz_paths: Sequence[str]) -> None:
        self.fuzz_paths = tuple(fuzz_paths)

    def generate(self, results: Iterable[CrawlResult]) -> List[str]:
        bases: Set[str] = set()
        for result in results:
            for js_url in result.js_urls:
                bases.update(base_paths(js_url))

        return _expand(bases, self.fuzz_paths)
