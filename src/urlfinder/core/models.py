"""Shared data structures used across the crawler stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Tuple


class Mode(IntEnum):
    """Extraction aggressiveness; each level adds a pattern category."""

    NORMAL = 1
    DEEP = 2
    DEEP_SAFE = 3


class FuzzMode(IntEnum):
    """Which fuzz candidate generators run after classification."""

    URL_ONLY = 1
    JS_ONLY = 2
    BOTH = 3


SKIPPED_STATUS = 0


@dataclass(frozen=True)
class FetchResult:
    """Raw outcome of a single HTTP GET."""

    url: str
    status: int
    content_type: str = ""
    body: str = ""


@dataclass(frozen=True)
class CrawlResult:
    """Classified, normalized and filtered discoveries for one fetch."""

    url: str
    status: int
    content_type: str = ""
    body: str = ""
    urls: Tuple[str, ...] = ()
    js_urls: Tuple[str, ...] = ()
    sensitive_info: Tuple[str, ...] = ()

    @classmethod
    def skipped(cls, url: str) -> "CrawlResult":
        return cls(url=url, status=SKIPPED_STATUS)

    @classmethod
    def from_fetch(
        cls,
        fetch: FetchResult,
        *,
        urls: Tuple[str, ...] = (),
        js_urls: Tuple[str, ...] = (),
        sensitive_info: Tuple[str, ...] = (),
    ) -> "CrawlResult":
        return cls(
            url=fetch.url,
            status=fetch.status,
            content_type=fetch.content_type,
            body=fetch.body,
            urls=tuple(urls),
            js_urls=tuple(js_urls),
            sensitive_info=tuple(sensitive_info),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "status": self.status,
            "content_type": self.content_type,
            "urls": list(self.urls),
            "js_urls": list(self.js_urls),
            "sensitive_info": list(self.sensitive_info),
        }
