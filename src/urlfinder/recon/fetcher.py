"""HTTP fetching under a run-wide concurrency budget."""

from __future__ import annotations

import logging
import threading
from typing import Optional

import requests

from ..core.config import RunConfig
from ..core.models import FetchResult
from ..core.ruleset import HeaderDefaults

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """Raised when a request fails at the transport level."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"{url}: {cause}")
        self.url = url
        self.cause = cause


def _prepare_session(config: RunConfig, headers: HeaderDefaults) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": config.user_agent or headers.user_agent,
            "Accept": headers.accept,
            "Accept-Language": headers.accept_language,
            "Accept-Encoding": headers.accept_encoding,
        }
    )
    cookie = config.cookie or headers.cookie
    if cookie:
        session.headers["Cookie"] = cookie
    if config.proxy:
        session.proxies.update({"http": config.proxy, "https": config.proxy})
    return session


class Fetcher:
    """Issues one GET per URL, never more than ``threads`` at a time."""

    def __init__(
        self,
        config: RunConfig,
        headers: HeaderDefaults,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = config.timeout
        self._slots = threading.Semaphore(config.threads)
        self._session = session or _prepare_session(config, headers)

    def fetch(self, url: str) -> FetchResult:
        with self._slots:
            try:
                response = self._session.get(url, timeout=self.timeout)
                body = response.text
            except requests.RequestException as exc:
                raise FetchError(url, exc) from exc

        logger.debug("Fetched %s (%s)", url, response.status_code)
        return FetchResult(
            url=url,
            status=response.status_code,
            content_type=response.headers.get("content-type", ""),
            body=body,
        )

    def close(self) -> None:
        self._session.close()
