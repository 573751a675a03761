"""Helper utilities used by recon modules."""

from __future__ import annotations

import re
from urllib.parse import urlsplit


class UrlError(ValueError):
    """Raised when a base URL or an extracted string cannot be resolved."""


def _split_base(base_url: str):
    try:
        parsed = urlsplit(base_url)
    except ValueError as exc:
        raise UrlError(f"Invalid base URL {base_url!r}: {exc}") from exc
    if not parsed.scheme or not parsed.netloc:
        raise UrlError(f"Base URL {base_url!r} has no scheme or host")
    return parsed


def normalize_url(url: str, base_url: str) -> str:
    """Resolves an extracted string to an absolute URL against ``base_url``.

    Relative values are appended to the directory of the base path, which is
    everything up to and including its last ``/``.
    """

    if url.startswith(("http://", "https://")):
        return url

    base = _split_base(base_url)
    if url.startswith("//"):
        return f"{base.scheme}:{url}"
    if url.startswith("/"):
        return f"{base.scheme}://{base.netloc}{url}"

    path = base.path or "/"
    parent = path[: path.rfind("/") + 1]
    return f"{base.scheme}://{base.netloc}{parent}{url}"


def is_domain_match(url: str, domain_pattern: str) -> bool:
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return False
    if not host:
        return False
    try:
        return re.search(domain_pattern, host) is not None
    except re.error:
        return False

