"""Pattern ruleset loading.

The ruleset is the immutable bag of regular expressions, fuzz path lists and
default request headers shared by every worker of a run. Patterns are compiled
exactly once, when the ruleset is built, so a malformed expression surfaces as
a :class:`ConfigError` before any request is issued.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Pattern, Tuple

import yaml

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.5"
DEFAULT_ACCEPT_ENCODING = "gzip, deflate"

DEFAULT_URL_PATTERNS = (
    r"https?://[\w\-\.]+(:\d+)?(/[\w\-\./?%&=]*)?",
    r"(/[\w\-\./?%&=]+)+",
)
DEFAULT_JS_PATTERNS = (
    r"https?://[\w\-\.]+(:\d+)?[\w\-\./?%&=]*\.js",
    r"(/[\w\-\./?%&=]*\.js)+",
)
DEFAULT_SENSITIVE_PATTERNS = (
    r"""(password|secret|token|key)\s*[=:]\s*['"][^'"]+['"]""",
    r"(api|v1|v2|v3)/[\w\-\./?%&=]+",
)
DEFAULT_URL_FILTERS = (
    r"\.(css|png|jpg|jpeg|gif|ico|svg|woff|woff2|ttf|eot|mp3|mp4|avi|swf)$",
)
DEFAULT_JS_FILTERS = (r"^(https?:)?//cdn\.",)
DEFAULT_URL_FUZZ_PATHS = ("/admin", "/api", "/v1", "/v2", "/swagger", "/docs")
DEFAULT_JS_FUZZ_PATHS = ("config.js", "api.js", "main.js", "app.js", "index.js")
DEFAULT_URL_DEPTH = 1
DEFAULT_JS_DEPTH = 3

PATTERN_FIELDS = (
    "url_patterns",
    "js_patterns",
    "sensitive_patterns",
    "url_filters",
    "js_filters",
)
PATH_FIELDS = ("url_fuzz_paths", "js_fuzz_paths")
DEPTH_FIELDS = ("url_depth", "js_depth")
HEADER_FIELDS = ("user_agent", "cookie", "accept", "accept_language", "accept_encoding")


class ConfigError(RuntimeError):
    """Raised when the ruleset or the run parameters cannot be used."""


@dataclass(frozen=True)
class HeaderDefaults:
    """Request header values used when the run does not override them."""

    user_agent: str = DEFAULT_USER_AGENT
    cookie: str = ""
    accept: str = DEFAULT_ACCEPT
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    accept_encoding: str = DEFAULT_ACCEPT_ENCODING


@dataclass(frozen=True)
class Ruleset:
    """Compiled, read-only extraction and fuzzing rules for a run."""

    headers: HeaderDefaults = field(default_factory=HeaderDefaults)
    url_patterns: Tuple[Pattern[str], ...] = ()
    js_patterns: Tuple[Pattern[str], ...] = ()
    sensitive_patterns: Tuple[Pattern[str], ...] = ()
    url_filters: Tuple[Pattern[str], ...] = ()
    js_filters: Tuple[Pattern[str], ...] = ()
    url_fuzz_paths: Tuple[str, ...] = ()
    js_fuzz_paths: Tuple[str, ...] = ()
    url_depth: int = DEFAULT_URL_DEPTH
    js_depth: int = DEFAULT_JS_DEPTH

    def is_url_filtered(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in self.url_filters)

    def is_js_filtered(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in self.js_filters)


def compile_patterns(name: str, patterns: Iterable[str]) -> Tuple[Pattern[str], ...]:
    """Compiles every pattern of a list, keeping the declared order."""

    compiled = []
    for index, pattern in enumerate(patterns):
        if not isinstance(pattern, str):
            raise ConfigError(f"{name}[{index}] must be a string, got {type(pattern).__name__}")
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigError(f"Invalid pattern in {name}[{index}] {pattern!r}: {exc}") from exc
    return tuple(compiled)


def _string_list(name: str, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{name} must be a list of strings")
    items = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ConfigError(f"{name}[{index}] must be a string")
        items.append(item)
    return tuple(items)


def _build_headers(raw: Any) -> HeaderDefaults:
    if raw is None:
        return HeaderDefaults()
    if not isinstance(raw, Mapping):
        raise ConfigError("headers must be a mapping")

    values: Dict[str, str] = {}
    for name in HEADER_FIELDS:
        if name not in raw:
            continue
        value = raw[name]
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ConfigError(f"headers.{name} must be a string")
        values[name] = value
    return HeaderDefaults(**values)


def build_ruleset(raw: Optional[Mapping[str, Any]] = None) -> Ruleset:
    """Builds a :class:`Ruleset` from a parsed document.

    Keys absent from ``raw`` fall back to the built-in defaults. A key present
    with an empty list disables that category.
    """

    raw = raw or {}
    defaults: Dict[str, Tuple[str, ...]] = {
        "url_patterns": DEFAULT_URL_PATTERNS,
        "js_patterns": DEFAULT_JS_PATTERNS,
        "sensitive_patterns": DEFAULT_SENSITIVE_PATTERNS,
        "url_filters": DEFAULT_URL_FILTERS,
        "js_filters": DEFAULT_JS_FILTERS,
        "url_fuzz_paths": DEFAULT_URL_FUZZ_PATHS,
        "js_fuzz_paths": DEFAULT_JS_FUZZ_PATHS,
    }

    kwargs: Dict[str, Any] = {"headers": _build_headers(raw.get("headers"))}
    for name in PATTERN_FIELDS:
        source = _string_list(name, raw[name]) if raw.get(name) is not None else defaults[name]
        kwargs[name] = compile_patterns(name, source)
    for name in PATH_FIELDS:
        kwargs[name] = _string_list(name, raw[name]) if raw.get(name) is not None else defaults[name]

    depth_defaults = {"url_depth": DEFAULT_URL_DEPTH, "js_depth": DEFAULT_JS_DEPTH}
    for name in DEPTH_FIELDS:
        value = raw.get(name, depth_defaults[name])
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigError(f"{name} must be a non-negative integer")
        kwargs[name] = value

    return Ruleset(**kwargs)


def default_ruleset() -> Ruleset:
    return build_ruleset()


def load_ruleset(path: Optional[Path] = None) -> Ruleset:
    """Reads a YAML ruleset file, or returns the defaults when ``path`` is None."""

    if path is None:
        return default_ruleset()

    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read ruleset {path}: {exc}") from exc

    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in ruleset {path}: {exc}") from exc

    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigError(f"Ruleset {path} must contain a mapping at the top level")

    return build_ruleset(document)
