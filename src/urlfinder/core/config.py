"""Run configuration built from CLI input and environment variables."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from dotenv import load_dotenv

from .models import FuzzMode, Mode
from .ruleset import ConfigError

DEFAULT_THREADS = 50
DEFAULT_TIMEOUT = 5
DEFAULT_OUTPUT_DIR = "output"


def parse_status_codes(status: str) -> Tuple[int, ...]:
    """Parses ``"200,301"`` into codes; ``"all"`` means no constraint.

    Entries that are not plain decimal numbers are skipped.
    """

    if status.strip().lower() == "all":
        return ()

    codes = []
    for piece in status.split(","):
        piece = piece.strip()
        if piece.isdecimal() and piece.isascii():
            codes.append(int(piece))
    return tuple(codes)


def is_status_match(status: int, codes: Sequence[int]) -> bool:
    return not codes or status in codes


@dataclass(slots=True)
class RunConfig:
    """Holds the validated parameters of a single crawl run."""

    threads: int = DEFAULT_THREADS
    timeout: float = DEFAULT_TIMEOUT
    mode: Mode = Mode.NORMAL
    fuzz_mode: Optional[FuzzMode] = None
    base_url: Optional[str] = None
    user_agent: Optional[str] = None
    cookie: Optional[str] = None
    proxy: Optional[str] = None
    domain: Optional[str] = None
    status_codes: Tuple[int, ...] = ()
    max_count: Optional[int] = None
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    config_path: Optional[Path] = None


def _env_override(value: Optional[str], variable: str) -> Optional[str]:
    if value:
        return value
    return os.getenv(variable) or None


def load_configuration(
    *,
    threads: int = DEFAULT_THREADS,
    timeout: float = DEFAULT_TIMEOUT,
    mode: int = Mode.NORMAL,
    fuzz_mode: Optional[int] = None,
    base_url: Optional[str] = None,
    user_agent: Optional[str] = None,
    cookie: Optional[str] = None,
    proxy: Optional[str] = None,
    domain: Optional[str] = None,
    status: Optional[str] = None,
    max_count: Optional[int] = None,
    output_dir: str = DEFAULT_OUTPUT_DIR,
    config_path: Optional[str] = None,
) -> RunConfig:
    """Builds a ``RunConfig`` from CLI input and environment variables.

    Explicit arguments win over ``URLFINDER_*`` variables, which are read after
    loading a ``.env`` file if one is present.
    """

    load_dotenv()

    if threads <= 0:
        raise ConfigError("threads must be a positive integer")
    if timeout <= 0:
        raise ConfigError("timeout must be positive")
    if max_count is not None and max_count < 0:
        raise ConfigError("max count must not be negative")

    try:
        run_mode = Mode(mode)
    except ValueError as exc:
        raise ConfigError(f"mode must be one of 1, 2, 3 (got {mode})") from exc

    run_fuzz_mode: Optional[FuzzMode] = None
    if fuzz_mode is not None:
        try:
            run_fuzz_mode = FuzzMode(fuzz_mode)
        except ValueError as exc:
            raise ConfigError(f"fuzz mode must be one of 1, 2, 3 (got {fuzz_mode})") from exc

    if domain:
        try:
            re.compile(domain)
        except re.error as exc:
            raise ConfigError(f"Invalid domain pattern {domain!r}: {exc}") from exc

    ruleset_path = _env_override(config_path, "URLFINDER_CONFIG")

    return RunConfig(
        threads=threads,
        timeout=timeout,
        mode=run_mode,
        fuzz_mode=run_fuzz_mode,
        base_url=base_url or None,
        user_agent=_env_override(user_agent, "URLFINDER_USER_AGENT"),
        cookie=_env_override(cookie, "URLFINDER_COOKIE"),
        proxy=_env_override(proxy, "URLFINDER_PROXY"),
        domain=domain or None,
        status_codes=parse_status_codes(status) if status else (),
        max_count=max_count,
        output_dir=Path(output_dir),
        config_path=Path(ruleset_path) if ruleset_path else None,
    )
