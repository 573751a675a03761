from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.config import is_status_match
from .utils import is_domain_match


@dataclass(slots=True)
class TargetFilter:
    """Encapsulates the domain allow-list and the status code filter."""

    domain_pattern: Optional[str] = None
    status_codes: Tuple[int, ...] = ()

    def is_allowed(self, url: str) -> bool:
        if not self.domain_pattern:
            return True
        return is_domain_match(url, self.domain_pattern)

    def is_status_allowed(self, status: int) -> bool:
        return is_status_match(status, self.status_codes)
