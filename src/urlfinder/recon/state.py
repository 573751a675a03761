from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Set


class DedupSet(Enum):
    VISITED = "visited"
    JS_VISITED = "js_visited"
    FUZZ_VISITED = "fuzz_visited"


@dataclass(slots=True)
class DedupState:
    """Run-wide membership sets shared by every worker.

    Entries are never removed. Every check-and-insert happens under a single
    lock acquisition, so an item is reported new to at most one caller.
    """

    visited: Set[str] = field(default_factory=set)
    js_visited: Set[str] = field(default_factory=set)
    fuzz_visited: Set[str] = field(default_factory=set)
    fetched_count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def _members(self, which: DedupSet) -> Set[str]:
        sets: Dict[DedupSet, Set[str]] = {
            DedupSet.VISITED: self.visited,
            DedupSet.JS_VISITED: self.js_visited,
            DedupSet.FUZZ_VISITED: self.fuzz_visited,
        }
        return sets[which]

    def try_insert(self, which: DedupSet, item: str) -> bool:
        members = self._members(which)
        with self._lock:
            if item in members:
                return False
            members.add(item)
            return True

    def contains(self, which: DedupSet, item: str) -> bool:
        members = self._members(which)
        with self._lock:
            return item in members

    def count(self, which: DedupSet) -> int:
        members = self._members(which)
        with self._lock:
            return len(members)

    def claim_fetch(self, limit: Optional[int] = None) -> bool:
        """Reserves one fetch against ``limit``; ``None`` means unlimited."""

        with self._lock:
            if limit is not None and self.fetched_count >= limit:
                return False
            self.fetched_count += 1
            return True
