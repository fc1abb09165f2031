"""Cross-feed deduplication of candidates."""

from __future__ import annotations

from typing import Iterable, List, Set

from .models import Candidate


def deduplicate(candidates: Iterable[Candidate]) -> List[Candidate]:
    """
    Remove candidates whose url was already seen (exact string match).
    Keeps the first occurrence and preserves original order.
    """
    seen: Set[str] = set()
    out: List[Candidate] = []
    for candidate in candidates:
        if candidate.url in seen:
            continue
        seen.add(candidate.url)
        out.append(candidate)
    return out
