from __future__ import annotations

from typing import Iterable

from siap.domain.models import School


def search_schools(schools: Iterable[School], term: str) -> list[School]:
    """Case-insensitive substring match on school name or NPSN; blank term returns all."""
    needle = term.strip().lower()
    if not needle:
        return list(schools)
    return [s for s in schools if needle in s.name.lower() or needle in s.npsn.lower()]
