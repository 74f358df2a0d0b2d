from __future__ import annotations

from enum import IntEnum


class Stage(IntEnum):
    """Visit form stages, in the only order they can be completed."""

    LOCATION_AND_SCHOOL = 1
    CATEGORY_AND_NOTES = 2
    FINDINGS_AND_ACTIONS = 3
    PHOTO_AND_SIGNATURES = 4
    FINALIZED = 5