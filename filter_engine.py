"""
Live name filter for the catalogue list.
"""

from typing import List, Sequence

import numpy as np


def filter_indices(records: Sequence, query: str) -> List[int]:
    """
    Return the indices of *records* whose name contains *query*,
    case-insensitively, in catalogue order. An empty query matches all.
    """
    if not query:
        return list(range(len(records)))

    needle = query.casefold()
    mask = np.array([needle in r.name.casefold() for r in records], dtype=bool)
    return np.flatnonzero(mask).tolist()


def clamp_selection(selected: int, view_len: int) -> int:
    """Clamp a selection into [0, view_len), or 0 for an empty view"""
    if view_len <= 0:
        return 0
    return min(max(selected, 0), view_len - 1)
