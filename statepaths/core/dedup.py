"""Path deduplication.

A path is redundant when its description occurs verbatim inside another
path's description: walking the longer path already walks it. Only the
maximal paths are kept.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from statepaths.core.path import Path

logger = logging.getLogger(__name__)


def deduplicate(paths: Sequence[Path]) -> list[Path]:
    """Keep only paths that are not contained in another kept path.

    Paths are considered longest first (ties keep their input order), and
    the kept list is returned reversed, so shorter paths come first.
    The input sequence is not modified.

    Complexity: O(n^2 * description length). Descriptions are computed
    once per path before the comparison loop.

    Example:
        >>> [p.description for p in deduplicate([a, a_b, a_b_c])]
        ['A -> B -> C']
    """
    longest_first = sorted(paths, key=len, reverse=True)

    kept: list[Path] = []
    kept_descriptions: list[str] = []
    for path, description in [(path, path.description) for path in longest_first]:
        if not any(description in other for other in kept_descriptions):
            kept.append(path)
            kept_descriptions.append(description)

    kept.reverse()
    logger.debug(f"Deduplicated {len(paths)} paths down to {len(kept)}")
    return kept
