from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class FieldCandidate:
    """
    A provisional field value found by pattern matching.

    - raw: the matched substring as it appeared in the normalized line
    - line_index: position of the source line (top to bottom), used for tie-breaks
    - normalized: separator-free form (digits for numbers, ``MM/YY[YY]`` for dates)
    - position: match offset inside the line
    - priority: rank of the pattern that produced it, lower is stronger
    - score: heuristic score (cardholder names only)
    """

    field: str
    raw: str
    line_index: int
    normalized: str
    position: int = 0
    priority: int = 0
    score: int = 0


@dataclass(frozen=True)
class FieldSelection:
    """The winning candidate for one field, rendered for display."""

    field: str
    value: str
    candidate: FieldCandidate
    verified: bool = True
    warnings: Tuple[str, ...] = ()
