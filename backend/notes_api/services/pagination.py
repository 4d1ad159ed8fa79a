"""
Notes API: Pagination Window Calculator
========================================

What:  Pure functions deciding which page buttons a pagination control shows.
Who:   NoteQueryService (last_page_for) and the client list view
       (build_window, clamp_page).

Algorithm (build_window):
    1. last <= 1 → nothing to render.
    2. Main window of `max_window` contiguous pages:
       - fixed_start: [1, min(last, max_window)]
       - otherwise centered on `current`, shifted (not shrunk) at the edges
    3. Displayed pages = window ∪ {1, current, last}, restricted to [1, last]
    4. Ascending; a page gets an ellipsis before it when the gap to the
       previous displayed page is greater than 1.

Example (current=6, last=20, max_window=5):
    window 4..8 → 1 … 4 5 [6] 7 8 … 20
"""

import math
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class PageLink:
    number: int
    ellipsis_before: bool = False
    active: bool = False


@dataclass(frozen=True)
class PaginationWindow:
    """Everything a pagination control needs to render itself."""

    current: int
    last: int
    pages: Tuple[PageLink, ...] = field(default_factory=tuple)
    previous_disabled: bool = True
    next_disabled: bool = True

    @property
    def visible(self) -> bool:
        return bool(self.pages)

    @property
    def numbers(self) -> List[int]:
        return [link.number for link in self.pages]

    def target(self, page: int) -> int:
        """Page to navigate to when `page` is requested (clamped to [1, last])."""
        return clamp_page(page, self.last)

    @property
    def previous_target(self) -> int:
        return self.target(self.current - 1)

    @property
    def next_target(self) -> int:
        return self.target(self.current + 1)


def last_page_for(total: int, per_page: int) -> int:
    """ceil(total / per_page), never below 1."""
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    return max(1, math.ceil(total / per_page))


def clamp_page(page: int, last: int) -> int:
    return min(max(1, page), max(1, last))


def _main_window(current: int, last: int, max_window: int, fixed_start: bool) -> range:
    if fixed_start:
        return range(1, min(last, max_window) + 1)
    start = max(1, current - max_window // 2)
    end = min(last, start + max_window - 1)
    start = max(1, end - max_window + 1)
    return range(start, end + 1)


def build_window(
    current: int,
    last: int,
    max_window: int = 5,
    fixed_start: bool = False,
) -> PaginationWindow:
    """
    Compute the pagination control for page `current` of `last`.

    Args:
        current:     Page being shown (may exceed `last` for an empty trailing page)
        last:        Last page number
        max_window:  Number of contiguous numbered buttons in the main window
        fixed_start: Pin the window to 1..max_window instead of centering it

    Returns:
        PaginationWindow; `pages` is empty when last <= 1.

    Raises:
        ValueError: max_window < 1
    """
    if max_window < 1:
        raise ValueError(f"max_window must be >= 1, got {max_window}")

    if last <= 1:
        return PaginationWindow(current=current, last=last)

    shown = set(_main_window(current, last, max_window, fixed_start))
    shown.update((1, current, last))
    numbers = sorted(p for p in shown if 1 <= p <= last)

    links = []
    previous = None
    for number in numbers:
        links.append(
            PageLink(
                number=number,
                ellipsis_before=previous is not None and number - previous > 1,
                active=number == current,
            )
        )
        previous = number

    return PaginationWindow(
        current=current,
        last=last,
        pages=tuple(links),
        previous_disabled=current <= 1,
        next_disabled=current >= last,
    )
