"""
Notes API: Pagination Window Tests
===================================

What:  Examples and exhaustive small-range property checks for build_window,
       clamp_page and last_page_for.

Properties checked over every (current, last, max_window) in range:
    ✅ last <= 1 renders nothing
    ✅ 1, current and last are always shown, ascending, no duplicates
    ✅ ellipsis exactly where the gap to the previous page exceeds 1
    ✅ previous disabled iff current == 1, next disabled iff current == last
    ✅ same inputs, same output
"""

import pytest

from notes_api.services.pagination import (
    build_window,
    clamp_page,
    last_page_for,
)


def _render(window):
    """Compact text form: '1 … 4 5 [6] 7 8 … 20'."""
    parts = []
    for link in window.pages:
        if link.ellipsis_before:
            parts.append("…")
        parts.append(f"[{link.number}]" if link.active else str(link.number))
    return " ".join(parts)


class TestBuildWindowExamples:

    def test_centered_window_in_the_middle(self):
        assert _render(build_window(6, 20)) == "1 … 4 5 [6] 7 8 … 20"

    def test_window_shifts_right_at_the_start(self):
        assert _render(build_window(1, 10)) == "[1] 2 3 4 5 … 10"
        assert _render(build_window(2, 10)) == "1 [2] 3 4 5 … 10"

    def test_window_shifts_left_at_the_end(self):
        assert _render(build_window(10, 10)) == "1 … 6 7 8 9 [10]"
        assert _render(build_window(9, 10)) == "1 … 6 7 8 [9] 10"

    def test_no_ellipsis_when_window_touches_first_page(self):
        assert _render(build_window(4, 10)) == "1 2 3 [4] 5 6 … 10"

    def test_fewer_pages_than_window(self):
        assert _render(build_window(2, 3)) == "1 [2] 3"

    def test_fixed_start_pins_current_and_last(self):
        assert _render(build_window(8, 20, fixed_start=True)) == "1 2 3 4 5 … [8] … 20"

    def test_fixed_start_current_inside_window(self):
        assert _render(build_window(3, 20, max_window=3, fixed_start=True)) == "1 2 [3] … 20"

    def test_current_past_last_page_is_not_shown(self):
        window = build_window(5, 3)
        assert window.numbers == [1, 2, 3]
        assert not any(link.active for link in window.pages)
        assert window.next_disabled is True

    def test_navigation_targets_are_clamped(self):
        window = build_window(1, 4)
        assert window.previous_target == 1
        assert window.next_target == 2
        assert window.target(99) == 4
        assert window.target(-3) == 1

    @pytest.mark.parametrize("last", [-1, 0, 1])
    def test_single_or_no_page_renders_nothing(self, last):
        window = build_window(1, last)
        assert window.pages == ()
        assert window.visible is False

    def test_invalid_max_window(self):
        with pytest.raises(ValueError):
            build_window(1, 10, max_window=0)


class TestBuildWindowProperties:

    @pytest.mark.parametrize("fixed_start", [False, True])
    def test_pinned_pages_sorted_unique(self, fixed_start):
        for last in range(2, 16):
            for current in range(1, last + 1):
                for max_window in range(1, 8):
                    window = build_window(current, last, max_window, fixed_start)
                    numbers = window.numbers

                    assert {1, current, last} <= set(numbers)
                    assert numbers == sorted(set(numbers))
                    assert all(1 <= n <= last for n in numbers)
                    assert [link.number for link in window.pages if link.active] == [current]

    @pytest.mark.parametrize("fixed_start", [False, True])
    def test_ellipsis_marks_every_gap(self, fixed_start):
        for last in range(2, 16):
            for current in range(1, last + 1):
                for max_window in range(1, 8):
                    pages = build_window(current, last, max_window, fixed_start).pages
                    assert pages[0].ellipsis_before is False
                    for prev, link in zip(pages, pages[1:]):
                        assert link.ellipsis_before == (link.number - prev.number > 1)

    def test_centered_window_keeps_full_size(self):
        for last in range(2, 16):
            for current in range(1, last + 1):
                for max_window in range(1, 8):
                    numbers = build_window(current, last, max_window).numbers
                    # The contiguous run around current holds min(last, max_window) pages
                    run = {current}
                    lo, hi = current, current
                    while lo - 1 in numbers:
                        lo -= 1
                        run.add(lo)
                    while hi + 1 in numbers:
                        hi += 1
                        run.add(hi)
                    assert len(run) >= min(last, max_window)

    def test_controls_disabled_only_at_the_ends(self):
        for last in range(2, 16):
            for current in range(1, last + 1):
                window = build_window(current, last)
                assert window.previous_disabled == (current == 1)
                assert window.next_disabled == (current == last)

    def test_no_pages_for_last_at_most_one(self):
        for last in range(-2, 2):
            for current in range(1, 4):
                assert build_window(current, last).pages == ()

    def test_deterministic(self):
        for last in range(2, 12):
            for current in range(1, last + 1):
                assert build_window(current, last, 4) == build_window(current, last, 4)


class TestPageArithmetic:

    @pytest.mark.parametrize(
        "total,expected",
        [(0, 1), (1, 1), (10, 1), (11, 2), (20, 2), (21, 3), (95, 10)],
    )
    def test_last_page_for(self, total, expected):
        assert last_page_for(total, 10) == expected

    def test_last_page_for_rejects_zero_per_page(self):
        with pytest.raises(ValueError):
            last_page_for(5, 0)

    @pytest.mark.parametrize(
        "page,last,expected",
        [(0, 5, 1), (1, 5, 1), (3, 5, 3), (5, 5, 5), (9, 5, 5), (-4, 5, 1), (3, 0, 1)],
    )
    def test_clamp_page(self, page, last, expected):
        assert clamp_page(page, last) == expected
