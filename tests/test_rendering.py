from __future__ import annotations

import pytest
from rich.text import Text

from food_order.rendering import render_window, window_bounds


@pytest.mark.parametrize(
    "total, rows, selected, expected",
    [
        (0, 5, None, (0, 0)),
        (3, 5, 2, (0, 3)),
        (20, 5, None, (0, 5)),
        (20, 5, 10, (8, 13)),
        (20, 5, 19, (15, 20)),
        (20, 0, 0, (0, 1)),
    ],
)
def test_window_bounds(total, rows, selected, expected):
    assert window_bounds(total, rows, selected) == expected


def test_render_window_marks_selection_and_cut_edges():
    entries = [Text(f"row {n}") for n in range(10)]

    rendered = render_window(entries, 5, 3).plain

    assert rendered.splitlines() == ["⋮", "  row 4", "➤ row 5", "  row 6", "⋮"]
