"""Plain-text rendering of month grids for the terminal."""

import click

from caterfind.core.calendar_grid import WEEKDAY_LABELS
from caterfind.views import DayCell, DayKind

CELL_WIDTH = 5

MARKERS = {
    DayKind.AVAILABLE: "+",
    DayKind.BUSY: "x",
    DayKind.NEUTRAL: ".",
    DayKind.PAST: "-",
}

COLORS = {
    DayKind.AVAILABLE: "green",
    DayKind.BUSY: "red",
    DayKind.NEUTRAL: None,
    DayKind.PAST: "bright_black",
}

LEGEND = "+ available   x busy   . open   - past   * has events"


def format_cell(cell: DayCell | None) -> str:
    """Render one cell, CELL_WIDTH characters wide before styling."""
    if cell is None:
        return " " * CELL_WIDTH

    base = f"{cell.day:>2}{MARKERS[cell.kind]}"
    if cell.selected:
        # The selection brackets take the event marker's column
        text = f"[{base}]"
    else:
        text = f" {base}{'*' if cell.event_count else ' '}"
    return click.style(text, fg=COLORS[cell.kind], bold=cell.selected)


def format_month(
    title: str,
    cells: list[DayCell | None],
    heading: str | None = None,
    show_back: bool = False,
) -> str:
    """Render a month as a 7-column text grid with a legend."""
    lines = []
    if show_back:
        lines.append("< Back to Caterers")
    if heading:
        lines.append(heading)
        lines.append("")

    width = CELL_WIDTH * 7
    lines.append(title.center(width).rstrip())
    lines.append("".join(label.center(CELL_WIDTH) for label in WEEKDAY_LABELS).rstrip())

    for start in range(0, len(cells), 7):
        week = cells[start : start + 7]
        lines.append("".join(format_cell(c) for c in week).rstrip())

    lines.append("")
    lines.append(LEGEND)
    return "\n".join(lines)
