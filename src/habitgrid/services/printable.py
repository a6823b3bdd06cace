"""Printable monthly tracker rendered to an A4 landscape PDF.

Pages are laid out in millimetres with the origin at the top-left corner.
Habits are chunked across pages so that the last page still has room for the
bottom widgets (weekly focus, mood graph, screen time / wins).
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Optional, Sequence, TypeVar

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.patches import Rectangle

from ..logging_config import get_logger
from .dates import MONTH_NAMES, days_in_month

logger = get_logger(__name__)

T = TypeVar("T")

# Page geometry (mm)
PAGE_WIDTH = 297.0
PAGE_HEIGHT = 210.0
MARGIN = 10.0
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
ROW_HEIGHT = 7.0
GRID_START_Y = 30.0
HABIT_COLUMN_WIDTH = 60.0
WIDGET_HEIGHT = 35.0
WIDGET_BUFFER = 5.0
WIDGET_GAP = 8.0
MIN_GRID_ROWS = 5

# Grid height left on the last page (below header, above widgets) and on a full page
WIDGET_PAGE_GRID_HEIGHT = 130.0
FULL_PAGE_GRID_HEIGHT = 170.0
MAX_ROWS_WIDGET_PAGE = int(WIDGET_PAGE_GRID_HEIGHT // ROW_HEIGHT)
MAX_ROWS_FULL_PAGE = int(FULL_PAGE_GRID_HEIGHT // ROW_HEIGHT)

_MM_TO_PT = 72 / 25.4

SLATE_900 = "#0f172a"
SLATE_600 = "#475569"
SLATE_400 = "#94a3b8"
SLATE_200 = "#e2e8f0"
WHITE = "#ffffff"

FOOTER_TEXT = "PRECISION THROUGH CONSISTENCY. FOCUS THROUGH MANUAL ENTRY."


class TrackerExportError(RuntimeError):
    """Raised when the printable tracker cannot be rendered or written."""


def paginate_habits(habits: Sequence[T]) -> list[list[T]]:
    """Split habits into per-page chunks.

    Whatever fits on a page that also carries the widgets goes there;
    otherwise a full page worth of rows is taken. The last page always has
    room for the widgets, so a full final chunk is followed by an empty page.
    There is always at least one page.
    """

    chunks: list[list[T]] = []
    remaining = list(habits)
    while remaining:
        if len(remaining) <= MAX_ROWS_WIDGET_PAGE:
            chunks.append(remaining)
            remaining = []
        else:
            chunks.append(remaining[:MAX_ROWS_FULL_PAGE])
            remaining = remaining[MAX_ROWS_FULL_PAGE:]
    if not chunks or len(chunks[-1]) > MAX_ROWS_WIDGET_PAGE:
        chunks.append([])
    return chunks


class _Page:
    """Thin drawing surface over a matplotlib axes using millimetre coordinates."""

    def __init__(self) -> None:
        self.figure = plt.figure(figsize=(PAGE_WIDTH / 25.4, PAGE_HEIGHT / 25.4))
        self.ax = self.figure.add_axes([0, 0, 1, 1])
        self.ax.set_xlim(0, PAGE_WIDTH)
        self.ax.set_ylim(PAGE_HEIGHT, 0)
        self.ax.axis("off")

    def rect(self, x, y, w, h, *, edge=SLATE_900, fill=None, width=0.2) -> None:
        self.ax.add_patch(
            Rectangle(
                (x, y),
                w,
                h,
                facecolor=fill or "none",
                edgecolor=edge or "none",
                linewidth=width * _MM_TO_PT,
            )
        )

    def line(self, x1, y1, x2, y2, *, color=SLATE_900, width=0.2) -> None:
        self.ax.plot([x1, x2], [y1, y2], color=color, linewidth=width * _MM_TO_PT, solid_capstyle="butt")

    def text(self, x, y, value, *, size=9, color=SLATE_900, bold=False, align="left") -> None:
        self.ax.text(
            x,
            y,
            value,
            fontsize=size,
            color=color,
            fontweight="bold" if bold else "normal",
            ha=align,
            va="baseline",
            family="sans-serif",
        )


def _draw_header(page: _Page, *, user_name: str, month_index0: int, year: int, page_no: int, total: int) -> None:
    page.text(MARGIN, 18, "HABIT TRACKER PROTOCOL", size=20, bold=True)
    page.text(
        MARGIN,
        24,
        f"{MONTH_NAMES[month_index0].upper()} {year} // PILOT: {user_name.upper()}",
        size=9,
        color=SLATE_600,
        bold=True,
    )

    tag_x = PAGE_WIDTH - MARGIN - 50
    page.rect(tag_x, 13, 50, 7, edge=None, fill=SLATE_900)
    page.text(tag_x + 25, 17.5, "CONFIDENTIAL / ANALOG SYNC", size=7, color=WHITE, bold=True, align="center")

    if total > 1:
        page.text(PAGE_WIDTH - MARGIN, 24, f"PAGE {page_no} OF {total}", size=7, color=SLATE_400, align="right")


def _draw_grid(page: _Page, habits: Sequence[Any], month_days: int) -> None:
    day_width = (CONTENT_WIDTH - HABIT_COLUMN_WIDTH) / month_days

    page.rect(MARGIN, GRID_START_Y, CONTENT_WIDTH, ROW_HEIGHT, fill=SLATE_200, width=0.3)
    page.text(MARGIN + 3, GRID_START_Y + 4.5, "HABIT METRIC", size=7, bold=True)
    for day in range(1, month_days + 1):
        x = MARGIN + HABIT_COLUMN_WIDTH + (day - 1) * day_width
        page.line(x, GRID_START_Y, x, GRID_START_Y + ROW_HEIGHT, width=0.3)
        page.text(x + day_width / 2, GRID_START_Y + 4.5, str(day), size=6, bold=True, align="center")

    for row in range(max(len(habits), MIN_GRID_ROWS)):
        y = GRID_START_Y + ROW_HEIGHT + row * ROW_HEIGHT
        page.rect(MARGIN, y, CONTENT_WIDTH, ROW_HEIGHT, width=0.2)
        if row < len(habits):
            page.text(MARGIN + 3, y + 4.5, habits[row].name.upper(), size=9)
        else:
            page.text(MARGIN + 3, y + 4.5, "_" * 20, size=9, color=SLATE_400)

        for day in range(month_days):
            x = MARGIN + HABIT_COLUMN_WIDTH + day * day_width
            page.line(x, y, x, y + ROW_HEIGHT, color=SLATE_400, width=0.1)
        page.line(MARGIN + HABIT_COLUMN_WIDTH, y, MARGIN + HABIT_COLUMN_WIDTH, y + ROW_HEIGHT, width=0.3)


def _draw_widgets(page: _Page) -> None:
    y = PAGE_HEIGHT - MARGIN - WIDGET_HEIGHT - WIDGET_BUFFER
    section_width = (CONTENT_WIDTH - 2 * WIDGET_GAP) / 3

    def section(x: float, title: str) -> None:
        page.rect(x, y, section_width, WIDGET_HEIGHT, width=0.3)
        page.text(x + 2, y + 4, title, size=7, bold=True)
        page.line(x, y + 6, x + section_width, y + 6)

    focus_x = MARGIN
    section(focus_x, "WEEKLY FOCUS / OBJECTIVES")
    for index in range(3):
        line_y = y + 14 + index * 8
        page.rect(focus_x + 4, line_y - 2.5, 2.5, 2.5, edge=SLATE_400)
        page.line(focus_x + 10, line_y, focus_x + section_width - 4, line_y, color=SLATE_400)

    mood_x = focus_x + section_width + WIDGET_GAP
    section(mood_x, "MOOD / ENERGY GRAPH")
    page.line(mood_x + 4, y + 28, mood_x + section_width - 4, y + 28, color=SLATE_400)
    page.line(mood_x + 4, y + 28, mood_x + 4, y + 10, color=SLATE_400)

    wins_x = mood_x + section_width + WIDGET_GAP
    section(wins_x, "SCREEN TIME / WINS")
    square, gap, columns = 3.5, 1.5, 6
    for index in range(12):
        sx = wins_x + 4 + (index % columns) * (square + gap)
        sy = y + 10 + (index // columns) * (square + gap)
        page.rect(sx, sy, square, square, edge=SLATE_400)
    page.text(wins_x + 4, y + 25, "TARGET < 2.5H", size=6, color=SLATE_600)
    page.rect(wins_x + 4, y + 28, section_width - 8, 5, edge=SLATE_400)
    page.text(wins_x + 5, y + 31.5, "BIGGEST WIN:", size=6, color=SLATE_600)


def _draw_footer(page: _Page) -> None:
    page.text(PAGE_WIDTH / 2, PAGE_HEIGHT - 5, FOOTER_TEXT, size=6, color=SLATE_400, align="center")


def export_tracker_pdf(
    user: Any,
    habits: Sequence[Any],
    output_path: Path,
    *,
    year: Optional[int] = None,
    month_index0: Optional[int] = None,
) -> Path:
    """Render the printable tracker for ``user`` and write it to ``output_path``.

    Reads habits only; nothing is persisted. Failures surface as
    ``TrackerExportError``.
    """

    today = date.today()
    year = today.year if year is None else year
    month_index0 = today.month - 1 if month_index0 is None else month_index0
    month_days = days_in_month(year, month_index0)
    chunks = paginate_habits(habits)
    output_path = Path(output_path)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with PdfPages(output_path) as pdf:
            info = pdf.infodict()
            info["Title"] = f"Habit Tracker {MONTH_NAMES[month_index0]} {year}"
            info["Author"] = user.name
            for index, chunk in enumerate(chunks):
                page = _Page()
                try:
                    _draw_header(
                        page,
                        user_name=user.name,
                        month_index0=month_index0,
                        year=year,
                        page_no=index + 1,
                        total=len(chunks),
                    )
                    _draw_grid(page, chunk, month_days)
                    if index == len(chunks) - 1:
                        _draw_widgets(page)
                    _draw_footer(page)
                    pdf.savefig(page.figure)
                finally:
                    plt.close(page.figure)
    except (OSError, ValueError, RuntimeError) as exc:
        logger.error("Tracker export failed: %s", exc, exc_info=True)
        raise TrackerExportError(f"Could not export tracker to {output_path}: {exc}") from exc

    logger.info(
        "Tracker exported",
        extra={"path": str(output_path), "pages": len(chunks), "habits": len(habits)},
    )
    return output_path
