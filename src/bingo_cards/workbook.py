"""Rendering cards into an xlsx workbook, one worksheet per person."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.page import PageMargins
from openpyxl.worksheet.worksheet import Worksheet

from .layout import GRID_SIZE, Card
from .serialize import ensure_parent, ensure_writable

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "SUMO BINGO!"
DEFAULT_OUT = "bingo.xlsx"

HEADER_ROWS = 2
LEFT_COLS = 1
CELL_PIXELS = 150
MARGIN_INCHES = 0.2
BORDER_COLOR = "333333"
FREE_FILL_COLOR = "222222"

MAX_SHEET_NAME = 31
INVALID_SHEET_CHARS = set("[]:*?/\\")

_side = Side(style="medium", color=BORDER_COLOR)
CELL_BORDER = Border(left=_side, right=_side, top=_side, bottom=_side)
CELL_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
FREE_FONT = Font(bold=True, color="FFFFFF")
FREE_FILL = PatternFill("solid", fgColor=FREE_FILL_COLOR)


def pixels_to_width(pixels: int) -> float:
    # Excel column width is measured in default-font character widths (7px + 5px padding)
    return round((pixels - 5) / 7, 2)


def pixels_to_points(pixels: int) -> float:
    return pixels * 0.75


def validate_sheet_names(names: Sequence[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if not name or len(name) > MAX_SHEET_NAME:
            raise ValueError(f"Sheet name must be 1-{MAX_SHEET_NAME} characters: {name!r}")
        bad = sorted(INVALID_SHEET_CHARS.intersection(name))
        if bad:
            raise ValueError(f"Sheet name {name!r} contains invalid characters: {''.join(bad)}")
        key = name.casefold()
        if key in seen:
            raise ValueError(f"Sheet names must be unique (case-insensitive): {name!r}")
        seen.add(key)


def render_card(ws: Worksheet, card: Card, *, title: str) -> None:
    ws.page_setup.orientation = ws.ORIENTATION_LANDSCAPE
    ws.page_margins = PageMargins(
        left=MARGIN_INCHES,
        right=MARGIN_INCHES,
        top=MARGIN_INCHES,
        bottom=MARGIN_INCHES,
        header=MARGIN_INCHES,
        footer=MARGIN_INCHES,
    )

    first_col = LEFT_COLS + 1
    last_col = LEFT_COLS + GRID_SIZE

    # header
    ws.merge_cells(start_row=HEADER_ROWS, start_column=first_col, end_row=HEADER_ROWS, end_column=last_col)
    header = ws.cell(row=HEADER_ROWS, column=first_col, value=f"{title} - {card.person}")
    header.alignment = CELL_ALIGNMENT
    for col in range(first_col, last_col + 1):
        ws.cell(row=HEADER_ROWS, column=col).border = CELL_BORDER

    for i in range(GRID_SIZE):
        ws.column_dimensions[get_column_letter(first_col + i)].width = pixels_to_width(CELL_PIXELS)
        ws.row_dimensions[HEADER_ROWS + 1 + i].height = pixels_to_points(CELL_PIXELS)

    free_row, free_col = card.free_cell
    for r, row in enumerate(card.grid):
        for c, text in enumerate(row):
            cell = ws.cell(row=HEADER_ROWS + 1 + r, column=first_col + c, value=text)
            cell.border = CELL_BORDER
            cell.alignment = CELL_ALIGNMENT
            if (r, c) == (free_row, free_col):
                cell.font = FREE_FONT
                cell.fill = FREE_FILL


def build_workbook(cards: Sequence[Card], *, title: str = DEFAULT_TITLE) -> Workbook:
    validate_sheet_names([card.person for card in cards])
    wb = Workbook()
    default_sheet = wb.active
    for card in cards:
        ws = wb.create_sheet(title=card.person)
        render_card(ws, card, title=title)
    wb.remove(default_sheet)
    return wb


def write_workbook(
    path: Path,
    cards: Sequence[Card],
    *,
    title: str = DEFAULT_TITLE,
    mkdirs: bool = True,
    overwrite: bool = False,
) -> None:
    if not cards:
        raise ValueError("No cards to write")
    ensure_writable(path, overwrite=overwrite)
    wb = build_workbook(cards, title=title)
    ensure_parent(path, mkdirs=mkdirs)
    wb.save(path)
    sheets: List[str] = wb.sheetnames
    logger.info("Wrote %d sheets to %s", len(sheets), path)
