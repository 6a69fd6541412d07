from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import load_workbook

from bingo_cards.layout import build_cards
from bingo_cards.workbook import validate_sheet_names, write_workbook

TILES = [f"Tile number {i}" for i in range(28)]


def _cards(people=("Alice", "Bob")):
    return build_cards(list(people), TILES, free_square="FREE SQUARE", seed=2024)


def test_one_sheet_per_person_with_grid(tmp_path: Path):
    path = tmp_path / "bingo.xlsx"
    cards = _cards()
    write_workbook(path, cards, title="SUMO BINGO!")

    wb = load_workbook(path)
    assert wb.sheetnames == ["Alice", "Bob"]
    for card in cards:
        ws = wb[card.person]
        assert ws["B2"].value == f"SUMO BINGO! - {card.person}"
        assert "B2:F2" in {str(r) for r in ws.merged_cells.ranges}
        for r in range(5):
            for c in range(5):
                assert ws.cell(row=3 + r, column=2 + c).value == card.grid[r][c]
        assert ws["D5"].value == "FREE SQUARE"


def test_formatting_and_page_setup(tmp_path: Path):
    path = tmp_path / "bingo.xlsx"
    write_workbook(path, _cards(["Alice"]))

    ws = load_workbook(path)["Alice"]
    assert ws.page_setup.orientation == "landscape"
    assert ws.page_margins.left == pytest.approx(0.2)
    assert ws.page_margins.footer == pytest.approx(0.2)

    free = ws["D5"]
    assert free.font.b is True
    assert free.fill.fgColor.rgb.endswith("222222")
    assert free.font.color.rgb.endswith("FFFFFF")

    tile = ws["B3"]
    assert tile.border.left.style == "medium"
    assert tile.border.left.color.rgb.endswith("333333")
    assert tile.alignment.wrap_text is True
    assert tile.alignment.horizontal == "center"
    assert tile.alignment.vertical == "center"
    assert ws.row_dimensions[3].height == pytest.approx(112.5)
    assert ws.column_dimensions["B"].width == pytest.approx(20.71, abs=0.01)


def test_multiline_tile_kept(tmp_path: Path):
    tiles = ["Line one\nline two"] + TILES
    cards = build_cards(["Alice"], tiles, seed=1)
    path = tmp_path / "bingo.xlsx"
    write_workbook(path, cards)
    ws = load_workbook(path)["Alice"]
    values = [ws.cell(row=r, column=c).value for r in range(3, 8) for c in range(2, 7)]
    assert values == [t for row in cards[0].grid for t in row]


def test_refuses_overwrite_without_force(tmp_path: Path):
    path = tmp_path / "bingo.xlsx"
    write_workbook(path, _cards())
    with pytest.raises(FileExistsError):
        write_workbook(path, _cards())
    write_workbook(path, _cards(), overwrite=True)


def test_creates_parent_dirs_unless_disabled(tmp_path: Path):
    nested = tmp_path / "a" / "b" / "bingo.xlsx"
    with pytest.raises(FileNotFoundError):
        write_workbook(nested, _cards(), mkdirs=False)
    write_workbook(nested, _cards())
    assert nested.exists()


@pytest.mark.parametrize(
    "names",
    [["x" * 32], ["Bad/Name"], ["What?"], ["Alice", "alice"], [""]],
)
def test_invalid_sheet_names(names):
    with pytest.raises(ValueError):
        validate_sheet_names(names)


def test_valid_sheet_names_pass():
    validate_sheet_names(["Alice", "Bob Smith", "x" * 31])


def test_no_cards_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        write_workbook(tmp_path / "bingo.xlsx", [])
