"""Board palette and sprite fills for the UI."""

from pushbox.core import view


class BoardColors:
    """Flat palette used to paint cells in place of sprite images."""

    BACKGROUND = "#101418"
    FLOOR = "#2b3137"
    WALL = "#6d4c41"
    WALL_EDGE = "#4e342e"

    TARGET = "#69f0ae"
    CRATE = "#ffb74d"
    CRATE_EDGE = "#c77c02"
    STORED = "#b4d37d"
    PLAYER = "#4fb3bf"
    PLAYER_EDGE = "#005662"

    STATUS_BAR_BG = "#ffffff"
    STATUS_TEXT = "#000000"


SPRITE_FILL = {
    view.SPRITE_EMPTY: BoardColors.FLOOR,
    view.SPRITE_TARGET: BoardColors.FLOOR,
    view.SPRITE_PLAYER: BoardColors.FLOOR,
    view.SPRITE_PLAYER_ON_TARGET: BoardColors.FLOOR,
    view.SPRITE_CRATE: BoardColors.CRATE,
    view.SPRITE_STORED: BoardColors.STORED,
    view.SPRITE_WALL: BoardColors.WALL,
}


def fill_for(sprite: str) -> str:
    return SPRITE_FILL.get(sprite, BoardColors.FLOOR)
