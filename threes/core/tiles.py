"""
Tile codec for the colour-mixing game: packs a colour family and a level into a single cell value.

A cell value of ``0`` is an empty cell. Any positive value encodes ``(family, level)`` through
``value = family + level * NUM_FAMILIES + 1``. Every other component goes through this module to
read or build tile values.
"""

# ##: Colour families.
CYAN_IDX = 0
MAGENTA_IDX = 1
YELLOW_IDX = 2
BLUE_IDX = 3
RED_IDX = 4
GREEN_IDX = 5
ORANGE_IDX = 6
VIOLET_IDX = 7
CHARTREUSE_IDX = 8
TEAL_IDX = 9
TURQUOISE_IDX = 10
INDIGO_IDX = 11
GRAY_IDX = 12
NUM_FAMILIES = 13

# ##: Tiers.
BASE_FAMILIES = frozenset({CYAN_IDX, MAGENTA_IDX, YELLOW_IDX})
PRIMARY_FAMILIES = frozenset({BLUE_IDX, RED_IDX, GREEN_IDX})
SECONDARY_FAMILIES = frozenset({ORANGE_IDX, VIOLET_IDX, CHARTREUSE_IDX, TEAL_IDX, TURQUOISE_IDX, INDIGO_IDX})
TERTIARY_FAMILIES = frozenset({GRAY_IDX})

# ##>: Highest number of dots drawn on a tile.
MAX_DISPLAY_DOTS = 3

_HEX_MAP = {
    CYAN_IDX: '#53ffec',
    MAGENTA_IDX: '#e854ff',
    YELLOW_IDX: '#ffd654',
    BLUE_IDX: '#5476ff',
    RED_IDX: '#ff5468',
    GREEN_IDX: '#68ff54',
    ORANGE_IDX: '#ffa854',
    VIOLET_IDX: '#b454ff',
    CHARTREUSE_IDX: '#c8ff54',
    TEAL_IDX: '#54ffc8',
    TURQUOISE_IDX: '#54b4ff',
    INDIGO_IDX: '#8054ff',
    GRAY_IDX: '#888888',
}

_LABEL_MAP = {
    CYAN_IDX: 'C',
    MAGENTA_IDX: 'M',
    YELLOW_IDX: 'Y',
    BLUE_IDX: 'B',
    RED_IDX: 'R',
    GREEN_IDX: 'G',
}

_EMPTY_HEX = '#000000'


def encode_tile(family: int, level: int) -> int:
    """
    Pack a colour family and a level into a cell value.

    Parameters
    ----------
    family : int
        Colour family index, in ``[0, NUM_FAMILIES)``.
    level : int
        Number of dots, ``>= 0``.

    Returns
    -------
    int
        The encoded cell value, always strictly positive.

    Raises
    ------
    ValueError
        If the family or the level is out of range.
    """
    if not 0 <= family < NUM_FAMILIES:
        raise ValueError(f'family must be in [0, {NUM_FAMILIES}), got {family}')
    if level < 0:
        raise ValueError(f'level must be >= 0, got {level}')
    return int(family + level * NUM_FAMILIES + 1)


def is_tile(value: int) -> bool:
    """Return True if ``value`` is a decodable, non-empty tile."""
    return int(value) > 0


def tile_family(value: int) -> int:
    """
    Return the colour family of a tile, or ``-1`` for an empty or invalid value.
    """
    if not is_tile(value):
        return -1
    return (int(value) - 1) % NUM_FAMILIES


def tile_level(value: int) -> int:
    """
    Return the level (dots) of a tile, or ``-1`` for an empty or invalid value.
    """
    if not is_tile(value):
        return -1
    return (int(value) - 1) // NUM_FAMILIES


def decode_tile(value: int) -> tuple[int, int] | None:
    """
    Decode a cell value into its ``(family, level)`` pair.

    Parameters
    ----------
    value : int
        A cell value.

    Returns
    -------
    tuple[int, int] | None
        The pair used to encode ``value``, or None when the cell is empty.
    """
    if not is_tile(value):
        return None
    return tile_family(value), tile_level(value)


def tile_tier(value: int) -> int:
    """
    Return the tier of a tile: 0 for base, 1 for primary, 2 for secondary, 3 for gray.

    Empty or invalid values have tier ``-1``.
    """
    family = tile_family(value)
    if family in BASE_FAMILIES:
        return 0
    if family in PRIMARY_FAMILIES:
        return 1
    if family in SECONDARY_FAMILIES:
        return 2
    if family in TERTIARY_FAMILIES:
        return 3
    return -1


def tile_hex(value: int) -> str:
    """Return the display colour of a tile. Dots do not change the colour."""
    return _HEX_MAP.get(tile_family(value), _EMPTY_HEX)


def tile_text_color(value: int) -> str:
    """
    Return a readable text colour (black or white) for a tile.

    Notes
    -----
    Uses the perceived luminance of the tile colour with a 0.5 threshold.
    """
    hex_color = tile_hex(value)
    red, green, blue = (int(hex_color[i : i + 2], 16) for i in (1, 3, 5))
    luminance = (0.299 * red + 0.587 * green + 0.114 * blue) / 255
    return '#000000' if luminance > 0.5 else '#FFFFFF'


def tile_label(value: int) -> str | None:
    """Return the single letter label of base and primary tiles, None otherwise."""
    return _LABEL_MAP.get(tile_family(value))


def tile_display_dots(value: int) -> int:
    """Return the number of dots to draw, capped at ``MAX_DISPLAY_DOTS``."""
    level = tile_level(value)
    if level < 0:
        return 0
    return min(level, MAX_DISPLAY_DOTS)


# ##: Named tiles.
CYAN = encode_tile(CYAN_IDX, 0)
MAGENTA = encode_tile(MAGENTA_IDX, 0)
YELLOW = encode_tile(YELLOW_IDX, 0)
BLUE = encode_tile(BLUE_IDX, 0)
RED = encode_tile(RED_IDX, 0)
GREEN = encode_tile(GREEN_IDX, 0)
GRAY = encode_tile(GRAY_IDX, 0)

BASE_TILES: tuple[int, ...] = (CYAN, MAGENTA, YELLOW)
PRIMARY_TILES: tuple[int, ...] = (BLUE, RED, GREEN)
