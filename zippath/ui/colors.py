"""Theme colors and color utilities for the UI."""


class ZipColors:
    """Light theme palette for the puzzle grid."""

    BG_TOP = "#e0f7fa"
    BG_BOTTOM = "#80deea"

    PRIMARY = "#00838f"
    PRIMARY_LIGHT = "#4fb3bf"
    PRIMARY_DARK = "#005662"

    CELL_EMPTY = "#ffffff"
    CELL_BORDER = "#cfd8dc"
    CELL_COMMITTED = "#b2dfdb"
    CELL_IN_PROGRESS = "#ffe0b2"
    CELL_ANCHOR = "#ffb74d"

    CHECKPOINT_BADGE = "#1a3a3a"
    CHECKPOINT_TEXT = "#ffffff"
    WALL = "#263238"

    TEXT_PRIMARY = "#1a3a3a"
    TEXT_SECONDARY = "#4a6572"
    SUCCESS = "#2e7d32"
    WARNING = "#e65100"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a


def path_shade(index: int, length: int) -> str:
    """Color for the ``index``-th committed cell, darkening along the path."""
    if length <= 1:
        return ZipColors.CELL_COMMITTED
    return blend_hex(ZipColors.CELL_COMMITTED, ZipColors.PRIMARY_LIGHT, index / (length - 1) * 0.6)
