"""Theme colors and color utilities for the UI."""


class HomeColors:
    """Bright, high-contrast palette for young players."""

    BG_TOP = "#fff8e1"
    BG_MIDDLE = "#ffecb3"
    BG_BOTTOM = "#ffe082"

    PRIMARY = "#00838f"
    PRIMARY_LIGHT = "#4fb3bf"
    PRIMARY_DARK = "#005662"

    CORAL = "#ff8a65"
    AMBER = "#ffb74d"
    MINT = "#69f0ae"
    LAVENDER = "#b39ddb"

    CORRECT = "#43a047"
    INCORRECT = "#e53935"
    CELEBRATE = "#fbc02d"

    CARD_BG = "rgba(255, 255, 255, 0.85)"
    CARD_BG_HOVER = "rgba(255, 255, 255, 0.95)"
    CARD_BORDER = "rgba(255, 255, 255, 0.6)"

    TEXT_PRIMARY = "#1a3a3a"
    TEXT_SECONDARY = "#4a6572"
    TEXT_MUTED = "#78909c"

    PROGRESS_TRACK = "#e6f0f0"
    PROGRESS_FILL = "#107878"


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
    except (AttributeError, TypeError, ValueError):
        return a


def readable_text_color(background: str) -> str:
    """Pick dark or white text for a #RRGGBB background."""
    try:
        r, g, b = int(background[1:3], 16), int(background[3:5], 16), int(background[5:7], 16)
    except (TypeError, ValueError, IndexError):
        return HomeColors.TEXT_PRIMARY
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return HomeColors.TEXT_PRIMARY if luminance > 160 else "#FFFFFF"
