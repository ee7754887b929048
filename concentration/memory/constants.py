"""Memory-game constants and default settings."""

# Symbols for the default eight-pair board
DEFAULT_SYMBOLS = (
    "gamepad",
    "rocket",
    "star",
    "target",
    "palette",
    "circus",
    "theater",
    "guitar",
)

# Glyphs used by text renderers; symbols without one fall back to their name
SYMBOL_GLYPHS = {
    "gamepad": "🎮",
    "rocket": "🚀",
    "star": "🌟",
    "target": "🎯",
    "palette": "🎨",
    "circus": "🎪",
    "theater": "🎭",
    "guitar": "🎸",
}

# Pacing delays in seconds; a confirmed pair settles faster than a miss flips back
MATCH_DELAY_SECONDS = 0.5
MISMATCH_DELAY_SECONDS = 1.0

TICK_INTERVAL_SECONDS = 1.0

# Cards awaiting resolution
MAX_SELECTION = 2

DEFAULT_CONFIG = {
    "symbols": DEFAULT_SYMBOLS,
    "layout": None,
    "match_delay": MATCH_DELAY_SECONDS,
    "mismatch_delay": MISMATCH_DELAY_SECONDS,
    "tick_interval": TICK_INTERVAL_SECONDS,
    "auto_tick": True,
    "seed": None,
}


def get_symbol_glyph(symbol_id) -> str:
    """Get the display glyph for a symbol."""
    return SYMBOL_GLYPHS.get(symbol_id, str(symbol_id))


def format_elapsed(seconds: int) -> str:
    """
    Format elapsed seconds as m:ss.

    >>> format_elapsed(75)
    '1:15'
    """
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{secs:02d}"
