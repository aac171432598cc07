"""
Amount text normalization.

Canonicalizes the characters recipe sites use for quantities so the
ingredient parser and the scaler only ever see ASCII amount tokens.
"""

import re

FRACTION_MAP = {
    "¼": "1/4",
    "½": "1/2",
    "¾": "3/4",
    "⅐": "1/7",
    "⅑": "1/9",
    "⅒": "1/10",
    "⅓": "1/3",
    "⅔": "2/3",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_GLYPHS = "".join(FRACTION_MAP)

# "1½" -> "1 ½" so the mixed number survives the substitution below
_GLUED_GLYPH_RE = re.compile(rf"(\d)([{_GLYPHS}])")
_GLYPH_RE = re.compile(rf"[{_GLYPHS}]")
_DASH_RE = re.compile(r"[‒–—]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_amount_text(text: str | None) -> str:
    """
    Normalize unicode fractions, dashes and whitespace.

    Safe to apply more than once.

    Examples:
        "¾ cup" -> "3/4 cup"
        "1½ cups" -> "1 1/2 cups"
        "2–3  cloves" -> "2-3 cloves"
    """
    if not text:
        return ""

    s = _GLUED_GLYPH_RE.sub(r"\1 \2", text)
    s = _GLYPH_RE.sub(lambda m: FRACTION_MAP[m.group(0)], s)
    s = s.replace("⁄", "/")
    s = _DASH_RE.sub("-", s)
    return _WHITESPACE_RE.sub(" ", s).strip()
