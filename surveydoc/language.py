"""
Language detection and marker wrapping for template data.

Every string leaf of the transformed data is wrapped in sentinel markers
carrying its dominant script (or, for title placeholders, a heading font
and size). The markers survive template rendering as plain text and are
turned into styled runs by ``font_styler.apply_font_styles``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .shared import FontConfig

# Marker grammar shared with font_styler
LANG_START = "___LANG_START___"
LANG_END = "___LANG_END___"
SPECIAL_START = "___SPECIAL_START___"
SPECIAL_END = "___SPECIAL_END___"
MARKERS = (LANG_START, LANG_END, SPECIAL_START, SPECIAL_END)

PERSIAN = "persian"
ENGLISH = "english"

_PERSIAN_CHAR_RE = re.compile(r"[؀-ۿ]")
_WS_RE = re.compile(r"\s")

PERSIAN_RATIO_THRESHOLD = 0.3


@dataclass(frozen=True)
class SpecialFont:
    font_name: str
    font_size: int


DEFAULT_TITLE_FONT = SpecialFont("B Titr", 26)

SPECIAL_FONTS: Dict[str, SpecialFont] = {
    "system_title_1": DEFAULT_TITLE_FONT,
    "title_1": DEFAULT_TITLE_FONT,
}


def special_fonts_for(font_config: Optional[FontConfig]) -> Dict[str, SpecialFont]:
    """Special placeholder fonts, with ``system_title_first`` replacing the heading font."""
    if font_config is None or not font_config.system_title_first:
        return dict(SPECIAL_FONTS)
    return {
        key: SpecialFont(font_config.system_title_first, cfg.font_size)
        for key, cfg in SPECIAL_FONTS.items()
    }


def detect_language(text: Any) -> str:
    """
    Classify text as ``'persian'`` when more than 30% of its non-whitespace
    characters are in the Arabic/Persian block, else ``'english'``.
    """
    if not isinstance(text, str) or not text.strip():
        return ENGLISH
    total = len(_WS_RE.sub("", text))
    if total == 0:
        return ENGLISH
    persian = len(_PERSIAN_CHAR_RE.findall(text))
    return PERSIAN if persian / total > PERSIAN_RATIO_THRESHOLD else ENGLISH


def wrap_line(line: str, language: str) -> str:
    return f"{LANG_START}{language}|{line}{LANG_END}"


def wrap_special_line(line: str, special: SpecialFont) -> str:
    return f"{SPECIAL_START}{special.font_name}|{special.font_size}|{line}{SPECIAL_END}"


def wrap_text(text: str, key: Optional[str] = None, special_fonts: Optional[Dict[str, SpecialFont]] = None) -> str:
    """
    Wrap each non-blank line of ``text`` in markers.

    A single-line string is always wrapped, even when blank. In multi-line
    text, blank and whitespace-only lines become empty lines without
    markers. The language is detected once for the whole string.
    """
    fonts = SPECIAL_FONTS if special_fonts is None else special_fonts
    special = fonts.get(key) if key is not None else None
    language = None if special else detect_language(text)

    if "\n" not in text:
        return wrap_special_line(text, special) if special else wrap_line(text, language)

    lines = []
    for line in text.split("\n"):
        if not line.strip():
            lines.append("")
        elif special:
            lines.append(wrap_special_line(line, special))
        else:
            lines.append(wrap_line(line, language))
    return "\n".join(lines)


def wrap_with_language_markers(
    data: Any,
    key: Optional[str] = None,
    special_fonts: Optional[Dict[str, SpecialFont]] = None,
) -> Any:
    """
    Return a copy of ``data`` with every string leaf wrapped in markers.

    Lists keep the enclosing key for special-font lookups; dict values are
    looked up by their own key. Other values are returned unchanged.
    """
    if isinstance(data, str):
        return wrap_text(data, key, special_fonts)
    if isinstance(data, (list, tuple)):
        return [wrap_with_language_markers(item, key, special_fonts) for item in data]
    if isinstance(data, dict):
        return {k: wrap_with_language_markers(v, k, special_fonts) for k, v in data.items()}
    return data


__all__ = [
    "ENGLISH",
    "LANG_END",
    "LANG_START",
    "MARKERS",
    "PERSIAN",
    "SPECIAL_END",
    "SPECIAL_FONTS",
    "SPECIAL_START",
    "SpecialFont",
    "detect_language",
    "special_fonts_for",
    "wrap_text",
    "wrap_with_language_markers",
]
