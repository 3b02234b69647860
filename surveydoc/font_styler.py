"""
Post-render font styling of WordprocessingML parts.

Rendered template text still carries the markers written by
``language.wrap_with_language_markers``. Each start marker closes the
current run and opens a new one carrying font family (and size or
right-to-left) properties; each end marker closes that run and reopens a
plain one. Replacement is textual, so a marker that the renderer split
across two ``<w:t>`` nodes is not matched; ``verify_styled_part`` reports
any such leftovers.
"""

from __future__ import annotations

import io
import re
import zipfile
from typing import Dict, List, Optional, Tuple
from xml.sax.saxutils import quoteattr

from lxml import etree

from .language import LANG_END, LANG_START, PERSIAN, SPECIAL_END, SPECIAL_START
from .logging_utils import LOG
from .shared import FontConfig, VerificationResult

_SPECIAL_START_RE = re.compile(re.escape(SPECIAL_START) + r"([^|]+)\|([0-9]+)\|")
_LANG_START_RE = re.compile(re.escape(LANG_START) + r"([a-z]+)\|")
_LEAK_RE = re.compile(r"___(?:LANG|SPECIAL)_(?:START|END)___")

_CLOSE_RUN = "</w:t></w:r>"
_OPEN_TEXT = '<w:t xml:space="preserve">'
_PLAIN_RUN = _CLOSE_RUN + "<w:r><w:rPr></w:rPr>" + _OPEN_TEXT


def _fonts_element(font_name: str) -> str:
    v = quoteattr(font_name)
    return f"<w:rFonts w:ascii={v} w:hAnsi={v} w:cs={v} w:eastAsia={v}/>"


def _open_styled_run(properties: str) -> str:
    return f"{_CLOSE_RUN}<w:r><w:rPr>{properties}</w:rPr>{_OPEN_TEXT}"


def _special_run(match: "re.Match[str]") -> str:
    font_name, size = match.group(1), int(match.group(2))
    half_points = size * 2
    return _open_styled_run(
        _fonts_element(font_name)
        + f'<w:sz w:val="{half_points}"/><w:szCs w:val="{half_points}"/>'
    )


def apply_font_styles(xml: str, font_config: Optional[FontConfig] = None) -> str:
    """
    Replace language and special-font markers in ``xml`` with styled runs.

    Special markers are resolved first; language markers use
    ``font_config.font_for(language)`` and Persian runs are marked ``<w:rtl/>``.
    """
    fonts = font_config or FontConfig()

    xml = _SPECIAL_START_RE.sub(_special_run, xml)
    xml = xml.replace(SPECIAL_END, _PLAIN_RUN)

    def _lang_run(match: "re.Match[str]") -> str:
        language = match.group(1)
        props = _fonts_element(fonts.font_for(language))
        if language == PERSIAN:
            props += "<w:rtl/>"
        return _open_styled_run(props)

    xml = _LANG_START_RE.sub(_lang_run, xml)
    xml = xml.replace(LANG_END, _PLAIN_RUN)
    return xml


def find_leaked_markers(xml: str) -> List[str]:
    """Marker tokens still present in ``xml``, in document order."""
    return _LEAK_RE.findall(xml)


def verify_styled_part(name: str, xml: str) -> VerificationResult:
    """
    Check a styled XML part.

    Leftover markers are warnings; markup that no longer parses is an error.
    """
    errors: List[str] = []
    warnings: List[str] = []

    leaked = find_leaked_markers(xml)
    if leaked:
        warnings.append(f"{name}: {len(leaked)} unresolved marker(s) ({', '.join(sorted(set(leaked)))})")

    try:
        etree.fromstring(xml.encode("utf-8"))
    except etree.XMLSyntaxError as e:
        errors.append(f"{name}: invalid XML after styling ({e})")

    return VerificationResult(ok=not errors, errors=errors, warnings=warnings)


def restyle_docx_package(
    docx_bytes: bytes,
    font_config: Optional[FontConfig] = None,
) -> Tuple[bytes, Dict[str, VerificationResult]]:
    """
    Apply font styles to every ``.xml`` member of a rendered .docx package.

    Other members are copied unchanged. Returns the new package bytes and
    a verification result per rewritten part.
    """
    results: Dict[str, VerificationResult] = {}
    out = io.BytesIO()

    with zipfile.ZipFile(io.BytesIO(docx_bytes)) as zin, \
            zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as zout:
        for info in zin.infolist():
            content = zin.read(info.filename)
            if info.filename.lower().endswith(".xml"):
                xml = content.decode("utf-8")
                styled = apply_font_styles(xml, font_config)
                if styled != xml or _LEAK_RE.search(xml):
                    results[info.filename] = verify_styled_part(info.filename, styled)
                    LOG.debug("Styled part %s", info.filename)
                content = styled.encode("utf-8")
            zout.writestr(info, content)

    return out.getvalue(), results


__all__ = [
    "apply_font_styles",
    "find_leaked_markers",
    "restyle_docx_package",
    "verify_styled_part",
]
