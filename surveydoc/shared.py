"""
Shared models, errors and text utilities.

Defines the mapping and font configuration models, verification results,
the package exception hierarchy, and XML text sanitizing helpers used by
the transformer and the renderer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Set

# ------------------------- Errors -------------------------

class SurveyDocError(Exception):
    """Base class for surveydoc errors."""


class MappingFileError(SurveyDocError):
    """The mapping file is missing, unreadable or malformed."""


class MarkerLeakError(SurveyDocError):
    """Language markers survived rendering, or a styled XML part is broken."""

# ------------------------- Models -------------------------

@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    errors: List[str]
    warnings: List[str]


@dataclass(frozen=True)
class Mapping:
    """A template placeholder and the JSON path that feeds it."""
    placeholder: str
    json_path: str


@dataclass(frozen=True)
class MappingFile:
    """
    Ordered mapping table loaded from a mapping file.

    Immutable after load; lookups never mutate it.
    """
    mappings: List[Mapping] = field(default_factory=list)

    @property
    def placeholders(self) -> Set[str]:
        return {m.placeholder for m in self.mappings}

    def find_json_path(self, placeholder: str) -> Optional[str]:
        """
        Return the JSON path for a placeholder.

        Exact match wins; otherwise a case-insensitive match on the
        trimmed name is tried.
        """
        for m in self.mappings:
            if m.placeholder == placeholder:
                return m.json_path
        wanted = placeholder.strip().lower()
        for m in self.mappings:
            if m.placeholder.strip().lower() == wanted:
                return m.json_path
        return None


@dataclass(frozen=True)
class FontConfig:
    persian: str = "B Nazanin"
    english: str = "Times New Roman"
    default: str = "Times New Roman"
    system_title_first: Optional[str] = None

    def font_for(self, language: str) -> str:
        """Font family for a detected language, falling back to the default font."""
        if language == "persian":
            return self.persian or self.default
        if language == "english":
            return self.english or self.default
        return self.default

    def merged(self, **overrides: Optional[str]) -> "FontConfig":
        """Return a copy with the non-empty overrides applied."""
        changes = {k: v for k, v in overrides.items() if v}
        unknown = set(changes) - {"persian", "english", "default", "system_title_first"}
        if unknown:
            raise ValueError(f"Unknown font setting(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)

# ------------------------- XML text helpers -------------------------

# Characters XML 1.0 does not allow: C0 controls except tab/LF/CR,
# surrogates, U+FFFE and U+FFFF.
_INVALID_XML_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def clean_xml_text(s: str) -> str:
    """NBSP to space, CR/CRLF to LF, and characters invalid in XML 1.0 dropped."""
    s = s.replace("\u00a0", " ").replace("\r\n", "\n").replace("\r", "\n")
    return _INVALID_XML_RE.sub("", s)


def sanitize_for_xml_in_obj(obj: Any) -> Any:
    """Copy of transformed template data with every string leaf cleaned for docxtpl."""
    if isinstance(obj, str):
        return clean_xml_text(obj)
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_xml_in_obj(i) for i in obj]
    if isinstance(obj, dict):
        return {k: sanitize_for_xml_in_obj(v) for k, v in obj.items()}
    return obj


def sorted_by_key(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: data[k] for k in sorted(data)}
