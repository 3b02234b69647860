"""
DOCX-based document renderer implementation.

Renders template data to Word .docx files using docxtpl templates, then
restyles every inserted run with the configured Persian/English fonts.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Dict, Optional

from .base import DocumentRenderer
from ..font_styler import restyle_docx_package
from ..language import special_fonts_for, wrap_with_language_markers
from ..logging_utils import LOG, fmt_issues
from ..shared import FontConfig, MarkerLeakError, VerificationResult, sanitize_for_xml_in_obj

from docxtpl import DocxTemplate


class DocxDocumentRenderer(DocumentRenderer):
    """
    Document renderer for Microsoft Word .docx files.

    This implementation:
    - Sanitizes content for XML safety before rendering
    - Wraps every string in language markers
    - Uses docxtpl for template rendering, with auto-escaping
    - Rewrites the markers into font-styled runs in every XML part
    - Reports markers that survived (raises in strict mode)
    """

    def __init__(self, font_config: Optional[FontConfig] = None, strict: bool = False):
        self.font_config = font_config or FontConfig()
        self.strict = strict

    def set_fonts(self, **overrides: Optional[str]) -> FontConfig:
        """Merge font overrides (persian, english, default, system_title_first)."""
        self.font_config = self.font_config.merged(**overrides)
        return self.font_config

    def render(self, data: Dict[str, Any], template_path: Path, output_path: Path) -> Path:
        """
        Render template data to a .docx file using a docxtpl template.

        Args:
            data: Transformed placeholder data
            template_path: Path to the .docx template file
            output_path: Path where the rendered .docx should be saved

        Returns:
            Path to the rendered .docx file

        Raises:
            FileNotFoundError: If the template file does not exist
            ValueError: If the template is not a .docx file
            MarkerLeakError: In strict mode, if markers leaked or a part is broken
        """
        content = self.render_to_bytes(data, template_path)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(content)
        LOG.info("Rendered %s", output_path.name)
        return output_path

    def render_to_bytes(self, data: Dict[str, Any], template_path: Path) -> bytes:
        """Render and restyle, returning the finished .docx package."""
        template_path = Path(template_path)
        if not template_path.exists():
            raise FileNotFoundError(f"Template file not found: {template_path}")

        if not template_path.is_file() or template_path.suffix.lower() != ".docx":
            raise ValueError(f"Template must be a .docx file: {template_path}")

        # Sanitize data for XML safety, then mark every string with its language
        sanitized = sanitize_for_xml_in_obj(data)
        context = wrap_with_language_markers(sanitized, special_fonts=special_fonts_for(self.font_config))

        tpl = DocxTemplate(str(template_path))
        tpl.render(context, autoescape=True)

        buf = io.BytesIO()
        tpl.save(buf)

        styled, results = restyle_docx_package(buf.getvalue(), self.font_config)
        self._report(template_path, results)
        return styled

    def _report(self, template_path: Path, results: Dict[str, VerificationResult]) -> None:
        errors = [e for r in results.values() for e in r.errors]
        warnings = [w for r in results.values() for w in r.warnings]
        if not errors and not warnings:
            return
        summary = fmt_issues(errors, warnings)
        if self.strict:
            raise MarkerLeakError(f"{template_path.name}: {summary}")
        if errors:
            LOG.error("%s: %s", template_path.name, summary)
        else:
            LOG.warning("%s: %s", template_path.name, summary)
