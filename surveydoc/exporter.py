"""
High-level export: transform survey data and render it in one call.

SurveyDocExporter ties a DataTransformer to a DocxDocumentRenderer and adds
single-document and batch (ZIP) export with title-based file names.
"""

from __future__ import annotations

import re
import tempfile
import zipfile
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .logging_utils import LOG
from .path_resolver import is_falsy
from .renderers import DocxDocumentRenderer
from .rules import DEFAULT_RULEBOOK, Rulebook
from .shared import FontConfig, MappingFileError
from .transformer import DataTransformer

TITLE_KEYS = ("system_title", "system_title_1", "title")
MAX_FILENAME_LENGTH = 100

_INVALID_FILENAME_RE = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RE = re.compile(r"\s+")
_UNDERSCORES_RE = re.compile(r"_{2,}")

PathLike = Union[str, Path]


def sanitize_filename(name: Any, fallback: str = "document") -> str:
    """Make a document title safe to use as a file name stem."""
    text = "" if name is None else str(name)
    text = _INVALID_FILENAME_RE.sub("_", text)
    text = _WHITESPACE_RE.sub("_", text)
    text = _UNDERSCORES_RE.sub("_", text)
    text = text.strip("_")[:MAX_FILENAME_LENGTH]
    return text or fallback


def title_of(data: Dict[str, Any]) -> Optional[Any]:
    """The first non-empty title placeholder of transformed data, if any."""
    for key in TITLE_KEYS:
        value = data.get(key)
        if not is_falsy(value):
            return value
    return None


class SurveyDocExporter:
    """
    Transform raw survey data and render it into .docx documents.

    ``output_path`` is the document written by ``generate_document``; its
    directory is also the default directory for single and batch exports.
    """

    def __init__(
        self,
        template_path: PathLike,
        mapping_path: PathLike,
        output_path: PathLike,
        transformer_output_path: Optional[PathLike] = None,
        rulebook: Union[str, Rulebook] = DEFAULT_RULEBOOK,
        font_config: Optional[FontConfig] = None,
        strict: bool = False,
    ):
        self.template_path = Path(template_path)
        self.output_path = Path(output_path)
        if transformer_output_path is None:
            transformer_output_path = self.output_path.with_name(f"{self.output_path.stem}_transformed.json")
        self.transformer = DataTransformer(mapping_path, transformer_output_path, rulebook=rulebook)
        self.renderer = DocxDocumentRenderer(font_config=font_config, strict=strict)
        self.batch_field_errors: List[Dict[str, str]] = []

    def set_fonts(self, **overrides: Optional[str]) -> FontConfig:
        """Override fonts for Persian and English text (and the title font)."""
        return self.renderer.set_fonts(**overrides)

    def transform_data(self, raw_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Transform raw data only.

        Raises:
            MappingFileError: if the transformer produced nothing because the
                mapping file could not be loaded
        """
        LOG.debug("Starting data transformation")
        transformed = self.transformer.transform(raw_data)
        if not transformed and not self.transformer.load_mappings():
            raise MappingFileError(f"Mappings could not be loaded from {self.transformer.mapping_path}")
        return transformed

    def generate_document(self, raw_data: Dict[str, Any]) -> Path:
        """Transform raw data and render it to ``output_path``."""
        return self.generate_from_transformed_data(self.transform_data(raw_data))

    def generate_from_transformed_data(
        self,
        transformed: Dict[str, Any],
        output_path: Optional[PathLike] = None,
    ) -> Path:
        target = Path(output_path) if output_path is not None else self.output_path
        return self.renderer.render(transformed, self.template_path, target)

    def _output_dir(self, output_dir: Optional[PathLike]) -> Path:
        directory = Path(output_dir) if output_dir is not None else self.output_path.parent
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def export_single(self, raw_data: Dict[str, Any], output_dir: Optional[PathLike] = None) -> Path:
        """
        Export one survey to ``<title>.docx``.

        The file is named after the system title (``system_title``, then
        ``system_title_1``, then ``title``), else ``document``.
        """
        transformed = self.transform_data(raw_data)
        filename = f"{sanitize_filename(title_of(transformed))}.docx"
        path = self.generate_from_transformed_data(transformed, self._output_dir(output_dir) / filename)
        LOG.info("Document exported: %s", path)
        return path

    def export_batch(
        self,
        raw_items: Sequence[Dict[str, Any]],
        output_dir: Optional[PathLike] = None,
        zip_filename: Optional[str] = None,
        side_files: Optional[Sequence[PathLike]] = None,
    ) -> Path:
        """
        Export several surveys and pack the documents into one ZIP file.

        Rule failures of item ``i`` are kept in ``batch_field_errors[i]``.

        Args:
            raw_items: Raw survey data, one item per document
            output_dir: Where the ZIP is written (default: next to output_path)
            zip_filename: ZIP name (default: batch_export_YYYY-MM-DD.zip)
            side_files: Transformed-data file per item (default: the
                transformer's output path, rewritten for every item)

        Returns:
            Path to the ZIP file

        Raises:
            ValueError: if ``raw_items`` is empty or ``side_files`` does not
                match it in length
        """
        if not raw_items:
            raise ValueError("raw_items must be a non-empty sequence")
        if side_files is not None and len(side_files) != len(raw_items):
            raise ValueError("side_files must name one file per item")

        directory = self._output_dir(output_dir)
        zip_path = directory / (zip_filename or f"batch_export_{date.today().isoformat()}.zip")
        total = len(raw_items)
        self.batch_field_errors = []

        with tempfile.TemporaryDirectory(dir=directory, prefix="temp_") as tmp:
            generated: List[Path] = []
            used_names: Dict[str, int] = {}
            for i, raw_data in enumerate(raw_items, start=1):
                LOG.info("Processing document %d/%d", i, total)
                if side_files is not None:
                    self.transformer.output_path = Path(side_files[i - 1])
                transformed = self.transform_data(raw_data)
                self.batch_field_errors.append(dict(self.transformer.field_errors))
                stem = sanitize_filename(title_of(transformed), fallback=f"document_{i}")
                count = used_names.get(stem, 0) + 1
                used_names[stem] = count
                if count > 1:
                    stem = f"{stem}_{count}"
                generated.append(
                    self.generate_from_transformed_data(transformed, Path(tmp) / f"{stem}.docx")
                )

            with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
                for path in generated:
                    zf.write(path, arcname=path.name)

        LOG.info("Batch export complete: %s (%d document(s))", zip_path, len(generated))
        return zip_path


__all__ = ["SurveyDocExporter", "sanitize_filename", "title_of"]
