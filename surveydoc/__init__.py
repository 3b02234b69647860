# surveydoc/__init__.py

from .transformer import DataTransformer
from .exporter import SurveyDocExporter, sanitize_filename
from .renderers import DocxDocumentRenderer
from .language import wrap_with_language_markers
from .font_styler import apply_font_styles
from .digits import to_persian_digits, is_purely_numerical
from .shared import FontConfig, MappingFileError, MarkerLeakError, SurveyDocError

__all__ = [
    "DataTransformer",
    "SurveyDocExporter",
    "DocxDocumentRenderer",
    "FontConfig",
    "MappingFileError",
    "MarkerLeakError",
    "SurveyDocError",
    "apply_font_styles",
    "is_purely_numerical",
    "sanitize_filename",
    "to_persian_digits",
    "wrap_with_language_markers",
]
