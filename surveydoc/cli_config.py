"""
CLI configuration data structures.

Defines the ExportConfig dataclass shared by the three CLI phases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .rules import DEFAULT_RULEBOOK
from .shared import FontConfig


@dataclass
class FontOverrides:
    """Fonts given on the command line; unset values keep the defaults."""
    persian: Optional[str] = None
    english: Optional[str] = None
    default: Optional[str] = None
    system_title_first: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            "persian": self.persian,
            "english": self.english,
            "default": self.default,
            "system_title_first": self.system_title_first,
        }

    def apply_to(self, base: FontConfig) -> FontConfig:
        return base.merged(**self.as_dict())


@dataclass
class ExportConfig:
    """Configuration gathered from user input."""

    # Inputs
    mapping: Optional[Path] = None
    source: Optional[Path] = None  # Survey JSON file or folder of them
    template: Optional[Path] = None  # Template DOCX (not needed with transform_only)

    # Global output directory
    target_dir: Optional[Path] = None

    rulebook: str = DEFAULT_RULEBOOK
    fonts: FontOverrides = field(default_factory=FontOverrides)

    # Output modes
    zip_name: Optional[str] = None  # Set to pack every document into one ZIP
    batch: bool = False
    transform_only: bool = False

    # Execution settings
    strict: bool = False
    debug: bool = False
    verbosity: int = 0
    log_file: Optional[str] = None
    list_rulebooks: bool = False

    # Filled by the prepare phase
    inputs: List[Path] = field(default_factory=list)

    @property
    def documents_dir(self) -> Path:
        if self.target_dir is None:
            raise ValueError("No target directory configured")
        return self.target_dir / "documents"

    @property
    def transformed_dir(self) -> Path:
        if self.target_dir is None:
            raise ValueError("No target directory configured")
        return self.target_dir / "transformed_data"

    @property
    def font_config(self) -> FontConfig:
        return self.fonts.apply_to(FontConfig())
