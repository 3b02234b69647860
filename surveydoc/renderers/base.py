"""
Base interface for document renderers.

Defines the contract for rendering transformed survey data through a
template into a finished document.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict


class DocumentRenderer(ABC):
    """
    Abstract base class for document renderers.

    Implementations take the flat placeholder map produced by the
    transformer and fill a template with it.
    """

    @abstractmethod
    def render(self, data: Dict[str, Any], template_path: Path, output_path: Path) -> Path:
        """
        Render template data to an output file using the specified template.

        Args:
            data: Placeholder name -> value, as produced by DataTransformer.transform
            template_path: Path to the template file to use for rendering
            output_path: Path where the rendered output should be saved

        Returns:
            Path to the rendered output file

        Raises:
            FileNotFoundError: If the template file does not exist
            ValueError: If the template has the wrong format
        """
        pass
