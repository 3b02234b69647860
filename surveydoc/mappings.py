"""
Mapping file loader.

A mapping file is a JSON object::

    {"mappings": [{"placeholder": "title", "jsonPath": "formData.title"}, ...]}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Union

from .logging_utils import LOG
from .shared import Mapping, MappingFile, MappingFileError


def _parse_entry(entry: Any, index: int) -> Mapping:
    if not isinstance(entry, dict):
        raise MappingFileError(f"Mapping #{index} is not an object")
    placeholder = entry.get("placeholder")
    json_path = entry.get("jsonPath")
    if not isinstance(placeholder, str) or not placeholder.strip():
        raise MappingFileError(f"Mapping #{index} has no placeholder")
    if json_path is None:
        json_path = ""
    if not isinstance(json_path, str):
        raise MappingFileError(f"Mapping #{index} ({placeholder}) has a non-string jsonPath")
    return Mapping(placeholder=placeholder.strip(), json_path=json_path.strip())


def parse_mappings(payload: Any) -> MappingFile:
    """Build a MappingFile from an already decoded JSON payload."""
    if not isinstance(payload, dict) or not isinstance(payload.get("mappings"), list):
        raise MappingFileError("Mapping file must be an object with a 'mappings' array")
    entries: List[Mapping] = [
        _parse_entry(entry, i) for i, entry in enumerate(payload["mappings"])
    ]
    return MappingFile(mappings=entries)


def load_mapping_file(path: Union[str, Path]) -> MappingFile:
    """
    Load and validate a mapping file.

    Raises:
        MappingFileError: if the file is missing, is not valid JSON, or has
            the wrong structure.
    """
    path = Path(path)
    if not path.is_file():
        raise MappingFileError(f"Mapping file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MappingFileError(f"Cannot read mapping file {path}: {e}") from e

    mapping_file = parse_mappings(payload)
    LOG.debug("Loaded %d mapping(s) from %s", len(mapping_file.mappings), path)
    return mapping_file


__all__ = ["load_mapping_file", "parse_mappings"]
