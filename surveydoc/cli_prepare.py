"""
CLI Phase 2: Prepare execution environment.

Validates inputs and prepares directories for execution.
No actual execution - just setup.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from .cli_config import ExportConfig
from .logging_utils import LOG


def _collect_inputs(src: Path) -> List[Path]:
    """Collect survey JSON files from a file or folder."""
    if src.is_file():
        return [src]

    if not src.is_dir():
        raise FileNotFoundError(f"Path not found or not a file/folder: {src}")

    return sorted(p for p in src.rglob("*.json") if p.is_file())


def prepare_execution_environment(config: ExportConfig) -> ExportConfig:
    """
    Phase 2: Validate inputs and prepare execution environment.

    - Validates the mapping file and (unless transform-only) the template
    - Creates the target directory
    - Collects input files
    - No execution yet

    Returns the same config (for chaining).
    """
    if config.list_rulebooks:
        return config

    if config.mapping is None or config.source is None or config.target_dir is None:
        raise ValueError("Missing required arguments: --mapping, --data and --target")

    if not config.mapping.is_file():
        LOG.error("Mapping file not found: %s", config.mapping)
        raise ValueError(f"Invalid mapping file: {config.mapping}")

    if not config.transform_only:
        if config.template is None or not config.template.is_file() or config.template.suffix.lower() != ".docx":
            LOG.error("Template not found or not a .docx: %s", config.template)
            raise ValueError(f"Invalid template: {config.template}")

    config.target_dir.mkdir(parents=True, exist_ok=True)
    if not config.target_dir.is_dir():
        LOG.error("Target is not a directory: %s", config.target_dir)
        raise ValueError(f"Target is not a directory: {config.target_dir}")

    config.inputs = _collect_inputs(config.source)
    return config
