"""
CLI Phase 3: Execute.

Transforms every collected survey and renders it (one document per survey
or one ZIP for all of them). All output paths are decided here.
"""

from __future__ import annotations

import json
import traceback
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .cli_config import ExportConfig
from .exporter import SurveyDocExporter
from .logging_utils import LOG, fmt_issues
from .rules import list_rulebooks
from .transformer import DataTransformer

Survey = Dict[str, Any]


def load_surveys(path: Path) -> List[Survey]:
    """
    Read one JSON file holding a survey object or an array of them.

    Raises:
        ValueError: if the file holds anything else
    """
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list) and all(isinstance(item, dict) for item in payload):
        return payload
    raise ValueError(f"{path.name}: expected a JSON object or an array of objects")


def _survey_label(path: Path, index: int, count: int) -> str:
    return path.name if count == 1 else f"{path.name}[{index}]"


def _side_file_name(path: Path, index: int, count: int) -> str:
    return f"{path.stem}.json" if count == 1 else f"{path.stem}_{index}.json"


def _status_icon(ok: bool, has_warns: bool) -> str:
    if not ok:
        return "❌"
    return "⚠️ " if has_warns else "🟢"


def _print_rulebooks() -> int:
    for rb in list_rulebooks():
        print(f"{rb['name']:<16} {rb['description']}", flush=True)
    return 0


def _transform_only(config: ExportConfig) -> Tuple[int, int, bool]:
    if config.mapping is None:
        raise ValueError("Transforming needs --mapping")
    config.transformed_dir.mkdir(parents=True, exist_ok=True)
    ok_count = failed = 0
    had_warning = False

    for input_file in config.inputs:
        try:
            surveys = load_surveys(input_file)
        except (OSError, ValueError) as e:
            LOG.info("%s %s | %s", _status_icon(False, False), input_file.name, e)
            failed += 1
            continue
        for i, survey in enumerate(surveys, start=1):
            out = config.transformed_dir / _side_file_name(input_file, i, len(surveys))
            transformer = DataTransformer(config.mapping, out, rulebook=config.rulebook)
            result = transformer.transform(survey)
            errors = [] if result else ["mapping file could not be loaded"]
            warns = [f"{k}: {v}" for k, v in sorted(transformer.field_errors.items())]
            had_warning = had_warning or bool(warns)
            LOG.info("%s %s | %s", _status_icon(not errors, bool(warns)),
                     _survey_label(input_file, i, len(surveys)), fmt_issues(errors, warns))
            if errors:
                failed += 1
            else:
                ok_count += 1

    return ok_count, failed, had_warning


def _render(config: ExportConfig, exporter: SurveyDocExporter) -> Tuple[int, int, bool]:
    ok_count = failed = 0
    had_warning = False

    for input_file in config.inputs:
        try:
            surveys = load_surveys(input_file)
        except (OSError, ValueError) as e:
            LOG.info("%s %s | %s", _status_icon(False, False), input_file.name, e)
            failed += 1
            continue
        for i, survey in enumerate(surveys, start=1):
            label = _survey_label(input_file, i, len(surveys))
            exporter.transformer.output_path = config.transformed_dir / _side_file_name(input_file, i, len(surveys))
            try:
                out_docx = exporter.export_single(survey, config.documents_dir)
            except Exception as e:
                if config.debug:
                    LOG.error(traceback.format_exc())
                LOG.info("%s %s | %s", _status_icon(False, False), label,
                         fmt_issues([f"{type(e).__name__}: {e}"], []))
                failed += 1
                continue
            warns = [f"{k}: {v}" for k, v in sorted(exporter.transformer.field_errors.items())]
            had_warning = had_warning or bool(warns)
            LOG.info("%s %s -> %s | %s", _status_icon(True, bool(warns)), label, out_docx.name,
                     fmt_issues([], warns))
            ok_count += 1

    return ok_count, failed, had_warning


def _render_zip(config: ExportConfig, exporter: SurveyDocExporter) -> Tuple[int, int, bool]:
    surveys: List[Survey] = []
    labels: List[str] = []
    side_files: List[Path] = []
    failed = 0
    for input_file in config.inputs:
        try:
            loaded = load_surveys(input_file)
        except (OSError, ValueError) as e:
            LOG.info("%s %s | %s", _status_icon(False, False), input_file.name, e)
            failed += 1
            continue
        for i, survey in enumerate(loaded, start=1):
            surveys.append(survey)
            labels.append(_survey_label(input_file, i, len(loaded)))
            side_files.append(config.transformed_dir / _side_file_name(input_file, i, len(loaded)))

    if not surveys:
        LOG.error("No surveys to export.")
        return 0, failed, False

    zip_path = exporter.export_batch(surveys, config.documents_dir, config.zip_name, side_files=side_files)

    had_warning = False
    for label, field_errors in zip(labels, exporter.batch_field_errors):
        warns = [f"{k}: {v}" for k, v in sorted(field_errors.items())]
        had_warning = had_warning or bool(warns)
        LOG.info("%s %s -> %s | %s", _status_icon(True, bool(warns)), label, zip_path.name,
                 fmt_issues([], warns))
    return len(surveys), failed, had_warning


def execute_pipeline(config: ExportConfig) -> int:
    """
    Phase 3: Execute the export based on user configuration.

    Returns exit code (0 = success, 1 = failure, 2 = strict mode warnings).
    """
    if config.list_rulebooks:
        return _print_rulebooks()

    if not config.inputs:
        LOG.error("No matching input files found.")
        return 1

    if config.transform_only:
        ok_count, failed, had_warning = _transform_only(config)
        out_dir = config.transformed_dir
    else:
        if config.template is None or config.mapping is None:
            raise ValueError("Rendering needs both --mapping and --template")
        exporter = SurveyDocExporter(
            config.template,
            config.mapping,
            config.documents_dir / "document.docx",
            transformer_output_path=config.transformed_dir / "document.json",
            rulebook=config.rulebook,
            font_config=config.font_config,
            strict=config.strict,
        )
        if config.batch:
            ok_count, failed, had_warning = _render_zip(config, exporter)
        else:
            ok_count, failed, had_warning = _render(config, exporter)
        out_dir = config.documents_dir

    LOG.info(
        "📊 Summary: %d successful, %d failed (total %d). Output in: %s",
        ok_count, failed, ok_count + failed, out_dir,
    )

    if failed:
        return 1

    if config.strict and had_warning:
        LOG.error("Strict mode enabled: warnings treated as failure.")
        return 2

    return 0
