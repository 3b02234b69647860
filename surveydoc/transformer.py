"""
Placeholder transformer.

Turns raw questionnaire JSON into the flat key/value map a Word template
expects. Every placeholder declared in the mapping file is resolved through
its JSON path and then shaped by the rule registered for it in the active
rulebook; placeholders without a rule fall back to a few generic rules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .digits import localize_value
from .logging_utils import LOG
from .mappings import load_mapping_file
from .path_resolver import is_falsy, resolve
from .rules import DEFAULT_RULEBOOK, Rulebook, RuleContext, get_rulebook, used_features
from .shared import MappingFile, MappingFileError, sorted_by_key

DESCRIPTION_SUFFIX = "_description"
USED_FEATURES_SUFFIX = "_used_features"

OUTPUT_FILENAME = "transformed_data_output.json"


def _is_description(placeholder: str) -> bool:
    return placeholder.lower().endswith(DESCRIPTION_SUFFIX)


class DataTransformer:
    """
    Transform raw survey data into template data, driven by a mapping file.

    The mapping file is loaded once per instance and cached; a fresh
    instance reloads it.
    """

    def __init__(
        self,
        mapping_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        rulebook: Union[str, Rulebook] = DEFAULT_RULEBOOK,
    ):
        self.mapping_path = Path(mapping_path)
        if output_path is None:
            output_path = self.mapping_path.parent / ".." / OUTPUT_FILENAME
        self.output_path = Path(output_path)
        self.rulebook = self._lookup_rulebook(rulebook)
        self.mapping_file: Optional[MappingFile] = None
        self.field_errors: Dict[str, str] = {}

    @staticmethod
    def _lookup_rulebook(rulebook: Union[str, Rulebook]) -> Rulebook:
        if isinstance(rulebook, Rulebook):
            return rulebook
        found = get_rulebook(rulebook)
        if found is None:
            raise ValueError(f"Unknown rulebook: {rulebook}")
        return found

    def load_mappings(self) -> bool:
        """
        Load the mapping file unless it is already cached.

        Returns:
            True if mappings are available, False if loading failed (logged)
        """
        if self.mapping_file is not None:
            return True
        try:
            self.mapping_file = load_mapping_file(self.mapping_path)
        except MappingFileError as e:
            LOG.error("Mappings could not be loaded: %s", e)
            return False
        LOG.info("Mapping file loaded: %d mapping(s)", len(self.mapping_file.mappings))
        return True

    def find_json_path(self, placeholder: str) -> Optional[str]:
        if self.mapping_file is None:
            LOG.warning("JSON path lookup for %s before mappings were loaded", placeholder)
            return None
        return self.mapping_file.find_json_path(placeholder)

    def get_value_from_json_path(self, data: Any, json_path: Optional[str]) -> Any:
        return resolve(data, json_path)

    def transform(self, raw_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Transform raw data for every placeholder in the mapping file.

        Args:
            raw_data: Decoded survey JSON, never modified

        Returns:
            Sorted dict of placeholder -> template value, or {} if the mapping
            file could not be loaded
        """
        if not self.load_mappings() or self.mapping_file is None:
            LOG.error("Transformation failed: mappings could not be loaded")
            return {}
        mapping_file = self.mapping_file

        placeholders = sorted(mapping_file.placeholders)
        self.field_errors = {}
        result: Dict[str, Any] = {}

        LOG.info("Transforming %d placeholder(s) with the %s rulebook", len(placeholders), self.rulebook.name)
        for placeholder in placeholders:
            json_path = self.find_json_path(placeholder)
            try:
                self._transform_one(placeholder, json_path, raw_data, result)
            except Exception as e:
                LOG.error("Rule for %s failed: %s", placeholder, e)
                self.field_errors[placeholder] = str(e)
                result.pop(placeholder, None)
                continue

            if placeholder in result and _is_description(placeholder):
                result[placeholder] = localize_value(result[placeholder])

        filled = sorted_by_key(result)
        LOG.info("Transformation complete: %d of %d placeholder(s) filled", len(filled), len(placeholders))
        self._write_output(filled)
        return filled

    def _transform_one(
        self,
        placeholder: str,
        json_path: Optional[str],
        raw_data: Dict[str, Any],
        result: Dict[str, Any],
    ) -> None:
        value = self.get_value_from_json_path(raw_data, json_path)

        rule = self.rulebook.get(placeholder)
        if rule is not None:
            if self.mapping_file is None:
                raise MappingFileError("Rules need a loaded mapping file")
            ctx = RuleContext(
                placeholder=placeholder,
                json_path=json_path,
                raw_data=raw_data,
                mapping_file=self.mapping_file,
            )
            result[placeholder] = rule(value, ctx)
            return

        if _is_description(placeholder):
            LOG.debug("Description placeholder %s (path %s)", placeholder, json_path)
            result[placeholder] = "" if not json_path or is_falsy(value) else value
        elif placeholder.endswith(USED_FEATURES_SUFFIX):
            LOG.debug("Used features placeholder %s (path %s)", placeholder, json_path)
            result[placeholder] = used_features(value if json_path else None)
        elif json_path:
            LOG.debug("Generic placeholder %s (path %s): %r", placeholder, json_path, value)
            result[placeholder] = localize_value(value)
        else:
            LOG.debug("No JSON path found for placeholder %s", placeholder)

    def _write_output(self, data: Dict[str, Any]) -> None:
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            with self.output_path.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            LOG.error("Could not write transformed data to %s: %s", self.output_path, e)
            return
        LOG.debug("Transformed data written to %s", self.output_path)


__all__ = ["DataTransformer"]
