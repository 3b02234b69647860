import json
import sys
from pathlib import Path

import pytest
from docx import Document

from surveydoc.rules import RuleContext
from surveydoc.shared import Mapping, MappingFile


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def write_mapping(tmp_path: Path):
    """Write a mapping file from {placeholder: jsonPath} pairs and return its path."""

    def _write(pairs: dict, name: str = "mappings.json") -> Path:
        mapping_dir = tmp_path / "config"
        mapping_dir.mkdir(parents=True, exist_ok=True)
        path = mapping_dir / name
        payload = {"mappings": [{"placeholder": k, "jsonPath": v} for k, v in pairs.items()]}
        path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_template(tmp_path: Path):
    """Build a .docx template with one paragraph per line of text."""

    def _make(*paragraphs: str, name: str = "template.docx") -> Path:
        path = tmp_path / name
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        doc.save(str(path))
        return path

    return _make


@pytest.fixture
def rule_ctx():
    """Build a RuleContext for calling a rule directly."""

    def _make(placeholder: str = "field", raw_data=None, mappings: dict = None) -> RuleContext:
        mapping_file = MappingFile(
            mappings=[Mapping(k, v) for k, v in (mappings or {}).items()]
        )
        return RuleContext(
            placeholder=placeholder,
            json_path=mapping_file.find_json_path(placeholder),
            raw_data=raw_data or {},
            mapping_file=mapping_file,
        )

    return _make
