"""Rules for the business-process questionnaire."""

from __future__ import annotations

from typing import Any, Dict

from .base import (
    TITLE_RULES,
    Rule,
    RuleContext,
    as_list,
    choice_flags,
    dig,
    name_of,
    option_of,
    options_of,
    single_choice,
    table_rows,
    text,
)
from .registry import Rulebook

LEVELS = ("low", "medium", "high")
PROBABILITY = options_of(*LEVELS, prefix="probability_of_occurrence_")
IMPACT = options_of(*LEVELS, prefix="risk_impact_")

MATURITY_LEVELS = {
    "process_maturity_level_identified":
        "The process has been identified, but its documentation (process profile) has not yet been developed.",
    "process_maturity_level_developed":
        "The process documentation (process profile) has been developed.",
    "process_maturity_level_recognized":
        "In addition to developing the process documentation, the process model has been created "
        "using recognized notations such as BPMN2.",
    "process_maturity_level_monitored":
        "Process performance indicators have been defined, and the process is continuously "
        "monitored based on these indicators.",
    "process_maturity_level_mechanism":
        "A process improvement mechanism has been designed and is being implemented.",
}


def _column(key: str) -> Rule:
    """List of one column of a repeated answer, a space where it is missing."""
    def rule(value: Any, ctx: RuleContext):
        return [text(dig(item, key)) for item in as_list(value)]
    return rule


def _step_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "number": text(dig(item, "number")),
        "description": text(dig(item, "description")),
        "responsible": text(dig(item, "responsible", "name")),
        "time": text(dig(item, "time")),
    }


def _resource_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {"name": text(dig(item, "name")), "description": text(dig(item, "description"))}


def _kpi_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "index_name": text(dig(item, "index-name")),
        "calculation_formula": text(dig(item, "calculation-formula")),
        "target_value": text(dig(item, "target-value")),
    }


def _risk_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "risk_name": text(dig(item, "risk-name")),
        "probability_of_occurrence": choice_flags(dig(item, "probability-of-occurrence"), PROBABILITY),
        "risk_impact": choice_flags(dig(item, "risk-impact"), IMPACT),
        "control_measures": text(dig(item, "control-measures")),
    }


def _document_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "document_and_form_name": text(dig(item, "document/form-name")),
        "document_and_form_code": text(dig(item, "document/form-code")),
        "link_or_attachment": choice_flags(
            dig(item, "link-or-attachment"),
            {"link_or_attachment_no": "No", "link_or_attachment_yes": "Yes"},
        ),
    }


def _maturity_level(value: Any, ctx: RuleContext):
    # an unanswered question counts as the first level
    default = None if option_of(value) else "process_maturity_level_identified"
    return [choice_flags(value, MATURITY_LEVELS, default=default)]


RULES: Dict[str, Rule] = {
    **TITLE_RULES,
    "owner": name_of,
    "unit": name_of,

    "process_inputs": _column("input"),
    "process_outputs": _column("output"),
    "main_steps_of_the_process": table_rows(_step_row),
    "resources": table_rows(_resource_row),
    "process_flow": single_choice({"process_flow_no": "No", "process_flow_yes": "Yes"}),

    "key_performance_indicators": table_rows(_kpi_row),
    "possible_risks": table_rows(_risk_row),
    "related_documents_and_forms": table_rows(_document_row),
    "process_maturity_level": _maturity_level,
}

RULEBOOK = Rulebook(
    name="process",
    description="Business process survey (steps, KPIs, risks, maturity)",
    rules=RULES,
)
