"""Rules for the data-asset questionnaire."""

from __future__ import annotations

from typing import Any, Dict

from ..digits import localize_value
from .base import (
    TITLE_RULES,
    Rule,
    RuleContext,
    dig,
    options_of,
    option_of,
    single_choice,
    table_rows,
    text,
)
from .registry import Rulebook

LEVELS = ("low", "medium", "high")

# output prefix -> answer key
IMPACT_AREAS = {
    "reputation": "reputation",
    "business_future": "businessFuture",
    "employee_concern": "employeeConcern",
    "stakeholder_concern": "stakeholderConcern",
    "financial_health": "financialHealth",
    "operational_health": "operationalHealth",
}

# output flag -> impact row id
IMPACT_KINDS = {
    "confidentiality_impact": "confidentialityImpact",
    "integrity_impact": "integrityImpact",
    "availability_impact": "availabilityImpact",
}


def _owner_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "name": text(dig(item, "name")),
        "department": text(dig(item, "department", "name")),
        "phone": localize_value(text(dig(item, "phone"))),
    }


def _completer_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "name": text(dig(item, "name")),
        "phone": localize_value(text(dig(item, "phone"))),
    }


def _characteristic_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {"name": text(dig(item, "name")), "desc": text(dig(item, "desc"))}


def _data_type_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "type_title": text(dig(item, "typeTitle")),
        "type_description": text(dig(item, "typeDescription")),
    }


def _impact_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    row_id = dig(item, "id")
    row: Dict[str, Any] = {out: row_id == src for out, src in IMPACT_KINDS.items()}
    for out, src in IMPACT_AREAS.items():
        answer = option_of(dig(item, src))
        row[f"{out}_has_impact"] = answer == "has_impact"
        row[f"{out}_has_no_impact"] = answer == "no_impact"
    return row


RULES: Dict[str, Rule] = {
    **TITLE_RULES,
    "data_type": single_choice({
        "data_type_specialized": "Specialized",
        "data_type_non-specialized": "non-specialized",
    }),
    "data_owners": table_rows(_owner_row),
    "form_completed_by": table_rows(_completer_row),

    "value_added_services": single_choice(options_of("no", "yes", prefix="value_added_services_")),

    "main_characteristics": table_rows(_characteristic_row),
    "data_types": table_rows(_data_type_row),

    "confidentiality": single_choice(options_of(*LEVELS, prefix="confidentiality_")),
    "integrity": single_choice(options_of(*LEVELS, prefix="integrity_")),
    "availability": single_choice(options_of(*LEVELS, prefix="availability_")),
    "impact_assessment": table_rows(_impact_row),
}

RULEBOOK = Rulebook(
    name="data",
    description="Data asset survey (owners, characteristics, CIA levels, impact assessment)",
    rules=RULES,
)
