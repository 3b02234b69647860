"""
Rules for the public-service questionnaire.

Most choice answers here are bare flag objects whose keys carry the
placeholder name as a prefix (``service_level_national``, ...).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..digits import localize_value
from .base import (
    ENDS_WITH,
    STARTS_WITH,
    TITLE_RULES,
    Rule,
    RuleContext,
    as_list,
    choice_flags,
    dig,
    free_list,
    is_chosen,
    multi_select,
    name_of,
    options_of,
    passthrough,
    selected_flags,
    single_choice,
    table_rows,
    text,
    text_or_space,
)
from .registry import Rulebook


def _flags(name: str, *keys: str, default: Optional[str] = None) -> Rule:
    """Bare choice flags keyed ``{name}_{option}``, matched by equality."""
    options = options_of(*keys, prefix=f"{name}_")
    return single_choice(options, wrap=False, default=f"{name}_{default}" if default else None)


def _selected(name: str, *keys: str) -> Rule:
    """Bare multi-select flags keyed ``{name}_{option}``."""
    return multi_select({f"{name}_{key}": key for key in keys}, wrap=False)


def _contact_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "name": text(dig(item, "name")),
        "phone": localize_value(text(dig(item, "phone"))),
    }


def _names(items: Any) -> List[Any]:
    return [dig(i, "name", default="") for i in as_list(items)]


def _region_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "region": _names(dig(item, "region")),
        "subregion": _names(dig(item, "subregion")),
    }


def _law_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "law_details": text(dig(item, "lawDetails", "title")),
        "description": text(dig(item, "description")),
    }


def _partner_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "organization_name": text(dig(item, "organizationName", "name")),
        "contact_info": text(dig(item, "contactInfo")),
    }


def _recipient_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "group_name": text(dig(item, "groupName")),
        "requirements": text(dig(item, "requirements")),
        "additional_notes": text(dig(item, "additionalNotes")),
    }


SATISFACTION_LEVELS = {
    "service_satisfaction_level_very_poor": "Very poor",
    "service_satisfaction_level_poor": "Poor",
    "service_satisfaction_level_average": "Average",
    "service_satisfaction_level_good": "Good",
    "service_satisfaction_level_excellent": "Excellent",
}


def _supporting_system_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "system_name": text(dig(item, "systemName")),
        "supported_features": text(dig(item, "supportedFeatures")),
        "limitations": text(dig(item, "limitations")),
    }


SUPPORT_LEVELS = {
    "system_support_level_partial": "partial",
    "system_support_level_nonintegrated": "nonintegrated",
    "system_support_level_integrated": "integrated",
    "system_support_level_full_integrated": "full-integrated",
}


def _service_data_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "exchanged_data": text(dig(item, "exchangedData", "title")),
        "service_parameters": _names(dig(item, "serviceParameters")),
        "instance_values": [
            dig(v, "typeTitle", default="") for v in as_list(dig(item, "instanceValues"))
        ],
    }


# first match wins, the answers are long sentences
INTEGRATION_LEVELS: Sequence[tuple] = (
    ("data_integration_level_some", STARTS_WITH, "Some"),
    ("data_integration_level_desired", ENDS_WITH, "service."),
    ("data_integration_level_service", ENDS_WITH, "insufficient."),
    ("data_integration_level_supported", ENDS_WITH, "mechanism."),
)


def _integration_level(value: Any, ctx: RuleContext) -> Dict[str, bool]:
    flags = {key: False for key, _, _ in INTEGRATION_LEVELS}
    for key, how, literal in INTEGRATION_LEVELS:
        if is_chosen(value, literal, how):
            flags[key] = True
            break
    return flags


def _specialist_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "specialization": text(dig(item, "specialization")),
        "characteristics": text(dig(item, "characteristics")),
    }


RESPONSIBILITIES = {
    "responsibilities_service_provider": "service_provider",
    "responsibilities_service_approver": "service_approver",
    "responsibilities_service_supervisor": "service_supervisor",
}


def _role_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "role": text(dig(item, "role")),
        "responsibilities": selected_flags(dig(item, "responsibilities"), RESPONSIBILITIES),
    }


def _yes_no(raw: Any, name: str) -> List[Dict[str, bool]]:
    return [choice_flags(raw, {f"{name}_yes": "yes", f"{name}_no": "no"})]


def _hr_assessment(value: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "is_staff_sufficient": _yes_no(dig(value, "isStaffSufficient"), "is_staff_sufficient"),
        "are_skills_available": _yes_no(dig(value, "areSkillsAvailable"), "are_skills_available"),
    }


def _channel_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "channel_type": text(dig(item, "channelType")),
        "address": text(dig(item, "address")),
        "description": text(dig(item, "description")),
    }


PHASES = (
    ("information_phase", "informationPhase"),
    ("production_phase", "productionPhase"),
    ("delivery_phase", "deliveryPhase"),
)


def _electronic_service_status(value: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        phase: [choice_flags(dig(value, source), {
            f"{phase}_electronic": "electronic",
            f"{phase}_non_electronic": "non_electronic",
        })]
        for phase, source in PHASES
    }


ISSUE_FIELDS = (
    "authentication_issues", "document_authentication_issues", "infrastructure_issues",
    "database_issues", "process_complexity_issues", "skills_issues",
    "system_quality_issues", "user_support_issues",
)

SUGGESTIONS = {
    "service_nature_change": "serviceNatureChange",
    "service_merger": "serviceMerger",
    "new_service_definition": "newServiceDefinition",
    "owner_unit_notes": "ownerUnitNotes",
    "other_suggestions": "otherSuggestions",
}


def _suggestions(value: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {out: text(dig(value, src)) for out, src in SUGGESTIONS.items()}


def _build_rules() -> Dict[str, Rule]:
    rules: Dict[str, Rule] = dict(TITLE_RULES)
    rules.update({
        "service_owners": table_rows(_contact_row),
        "form_completed_by": table_rows(_contact_row),

        "service_unique_code": text_or_space,
        "service_provider": name_of,
        "service_desc": text_or_space,
        "regions": table_rows(_region_row, sentinel={"region": [" "], "subregion": [" "]}),
        "service_type": multi_select({
            "service_type_C2G": "C2G",
            "service_type_B2G": "B2G",
            "service_type_G2G": "G2G",
        }, wrap=False),
        "service_level": _flags(
            "service_level", "national", "regional", "provincial", "urban", "rural", default="national",
        ),
        "service_initiation": _flags(
            "service_initiation", "user_request", "specific_time", "specific_event", "other",
            default="user_request",
        ),
        "strategic_importance": _flags("strategic_importance", "low", "medium", "high"),
        "required_documents": text_or_space,
        "average_service_time": text_or_space,
        "service_frequency": _flags("service_frequency", "one_time", "periodic"),
        "related_laws_regulations": table_rows(_law_row),

        "service_partners": table_rows(_partner_row),

        "recipient_groups": table_rows(_recipient_row),
        "service_satisfaction_level": single_choice(SATISFACTION_LEVELS, wrap=False),

        "supporting_systems": table_rows(_supporting_system_row),
        "system_support_level": single_choice(SUPPORT_LEVELS, wrap=False),

        "service_data": table_rows(_service_data_row),
        "data_integration_level": _integration_level,

        "specialized_human_resources": table_rows(_specialist_row),
        "human_roles": table_rows(_role_row),
        "hr_assessment": _hr_assessment,
        "related_processes": free_list(lambda p: dig(p, "formData", "title", default=""), wrap_scalar=False),
        "process_coverage_status": single_choice({
            "process_coverage_status_yes": "Yes",
            "process_coverage_status_no": "No",
        }, wrap=False),

        "service_delivery_channels": table_rows(_channel_row),

        "service_delivery_platform": _selected(
            "service_delivery_platform",
            "mpls_tehran", "mpls_provinces", "national_network", "government_network",
            "apn_network", "ptp_lines", "other",
        ),

        "communication_type": _selected("communication_type", "electronic", "non_electronic"),
        "electronic_types": _selected(
            "electronic_types", "internet", "email", "sms", "mobile_app", "postal", "other",
        ),
        "service_type_status": _selected("service_type_status", "electronic", "non_electronic"),
        "electronic_methods": _selected("electronic_methods", "portal", "internet", "email", "other"),
        "service_delivery_type": _selected("service_delivery_type", "electronic", "non_electronic"),
        "electronic_service_methods": _selected(
            "electronic_service_methods",
            "internet", "email", "phone_sms", "mobile_app", "postal", "other",
        ),
        "additional_information": passthrough,
        "electronic_service_status": _electronic_service_status,

        "suggestions": _suggestions,
    })
    for name in ISSUE_FIELDS:
        rules[name] = _flags(name, "has_issues", "no_issues")
    return rules


RULEBOOK = Rulebook(
    name="service",
    description="Public service survey (delivery, channels, human resources, issues)",
    rules=_build_rules(),
)
