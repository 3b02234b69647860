"""
Rules for the information-system questionnaire.

Sections: identification, mission and services, data, interactions,
users, architecture and technology, hardware, support, documentation
and quality, yes/no questions.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..digits import localize_value, to_solar_hijri
from .base import (
    SPACE,
    TITLE_RULES,
    Rule,
    RuleContext,
    as_list,
    choice_flags,
    dig,
    first_of,
    free_list,
    multi_select,
    options_of,
    passthrough,
    selected_flags,
    single_choice,
    table_rows,
    text,
)
from .registry import Rulebook

# ------------------------- Section 1: identification -------------------------

def _url_of(item: Any) -> Any:
    return dig(item, "url", default="") if isinstance(item, dict) else item


def _system_users(value: Any, ctx: RuleContext) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [{"name": dig(item, "name", "name", default="")} for item in value]


def _owner_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "name": text(dig(item, "name")),
        "department": text(dig(item, "department", "name")),
        "mobile": localize_value(text(dig(item, "mobile"))),
    }


def _filler_name(value: Any, ctx: RuleContext) -> str:
    if not isinstance(value, dict):
        return ""
    first = dig(value, "firstname", default="")
    last = dig(value, "lastname", default="")
    return f"{first} {last}".strip()

# ------------------------- Section 2: mission and services -------------------------

def _main_functions(value: Any, ctx: RuleContext) -> List[Any]:
    return list(value) if isinstance(value, list) and value else []


def _service_title(service: Any) -> Any:
    if isinstance(service, str):
        return service
    return first_of(dig(service, "serviceId", "title"), dig(service, "title"))


def _legal_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "legal_material": first_of(dig(item, "lawDetails", "title")),
        "legal_description": first_of(dig(item, "description")),
    }


def _duplicate_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    # the duplicated system is a linked record shaped like this survey
    title_path = ctx.find_json_path("system_title")
    linked = dig(item, "systemName", default={})
    functions = [
        dig(f, "name", default="")
        for f in as_list(dig(item, "duplicateFunctions"))
    ]
    return {
        "duplicate_system": first_of(ctx.resolve(title_path, data=linked)),
        "duplicate_functions": ", ".join(f for f in functions if f),
        "duplicateSystems_reason": first_of(dig(item, "reason")),
    }

# ------------------------- Section 3: data -------------------------

SYSTEM_ROLES = ("data_steward", "data_entry_point", "data_producer")
DATA_SOURCES = ("user_input", "operations", "internal_system", "external_org", "import", "hardware")


def _data_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "data_name": text(dig(item, "dataName", "title")),
        "system_role": [selected_flags(dig(item, "systemRole"), SYSTEM_ROLES)],
        "data_source": [selected_flags(dig(item, "dataSource"), DATA_SOURCES)],
        "description": text(dig(item, "description")),
    }


def _unsupported_data_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "unsupportedData": text(dig(item, "dataName", "title")),
        "description": text(dig(item, "description")),
    }

# ------------------------- Section 4: interactions -------------------------

EXCHANGE_TYPES = options_of("send", "receive")
EXCHANGE_METHODS = ("api", "mech_file", "manual_file", "db_connection")


def _interaction_row(row: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {
        "systemName": [
            first_of(dig(s, "formData", "system_title"), dig(s, "name"))
            for s in as_list(dig(row, "systemNames"))
        ],
        "exchangeData": [
            first_of(dig(d, "formData", "title"), dig(d, "title"))
            for d in as_list(dig(row, "exchangedData"))
        ],
        "exchangeType": [choice_flags(dig(row, "exchangeType"), EXCHANGE_TYPES)],
        "exchangeMethod": [selected_flags(dig(row, "exchangeMethod"), EXCHANGE_METHODS)],
        "serviceParameters": [
            first_of(dig(p, "formData", "title"), dig(p, "title"), dig(p, "name"))
            for p in as_list(dig(row, "serviceParameters"))
        ],
        "exchangeReason": first_of(dig(row, "exchangeReason")),
    }


_INTERACTION_SENTINEL = {
    "systemName": [],
    "exchangeData": [],
    "exchangeType": [choice_flags(None, EXCHANGE_TYPES)],
    "exchangeMethod": [selected_flags(None, EXCHANGE_METHODS)],
    "serviceParameters": [],
    "exchangeReason": SPACE,
}


def _linked_title(item: Any) -> Any:
    if isinstance(item, str):
        return item
    return first_of(dig(item, "formData", "title"), dig(item, "title"))


def _desired_relation_row(row: Any, ctx: RuleContext) -> Dict[str, Any]:
    system = dig(row, "systemName")
    if isinstance(system, dict):
        system_name = first_of(dig(system, "formData", "system_title"), dig(system, "name"))
    elif isinstance(system, str):
        system_name = system
    else:
        system_name = ""

    exchanged = dig(row, "exchangedData")
    if isinstance(exchanged, list):
        exchange_data = ", ".join(str(_linked_title(d)) for d in exchanged)
    elif isinstance(exchanged, (dict, str)):
        exchange_data = _linked_title(exchanged)
    else:
        exchange_data = ""

    return {"desired_systemName": system_name, "desired_exchangeData": exchange_data}

# ------------------------- Section 5: users -------------------------

def _unauthorized_user_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {"user": text(dig(item, "userGroup")), "reason": text(dig(item, "reason"))}

# ------------------------- Section 6: architecture and technology -------------------------

TECHNOLOGY_OPTIONS: Dict[str, tuple] = {
    "operating_system": ("windows", "linux", "other", "unix", "mac", "cloud_os", "embedded_os"),
    "programming_languages": (
        "java", "dotnet", "dotnetcore", "python", "javascript", "typescript",
        "ruby", "php", "go", "swift", "other",
    ),
    "frameworks": (
        "spring", "rails", "dotnet", "react", "angular", "vue", "flask",
        "laravel", "django", "express", "other",
    ),
    "database": ("sqlserver", "mysql", "postgresql", "oracle", "mongodb", "redis", "cassandra", "access", "other"),
    "infrastructure": ("none", "docker", "kubernetes", "ansible", "terraform", "aws", "google_cloud", "azure", "other"),
    "monitoring_tools": ("none", "grafana", "prometheus", "elk", "datadog", "new_relic", "zabbix", "other"),
    "authentication_methods": ("username_password", "mfa", "biometric"),
    "backup_method": ("automatic", "manual"),
    "backup_type": ("continuous", "differential", "incremental", "full"),
    "backup_schedule": ("yearly", "quarterly", "monthly", "weekly", "daily"),
    "backup_storage": ("offsite", "network", "cloud", "local"),
    "backup_testing": ("none", "emergency", "regular"),
    "retention_policy": ("none", "one_year", "six_months", "three_months", "one_month"),
    "penetration_testing": ("black", "white", "gray", "not_done"),
    "hardening": ("done", "not_done"),
    "security_certification": ("has_afta", "has_other", "no_certification"),
}


def _third_party_tools(value: Any, ctx: RuleContext) -> List[Dict[str, Any]]:
    if isinstance(value, list):
        return [v if isinstance(v, dict) and v.get("tool") else {"tool": v} for v in value]
    if isinstance(value, str) and value.strip():
        return [{"tool": value}]
    return []


DISTRIBUTION_FIELDS = ("database_distribution", "application_distribution")


def _centralization(value: Any, ctx: RuleContext) -> List[Dict[str, bool]]:
    return [{key: dig(value, key) == "distributed" for key in DISTRIBUTION_FIELDS}]


DEV_LIMIT_OPTIONS = options_of("free_no_cost", "free_with_cost", "limited")


def _dev_limits(source_key: str) -> Rule:
    def rule(value: Any, ctx: RuleContext) -> List[Dict[str, bool]]:
        return [choice_flags(dig(value, source_key), DEV_LIMIT_OPTIONS)]
    return rule


DEVELOPMENT_CHALLENGES = (
    "none", "high_cost_time", "contract_issues", "technical_complexity", "no_access_to_developer",
)

# ------------------------- Section 7: hardware -------------------------

SERVER_TYPES = options_of("physical_server", "virtual_server", "cloud_server")
CPU_CORES = options_of("2_cores", "8_cores", "16_cores", "32_cores", "64_cores_plus")
MEMORY_SIZES = options_of(
    "less_than_8gb", "8_to_16gb", "16_to_32gb", "32_to_64gb",
    "64_to_128gb", "128_to_512gb", "more_than_512gb",
)
STORAGE_SIZES = {
    "less_than_500gb": "less_than_500gb",
    "500gb_to_1tb": "500gb_to_1tb",
    "1tb_to_5tb": "1_to_5tb",
    "more_than_5tb": "more_than_5tb",
}
GPU_TYPES = options_of("not_required", "standard_card", "advanced_card")
BACKUP_SPACES = options_of("1_to_5tb", "5_to_10tb", "10_to_25tb", "25_to_50tb", "more_than_50tb")


def _hardware_flags(item: Any, prefix: str, sources: Dict[str, str]) -> Dict[str, Any]:
    return {
        f"{prefix}_server_type": choice_flags(dig(item, sources["server_type"]), SERVER_TYPES),
        f"{prefix}_cpu": choice_flags(dig(item, sources["cpu"]), CPU_CORES),
        f"{prefix}_memory": choice_flags(dig(item, sources["memory"]), MEMORY_SIZES),
        f"{prefix}_storage": choice_flags(dig(item, sources["storage"]), STORAGE_SIZES),
        f"{prefix}_gpu": choice_flags(dig(item, sources["gpu"]), GPU_TYPES),
        f"{prefix}_backup_space": choice_flags(dig(item, sources["backup_space"]), BACKUP_SPACES),
    }


_CURRENT_SOURCES = {
    "server_type": "server_type", "cpu": "cpu_cores", "memory": "memory",
    "storage": "storage", "gpu": "gpu", "backup_space": "backup_space",
}
_FUTURE_SOURCES = {
    "server_type": "future_server_type", "cpu": "future_cpu_cores", "memory": "future_memory",
    "storage": "future_storage", "gpu": "future_gpu", "backup_space": "future_backup_space",
}


def _current_hardware_row(hw: Any, ctx: RuleContext) -> Dict[str, Any]:
    row = {
        "machineName": text(dig(hw, "machineName")),
        "ipAddress": localize_value(text(dig(hw, "ipAddress"))),
    }
    row.update(_hardware_flags(hw, "current", _CURRENT_SOURCES))
    row["description"] = text(first_of(dig(hw, "server_desc"), dig(hw, "description")))
    return row


def _future_hardware_row(hw: Any, ctx: RuleContext) -> Dict[str, Any]:
    row = _hardware_flags(hw, "future", _FUTURE_SOURCES)
    row["description"] = text(dig(hw, "description"))
    return row


def _hardware_table(form_key: str, build_row) -> Rule:
    rows = table_rows(build_row)

    def rule(value: Any, ctx: RuleContext) -> List[Dict[str, Any]]:
        # hardware lists live at a fixed place in the form, whatever the mapping says
        if not isinstance(value, list) or not value:
            value = ctx.resolve(f"formData.{form_key}")
        return rows(value, ctx)
    rule.is_table = True  # type: ignore[attr-defined]
    return rule

# ------------------------- Sections 8-11: support, documents, quality -------------------------

SUPPORT_CHOICES = {
    "support_method": options_of("contractor", "organization", "both", "none"),
    "support_quality": options_of("good", "medium", "weak"),
    "intellectual_property": options_of("organization", "other_organization", "developer"),
    "user_satisfaction": options_of("low", "medium", "high", "very_high"),
}

DOCUMENT_FIELDS = (
    "requirements_docs", "analysis_docs", "architecture_docs", "implementation_docs",
    "test_docs", "user_manual", "operation_manual", "source_code", "security_docs",
    "risk_assessment",
)
DOCUMENT_STATUS = options_of("not_exists", "exists_outdated", "exists_updated")

QUALITY_FIELDS = (
    "authentication", "access_control", "activity_logging", "data_encryption",
    "standard_protocols", "data_format", "data_import", "data_export", "data_recovery",
    "error_prevention", "error_free", "requirement_coverage", "change_time",
    "ui_consistency", "ui_attractiveness", "terminology", "ui_customization",
    "workflow_match", "operation_speed", "resource_usage", "user_impact", "scalability",
)
QUALITY_FREQUENCY = options_of("never", "often", "sometimes", "rarely")

YES_NO_FIELDS = (
    "ai_usage", "blockchain", "pki", "directDbAccess", "recovery_mechanism",
    "replacementPlan", "reports_status", "local_backup_by_admin", "systemInteraction",
)
YES_NO = options_of("yes", "no")


def _build_rules() -> Dict[str, Rule]:
    rules: Dict[str, Rule] = dict(TITLE_RULES)
    rules.update({
        "system_title": passthrough,
        "system_title_1": passthrough,
        "systemUrls": free_list(_url_of),
        "system_type": single_choice({
            "specialized": "Specialized",
            "non-specialized": "non-specialized",
            "out-of-scope": "out-of-scope",
        }),
        "system_user": _system_users,
        "system_owner": table_rows(_owner_row),
        "filler_name": _filler_name,

        "systemMission": passthrough,
        "contractorInfo": passthrough,
        "mainFunctions": _main_functions,
        "supported_services": free_list(_service_title),
        "unsupported_services": free_list(_service_title),
        "legals_table": table_rows(
            _legal_row,
            sentinel={"legal_material": SPACE, "legal_description": SPACE},
            wrap_scalar=True,
        ),
        "acquisition_method": single_choice(options_of(
            "internal_development", "package_purchase", "outsourced_development",
            "hybrid_purchase", "other",
        )),
        "current_status": multi_select((
            "work_referral", "analysis", "design", "implementation", "deployment",
            "operational", "maintenance", "future_development", "retired",
        )),
        "system_start_date": lambda value, ctx: to_solar_hijri(value),
        "subsystem": single_choice(options_of("is_subsystem", "has_subsystems", "no"), wrap=False),
        "duplicate_systems": table_rows(
            _duplicate_row,
            sentinel={"duplicate_system": SPACE, "duplicate_functions": SPACE, "duplicateSystems_reason": SPACE},
            wrap_scalar=True,
        ),

        "data_table": table_rows(_data_row),
        "unsupportedData_table": table_rows(_unsupported_data_row),

        "systemInteraction_table": table_rows(_interaction_row, sentinel=_INTERACTION_SENTINEL),
        "desiredSystemRelations_table": table_rows(
            _desired_relation_row,
            sentinel={"desired_systemName": SPACE, "desired_exchangeData": SPACE},
        ),
        "systemRelationIssues_table": table_rows(
            lambda item, ctx: item,
            sentinel={"system": SPACE, "issue": SPACE, "solution": SPACE},
        ),

        "unauthorizedUsers_table": table_rows(_unauthorized_user_row),

        "architecture": single_choice(options_of(
            "service_oriented", "serverless", "single_tier", "multi_tier", "microservices", "other",
        )),
        "third_party_tools": _third_party_tools,
        "db_constraints": single_choice(options_of("good", "medium", "weak")),
        "load_balancing": single_choice(options_of("application_level", "database_level", "both", "none")),
        "pki_implementation": single_choice(options_of("on_premises", "cloud_based", "hybrid")),
        "pki_usage": multi_select(("encryption", "digital_signing", "authentication")),
        "centralization": _centralization,
        "db_dev_limits": _dev_limits("database_development"),
        "app_dev_limits": _dev_limits("application_development"),
        "service_dev_limits": _dev_limits("service_development"),
        "development_challenges": multi_select(DEVELOPMENT_CHALLENGES),

        "current_hardware": _hardware_table("current_hardware", _current_hardware_row),
        "future_hardware": _hardware_table("future_hardware", _future_hardware_row),
    })

    for name, options in TECHNOLOGY_OPTIONS.items():
        rules[name] = multi_select(options, strict=True)
    for name, options in SUPPORT_CHOICES.items():
        rules[name] = single_choice(options)
    for name in DOCUMENT_FIELDS:
        rules[name] = single_choice(DOCUMENT_STATUS)
    for name in QUALITY_FIELDS:
        rules[name] = single_choice(QUALITY_FREQUENCY)
    for name in YES_NO_FIELDS:
        rules[name] = single_choice(YES_NO)
    return rules


RULEBOOK = Rulebook(
    name="system",
    description="Information system survey (identification, data, interactions, technology, hardware)",
    rules=_build_rules(),
)
