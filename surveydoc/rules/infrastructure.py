"""
Rules for the network and infrastructure questionnaire.

Answers in this form are mostly full sentences picked from a list, so the
choice rules classify by prefix (``"Yes - Backup ..."`` -> ``yes``) rather
than by equality.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .base import (
    STARTS_WITH,
    TITLE_RULES,
    YES_PARTIALLY_NO,
    Rule,
    RuleContext,
    choice_flags,
    classifier,
    dig,
    multi_select,
    passthrough,
    selected_flags,
    table_rows,
    text,
    text_or_space,
    yes_partially_no,
)
from .registry import Rulebook

# ------------------------- Interviewees and data centres -------------------------

def _interviewee_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {"fullname": text(dig(item, "fullname")), "phone": text(dig(item, "phone"))}


def _completer_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    return {"name": text(dig(item, "name")), "phone": text(dig(item, "phone"))}


SITE_TYPES = {"data_center": "Data Center", "server_room": "Server Room"}
SITE_OWNERS = {"organization": "Organization", "other_owner": "Other - specify:"}
SITE_STATUSES = {
    "supplying": "Supplying/Installing",
    "operational": "Operational",
    "replaced": "Being Replaced (Removed)",
    "other_status": "Other - specify:",
}

# output key -> answer key, each a yes/partially/no question
SITE_CHECKS = {
    "power_outage_resilience": "power_outage_resilience",
    "temperature_monitoring": "temperature_monitoring",
    "fire_suppression": "fire_suppression",
    "access_control_data": "access_control",
    "locked_cabinets": "locked_cabinets",
    "network_redundancy": "network_redundancy",
    "backup_and_recovery": "backup_and_recovery",
    "change_management": "change_management",
    "disaster_recovery_plan": "disaster_recovery_plan",
    "catalog": "catalog",
    "service_level_agreement": "service-level-agreement",
}


def _data_center_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    owner = dig(item, "owner")
    status = dig(item, "status")
    row: Dict[str, Any] = {
        "type": choice_flags(dig(item, "type"), SITE_TYPES),
        "owner": {
            **choice_flags(owner, SITE_OWNERS),
            "other_owner_text": text(dig(owner, "otherText")),
        },
        "physical_location": text(dig(item, "physical-location")),
        "status": {
            **choice_flags(status, SITE_STATUSES),
            "other_status_text": text(dig(status, "otherText")),
        },
    }
    for out, src in SITE_CHECKS.items():
        row[out] = choice_flags(dig(item, src), YES_PARTIALLY_NO, STARTS_WITH)
    row["services"] = dig(item, "services", default=[])
    return row

# ------------------------- Tool inventories -------------------------

OPEN_SOURCE = {"open_no": "No", "open_yes": "Yes"}
DOCUMENTATION = {"documentation_not": "Not suitable", "documentation_suitable": "Suitable"}

# placeholder -> (row key prefix, open-source key)
TOOL_TABLES = {
    "monitoring_and_control": ("monitoring", "monitoring_open_source"),
    "backup": ("backup", None),
    "remote_connection": ("remote_connection", None),
    "server_infrastructure_monitoring": ("server_infrastructure_monitoring", None),
    "configuration_change_management": ("configuration_change_management", None),
    "ipam_documentation": ("ipam_documentation", None),
    "ticketing_helpdesk": ("ticketing_helpdesk", None),
    "security_ids_ips_siem": ("security_ids_ips_siem", None),
    "traffic_analysis_troubleshooting": ("traffic_analysis_troubleshooting", None),
    "automation_orchestration": ("automation_orchestration", None),
    "reporting_dashboard": ("reporting_dashboard", None),
    "access_identity_management": ("access_identity_management", None),
}


def _unanswered_as(raw: Any, options: Mapping[str, str], missing_key: str) -> Dict[str, bool]:
    """Choice flags where a question left out entirely counts as ``missing_key``."""
    flags = choice_flags(raw, options)
    if raw is None:
        flags[missing_key] = True
    return flags


def _tool_table(prefix: str, open_source_key: Optional[str]) -> Rule:
    open_key = open_source_key or f"{prefix}_open-source"

    def build_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
        return {
            f"{prefix}_name": text(dig(item, "name")),
            open_key: _unanswered_as(dig(item, "open-source"), OPEN_SOURCE, "open_no"),
            f"{prefix}_policies": text(dig(item, "policies")),
            f"{prefix}_documentation": _unanswered_as(
                dig(item, "documentation"), DOCUMENTATION, "documentation_not",
            ),
        }

    sentinel = {
        f"{prefix}_name": " ",
        open_key: choice_flags(None, OPEN_SOURCE),
        f"{prefix}_policies": " ",
        f"{prefix}_documentation": choice_flags(None, DOCUMENTATION),
    }
    return table_rows(build_row, sentinel=sentinel)


ACCESS_METRICS = {
    "access_bandwidth": "Bandwidth",
    "access_latency": "Latency",
    "access_availability": "Availability percentage",
    "access_packet": "Packet loss",
    "access_port": "Port/Interface errors",
    "access_device": "Device temperature",
    "access_cpu": "CPU and network memory usage",
    "access_unusual": "Unusual or suspicious traffic",
    "access_link": "Link and connection status",
    "access_number": "Number of concurrent users",
    "access_traffic": "Traffic by protocol or application",
    "access_security": "Security and access logs",
    "access_health": "Health of key services (DNS, DHCP, AD, etc.)",
}

# ------------------------- Public key infrastructure -------------------------

PKI_CLASSIFIERS: Dict[str, Dict[str, str]] = {
    "ca_count": {"ca_0": "0", "ca_1": "1", "ca_2": "2", "ca_more": "More"},
    "ra_count": {"ra_none": "None", "ra_1": "1", "ra_2": "2", "ra_more": "More"},
    "ca_os": {"ca_os_windows": "Windows", "ca_os_linux": "Linux", "ca_os_mixed": "Mixed"},
    "va_count": {"va_none": "None", "va_1": "1", "va_2": "2", "va_more": "More"},
    "key_length": {
        "key_length_1024": "1024",
        "key_length_2048": "2048",
        "key_length_3072": "3072",
        "key_length_other": "Other",
    },
    "ca_redundancy": {
        "ca_redundancy_no": "No",
        "ca_redundancy_backup": "Yes - Backup",
        "ca_redundancy_cluster": "Yes - Active",
    },
    "key_recovery": {
        "key_recovery_none": "None",
        "key_recovery_hsm": "Yes - Keys are archived",
        "key_recovery_backup": "Yes - Keys are backed",
    },
    "certificate_validity": {
        "certificate_validity_less": "Less",
        "certificate_validity_1_2": "1-2",
        "certificate_validity_more": "More",
        "certificate_validity_variable": "Variable",
    },
    "pki_standards": {
        "pki_standards_none": "No",
        "pki_standards_microsoft": "Microsoft",
        "pki_standards_nist": "NIST",
        "pki_standards_iso": "ISO/IEC",
        "pki_standards_etsi": "ETSI",
        "pki_standards_other": "Other",
    },
    "wan_pki": {"wan_pki_no": "No", "wan_pki_yes": "Yes"},
    "key_generation": {
        "key_generation_no": "No",
        "key_generation_yes": "Yes",
        "key_generation_hybrid": "Hybrid",
    },
    "pki_support_need": {"pki_support_need_no": "No", "pki_support_need_yes": "Yes"},
    "support_quality": {
        "support_quality_weak": "Weak",
        "support_quality_average": "Average",
        "support_quality_good": "Good",
    },
}

PKI_SECURITY_MECHANISMS = {
    "pki_security_digital_signature":
        "Support for digital signature mechanism - e.g., for electronic documents or transactions.",
    "pki_security_timestamping":
        "Support for timestamping mechanism - to record the time of digital signatures.",
    "pki_security_ssh":
        "Support for SSH strong authentication using certificates instead of passwords.",
    "pki_security_2fa":
        "Certificate-based two-factor authentication (2FA) - e.g., Smart Card or certificate-based MFA.",
    "pki_security_ssl":
        "Use of SSL/TLS certificates for websites and internal services - for encryption and server authentication.",
    "pki_security_ipsec": "Use of IPSec with certificates - for secure WAN/LAN tunnels.",
    "pki_security_secure_email":
        "Use of secure email certificates (S/MIME) - for email encryption and signing.",
    "pki_security_code_signing":
        "Code signing - to ensure integrity and authenticity of executable code.",
    "pki_security_encrypted_data":
        "Certificate-based encrypted data exchange - e.g., using XML Signature or PKCS#7.",
    "pki_security_other": "Other - please specify:",
}

PUBLIC_KEY_USES = {
    "public_key_digital_signature": "Support for digital signature mechanism.",
    "public_key_timestamping": "Support for timestamping mechanism.",
    "public_key_ssh": "Support for strong SSH authentication protocol.",
    "public_key_2fa": "Capability for two-factor authentication based on PKI.",
    "public_key_ssl": "Use of SSL/TLS certificates.",
    "public_key_ipsec": "Use of Internet Protocol Security (IPSec).",
    "public_key_secure_email": "Use of secure email certificates.",
    "public_key_code_signing": "Code signing to ensure code integrity and authenticity.",
    "public_key_encrypted_data": "Encrypted data exchange based on PKI using electronic certificates.",
}


def _pki_row(item: Any, ctx: RuleContext) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        name: choice_flags(dig(item, name), table, STARTS_WITH)
        for name, table in PKI_CLASSIFIERS.items()
    }
    row["key_management_policies"] = text(dig(item, "key_management_policies"))
    row["pki_systems"] = text(dig(item, "pki_systems"))
    row["pki_security_mechanisms"] = selected_flags(
        dig(item, "pki_security_mechanisms"), PKI_SECURITY_MECHANISMS, strict=True,
    )
    row["public_key"] = selected_flags(dig(item, "public-key"), PUBLIC_KEY_USES, strict=True)
    return row

# ------------------------- Network team -------------------------

NETWORK_TEAM_CLASSIFIERS: Dict[str, Dict[str, str]] = {
    "network_staff_count": {
        "network_staff_0": "0",
        "network_staff_1": "1",
        "network_staff_2_3": "2",
        "network_staff_4_6": "4",
        "network_staff_more": "More",
    },
    "network_team_certification": {
        "network_team_certification_no": "No",
        "network_team_certification_basic": "Basic",
        "network_team_certification_advanced": "Advanced",
        "network_team_certification_specialized": "Specialized",
        "network_team_certification_combination": "Combination",
    },
    "network_task_access_separation": {
        "network_task_access_separation_one": "All",
        "network_task_access_separation_centralized": "Tasks are divided,",
        "network_task_access_separation_rolebased": "Tasks are divided –",
        "network_task_access_separation_fullrbac": "Full",
        "network_task_access_separation_review": "RBAC",
    },
    "network_emergency_availability": {
        "network_emergency_availability_none": "No",
        "network_emergency_availability_one": "Emergency",
        "network_emergency_availability_oncall": "Defined",
        "network_emergency_availability_team": "On-call",
        "network_emergency_availability_247": "24/7",
    },
    "network_team_training": {
        "network_team_training_none": "No",
        "network_team_training_reactive": "Only",
        "network_team_training_yearly": "Once",
        "network_team_training_6months": "Every",
        "network_team_training_specialized": "Quarterly",
    },
    "network_backup_roles": {
        "network_backup_roles_none": "No",
        "network_backup_roles_few": "Only",
        "network_backup_roles_technical": "For",
        "network_backup_roles_assigned": "Backup assigned",
        "network_backup_roles_full": "Backup +",
    },
    "network_kpi_evaluation": {
        "network_kpi_evaluation_none": "No",
        "network_kpi_evaluation_qualitative": "Qualitative",
        "network_kpi_evaluation_general": "General",
        "network_kpi_evaluation_quantitative": "Quantitative",
        "network_kpi_evaluation_full": "KPIs",
    },
}

# ------------------------- Security and authentication -------------------------

YES_PARTIALLY_NO_FIELDS = (
    # network
    "network_diagrams", "structured_cabling", "vlan_implementation", "network_inventory", "redundancy",
    # internet
    "internet_rbac", "internet_scheduling", "internet_auth", "internet_monitoring",
    "internet_reports", "internet_alerts",
    # security
    "access_control_security", "network_access_control", "network_segmentation", "firewalls",
    "ids_ips", "network_traffic_analysis", "patch_management", "hardware_security",
    "least_privilege", "data_encryption", "sso_support", "two_factor_authentication",
    "pki_usage", "isms_implementation", "security_benchmark_usage",
    "network_policy_documentation", "drp", "bcp", "security_scans",
)

AUTH_MODES = {"centralized_auth": "Centralized", "seperated_auth": "Separate", "combined_auth": "Combined"}

AUTHENTICATION_METHODS = {
    "password": "Username and password only, without any additional security layer.",
    "smartcard": "Smart card (e.g., HID, Smart Card) used as part of MFA or as password replacement.",
    "biometric": "Fingerprint or biometric authentication, either standalone or combined with other methods.",
    "authentication_methods_current_other": "Other",
}

AUTHENTICATION_TYPES = {
    "authentication_types_supported_local": "Local authentication, e.g., local users on servers or devices.",
    "authentication_types_supported_remote": "Remote authentication, e.g., VPN, RDP, SSH via RADIUS/LDAP.",
    "authentication_types_supported_cascading":
        "Cascading authentication, e.g., AD authentication propagated to other services.",
}

AUTHENTICATION_CAPACITY = {
    "authentication_capacity_unknown": "Unknown",
    "authentication_capacity_lt100": "Less",
    "authentication_capacity_100_1000": "100",
    "authentication_capacity_gt1000": "More",
}

# ------------------------- Documentation -------------------------

# placeholder -> flag key prefix
DOCUMENTATION_FIELDS = {
    "physical_logical_map_documentation": "physical_logical_map",
    "physical_network_map": "physical_network_map",
    "logical_network_map": "logical_network_map",
    "ip_addressing_documentation": "ip_addressing_documentation",
    "equipment_configuration_docs": "equipment_configuration_docs",
    "change_documentation": "change_documentation",
    "security_documentation": "security_documentation",
    "admin_and_access_docs": "admin_and_access_docs",
    "backup_and_recovery_docs": "backup_and_recovery_docs",
    "server_technical_docs": "server_technical_docs",
    "monitoring_and_reporting_docs": "monitoring_and_reporting_docs",
    "sop_documentation": "sop_documentation",
    "compliance_and_audit_docs_national": "compliance_and_audit_docs_national",
    "compliance_and_audit_docs_international": "compliance_and_audit_docs_international",
    "internal_wiki": "internal_wiki",
    "physical_equipment": "physical_equipment",
}


def _documentation_levels(prefix: str) -> Dict[str, str]:
    return {
        f"{prefix}_none": "Not",
        f"{prefix}_outdated": "Available but",
        f"{prefix}_available": "Available and",
    }


def _build_rules() -> Dict[str, Rule]:
    rules: Dict[str, Rule] = dict(TITLE_RULES)
    rules.update({
        "interviewees": table_rows(_interviewee_row),
        "form_completed_by": table_rows(_completer_row),
        "data_center": table_rows(_data_center_row),

        "internet": passthrough,
        "local": passthrough,
        "custom": passthrough,
        "users": passthrough,
        "auth": classifier(AUTH_MODES),
        "access": multi_select(ACCESS_METRICS, wrap=False, strict=True),

        "public_key_infrastructure": table_rows(_pki_row),

        "authentication_methods_current": multi_select(AUTHENTICATION_METHODS, wrap=False, strict=True),
        "authentication_types_supported": multi_select(AUTHENTICATION_TYPES, wrap=False, strict=True),
        "authentication_protocols": text_or_space,
        "authentication_capacity": classifier(AUTHENTICATION_CAPACITY),
        "auth_policies_standards": text_or_space,
        "user_role_management_tools": text_or_space,

        "descs": text_or_space,
        "problems_suggestions": text_or_space,
    })
    for name, (prefix, open_key) in TOOL_TABLES.items():
        rules[name] = _tool_table(prefix, open_key)
    for name, table in NETWORK_TEAM_CLASSIFIERS.items():
        rules[name] = classifier(table)
    for name in YES_PARTIALLY_NO_FIELDS:
        rules[name] = yes_partially_no
    for name, prefix in DOCUMENTATION_FIELDS.items():
        rules[name] = classifier(_documentation_levels(prefix))
    return rules


RULEBOOK = Rulebook(
    name="infrastructure",
    description="Network and infrastructure survey (data centres, tools, PKI, security, documentation)",
    rules=_build_rules(),
)
