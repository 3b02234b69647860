"""Tests for the network and infrastructure rulebook."""

from surveydoc.rules.infrastructure import (
    ACCESS_METRICS,
    PUBLIC_KEY_USES,
    RULEBOOK,
    TOOL_TABLES,
)


def _rule(name):
    return RULEBOOK.get(name)


class TestDataCenter:
    """Tests for data centre rows."""

    def test_full_row(self, rule_ctx):
        """Answers are classified and other-text fields carried."""
        value = [{
            "type": "Server Room",
            "owner": {"option": "Other - specify:", "otherText": "Ministry"},
            "status": "Operational",
            "physical-location": "Basement",
            "fire_suppression": "Yes - gas based",
            "access_control": "Partially",
            "service-level-agreement": "No",
            "services": ["mail"],
        }]
        row = _rule("data_center")(value, rule_ctx())[0]
        assert row["type"] == {"data_center": False, "server_room": True}
        assert row["owner"] == {"organization": False, "other_owner": True, "other_owner_text": "Ministry"}
        assert row["status"]["operational"] is True
        assert row["status"]["other_status_text"] == " "
        assert row["physical_location"] == "Basement"
        assert row["fire_suppression"] == {"no": False, "partially": False, "yes": True}
        assert row["access_control_data"]["partially"] is True
        assert row["service_level_agreement"]["no"] is True
        assert row["services"] == ["mail"]

    def test_sentinel(self, rule_ctx):
        """No data centres gives one row with flags off and no services."""
        row = _rule("data_center")([], rule_ctx())[0]
        assert row["physical_location"] == " "
        assert row["services"] == []
        assert not any(row["catalog"].values())


class TestToolTables:
    """Tests for tool inventory tables."""

    def test_all_tool_tables_registered(self):
        """Every tool inventory has a rule."""
        for name in TOOL_TABLES:
            assert name in RULEBOOK

    def test_monitoring_uses_its_own_open_source_key(self, rule_ctx):
        """Monitoring rows store open-source flags under monitoring_open_source."""
        value = [{"name": "Zabbix", "open-source": "Yes", "documentation": "Suitable", "policies": "p"}]
        row = _rule("monitoring_and_control")(value, rule_ctx())[0]
        assert row == {
            "monitoring_name": "Zabbix",
            "monitoring_open_source": {"open_no": False, "open_yes": True},
            "monitoring_policies": "p",
            "monitoring_documentation": {"documentation_not": False, "documentation_suitable": True},
        }

    def test_unanswered_tool_fields(self, rule_ctx):
        """Missing open-source and documentation answers count as no and not suitable."""
        row = _rule("backup")([{"name": "Veeam"}], rule_ctx())[0]
        assert row["backup_open-source"] == {"open_no": True, "open_yes": False}
        assert row["backup_documentation"] == {"documentation_not": True, "documentation_suitable": False}
        assert row["backup_policies"] == " "

    def test_sentinel_all_false(self, rule_ctx):
        """An empty tool table gives one blank row with every flag off."""
        row = _rule("ticketing_helpdesk")(None, rule_ctx())[0]
        assert row["ticketing_helpdesk_name"] == " "
        assert not any(row["ticketing_helpdesk_open-source"].values())
        assert not any(row["ticketing_helpdesk_documentation"].values())


class TestPki:
    """Tests for the PKI table."""

    def test_pki_row(self, rule_ctx):
        """Classifiers match by prefix; checklists are strict."""
        use = PUBLIC_KEY_USES["public_key_ssl"]
        value = [{
            "ca_count": "2",
            "ca_redundancy": "Yes - Backup CA in standby",
            "key_length": "2048 bits",
            "public-key": {use: True, PUBLIC_KEY_USES["public_key_ssh"]: "true"},
            "pki_systems": "EJBCA",
        }]
        row = _rule("public_key_infrastructure")(value, rule_ctx())[0]
        assert row["ca_count"]["ca_2"] is True
        assert row["ca_redundancy"] == {
            "ca_redundancy_no": False,
            "ca_redundancy_backup": True,
            "ca_redundancy_cluster": False,
        }
        assert row["key_length"]["key_length_2048"] is True
        assert row["public_key"]["public_key_ssl"] is True
        assert row["public_key"]["public_key_ssh"] is False
        assert row["pki_systems"] == "EJBCA"
        assert row["key_management_policies"] == " "
        assert not any(row["pki_security_mechanisms"].values())


class TestClassifiers:
    """Tests for prefix classifiers and checklists."""

    def test_auth_mode(self, rule_ctx):
        """Authentication mode is classified by prefix."""
        assert _rule("auth")("Combined - AD and local", rule_ctx()) == {
            "centralized_auth": False,
            "seperated_auth": False,
            "combined_auth": True,
        }

    def test_access_metrics_strict(self, rule_ctx):
        """Access metrics only count literal True."""
        flags = _rule("access")({"Bandwidth": True, "Latency": 1}, rule_ctx())
        assert flags["access_bandwidth"] is True
        assert flags["access_latency"] is False
        assert len(flags) == len(ACCESS_METRICS)

    def test_network_staff(self, rule_ctx):
        """Staff counts are matched by leading text."""
        flags = _rule("network_staff_count")("2-3 people", rule_ctx())
        assert [k for k, v in flags.items() if v] == ["network_staff_2_3"]

    def test_yes_partially_no_fields(self, rule_ctx):
        """Security questions are yes/partially/no."""
        assert _rule("firewalls")("Yes, at the perimeter", rule_ctx()) == {"no": False, "partially": False, "yes": True}

    def test_documentation_levels(self, rule_ctx):
        """Documentation answers are classified by their opening words."""
        flags = _rule("internal_wiki")("Available but outdated", rule_ctx())
        assert flags == {"internal_wiki_none": False, "internal_wiki_outdated": True, "internal_wiki_available": False}

    def test_documentation_prefix_differs_from_placeholder(self, rule_ctx):
        """Some documentation fields use a shorter flag prefix."""
        flags = _rule("physical_logical_map_documentation")("Not available", rule_ctx())
        assert flags["physical_logical_map_none"] is True

    def test_text_fields(self, rule_ctx):
        """Free-text fields default to a space."""
        assert _rule("descs")("", rule_ctx()) == " "
        assert _rule("problems_suggestions")("Slow links", rule_ctx()) == "Slow links"
