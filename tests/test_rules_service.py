"""Tests for the public-service rulebook."""

import pytest

from surveydoc.rules.service import RULEBOOK


def _rule(name):
    return RULEBOOK.get(name)


class TestServiceChoices:
    """Prefixed choice flags."""

    def test_service_level_default(self, rule_ctx):
        """An unanswered service level counts as national."""
        flags = _rule("service_level")(None, rule_ctx())
        assert flags == {
            "service_level_national": True,
            "service_level_regional": False,
            "service_level_provincial": False,
            "service_level_urban": False,
            "service_level_rural": False,
        }

    @pytest.mark.parametrize("answer", ["urban", "rural"])
    def test_service_level_urban_and_rural(self, rule_ctx, answer):
        """Urban and rural answers set their own flags."""
        flags = _rule("service_level")(answer, rule_ctx())
        assert flags[f"service_level_{answer}"] is True
        assert flags["service_level_national"] is False

    def test_service_initiation_default(self, rule_ctx):
        """An unanswered initiation counts as user request."""
        assert _rule("service_initiation")("", rule_ctx())["service_initiation_user_request"] is True

    def test_service_type(self, rule_ctx):
        """Service types are bare multi-select flags."""
        assert _rule("service_type")({"C2G": True, "G2G": True}, rule_ctx()) == {
            "service_type_C2G": True,
            "service_type_B2G": False,
            "service_type_G2G": True,
        }

    def test_issue_fields(self, rule_ctx):
        """Issue fields have has_issues and no_issues flags."""
        assert _rule("database_issues")("has_issues", rule_ctx()) == {
            "database_issues_has_issues": True,
            "database_issues_no_issues": False,
        }

    def test_satisfaction_level(self, rule_ctx):
        """Satisfaction labels map to their flag."""
        flags = _rule("service_satisfaction_level")("Good", rule_ctx())
        assert flags["service_satisfaction_level_good"] is True
        assert sum(flags.values()) == 1

    def test_delivery_platform(self, rule_ctx):
        """Platforms are prefixed multi-select flags."""
        flags = _rule("service_delivery_platform")(["apn_network"], rule_ctx())
        assert flags["service_delivery_platform_apn_network"] is True
        assert len(flags) == 7


class TestServiceTables:
    """Row-shaped service answers."""

    def test_contact_rows_localize_phone(self, rule_ctx):
        """Contact phones use Persian digits."""
        value = [{"name": "Reza", "phone": "021-5555"}]
        assert _rule("service_owners")(value, rule_ctx()) == [{"name": "Reza", "phone": "۰۲۱-۵۵۵۵"}]

    def test_regions(self, rule_ctx):
        """Regions list region and subregion names."""
        value = [{"region": [{"name": "North"}], "subregion": [{"name": "A"}, {"name": "B"}]}]
        assert _rule("regions")(value, rule_ctx()) == [{"region": ["North"], "subregion": ["A", "B"]}]

    def test_regions_sentinel(self, rule_ctx):
        """No regions gives one row of single-space lists."""
        assert _rule("regions")([], rule_ctx()) == [{"region": [" "], "subregion": [" "]}]

    def test_human_roles(self, rule_ctx):
        """Role rows carry responsibility flags."""
        value = [{"role": "Clerk", "responsibilities": ["service_provider"]}]
        row = _rule("human_roles")(value, rule_ctx())[0]
        assert row["role"] == "Clerk"
        assert row["responsibilities"] == {
            "responsibilities_service_provider": True,
            "responsibilities_service_approver": False,
            "responsibilities_service_supervisor": False,
        }

    def test_service_data(self, rule_ctx):
        """Service data rows flatten linked titles."""
        value = [{
            "exchangedData": {"title": "Certificate"},
            "serviceParameters": [{"name": "id"}],
            "instanceValues": [{"typeTitle": "PDF"}],
        }]
        assert _rule("service_data")(value, rule_ctx()) == [
            {"exchanged_data": "Certificate", "service_parameters": ["id"], "instance_values": ["PDF"]},
        ]

    def test_related_processes(self, rule_ctx):
        """Related processes list linked process titles."""
        value = [{"formData": {"title": "Hiring"}}, {"formData": {}}]
        assert _rule("related_processes")(value, rule_ctx()) == ["Hiring"]


class TestServiceObjects:
    """Composite service answers."""

    @pytest.mark.parametrize("answer, key", [
        ("Some parts are integrated", "data_integration_level_some"),
        ("Integration is desired for this service.", "data_integration_level_desired"),
        ("The current exchange is insufficient.", "data_integration_level_service"),
        ("Data is exchanged through a mechanism.", "data_integration_level_supported"),
    ])
    def test_integration_level(self, rule_ctx, answer, key):
        """Integration level matches by prefix or suffix."""
        flags = _rule("data_integration_level")(answer, rule_ctx())
        assert [k for k, v in flags.items() if v] == [key]

    def test_integration_level_first_match_wins(self, rule_ctx):
        """Only the first matching level is set."""
        flags = _rule("data_integration_level")("Some data reaches this service.", rule_ctx())
        assert [k for k, v in flags.items() if v] == ["data_integration_level_some"]

    def test_hr_assessment(self, rule_ctx):
        """HR assessment holds two yes/no lists."""
        value = {"isStaffSufficient": "no", "areSkillsAvailable": "yes"}
        assert _rule("hr_assessment")(value, rule_ctx()) == {
            "is_staff_sufficient": [{"is_staff_sufficient_yes": False, "is_staff_sufficient_no": True}],
            "are_skills_available": [{"are_skills_available_yes": True, "are_skills_available_no": False}],
        }

    def test_electronic_service_status(self, rule_ctx):
        """Each phase is encoded separately."""
        value = {"informationPhase": "electronic", "deliveryPhase": "non_electronic"}
        status = _rule("electronic_service_status")(value, rule_ctx())
        assert status["information_phase"] == [
            {"information_phase_electronic": True, "information_phase_non_electronic": False},
        ]
        assert not any(status["production_phase"][0].values())
        assert status["delivery_phase"][0]["delivery_phase_non_electronic"] is True

    def test_suggestions(self, rule_ctx):
        """Suggestions are renamed and blank-filled."""
        result = _rule("suggestions")({"serviceMerger": "Merge A and B"}, rule_ctx())
        assert result["service_merger"] == "Merge A and B"
        assert result["other_suggestions"] == " "
        assert len(result) == 5
