"""Tests for the business-process rulebook."""

from surveydoc.rules.process import MATURITY_LEVELS, RULEBOOK


class TestProcessRules:
    """Tests for process placeholder rules."""

    def test_owner_and_unit(self, rule_ctx):
        """Owner and unit read the linked name."""
        assert RULEBOOK.get("owner")({"name": "Finance"}, rule_ctx()) == "Finance"
        assert RULEBOOK.get("unit")(None, rule_ctx()) == " "

    def test_inputs_and_outputs_columns(self, rule_ctx):
        """Inputs and outputs become lists of one column."""
        value = [{"input": "Form"}, {"input": ""}]
        assert RULEBOOK.get("process_inputs")(value, rule_ctx()) == ["Form", " "]
        assert RULEBOOK.get("process_outputs")(None, rule_ctx()) == []

    def test_steps(self, rule_ctx):
        """Step rows read the responsible person's name."""
        value = [{"number": 1, "description": "Check", "responsible": {"name": "Clerk"}, "time": "2h"}]
        assert RULEBOOK.get("main_steps_of_the_process")(value, rule_ctx()) == [
            {"number": 1, "description": "Check", "responsible": "Clerk", "time": "2h"},
        ]

    def test_kpi_reads_hyphenated_keys(self, rule_ctx):
        """KPI rows read hyphenated source keys."""
        value = [{"index-name": "Speed", "calculation-formula": "a/b", "target-value": "90%"}]
        assert RULEBOOK.get("key_performance_indicators")(value, rule_ctx()) == [
            {"index_name": "Speed", "calculation_formula": "a/b", "target_value": "90%"},
        ]

    def test_risk_row(self, rule_ctx):
        """Risk rows encode probability and impact as flags."""
        value = [{"risk-name": "Outage", "probability-of-occurrence": "high", "risk-impact": "low"}]
        row = RULEBOOK.get("possible_risks")(value, rule_ctx())[0]
        assert row["probability_of_occurrence"] == {
            "probability_of_occurrence_low": False,
            "probability_of_occurrence_medium": False,
            "probability_of_occurrence_high": True,
        }
        assert row["risk_impact"]["risk_impact_low"] is True
        assert row["control_measures"] == " "

    def test_risk_sentinel(self, rule_ctx):
        """No risks gives one blank row with all flags off."""
        rows = RULEBOOK.get("possible_risks")([], rule_ctx())
        assert len(rows) == 1
        assert rows[0]["risk_name"] == " "
        assert not any(rows[0]["probability_of_occurrence"].values())

    def test_related_documents(self, rule_ctx):
        """Document rows read slash keys and a yes/no attachment flag."""
        value = [{"document/form-name": "Form A", "document/form-code": "F-1", "link-or-attachment": "Yes"}]
        row = RULEBOOK.get("related_documents_and_forms")(value, rule_ctx())[0]
        assert row["document_and_form_name"] == "Form A"
        assert row["document_and_form_code"] == "F-1"
        assert row["link_or_attachment"] == {"link_or_attachment_no": False, "link_or_attachment_yes": True}

    def test_maturity_level_answered(self, rule_ctx):
        """An answered maturity level sets exactly that flag."""
        answer = MATURITY_LEVELS["process_maturity_level_monitored"]
        flags = RULEBOOK.get("process_maturity_level")(answer, rule_ctx())[0]
        assert [k for k, v in flags.items() if v] == ["process_maturity_level_monitored"]

    def test_maturity_level_unanswered_defaults(self, rule_ctx):
        """No answer counts as the first level."""
        flags = RULEBOOK.get("process_maturity_level")("", rule_ctx())[0]
        assert [k for k, v in flags.items() if v] == ["process_maturity_level_identified"]

    def test_maturity_level_unknown_answer(self, rule_ctx):
        """An unrecognised answer sets nothing."""
        flags = RULEBOOK.get("process_maturity_level")("Something else", rule_ctx())[0]
        assert not any(flags.values())
