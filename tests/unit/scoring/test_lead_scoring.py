"""
Unit tests for lead score calculation.
"""

import itertools

import pytest

from serviceagent.exceptions import ScoringConfigurationError
from serviceagent.scoring import (
    Lead,
    calculate_lead_score,
    get_default_scoring_settings,
    get_score_category,
    rescore_leads,
    score_lead,
)

LINKEDIN_RULE = {
    "id": "linkedin",
    "name": "Lead from LinkedIn",
    "field": "source",
    "operator": "equals",
    "value": "LinkedIn",
    "points": 20,
    "active": True,
}


def minimal_lead(**fields):
    data = {"id": "lead-2", "name": "Sam Lee", "email": "sam@example.com"}
    data.update(fields)
    return data


class TestCalculateLeadScore:
    """Rule pass behavior."""

    def test_single_matching_rule(self, make_settings, reference_time):
        settings = make_settings([LINKEDIN_RULE])
        result = calculate_lead_score(
            minimal_lead(source="LinkedIn"), settings, reference_time
        )

        assert result.score == 20
        assert len(result.breakdown) == 1
        entry = result.breakdown[0]
        assert entry.rule_id == "linkedin"
        assert entry.rule_name == "Lead from LinkedIn"
        assert entry.points == 20
        assert entry.applied_at == reference_time

    def test_missing_budget(self, make_settings):
        exists_rule = {"id": "b1", "field": "budget", "operator": "exists", "points": 15}
        missing_rule = {"id": "b2", "field": "budget", "operator": "not_exists", "points": -10}

        result = calculate_lead_score(minimal_lead(), make_settings([exists_rule]))
        assert result.score == 0
        assert result.breakdown == []

        result = calculate_lead_score(
            minimal_lead(), make_settings([missing_rule], min_score=-100)
        )
        assert result.score == -10
        assert [(e.rule_id, e.points) for e in result.breakdown] == [("b2", -10)]

    def test_clamped_to_max(self, make_settings):
        rules = [
            {"id": f"r{i}", "field": "company", "operator": "exists", "points": 65}
            for i in range(2)
        ]
        result = calculate_lead_score(
            minimal_lead(company="Acme"), make_settings(rules, 0, 100)
        )

        assert result.score == 100
        # Entries record the unclamped contributions
        assert sum(e.points for e in result.breakdown) == 130

    def test_clamped_to_min(self, make_settings):
        rule = {"id": "n", "field": "lastInteraction", "operator": "not_exists", "points": -10}
        result = calculate_lead_score(minimal_lead(), make_settings([rule], 0, 100))

        assert result.score == 0
        assert len(result.breakdown) == 1

    def test_clamp_applies_once_at_end(self, make_settings):
        rules = [
            {"id": "down", "field": "lastInteraction", "operator": "not_exists", "points": -30},
            {"id": "up", "field": "company", "operator": "exists", "points": 40},
        ]
        result = calculate_lead_score(
            minimal_lead(company="Acme"), make_settings(rules, 0, 100)
        )
        assert result.score == 10

    def test_inactive_rules_skipped(self, make_settings):
        rule = dict(LINKEDIN_RULE, active=False)
        result = calculate_lead_score(minimal_lead(source="LinkedIn"), make_settings([rule]))

        assert result.score == 0
        assert result.breakdown == []

    def test_is_active_alias(self, make_settings):
        rule = dict(LINKEDIN_RULE)
        del rule["active"]
        rule["isActive"] = False
        result = calculate_lead_score(minimal_lead(source="LinkedIn"), make_settings([rule]))
        assert result.score == 0

    def test_zero_point_rule_leaves_no_entry(self, make_settings):
        rule = dict(LINKEDIN_RULE, points=0)
        result = calculate_lead_score(minimal_lead(source="LinkedIn"), make_settings([rule]))
        assert result.breakdown == []

    def test_malformed_rules_contribute_nothing(self, make_settings):
        rules = [
            {"id": "bad-op", "field": "source", "operator": "startswith", "value": "Li", "points": 5},
            {"id": "bad-field", "field": "shoeSize", "operator": "not_exists", "points": 5},
            LINKEDIN_RULE,
        ]
        result = calculate_lead_score(minimal_lead(source="LinkedIn"), make_settings(rules))

        assert result.score == 20
        assert [e.rule_id for e in result.breakdown] == ["linkedin"]

    def test_breakdown_follows_rule_order(self, make_settings):
        settings = get_default_scoring_settings()
        lead = minimal_lead(
            source="LinkedIn", budget=20000, company="Acme", interactionCount=4
        )
        result = calculate_lead_score(lead, settings)

        assert [e.rule_id for e in result.breakdown] == ["1", "2", "3", "4", "5", "6"]
        assert result.score == 75

    def test_invalid_bounds_raise(self):
        with pytest.raises(ScoringConfigurationError):
            calculate_lead_score(minimal_lead(), {"rules": [], "minScore": 10, "maxScore": 0})

    def test_missing_bounds_raise(self):
        with pytest.raises(ScoringConfigurationError):
            calculate_lead_score(minimal_lead(), {"rules": []})

    def test_idempotent(self, make_settings):
        settings = get_default_scoring_settings()
        lead = minimal_lead(source="LinkedIn", budget=500)

        first = calculate_lead_score(lead, settings)
        second = calculate_lead_score(lead, settings)

        assert first.score == second.score
        assert [(e.rule_id, e.points) for e in first.breakdown] == [
            (e.rule_id, e.points) for e in second.breakdown
        ]

    def test_total_independent_of_rule_order(self, make_settings):
        rules = [
            LINKEDIN_RULE,
            {"id": "c", "field": "company", "operator": "exists", "points": 50},
            {"id": "n", "field": "lastInteraction", "operator": "not_exists", "points": -40},
            {"id": "b", "field": "budget", "operator": "greater_than", "value": 100, "points": 45},
        ]
        lead = minimal_lead(source="LinkedIn", company="Acme", budget=1000)

        scores = {
            calculate_lead_score(lead, make_settings(list(order))).score
            for order in itertools.permutations(rules)
        }
        assert scores == {75}

    def test_score_within_bounds(self, make_settings):
        rules = [
            {"id": "big", "field": "company", "operator": "exists", "points": 500},
            {"id": "neg", "field": "phone", "operator": "not_exists", "points": -900},
        ]
        for lead in (minimal_lead(), minimal_lead(company="Acme"), minimal_lead(phone="555")):
            score = calculate_lead_score(lead, make_settings(rules, -50, 50)).score
            assert -50 <= score <= 50

    def test_does_not_mutate_lead(self, make_settings):
        lead = Lead.model_validate(minimal_lead(source="LinkedIn"))
        calculate_lead_score(lead, make_settings([LINKEDIN_RULE]))
        assert lead.score == 0
        assert lead.score_breakdown == []


class TestMistypedLeadFields:
    """Attributes of the wrong type score zero instead of failing the lead."""

    def test_non_numeric_interaction_count(self, make_settings):
        rules = [
            LINKEDIN_RULE,
            {"id": "busy", "field": "interactionCount", "operator": "greater_than", "value": 3, "points": 15},
        ]
        lead = minimal_lead(source="LinkedIn", interactionCount="many")

        result = calculate_lead_score(lead, make_settings(rules))

        assert result.score == 20
        assert [e.rule_id for e in result.breakdown] == ["linkedin"]

    def test_numeric_string_is_not_coerced(self, make_settings):
        rule = {"id": "busy", "field": "interactionCount", "operator": "greater_than", "value": 3, "points": 15}
        lead = minimal_lead(interactionCount="5")

        assert calculate_lead_score(lead, make_settings([rule])).score == 0
        assert Lead.model_validate(lead).interaction_count == "5"

    def test_string_value_matches_string_rule(self, make_settings):
        rule = {"id": "five", "field": "interactionCount", "operator": "equals", "value": "5", "points": 5}

        assert calculate_lead_score(minimal_lead(interactionCount="5"), make_settings([rule])).score == 5
        assert calculate_lead_score(minimal_lead(interactionCount=5), make_settings([rule])).score == 0

    def test_tags_given_as_string(self, make_settings):
        rules = [
            LINKEDIN_RULE,
            {"id": "tag", "field": "tags", "operator": "contains", "value": "Interested", "points": 10},
        ]
        lead = minimal_lead(source="LinkedIn", tags="Interested")

        result = calculate_lead_score(lead, make_settings(rules))

        # Text fields use substring matching
        assert result.score == 30

    def test_tags_given_as_number(self, make_settings):
        rule = {"id": "tag", "field": "tags", "operator": "contains", "value": "Interested", "points": 10}

        assert calculate_lead_score(minimal_lead(tags=42), make_settings([rule])).score == 0

    def test_unknown_status(self, make_settings):
        rules = [
            {"id": "new", "field": "status", "operator": "equals", "value": "New", "points": 5},
            {"id": "any", "field": "status", "operator": "exists", "points": 1},
        ]

        result = calculate_lead_score(minimal_lead(status=7), make_settings(rules))
        assert [e.rule_id for e in result.breakdown] == ["any"]

        result = calculate_lead_score(minimal_lead(status="Archived"), make_settings(rules))
        assert [e.rule_id for e in result.breakdown] == ["any"]

    def test_ai_pass_ignores_mistyped_fields(self, make_settings):
        settings = make_settings([LINKEDIN_RULE], ai_assist=True)
        lead = minimal_lead(source="LinkedIn", tags=5, interactionCount="9", company=123)

        scored = score_lead(lead, settings)

        assert scored.score == 20
        assert scored.ai_adjusted is False


class TestScoreLead:
    """Scoring a lead end to end, rules then AI."""

    def test_rules_only(self, make_settings, reference_time):
        scored = score_lead(
            minimal_lead(source="LinkedIn"), make_settings([LINKEDIN_RULE]), reference_time
        )

        assert scored.score == 20
        assert scored.ai_adjusted is False
        assert len(scored.score_breakdown) == 1

    def test_with_ai_assist(self, make_settings, linkedin_lead, reference_time):
        settings = make_settings([LINKEDIN_RULE], ai_assist=True)
        scored = score_lead(linkedin_lead, settings, reference_time)

        assert scored.ai_adjusted is True
        assert scored.score == 20 + 10 + 15 + 5
        assert scored.score_breakdown[0].rule_id == "linkedin"
        assert [e.rule_id for e in scored.score_breakdown[1:]] == [
            "ai:demo-interest",
            "ai:high-engagement",
            "ai:established-company",
        ]

    def test_ai_assist_without_matches(self, make_settings):
        settings = make_settings([LINKEDIN_RULE], ai_assist=True)
        scored = score_lead(minimal_lead(source="LinkedIn"), settings)

        assert scored.ai_adjusted is False
        assert scored.score == 20

    def test_previous_breakdown_replaced(self, make_settings, linkedin_lead):
        settings = make_settings([LINKEDIN_RULE])
        once = score_lead(linkedin_lead, settings)
        twice = score_lead(once, settings)

        assert twice.score == once.score
        assert len(twice.score_breakdown) == 1

    def test_rescore_leads_clears_ai_flag(self, make_settings, linkedin_lead):
        with_ai = score_lead(linkedin_lead, make_settings([LINKEDIN_RULE], ai_assist=True))
        assert with_ai.ai_adjusted

        rescored = rescore_leads([with_ai], make_settings([LINKEDIN_RULE]))
        assert len(rescored) == 1
        assert rescored[0].ai_adjusted is False
        assert rescored[0].score == 20


class TestScoreCategory:
    @pytest.mark.parametrize(
        "score,category",
        [(100, "Hot"), (80, "Hot"), (79, "Warm"), (50, "Warm"), (49, "Cool"), (30, "Cool"), (29, "Cold"), (0, "Cold")],
    )
    def test_categories(self, score, category):
        assert get_score_category(score) == category


class TestDefaultSettings:
    def test_default_rules(self):
        settings = get_default_scoring_settings()

        assert settings.min_score == 0
        assert settings.max_score == 100
        assert settings.ai_assist is True
        assert [r.points for r in settings.rules] == [20, 15, 25, 10, 15, -10]

    def test_returns_fresh_copy(self):
        first = get_default_scoring_settings()
        first.rules.clear()
        assert len(get_default_scoring_settings().rules) == 6
