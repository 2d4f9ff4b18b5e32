"""Tests for UX rule evaluation."""

from __future__ import annotations

import pytest


def _rule(**overrides):
    from medspec.core.ir import UXRule

    data = {"id": "r1", "family": "Edit", "event": "click", "action": "modal"}
    data.update(overrides)
    return UXRule.model_validate(data)


# =============================================================================
# Guard matching
# =============================================================================


class TestMatchGuard:
    def test_exclusive_greater_than(self):
        from medspec.core.evaluator import match_guard

        assert match_guard({"formFields": ">5"}, {"formFields": 6}) is True
        assert match_guard({"formFields": ">5"}, {"formFields": 5}) is False

    def test_inclusive_greater_than(self):
        from medspec.core.evaluator import match_guard

        assert match_guard({"formFields": ">=5"}, {"formFields": 5}) is True
        assert match_guard({"formFields": ">=5"}, {"formFields": 4}) is False

    def test_comparator_accepts_numeric_strings(self):
        from medspec.core.evaluator import match_guard

        assert match_guard({"formFields": ">5"}, {"formFields": "6"}) is True

    @pytest.mark.parametrize("actual", [None, True, "many", [6]])
    def test_comparator_fails_closed_on_non_numbers(self, actual):
        from medspec.core.evaluator import match_guard

        assert match_guard({"formFields": ">=0"}, {"formFields": actual}) is False

    def test_missing_key_fails(self):
        from medspec.core.evaluator import match_guard

        assert match_guard({"keepContext": True}, {}) is False
        assert match_guard({"keepContext": False}, {}) is False

    def test_list_membership(self):
        from medspec.core.evaluator import match_guard

        assert match_guard({"contentType": ["list", "table"]}, {"contentType": "table"}) is True
        assert match_guard({"contentType": ["list", "table"]}, {"contentType": "single"}) is False

    def test_booleans_compare_strictly(self):
        from medspec.core.evaluator import match_guard

        assert match_guard({"blocking": 1}, {"blocking": True}) is False
        assert match_guard({"formFields": False}, {"formFields": 0}) is False
        assert match_guard({"blocking": True}, {"blocking": True}) is True

    def test_all_predicates_must_hold(self):
        from medspec.core.evaluator import match_guard

        when = {"contentWidthNarrow": True, "formFields": ">=3"}
        assert match_guard(when, {"contentWidthNarrow": True, "formFields": 3}) is True
        assert match_guard(when, {"contentWidthNarrow": False, "formFields": 3}) is False

    def test_empty_when_matches(self):
        from medspec.core.evaluator import match_guard

        assert match_guard({}, {"formFields": 1}) is True

    def test_accepts_context_model(self):
        from medspec.core.evaluator import match_guard
        from medspec.core.ir import UXContext

        assert match_guard({"needsSharableURL": True}, UXContext(needs_sharable_url=True)) is True


# =============================================================================
# Rule resolution
# =============================================================================


class TestEvaluateRule:
    def test_first_match_wins(self):
        from medspec.core.evaluator import evaluate_rule

        rule = _rule(
            guards=[
                {"when": {"formFields": ">1"}, "then": {"action": "drawer"}},
                {"when": {"formFields": ">2"}, "then": {"action": "route"}},
            ]
        )
        decision = evaluate_rule(rule, {"formFields": 9})
        assert decision.action == "drawer"
        assert decision.matched_guard_index == 0

    def test_later_guard_when_first_fails(self):
        from medspec.core.evaluator import evaluate_rule

        rule = _rule(
            guards=[
                {"when": {"formFields": ">5"}, "then": {"action": "route"}},
                {"when": {"formFields": ">=3"}, "then": {"action": "drawer"}},
            ]
        )
        decision = evaluate_rule(rule, {"formFields": 4})
        assert decision.action == "drawer"
        assert decision.matched_guard_index == 1

    def test_no_match_uses_rule_defaults(self):
        from medspec.core.evaluator import evaluate_rule

        rule = _rule(
            priority="low",
            confidence=0.4,
            meta={"focusTrap": True},
            guards=[{"when": {"formFields": ">5"}, "then": {"action": "route"}}],
        )
        decision = evaluate_rule(rule, {"formFields": 0})
        assert decision.action == "modal"
        assert decision.priority == "low"
        assert decision.confidence == 0.4
        assert decision.matched_guard_index == -1
        assert decision.meta == {"focusTrap": True}

    def test_missing_priority_and_confidence_default(self):
        from medspec.core.evaluator import evaluate_rule

        decision = evaluate_rule(_rule(), {})
        assert decision.priority == "medium"
        assert decision.confidence == 1.0

    def test_then_without_action_keeps_rule_action(self):
        from medspec.core.evaluator import evaluate_rule

        rule = _rule(guards=[{"when": {}, "then": {"priority": "high"}}])
        decision = evaluate_rule(rule, {})
        assert decision.action == "modal"
        assert decision.priority == "high"
        assert decision.matched_guard_index == 0

    def test_meta_merged_with_style_and_placement(self):
        from medspec.core.evaluator import evaluate_rule

        rule = _rule(
            meta={"focusTrap": True, "size": "sm"},
            guards=[
                {
                    "when": {},
                    "then": {
                        "meta": {"size": "lg"},
                        "style": {"intent": "danger"},
                        "placement": {"side": "right"},
                    },
                }
            ],
        )
        decision = evaluate_rule(rule, {})
        assert decision.meta == {
            "focusTrap": True,
            "size": "lg",
            "style": {"intent": "danger"},
            "placement": {"side": "right"},
        }

    def test_empty_style_and_placement_kept(self):
        from medspec.core.evaluator import evaluate_rule

        rule = _rule(guards=[{"when": {}, "then": {"style": {}, "placement": {}}}])
        decision = evaluate_rule(rule, {})
        assert decision.meta == {"style": {}, "placement": {}}

    def test_deterministic(self):
        from medspec.core.evaluator import evaluate_rule

        rule = _rule(guards=[{"when": {"formFields": ">5"}, "then": {"action": "route"}}])
        assert evaluate_rule(rule, {"formFields": 6}) == evaluate_rule(rule, {"formFields": 6})


# =============================================================================
# Policy evaluation
# =============================================================================


class TestEvaluate:
    def test_one_decision_per_rule(self, rulebook):
        from medspec.core.evaluator import evaluate
        from medspec.core.ir import UXContext

        for platform in ("desktop", "mobile"):
            policy = rulebook.policy_for(platform)
            for context in (UXContext(), UXContext(form_fields=9, keep_context=True)):
                evaluation = evaluate(rulebook, context, platform)
                assert len(evaluation.decisions) == len(policy.rules)
                assert [d.rule_id for d in evaluation.decisions] == [r.id for r in policy.rules]

    def test_policy_meta(self, rulebook):
        from medspec.core.evaluator import evaluate
        from medspec.core.ir import UXContext

        evaluation = evaluate(rulebook, UXContext(), "mobile")
        assert evaluation.policy_meta.policy_id == "mobile-default-v1"
        assert evaluation.policy_meta.version == rulebook.version
        assert evaluation.policy_meta.platform == "mobile"

    def test_missing_policy_yields_no_decisions(self, rulebook_data):
        from medspec.core.evaluator import NO_POLICY_ID, evaluate
        from medspec.core.ir import UXContext, UXRulebook

        book = UXRulebook.model_validate(rulebook_data)
        evaluation = evaluate(book, UXContext(), "mobile")
        assert evaluation.decisions == []
        assert evaluation.policy_meta.policy_id == NO_POLICY_ID
        assert evaluation.policy_meta.version == "test-1"

    def test_desktop_admin_decisions(self, rulebook, desktop_spec):
        from medspec.core.context import derive_context
        from medspec.core.evaluator import evaluate

        evaluation = evaluate(rulebook, derive_context(desktop_spec), "desktop")
        actions = {d.rule_id: d.action for d in evaluation.decisions}
        assert actions["nav-primary"] == "route"
        assert actions["details-view"] == "route"
        assert actions["edit-open"] == "modal"
        assert actions["edit-validation"] == "banner"
        assert actions["menu-overflow"] == "menu"
        assert actions["feedback-save"] == "toast"

        details = evaluation.decisions_for("Details")[0]
        assert details.matched_guard_index == 0
        assert details.meta["pattern"] == "master-detail"

    def test_desktop_edit_page_for_long_forms(self, rulebook):
        from medspec.core.evaluator import evaluate
        from medspec.core.ir import UXContext

        evaluation = evaluate(rulebook, UXContext(form_fields=6), "desktop")
        edit_open = next(d for d in evaluation.decisions if d.rule_id == "edit-open")
        assert edit_open.action == "route"
        assert edit_open.confidence == 0.85

    def test_has_action(self, rulebook):
        from medspec.core.evaluator import evaluate
        from medspec.core.ir import UXContext

        evaluation = evaluate(rulebook, UXContext(device_has_touch=True), "mobile")
        assert evaluation.has_action("ensure-target-size")
        assert not evaluation.has_action("download")
