"""Unit tests for score computation and risk classification."""

import pytest

from src.domains.fraud.models import FraudRuleView, RiskLevel, RuleStatus
from src.domains.fraud.rules_engine import RulesEngine, classify, compute_score, evaluate_rules
from tests.conftest import (
    DAYTIME,
    LATE_NIGHT,
    default_rule_views,
    make_check_in,
    make_evidence,
    make_transaction,
)


def _only(rules: list[FraudRuleView], *names: str) -> list[FraudRuleView]:
    return [r for r in rules if r.name in names]


def _deactivate(rules: list[FraudRuleView], name: str) -> list[FraudRuleView]:
    return [
        r.model_copy(update={"status": RuleStatus.INACTIVE}) if r.name == name else r
        for r in rules
    ]


def _scenario_evidence():
    """Two daytime transactions without geolocation and one failed check-in."""
    return make_evidence(
        transactions=[
            make_transaction(when=DAYTIME, latitude=None, longitude=None),
            make_transaction(when=DAYTIME, latitude=None, longitude=None),
        ],
        check_ins=[make_check_in("failed")],
    )


class TestClassify:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, RiskLevel.LOW),
            (25, RiskLevel.LOW),
            (26, RiskLevel.MEDIUM),
            (50, RiskLevel.MEDIUM),
            (51, RiskLevel.HIGH),
            (400, RiskLevel.HIGH),
        ],
    )
    def test_boundaries(self, score, expected):
        assert classify(score) == expected


class TestComputeScore:
    def test_empty_evidence_scores_zero(self, active_rules):
        evidence = make_evidence()
        assert evidence.is_empty
        assert compute_score(evidence, active_rules) == 0
        result = RulesEngine().evaluate(evidence, active_rules)
        assert result.score == 0
        assert result.risk_level == RiskLevel.LOW

    def test_deterministic(self, active_rules):
        evidence = _scenario_evidence()
        scores = {compute_score(evidence, active_rules) for _ in range(5)}
        assert scores == {50}

    def test_more_failed_check_ins_never_lower_score(self, active_rules):
        evidence = _scenario_evidence()
        before = compute_score(evidence, active_rules)
        more = evidence.model_copy(
            update={"check_ins": evidence.check_ins + [make_check_in("failed")]}
        )
        assert compute_score(more, active_rules) >= before
        assert compute_score(more, active_rules) == before + 20

    def test_inactive_rule_removes_its_contribution(self, active_rules):
        evidence = _scenario_evidence()
        full = compute_score(evidence, active_rules)
        without = compute_score(evidence, _deactivate(active_rules, "selfie-mismatch"))
        assert without == full - 20

    def test_inactive_rule_with_no_matches_leaves_score(self, active_rules):
        evidence = _scenario_evidence()
        assert compute_score(evidence, _deactivate(active_rules, "multiple-ips")) == compute_score(
            evidence, active_rules
        )

    def test_flat_devices_vs_multiplied_odd_hours(self, active_rules):
        evidence = make_evidence(
            transactions=[
                make_transaction(when=LATE_NIGHT, device_id=d) for d in ("a", "b", "c")
            ]
        )
        assert compute_score(evidence, _only(active_rules, "multiple-devices")) == 10
        assert compute_score(evidence, _only(active_rules, "odd-hour-transactions")) == 45

    def test_score_is_unbounded(self, active_rules):
        evidence = make_evidence(
            transactions=[make_transaction(when=LATE_NIGHT, latitude=None) for _ in range(20)]
        )
        # 20 x (15 odd-hour + 15 missing geolocation)
        assert compute_score(evidence, active_rules) == 600

    def test_uses_current_rule_weights(self, active_rules):
        evidence = _scenario_evidence()
        heavier = [
            r.model_copy(update={"score_impact": 40}) if r.name == "selfie-mismatch" else r
            for r in active_rules
        ]
        assert compute_score(evidence, heavier) == 70

    def test_unknown_rule_name_contributes_nothing(self):
        rules = [FraudRuleView(name="velocity-spike", score_impact=99)]
        evidence = _scenario_evidence()
        results = evaluate_rules(evidence, rules)
        assert len(results) == 1
        assert results[0].contribution == 0
        assert results[0].reserved is True
        assert compute_score(evidence, rules) == 0


class TestScenarios:
    def test_missing_geolocation_and_failed_check_in_is_medium(self, active_rules):
        result = RulesEngine().evaluate(_scenario_evidence(), active_rules)
        assert result.score == 50
        assert result.risk_level == RiskLevel.MEDIUM
        triggered = {r.rule_name: r.contribution for r in result.rule_results if r.triggered}
        assert triggered == {"missing-geolocation": 30, "selfie-mismatch": 20}

    def test_extra_odd_hour_transaction_pushes_to_high(self, active_rules):
        evidence = _scenario_evidence()
        evidence = evidence.model_copy(
            update={"transactions": [make_transaction(when=LATE_NIGHT)] + evidence.transactions}
        )
        result = RulesEngine().evaluate(evidence, active_rules)
        assert result.score == 65
        assert result.risk_level == RiskLevel.HIGH

    def test_result_lists_every_active_rule(self):
        rules = default_rule_views()
        result = RulesEngine().evaluate(make_evidence(), rules)
        assert [r.rule_name for r in result.rule_results] == [r.name for r in rules]
        assert result.agent_user_id == "agent-1"
