"""Rule-based fraud scoring: weighted match counts summed into one score."""

from collections.abc import Iterable
from datetime import UTC, datetime

import structlog

from .config import RISK_THRESHOLDS, FraudConfig, default_config
from .models import Evidence, FraudRuleView, RiskLevel, RuleResult, ScoringResult
from .rules import RULES_BY_NAME, EvidenceRule

logger = structlog.get_logger()


def classify(score: int) -> RiskLevel:
    """Map a fraud score to its risk level. Boundaries are inclusive on the lower tier."""
    if score > RISK_THRESHOLDS.high_above:
        return RiskLevel.HIGH
    if score > RISK_THRESHOLDS.medium_above:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def evaluate_rules(
    evidence: Evidence,
    active_rules: Iterable[FraudRuleView],
    config: FraudConfig | None = None,
    predicates: dict[str, EvidenceRule] | None = None,
) -> list[RuleResult]:
    """Run every active rule that has a predicate. Inactive rules are skipped."""
    cfg = config or default_config
    known = predicates if predicates is not None else RULES_BY_NAME
    results: list[RuleResult] = []

    for rule in active_rules:
        if not rule.is_active:
            continue
        predicate = known.get(rule.name)
        if predicate is None:
            logger.warning("fraud_rule_without_predicate", rule_name=rule.name)
            results.append(
                RuleResult(rule_name=rule.name, score_impact=rule.score_impact, reserved=True)
            )
            continue
        results.append(predicate.evaluate(evidence, rule, cfg))

    return results


def compute_score(
    evidence: Evidence,
    active_rules: Iterable[FraudRuleView],
    config: FraudConfig | None = None,
) -> int:
    """Total fraud score for the evidence. Pure; unbounded; never negative."""
    return sum(r.contribution for r in evaluate_rules(evidence, active_rules, config))


class RulesEngine:
    """Evaluates an agent's evidence against the active fraud rules.

    Scoring is additive:
    1. Each active rule counts its matches in the evidence
    2. Multiplicative rules contribute matches * score_impact
    3. Flat rules contribute score_impact once when they match
    4. Score = sum of contributions, no cap
    5. Risk level = classify(score)
    """

    def __init__(
        self,
        config: FraudConfig | None = None,
        predicates: dict[str, EvidenceRule] | None = None,
    ) -> None:
        self._config = config or default_config
        self._predicates = dict(predicates if predicates is not None else RULES_BY_NAME)

    def evaluate(
        self,
        evidence: Evidence,
        active_rules: Iterable[FraudRuleView],
    ) -> ScoringResult:
        results = evaluate_rules(evidence, active_rules, self._config, self._predicates)
        score = sum(r.contribution for r in results)
        risk_level = classify(score)

        logger.info(
            "fraud_score_computed",
            agent_user_id=evidence.agent_user_id,
            score=score,
            risk_level=risk_level.value,
            triggered=[r.rule_name for r in results if r.triggered],
        )

        return ScoringResult(
            agent_user_id=evidence.agent_user_id,
            score=score,
            risk_level=risk_level,
            rule_results=results,
            computed_at=datetime.now(UTC),
        )
