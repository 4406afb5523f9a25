"""Abstract base class for evidence-driven fraud rules."""

from abc import ABC, abstractmethod

from ..config import FraudConfig
from ..models import Evidence, FraudRuleView, RuleResult


class EvidenceRule(ABC):
    """Predicate over an agent's evidence, keyed by the registry rule name.

    ``count_matches`` returns how many times the rule fired. Multiplicative
    rules contribute ``matches * score_impact``; flat rules contribute
    ``score_impact`` once whenever they match at all.
    """

    rule_id: str
    category: str  # "activity" | "identity" | "verification"
    flat: bool = False
    reserved: bool = False

    @abstractmethod
    def count_matches(self, evidence: Evidence, config: FraudConfig) -> int:
        ...

    def describe(self, matches: int) -> str:
        return f"{matches} match(es)"

    def evaluate(
        self,
        evidence: Evidence,
        rule: FraudRuleView,
        config: FraudConfig,
    ) -> RuleResult:
        matches = self.count_matches(evidence, config)
        multiplier = min(matches, 1) if self.flat else matches
        return RuleResult(
            rule_name=self.rule_id,
            matches=matches,
            score_impact=rule.score_impact,
            contribution=multiplier * rule.score_impact,
            reserved=self.reserved,
            details=self.describe(matches) if matches else "",
        )


class ReservedRule(EvidenceRule):
    """Catalogued rule with no predicate wired yet; never matches."""

    reserved = True

    def count_matches(self, evidence: Evidence, config: FraudConfig) -> int:
        return 0
