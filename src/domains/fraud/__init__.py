"""Fraud scoring domain."""

from .errors import NotFoundError, ProfileNotFoundError
from .evidence import EvidenceAggregator
from .models import (
    Evidence,
    FraudRuleUpdate,
    FraudRuleView,
    RiskLevel,
    RuleResult,
    RuleStatus,
    ScoringResult,
)
from .profile import ProfileUpdater
from .registry import DEFAULT_RULES, RuleRegistry
from .rules import ALL_RULES
from .rules_engine import RulesEngine, classify, compute_score
from .scorer import FraudScorer

__all__ = [
    "ALL_RULES",
    "DEFAULT_RULES",
    "Evidence",
    "EvidenceAggregator",
    "FraudRuleUpdate",
    "FraudRuleView",
    "FraudScorer",
    "NotFoundError",
    "ProfileNotFoundError",
    "ProfileUpdater",
    "RiskLevel",
    "RuleRegistry",
    "RuleResult",
    "RuleStatus",
    "RulesEngine",
    "ScoringResult",
    "classify",
    "compute_score",
]
