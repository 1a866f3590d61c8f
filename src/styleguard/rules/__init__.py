"""Rule registry: rule models, the static table and detection predicates."""

from .models import Category, Rule, RuleScope, Severity
from .predicates import PREDICATES, Hit
from .registry import RULE_TABLE, get_rule, list_rules, load_registry, rules_by_category

__all__ = [
    "Category",
    "Rule",
    "RuleScope",
    "Severity",
    "Hit",
    "PREDICATES",
    "RULE_TABLE",
    "get_rule",
    "list_rules",
    "load_registry",
    "rules_by_category",
]
