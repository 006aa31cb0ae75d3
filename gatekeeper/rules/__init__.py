"""
Rule declaration and evaluation.
"""

from .models import Rule, RuleDescription, RuleSet, rule
from .engine import RuleRunner

__all__ = ["Rule", "RuleDescription", "RuleSet", "RuleRunner", "rule"]
