"""
Gatekeeper: declarative authorization pipelines.

A pipeline captures typed parameters from a raw input, optionally builds a
context, and runs an ordered list of named rules against them:

- pipeline: ``gatekeeper()`` / ``Gatekeeper`` and ``trust()``
- rules: ``rule()``, ``Rule`` and ``RuleSet``
- normalize: capture/context helpers, including pydantic model validation
- errors: ``GatekeeperUnauthorizedError`` and configuration errors
- config, logging, tracing, metrics: the ambient stack
"""

from .errors import (
    ErrorResponse,
    GatekeeperError,
    GatekeeperUnauthorizedError,
    RuleConfigurationError,
)
from .normalize import InputNormalizer, capture_model, context_model
from .pipeline import Gatekeeper, GatekeeperOptions, gatekeeper
from .rules import Rule, RuleDescription, RuleRunner, RuleSet, rule

__version__ = "1.0.0"

__all__ = [
    "ErrorResponse",
    "Gatekeeper",
    "GatekeeperError",
    "GatekeeperOptions",
    "GatekeeperUnauthorizedError",
    "InputNormalizer",
    "Rule",
    "RuleConfigurationError",
    "RuleDescription",
    "RuleRunner",
    "RuleSet",
    "capture_model",
    "context_model",
    "gatekeeper",
    "rule",
]
