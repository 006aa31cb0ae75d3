"""
Rule evaluation engine for Gatekeeper.
"""

import inspect
import time
from typing import Any, Dict, Optional

from ..errors import GatekeeperUnauthorizedError, UNAUTHORIZED_MESSAGE
from ..logging import bind_rule, get_logger, reset_rule
from ..metrics import GatekeeperMetrics
from ..tracing import trace_operation
from .models import RuleSet


class RuleRunner:
    """Runs a rule set in declared order and collects the results.

    Rules run strictly one after another: a rule never starts before the
    previous one has returned or its awaitable has settled. The first rule
    that raises aborts the run and is reported as a
    ``GatekeeperUnauthorizedError``; partial results are discarded.
    """

    def __init__(self, metrics: Optional[GatekeeperMetrics] = None):
        self.logger = get_logger("gatekeeper.rule_runner")
        self.metrics = metrics

    async def run(self, parameters: Any, context: Any, rules: RuleSet) -> Dict[str, Any]:
        """Evaluate ``rules`` against the normalized parameters and context."""
        results: Dict[str, Any] = {}
        current_rule: Optional[str] = None

        try:
            for position, (name, evaluator) in enumerate(rules):
                current_rule = name
                value = await self._evaluate(name, position, evaluator, parameters, context)

                if value is None:
                    continue

                results[name] = value

        except Exception as e:
            self.logger.warning(
                "Rule failed",
                rule=current_rule,
                error_type=type(e).__name__,
                error=str(e)
            )
            raise GatekeeperUnauthorizedError(UNAUTHORIZED_MESSAGE, e, current_rule) from e

        return results

    async def _evaluate(self, name: str, position: int, evaluator, parameters: Any, context: Any) -> Any:
        token = bind_rule(name)
        start_time = time.perf_counter()
        outcome = "failed"

        try:
            with trace_operation("gatekeeper.rule", **{
                "gatekeeper.rule": name,
                "gatekeeper.rule.position": position
            }):
                value = evaluator(parameters, context)
                if inspect.isawaitable(value):
                    value = await value

            outcome = "skipped" if value is None else "ok"
            return value

        finally:
            duration = time.perf_counter() - start_time
            reset_rule(token)

            if self.metrics is not None:
                self.metrics.record_rule(name, outcome, duration)

            if outcome != "failed":
                self.logger.debug(
                    "Rule evaluated",
                    rule=name,
                    position=position,
                    skipped=outcome == "skipped",
                    duration_ms=round(duration * 1000, 3)
                )
