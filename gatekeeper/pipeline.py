"""
Gatekeeper pipeline: normalize the input, then run the rules.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from .config import GatekeeperSettings, get_settings
from .errors import GatekeeperUnauthorizedError
from .logging import get_logger, reset_invocation_id, set_invocation_id
from .metrics import GatekeeperMetrics, get_metrics_collector
from .normalize import Capture, ContextFactory, InputNormalizer
from .rules.engine import RuleRunner
from .rules.models import RuleLike, RuleSet
from .tracing import trace_operation


@dataclass(frozen=True)
class GatekeeperOptions:
    """Configuration bundle for a pipeline."""
    capture: Capture
    rules: Iterable[RuleLike] = field(default_factory=tuple)
    context: Optional[ContextFactory] = None


class Gatekeeper:
    """An immutable authorization pipeline.

    Every call to :meth:`trust` is independent: its accumulator and
    current-rule tracking live only for that call, so one instance can be
    shared between concurrent tasks.
    """

    def __init__(self, options: GatekeeperOptions, settings: Optional[GatekeeperSettings] = None,
                 metrics: Optional[GatekeeperMetrics] = None):
        if settings is None:
            settings = get_settings()

        if metrics is None and settings.enable_metrics:
            metrics = get_metrics_collector(settings.metrics_namespace)

        self._normalizer = InputNormalizer(options.capture, options.context)
        self._rules = RuleSet(options.rules, strict=settings.strict_rule_names)
        self._runner = RuleRunner(metrics)
        self.metrics = metrics
        self.logger = get_logger("gatekeeper.pipeline")

        self.logger.debug("Pipeline configured", rules=list(self._rules.names))

    @property
    def rules(self) -> RuleSet:
        """The configured rules, in evaluation order."""
        return self._rules

    async def trust(self, raw_input: Any = None, raw_context: Any = None) -> Dict[str, Any]:
        """Authorize one request.

        Returns the mapping of rule name to result for every rule that
        produced a value. Raises ``GatekeeperUnauthorizedError`` when a rule
        fails; errors from the capture or context functions propagate as-is.
        """
        token = set_invocation_id()
        start_time = time.perf_counter()
        outcome = None

        try:
            with trace_operation("gatekeeper.trust", **{"gatekeeper.rules": len(self._rules)}):
                try:
                    parameters, context = await self._normalizer.normalize(raw_input, raw_context)
                except Exception:
                    outcome = "invalid_input"
                    raise

                try:
                    result = await self._runner.run(parameters, context, self._rules)
                except GatekeeperUnauthorizedError:
                    outcome = "unauthorized"
                    raise

            outcome = "authorized"
            self.logger.debug("Invocation authorized", results=list(result))
            return result

        finally:
            if self.metrics is not None and outcome is not None:
                self.metrics.record_invocation(outcome, time.perf_counter() - start_time)
            reset_invocation_id(token)


def gatekeeper(capture: Capture, rules: Iterable[RuleLike] = (), context: Optional[ContextFactory] = None,
               settings: Optional[GatekeeperSettings] = None,
               metrics: Optional[GatekeeperMetrics] = None) -> Gatekeeper:
    """Build a pipeline from a capture function, rules and optional context function."""
    return Gatekeeper(
        GatekeeperOptions(capture=capture, rules=rules, context=context),
        settings=settings,
        metrics=metrics
    )
