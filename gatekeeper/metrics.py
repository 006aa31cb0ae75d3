"""
Prometheus metrics for Gatekeeper pipelines.
"""

from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram


class GatekeeperMetrics:
    """Metrics collector for one or more pipelines.

    Each collector owns a ``CollectorRegistry`` unless one is passed in, so
    building several pipelines in one process never registers a metric twice.
    """

    def __init__(self, namespace: str = "gatekeeper", registry: Optional[CollectorRegistry] = None):
        self.namespace = namespace
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up pipeline metrics."""
        self._metrics["invocations_total"] = Counter(
            "invocations_total",
            "Total pipeline invocations",
            ["outcome"],
            namespace=self.namespace,
            registry=self.registry
        )

        self._metrics["invocation_duration_seconds"] = Histogram(
            "invocation_duration_seconds",
            "Pipeline invocation duration in seconds",
            namespace=self.namespace,
            registry=self.registry
        )

        self._metrics["rule_evaluations_total"] = Counter(
            "rule_evaluations_total",
            "Total rule evaluations",
            ["rule", "outcome"],
            namespace=self.namespace,
            registry=self.registry
        )

        self._metrics["rule_duration_seconds"] = Histogram(
            "rule_duration_seconds",
            "Rule evaluation duration in seconds",
            ["rule"],
            namespace=self.namespace,
            registry=self.registry
        )

    def record_invocation(self, outcome: str, duration: float):
        """Record the outcome of one ``trust`` call."""
        self._metrics["invocations_total"].labels(outcome=outcome).inc()
        self._metrics["invocation_duration_seconds"].observe(duration)

    def record_rule(self, rule: str, outcome: str, duration: float):
        """Record one rule evaluation."""
        self._metrics["rule_evaluations_total"].labels(rule=rule, outcome=outcome).inc()
        self._metrics["rule_duration_seconds"].labels(rule=rule).observe(duration)

    def sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read a sample value from this collector's registry."""
        return self.registry.get_sample_value(f"{self.namespace}_{name}", labels or {})


def get_metrics_collector(namespace: str = "gatekeeper", registry: Optional[CollectorRegistry] = None) -> GatekeeperMetrics:
    """Get a metrics collector."""
    return GatekeeperMetrics(namespace, registry)
