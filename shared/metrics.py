"""
Shared metrics configuration for the ACL evaluator.
"""

import threading
from typing import Dict, Any, Optional

from prometheus_client import Counter, CollectorRegistry, REGISTRY


class AclMetrics:
    """Prometheus metrics for evaluator construction and decisions."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up evaluator metrics."""
        self._metrics["acl_evaluators_built_total"] = Counter(
            "acl_evaluators_built_total",
            "Total ACL evaluators constructed",
            registry=self.registry
        )

        self._metrics["acl_decisions_total"] = Counter(
            "acl_decisions_total",
            "Total ACL decisions",
            ["outcome"],
            registry=self.registry
        )

    def record_evaluator_built(self):
        """Record construction of an evaluator."""
        self._metrics["acl_evaluators_built_total"].inc()

    def record_decision(self, allowed: bool):
        """Record one is_allowed decision."""
        outcome = "allowed" if allowed else "denied"
        self._metrics["acl_decisions_total"].labels(outcome=outcome).inc()

    def get_decision_count(self, allowed: bool) -> float:
        """Return the current decision count for an outcome."""
        outcome = "allowed" if allowed else "denied"
        value = self.registry.get_sample_value(
            "acl_decisions_total", {"outcome": outcome}
        )
        return value or 0.0


_metrics: Optional[AclMetrics] = None
_metrics_lock = threading.Lock()


def get_metrics() -> AclMetrics:
    """Get the process-wide metrics instance bound to the default registry."""
    global _metrics
    with _metrics_lock:
        if _metrics is None:
            _metrics = AclMetrics()
        return _metrics
