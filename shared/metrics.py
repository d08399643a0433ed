"""
Shared metrics configuration for the access policy engine.
"""

from typing import Dict, Any, Optional
import threading

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, start_http_server


class PolicyMetrics:
    """Prometheus metrics for policy construction and decisions."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        # A private registry keeps several engines in one process from
        # colliding on metric names.
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up decision and configuration metrics."""
        self._metrics["policy_decisions_total"] = Counter(
            "policy_decisions_total",
            "Total authorization decisions",
            ["role", "outcome"],
            registry=self.registry
        )

        self._metrics["policy_decision_duration_seconds"] = Histogram(
            "policy_decision_duration_seconds",
            "Authorization decision duration in seconds",
            registry=self.registry
        )

        self._metrics["policy_configuration_errors_total"] = Counter(
            "policy_configuration_errors_total",
            "Total configuration errors",
            ["stage"],
            registry=self.registry
        )

        self._metrics["policy_roles"] = Gauge(
            "policy_roles",
            "Number of roles in the installed configuration",
            registry=self.registry
        )

        self._metrics["policy_rules"] = Gauge(
            "policy_rules",
            "Number of resolved rules in the installed configuration",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def start_metrics_server(self, port: int = 9090):
        """Start the Prometheus metrics server."""
        start_http_server(port, registry=self.registry)

    def record_decision(self, role: str, allowed: bool, duration: float):
        """Record a single authorization decision."""
        outcome = "allow" if allowed else "deny"
        self._metrics["policy_decisions_total"].labels(role=role, outcome=outcome).inc()
        self._metrics["policy_decision_duration_seconds"].observe(duration)

    def record_configuration_error(self, stage: str):
        """Record a failed authoring or construction step."""
        self._metrics["policy_configuration_errors_total"].labels(stage=stage).inc()

    def record_configuration(self, roles: int, rules: int):
        """Record the size of a freshly installed configuration."""
        with self._lock:
            self._metrics["policy_roles"].set(roles)
            self._metrics["policy_rules"].set(rules)

    def sample(self, name: str, **labels) -> Optional[float]:
        """Read the current value of a metric sample from the registry."""
        return self.registry.get_sample_value(name, labels or None)
