"""
Policy engine: holds the installed configuration and answers queries.
"""

from typing import Any, Optional

from prometheus_client import REGISTRY

from shared.config import PolicySettings, get_settings
from shared.logging import configure_logging, get_logger
from shared.errors import BadConfiguration, NotConfigured, PolicyException
from shared.metrics import PolicyMetrics
from .configuration import Builder, Configuration
from .rules.models import ANY, Decision, name_of


class PolicyEngine:
    """Installs a constructed configuration and evaluates queries against it.

    Authoring and construction must finish before queries start; once
    installed, a configuration is read-only and may be queried from
    several threads.
    """

    def __init__(self, settings: Optional[PolicySettings] = None, metrics: Optional[PolicyMetrics] = None):
        self.settings = settings or get_settings()
        configure_logging("policy", self.settings.log_level)
        self.logger = get_logger("policy.engine")
        if metrics is None and self.settings.enable_metrics:
            metrics = PolicyMetrics()
        self.metrics = metrics
        self._configuration: Optional[Configuration] = None

        self.logger.info("Policy engine initialized", env=self.settings.env, metrics=self.metrics is not None)

    def define(self, **options) -> Builder:
        """Start authoring a configuration that is installed when built."""
        return Builder(settings=self.settings, on_build=self.configure, **options)

    def configure(self, configuration: Configuration) -> Configuration:
        """Construct (if needed) and install a configuration."""
        try:
            configuration.construct()
        except BadConfiguration as e:
            self.logger.warning("Configuration rejected", error=e.message, details=e.details)
            if self.metrics:
                self.metrics.record_configuration_error("construct")
            raise

        self._configuration = configuration

        if self.metrics:
            self.metrics.record_configuration(len(configuration.roles), configuration.rule_count())

        self.logger.info("Configuration installed", roles=sorted(configuration.roles))
        return configuration

    @property
    def configuration(self) -> Configuration:
        if self._configuration is None:
            raise NotConfigured()
        return self._configuration

    @property
    def configured(self) -> bool:
        return self._configuration is not None

    def can(self, role: Any, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> bool:
        """Whether ``role`` may perform ``action`` on ``resource`` within ``scope``."""
        return self.explain(role, resource=resource, scope=scope, action=action).allowed

    def explain(self, role: Any, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> Decision:
        """Decide a query, recording metrics for the decision."""
        configuration = self.configuration

        try:
            decision = configuration.explain(role, resource=resource, scope=scope, action=action)
        except PolicyException as e:
            self.logger.warning("Query rejected", role=name_of(role), code=e.code, error=e.message)
            raise

        if self.metrics:
            self.metrics.record_decision(name_of(role), decision.allowed, decision.evaluation_time_ms / 1000)

        self.logger.debug(
            "Policy decision",
            role=name_of(role),
            resource=name_of(resource),
            scope=name_of(scope),
            action=name_of(action),
            allowed=decision.allowed,
            rule=decision.rule
        )

        return decision

    def clear(self):
        """Forget the installed configuration."""
        self._configuration = None
        self.logger.info("Configuration cleared")


_default_engine: Optional[PolicyEngine] = None


def get_engine() -> PolicyEngine:
    """The process-wide engine used by the module-level helpers."""
    global _default_engine
    if _default_engine is None:
        settings = get_settings()
        metrics = PolicyMetrics(registry=REGISTRY) if settings.enable_metrics else None
        _default_engine = PolicyEngine(settings=settings, metrics=metrics)
    return _default_engine


def define(**options) -> Builder:
    return get_engine().define(**options)


def configure(configuration: Configuration) -> Configuration:
    return get_engine().configure(configuration)


def current_configuration() -> Configuration:
    return get_engine().configuration


def can(role: Any, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> bool:
    return get_engine().can(role, resource=resource, scope=scope, action=action)


def explain(role: Any, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> Decision:
    return get_engine().explain(role, resource=resource, scope=scope, action=action)


def clear():
    get_engine().clear()
