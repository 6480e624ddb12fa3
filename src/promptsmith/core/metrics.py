"""Prometheus metrics for Promptsmith."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

from promptsmith.registry.models import ModelRegistry, RegistryStatus

promptsmith_requests_total = Counter(
    "promptsmith_requests_total",
    "Total generation requests handled by the AI service",
    ["capability", "model", "status"],
)
promptsmith_request_duration_seconds = Histogram(
    "promptsmith_request_duration_seconds",
    "Generation request duration in seconds",
    ["capability", "model"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)
promptsmith_errors_total = Counter(
    "promptsmith_errors_total",
    "Total failed generation requests",
    ["capability", "model"],
)

# Registry state
promptsmith_models_configured = Gauge(
    "promptsmith_models_configured",
    "Models loaded from the registry config, per group",
    ["group"],
)
promptsmith_registry_status = Gauge(
    "promptsmith_registry_status",
    "1 for the current registry load status, 0 otherwise",
    ["status"],
)


def observe_registry(registry: ModelRegistry) -> None:
    """Refresh the registry gauges. Groups that disappeared are dropped."""
    promptsmith_models_configured.clear()
    for group in registry.get_available_groups():
        promptsmith_models_configured.labels(group=group).set(len(registry.get_models_by_group(group)))
    for status in RegistryStatus:
        promptsmith_registry_status.labels(status=status.value).set(1 if registry.status is status else 0)
