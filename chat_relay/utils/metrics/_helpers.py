"""
Get-or-create registration for the chat metrics.

The metric modules are imported once per process, but uvicorn --reload and
test sessions building several applications can import them again. A
second registration of the same name is answered with the collector that
is already in the default registry.
"""

from prometheus_client import REGISTRY, Counter, Gauge
from prometheus_client.metrics import MetricWrapperBase


def _get_or_create(
    metric_cls: type[MetricWrapperBase],
    name: str,
    doc: str,
    labels: list[str] | None,
) -> MetricWrapperBase:
    try:
        return metric_cls(name, doc, labels or [])
    except ValueError:
        # Duplicated timeseries, reuse the registered collector
        return REGISTRY._names_to_collectors[name]


def _get_or_create_counter(
    name: str, doc: str, labels: list[str] | None = None
) -> Counter:
    """Counter for chat events, e.g. `ws_messages_received_total`."""
    return _get_or_create(Counter, name, doc, labels)


def _get_or_create_gauge(
    name: str, doc: str, labels: list[str] | None = None
) -> Gauge:
    """Gauge for the size of the chat, e.g. `chat_participants`."""
    return _get_or_create(Gauge, name, doc, labels)
