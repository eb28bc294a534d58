"""Prometheus metrics for model invocations."""

from prometheus_client import Counter, Histogram

llm_call_latency_ms = Histogram(
    "llm_call_latency_ms",
    "Model pipeline latency in milliseconds",
    ["model", "status"],
    buckets=[100, 500, 1000, 2000, 4000, 8000, 15000, 30000, 60000],
)

llm_results_total = Counter(
    "llm_results_total",
    "Total model pipeline outcomes",
    ["model", "status"],
)

llm_fallbacks_total = Counter(
    "llm_fallbacks_total",
    "Total results that used the fallback itinerary",
    ["model"],
)


class ModelMetrics:
    """No-op metrics interface; see PrometheusModelMetrics."""

    def record_result(self, model: str, status: str, latency_ms: float, fallback: bool) -> None:
        """Record one model outcome."""
        pass


class PrometheusModelMetrics(ModelMetrics):
    """Prometheus-based model metrics implementation."""

    def record_result(self, model: str, status: str, latency_ms: float, fallback: bool) -> None:
        """Record latency, outcome and fallback usage."""
        llm_call_latency_ms.labels(model=model, status=status).observe(latency_ms)
        llm_results_total.labels(model=model, status=status).inc()
        if fallback:
            llm_fallbacks_total.labels(model=model).inc()
