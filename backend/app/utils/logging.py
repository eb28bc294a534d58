"""Structured logging for model invocations."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredModelLogger:
    """Structured logger for per-model pipeline outcomes."""

    def log_result(
        self,
        model_id: str,
        status: str,
        latency_ms: float,
        is_fallback: bool,
        error_reason: str | None = None,
    ) -> None:
        """Log one model outcome with structured data."""
        log_data: dict[str, Any] = {
            "model_id": model_id,
            "status": status,
            "latency_ms": round(latency_ms, 2),
            "is_fallback": is_fallback,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Schedule generation: {model_id} - {status}"

        if status == "GOOD_RESULT" and not is_fallback:
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
