"""Logging helpers (formatter, trace-context filter and dictConfig builder)."""

from __future__ import annotations

import json
import logging
import os
import time
import traceback
from collections.abc import Mapping
from logging.config import dictConfig
from typing import Any

from opentelemetry import baggage, trace

from mapstep.config.settings import MapStepSettings, load_settings

_PACKAGE_LOGGER = "mapstep"


def _managed_runtime() -> bool:
    # Cloud Run and Kubernetes log ingestion parse JSON lines into structured payloads.
    return bool(os.getenv("K_SERVICE") or os.getenv("KUBERNETES_SERVICE_HOST"))


def _compact_json(value: Any, *, limit: int = 512) -> str:
    encoded = json.dumps(value, sort_keys=True, separators=(",", ":"))
    if len(encoded) <= limit:
        return encoded
    return encoded[:limit] + "... (truncated)"


def _structured_payload(record: logging.LogRecord, max_items: int) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "message": record.getMessage(),
        "severity": record.levelname,
        "logger": record.name,
        "timestamp": (
            f"{time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(record.created))}"
            f".{int(record.msecs):03d}Z"
        ),
    }
    data = record.__dict__.get("data")
    if data:
        payload["data"] = _sanitize_for_json(data, max_items=max_items)
        payload["message"] += f" | data={_compact_json(payload['data'])}"
    if record.exc_info:
        payload["exception"] = "".join(traceback.format_exception(*record.exc_info)).rstrip("\n")
    # Trace context from OtelContextLogFilter sits beside the standard keys.
    for key, value in record.__dict__.get("json_fields", {}).items():
        payload.setdefault(key, value)
    return payload


class ExtrasFormatter(logging.Formatter):
    """Append structured ``data`` payloads, or emit JSON lines when requested."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        *,
        json_lines: bool = False,
        max_items: int = 200,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._json_lines = json_lines
        self._max_items = max_items

    def format(self, record: logging.LogRecord) -> str:
        if self._json_lines or _managed_runtime():
            payload = _structured_payload(record, self._max_items)
            return json.dumps(payload, sort_keys=True, separators=(",", ":"))

        formatted = super().format(record)
        data = record.__dict__.get("data")
        if data:
            sanitized = _sanitize_for_json(data, max_items=self._max_items)
            return f"{formatted} | data={_compact_json(sanitized)}"
        return formatted


class OtelContextLogFilter(logging.Filter):
    """Inject OpenTelemetry trace context and baggage into ``json_fields``."""

    def filter(self, record: logging.LogRecord) -> bool:
        otel: dict[str, Any] = {}
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            otel["trace_id"] = f"{span_context.trace_id:032x}"
            otel["span_id"] = f"{span_context.span_id:016x}"

        baggage_values = baggage.get_all()
        if baggage_values:
            otel["baggage"] = {key: str(value) for key, value in baggage_values.items()}

        if not otel:
            return True

        record.__dict__.setdefault("json_fields", {})["otel"] = otel
        return True


def build_log_config(
    settings: MapStepSettings,
    *,
    extra_loggers: Mapping[str, dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a dictConfig-compatible configuration for the ``mapstep`` loggers."""

    loggers: dict[str, dict[str, Any]] = {
        _PACKAGE_LOGGER: {
            "level": settings.log_level,
            "handlers": ["console"],
            "propagate": False,
        },
    }
    if extra_loggers:
        loggers.update(extra_loggers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": ExtrasFormatter,
                "fmt": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S",
                "json_lines": settings.json_logs,
                "max_items": settings.log_max_items,
            }
        },
        "filters": {
            "otel_context": {"()": OtelContextLogFilter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "stream": "ext://sys.stdout",
                "filters": ["otel_context"],
            }
        },
        "loggers": loggers,
    }


def configure_logging(
    settings: MapStepSettings | None = None,
    *,
    extra_loggers: Mapping[str, dict[str, Any]] | None = None,
) -> None:
    """Apply the logging config; settings are loaded from the environment when omitted."""
    resolved = settings or load_settings()
    dictConfig(build_log_config(resolved, extra_loggers=extra_loggers))
    logging.getLogger(__name__).debug(
        "configured logging",
        extra={"data": {"level": resolved.log_level, "json_logs": resolved.json_logs}},
    )


def _sanitize_for_json(value: Any, depth: int = 10, max_items: int = 200) -> Any:
    """Return a JSON-serializable copy with long collections truncated."""
    if depth <= 0:
        return "<depth_exceeded>"
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        result: dict[str, Any] = {}
        for idx, (k, v) in enumerate(value.items()):
            if idx >= max_items:
                result["<truncated>"] = f"...{len(value) - idx} more"
                break
            result[str(k)] = _sanitize_for_json(v, depth - 1, max_items)
        return result
    if isinstance(value, (list, tuple)):
        items = [_sanitize_for_json(item, depth - 1, max_items) for item in value[:max_items]]
        if len(value) > max_items:
            items.append(f"... {len(value) - max_items} more")
        return items
    return repr(value)


__all__ = [
    "ExtrasFormatter",
    "OtelContextLogFilter",
    "build_log_config",
    "configure_logging",
]
