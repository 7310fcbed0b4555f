from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


class CorrelationIdFilter(logging.Filter):
    def __init__(self, correlation_id: str):
        super().__init__()
        self._correlation_id = correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = self._correlation_id
        return True


def configure_logging(
    correlation_id: str,
    log_dir: Path | None = None,
    level: int = logging.INFO,
) -> None:
    """Console text logging, plus text and JSON lines files when ``log_dir`` is set."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    correlation_filter = CorrelationIdFilter(correlation_id)
    text_formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(text_formatter)
    stream_handler.addFilter(correlation_filter)
    root.addHandler(stream_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    utc_day = datetime.now(timezone.utc).strftime("%Y-%m-%d")

    text_handler = logging.FileHandler(log_dir / f"cartflow-{utc_day}.log", encoding="utf-8")
    text_handler.setFormatter(text_formatter)
    text_handler.addFilter(correlation_filter)

    json_handler = logging.FileHandler(log_dir / f"cartflow-{utc_day}.jsonl", encoding="utf-8")
    json_handler.setFormatter(
        JsonFormatter(fmt="%(asctime)s %(levelname)s %(name)s %(correlation_id)s %(message)s")
    )
    json_handler.addFilter(correlation_filter)

    root.addHandler(text_handler)
    root.addHandler(json_handler)


def get_logger(name: str, correlation_id: str) -> logging.LoggerAdapter:
    base_logger = logging.getLogger(name)
    return logging.LoggerAdapter(base_logger, extra={"correlation_id": correlation_id})
