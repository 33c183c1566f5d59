"""Tests for structured run logging."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from rss_blog_importer.config import LoggingConfig
from rss_blog_importer.utils.logging import JsonlFormatter, log_event, setup_logging


def test_jsonl_formatter_includes_event_fields():
    record = logging.LogRecord("rss_blog_importer", logging.INFO, __file__, 1, "Post created", None, None)
    record.event = "post_created"
    record.path = "Blog Posts/2024-01-01 - A.md"

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["message"] == "Post created"
    assert payload["level"] == "INFO"
    assert payload["event"] == "post_created"
    assert payload["path"] == "Blog Posts/2024-01-01 - A.md"
    assert "msg" not in payload


def test_setup_logging_writes_jsonl_file(tmp_path: Path):
    cfg = LoggingConfig(console=False, file=True, format="jsonl")
    logger = setup_logging(cfg, tmp_path)

    log_event(logger, "Import start", event="run_start", watermark=0)
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / cfg.filename).read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[-1])
    assert record["event"] == "run_start"
    assert record["watermark"] == 0
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []


def test_log_event_without_logger_is_noop():
    log_event(None, "ignored", event="x")
