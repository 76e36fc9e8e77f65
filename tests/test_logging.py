import json
import logging

import structlog

from openconv.logging import setup_logging


def test_events_render_as_json(caplog):
    setup_logging("INFO")
    caplog.set_level(logging.INFO)
    try:
        log = structlog.get_logger("openconv.test")
        log.debug("store.hidden")
        log.info("seed.loaded", guilds=4)
        payload = json.loads(caplog.records[-1].getMessage())
    finally:
        structlog.reset_defaults()
    assert payload["message"] == "seed.loaded"
    assert payload["level"] == "info"
    assert payload["guilds"] == 4
    assert "timestamp" in payload
    assert all("store.hidden" not in r.getMessage() for r in caplog.records)


def test_level_from_environment(monkeypatch, caplog):
    monkeypatch.setenv("OPENCONV_LOG_LEVEL", "warning")
    setup_logging()
    caplog.set_level(logging.DEBUG)
    try:
        log = structlog.get_logger("openconv.test")
        log.info("quiet")
        log.warning("loud")
    finally:
        structlog.reset_defaults()
    messages = [r.getMessage() for r in caplog.records]
    assert not any("quiet" in m for m in messages)
    assert any("loud" in m for m in messages)
