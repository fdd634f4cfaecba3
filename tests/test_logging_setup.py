"""Tests for logging configuration."""

import io
import logging
from datetime import timezone

import pytest

import photo_timeline
from photo_timeline.config import TimelineConfig
from photo_timeline.logging_setup import LOGGER_NAME, setup_logging
from photo_timeline.pipeline import Timeline


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.level)
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


def test_console_only():
    run_id = setup_logging()
    logger = logging.getLogger(LOGGER_NAME)

    assert run_id.startswith("photo-timeline_")
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.INFO


def test_verbose_console():
    setup_logging(verbose=True)
    assert logging.getLogger(LOGGER_NAME).handlers[0].level == logging.DEBUG


def test_log_file_written(tmp_path):
    run_id = setup_logging(log_dir=tmp_path / "logs")

    logging.getLogger("photo_timeline.sidecar").debug("indexed 3 sidecars")
    for handler in logging.getLogger(LOGGER_NAME).handlers:
        handler.flush()

    log_file = tmp_path / "logs" / f"{run_id}.log"
    assert log_file.exists()
    assert "photo_timeline.sidecar: indexed 3 sidecars" in log_file.read_text(encoding="utf-8")


def test_console_stream_receives_build_progress(make_photo):
    stream = io.StringIO()
    setup_logging(stream=stream)

    Timeline(TimelineConfig(tz=timezone.utc)).build([make_photo("a.jpg")])

    output = stream.getvalue()
    assert "Phase 1/4: Classifying records..." in output
    assert "a.jpg: no usable date" not in output


def test_verbose_stream_includes_resolution_detail(make_photo):
    stream = io.StringIO()
    setup_logging(verbose=True, stream=stream)

    Timeline(TimelineConfig(tz=timezone.utc)).build([make_photo("a.jpg")])

    assert "a.jpg: no usable date, falling back to now" in stream.getvalue()


def test_package_export():
    assert photo_timeline.setup_logging is setup_logging


def test_repeated_setup_does_not_stack_handlers(tmp_path):
    setup_logging(log_dir=tmp_path)
    setup_logging(log_dir=tmp_path)
    assert len(logging.getLogger(LOGGER_NAME).handlers) == 2
