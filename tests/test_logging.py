"""Tests for the numcore logging namespace and what the engines report through it."""

import importlib
import logging
from io import StringIO

import numpy as np
import pytest

from numcore import integrate, integrate_box, minimize
from numcore.logging import configure_logging, get_logger, set_log_level


def quadratic(x):
    return float(np.dot(x, x)), 2.0 * x


@pytest.fixture
def captured():
    """Route every numcore logger to a buffer at DEBUG, then restore defaults."""
    stream = StringIO()
    configure_logging(level=logging.DEBUG, format_string="%(levelname)s|%(name)s|%(message)s", stream=stream)
    try:
        yield stream
    finally:
        configure_logging(level=logging.WARNING)


@pytest.mark.parametrize(
    "name,expected",
    [
        (None, "numcore"),
        ("numcore", "numcore"),
        ("numcore.integrate.adaptive", "numcore.integrate.adaptive"),
        ("user_module", "numcore.user_module"),
    ],
)
def test_logger_names_live_under_package(name, expected):
    assert get_logger(name).name == expected


def test_engine_loggers_are_cached_and_isolated():
    logger = get_logger("numcore.optimize.lbfgs")
    assert logger is importlib.import_module("numcore.optimize.lbfgs").logger
    assert logger is not importlib.import_module("numcore.integrate.adaptive").logger
    assert logger.propagate is False


def test_set_log_level_reaches_handlers():
    logger = get_logger("numcore.integrate.adaptive")
    try:
        set_log_level("debug")
        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)
        set_log_level("not-a-level")
        assert logger.level == logging.WARNING
    finally:
        set_log_level(logging.WARNING)


def test_configure_logging_applies_to_new_loggers(captured):
    get_logger("created_after_configure").info("late message")
    assert "INFO|numcore.created_after_configure|late message" in captured.getvalue()


def test_optimizer_iterations_logged_at_debug(captured):
    res = minimize(quadratic, np.array([1.0, -2.0]))
    assert res.success
    assert "DEBUG|numcore.optimize.lbfgs|iteration 1:" in captured.getvalue()


def test_default_level_hides_optimizer_iterations():
    stream = StringIO()
    configure_logging(level=logging.WARNING, stream=stream)
    try:
        minimize(quadratic, np.array([1.0, -2.0]))
        assert stream.getvalue() == ""
    finally:
        configure_logging(level=logging.WARNING)


def test_rejected_start_point_logged(captured):
    res = minimize(quadratic, np.array([np.nan, 1.0]))
    assert not res.success
    assert "INFO|numcore.optimize.lbfgs|minimization rejected:" in captured.getvalue()


def test_integration_failure_logged_at_info(captured):
    result = integrate(lambda x: 1.0 / x, 0.0, 1.0)
    assert not result.success
    assert "INFO|numcore.integrate.adaptive|adaptive integration stopped" in captured.getvalue()


def test_box_budget_refusal_logged(captured):
    res = integrate_box(lambda x: 1.0, [0.0, 0.0], [1.0, 1.0], max_evals=5)
    assert not res.success
    assert "INFO|numcore.integrate.box|box integration stopped" in captured.getvalue()
