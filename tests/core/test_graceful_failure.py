"""
Tests for graceful_failure.

These cover the "log and continue" behaviour used around analysis requests
and history reads/writes, which must never stop a finished session from
showing its result.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from iqtest.core.errors import InvariantViolation, PersistenceError
from iqtest.core.graceful_failure import (
    GracefulFailureDecorator,
    graceful_failure,
    graceful_failure_decorator,
)


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


def logged(mock_logger):
    """Return (level, message, exc_info) of the single log call."""
    args, kwargs = mock_logger.log.call_args
    return args[0], args[1], kwargs["exc_info"]


class TestGracefulFailureContextManager:
    """Tests for the graceful_failure context manager."""

    def test_body_runs_without_logging(self, mock_logger):
        """Test that a successful save produces no log line."""
        saved = []

        with graceful_failure("save test history", mock_logger):
            saved.append(42)

        assert saved == [42]
        mock_logger.log.assert_not_called()

    def test_persistence_error_is_absorbed(self, mock_logger):
        """Test that a failed history write does not reach the caller."""
        reached = False

        with graceful_failure("save test history", mock_logger):
            raise PersistenceError("database is locked")
        reached = True

        assert reached
        level, message, exc_info = logged(mock_logger)
        assert level == logging.WARNING
        assert message == "Failed to save test history: database is locked"
        assert exc_info is False

    def test_context_and_level(self, mock_logger):
        """Test that context pairs and a custom level are used."""
        with graceful_failure(
            "save test history",
            mock_logger,
            log_level=logging.ERROR,
            exc_info=True,
            context={"user_id": "user-1", "iq_score": 106},
        ):
            raise PersistenceError("disk full")

        level, message, exc_info = logged(mock_logger)
        assert level == logging.ERROR
        assert message == (
            "Failed to save test history (user_id=user-1, iq_score=106): disk full"
        )
        assert exc_info is True

    def test_invariant_violation_is_absorbed_too(self, mock_logger):
        """Test that the helper does not special-case domain errors.

        Callers only wrap non-critical work, so any Exception is logged.
        """
        with graceful_failure("generate result analysis", mock_logger):
            raise InvariantViolation("unexpected")

        mock_logger.log.assert_called_once()

    @pytest.mark.parametrize("exc_type", [KeyboardInterrupt, SystemExit])
    def test_base_exceptions_propagate(self, mock_logger, exc_type):
        """Test that interpreter-level exits are never swallowed."""
        with pytest.raises(exc_type):
            with graceful_failure("load test history", mock_logger):
                raise exc_type()

        mock_logger.log.assert_not_called()


class TestGracefulFailureDecorator:
    """Tests for graceful_failure_decorator."""

    def test_alias(self):
        assert graceful_failure_decorator is GracefulFailureDecorator

    def test_passes_through_return_value(self, mock_logger):
        """Test that arguments and return value are untouched on success."""

        @graceful_failure_decorator("load test history", logger=mock_logger)
        def load(user_id, limit=20):
            return [f"{user_id}:{limit}"]

        assert load("user-1", limit=5) == ["user-1:5"]
        mock_logger.log.assert_not_called()

    def test_returns_default_on_failure(self, mock_logger):
        """Test that an unreadable store yields the configured default."""

        @graceful_failure_decorator(
            "load test history", logger=mock_logger, default=()
        )
        def load():
            raise PersistenceError("unreadable")

        assert load() == ()
        _, message, _ = logged(mock_logger)
        assert message == "Failed to load test history: unreadable"

    def test_default_is_none(self, mock_logger):
        @graceful_failure_decorator("load test history", logger=mock_logger)
        def load():
            raise PersistenceError("unreadable")

        assert load() is None

    def test_falls_back_to_module_logger(self):
        """Test that the wrapped function's module logger is used."""
        with patch("iqtest.core.graceful_failure.logging.getLogger") as get_logger:

            @graceful_failure_decorator("load test history")
            def load():
                raise PersistenceError("unreadable")

            load()

        get_logger.assert_called_once_with(__name__)
        get_logger.return_value.log.assert_called_once()

    def test_preserves_metadata(self):
        @graceful_failure_decorator("load test history")
        def load_history():
            """Stored results, newest first."""

        assert load_history.__name__ == "load_history"
        assert load_history.__doc__ == "Stored results, newest first."
