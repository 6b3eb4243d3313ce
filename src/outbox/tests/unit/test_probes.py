"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock, patch

import structlog

from infrastructure.observability.probes import DefaultTransactionProbe
from outboxtest.observability import DefaultOutboxAsserterProbe


class TestTransactionProbe:
    """Tests for TransactionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultTransactionProbe()
        assert probe._logger is not None

    def test_default_probe_accepts_custom_logger(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultTransactionProbe(logger=mock_logger)
        assert probe._logger is mock_logger

    def test_transaction_retrying_logs_warning(self):
        """transaction_retrying should log the attempt number and error."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultTransactionProbe(logger=mock_logger)

        probe.transaction_retrying(attempt=2, error=Exception("could not serialize"))

        mock_logger.warning.assert_called_once_with(
            "database_transaction_retrying",
            attempt=2,
            error="could not serialize",
        )

    def test_transaction_failed_logs_debug(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultTransactionProbe(logger=mock_logger)

        probe.transaction_failed(ValueError("boom"))

        mock_logger.debug.assert_called_once_with(
            "database_transaction_failed",
            error_type="ValueError",
            error="boom",
        )


class TestOutboxAsserterProbe:
    """Tests for DefaultOutboxAsserterProbe."""

    def test_binds_component(self):
        with patch("outboxtest.observability.logger") as mock_logger:
            DefaultOutboxAsserterProbe()
            mock_logger.bind.assert_called_once_with(component="outbox_asserter")

    def test_message_popped_logs_debug(self):
        with patch("outboxtest.observability.logger") as mock_logger:
            mock_log = MagicMock()
            mock_logger.bind.return_value = mock_log

            DefaultOutboxAsserterProbe().message_popped("orders.created", "id-1")

            mock_log.debug.assert_called_once_with(
                "outbox_message_popped",
                destination="orders.created",
                message_id="id-1",
            )

    def test_pop_failed_logs_info(self):
        with patch("outboxtest.observability.logger") as mock_logger:
            mock_log = MagicMock()
            mock_logger.bind.return_value = mock_log

            DefaultOutboxAsserterProbe().pop_failed("orders.created", "no rows")

            mock_log.info.assert_called_once_with(
                "outbox_pop_failed",
                destination="orders.created",
                reason="no rows",
            )

    def test_outbox_purged_logs_count(self):
        with patch("outboxtest.observability.logger") as mock_logger:
            mock_log = MagicMock()
            mock_logger.bind.return_value = mock_log

            DefaultOutboxAsserterProbe().outbox_purged(3)

            mock_log.debug.assert_called_once_with("outbox_purged", count=3)
