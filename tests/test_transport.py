# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for SentryTransport."""

import asyncio
import os
from unittest.mock import MagicMock, patch

import pytest

from sentry_log_transport import (
    RemoteConfig,
    SentryTransport,
    SilentRemoteReporter,
    TransportOptions,
    TranslatorAction,
)


@pytest.fixture
def reporter():
    return SilentRemoteReporter()


class TestConstruction:
    """Tests for transport construction."""

    def test_init_with_defaults(self, reporter):
        """Test that the reporter is initialized with defaulted options."""
        with patch.dict(os.environ, {}, clear=True):
            SentryTransport(reporter=reporter)

        assert reporter.init_options == {
            "dsn": "",
            "server_name": "sentry-log-transport",
            "environment": "production",
            "debug": False,
            "sample_rate": 1.0,
            "max_breadcrumbs": 100,
        }

    def test_init_with_explicit_options(self, reporter):
        """Test that explicit Sentry options are forwarded."""
        SentryTransport(
            reporter=reporter,
            sentry={"dsn": "https://key@example.com/1", "environment": "staging", "release": "1.2"},
        )

        assert reporter.init_options["dsn"] == "https://key@example.com/1"
        assert reporter.init_options["environment"] == "staging"
        assert reporter.init_options["release"] == "1.2"

    def test_skip_sentry_init(self, reporter):
        """Test that skip_sentry_init leaves the client untouched."""
        SentryTransport(reporter=reporter, skip_sentry_init=True)

        assert not reporter.initialized

    def test_options_object(self, reporter):
        """Test construction from a TransportOptions instance."""
        options = TransportOptions(
            sentry=RemoteConfig(dsn="https://key@example.com/2"),
            levels_map={"warn": "info"},
            silent=True,
        )

        transport = SentryTransport(options, reporter=reporter)

        assert transport.silent is True
        assert transport.levels_map["warn"] == "info"
        assert reporter.init_options["dsn"] == "https://key@example.com/2"

    def test_keyword_overrides_options_object(self, reporter):
        """Test that keyword options are merged over an options object."""
        transport = SentryTransport(
            TransportOptions(silent=True), reporter=reporter, silent=False
        )

        assert transport.silent is False

    def test_unknown_option_rejected(self, reporter):
        """Test that unknown option names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown transport options"):
            SentryTransport(reporter=reporter, levelsMap={"warn": "info"})

    def test_auto_clear_scope_only_disabled_by_false(self, reporter):
        """Test that only an explicit False disables auto-clear."""
        assert SentryTransport(reporter=reporter, auto_clear_scope=None).auto_clear_scope
        assert not SentryTransport(reporter=reporter, auto_clear_scope=False).auto_clear_scope

    def test_sentry_accessor(self, reporter):
        """Test the read-only client accessor."""
        transport = SentryTransport(reporter=reporter)

        assert transport.sentry is reporter.client
        with pytest.raises(AttributeError):
            transport.sentry = object()


class TestLog:
    """Tests for SentryTransport.log."""

    def test_message_scenario(self, reporter):
        """Test a warn record remapped to info."""
        transport = SentryTransport(reporter=reporter, levels_map={"warn": "info"}, silent=False)

        action = transport.log({"message": "disk low", "level": "warn"})

        assert action is TranslatorAction.MESSAGE_CAPTURED
        assert reporter.get_messages("info")[0]["message"] == "disk low"
        assert not reporter.has_errors()

    def test_exception_scenario(self, reporter):
        """Test an error record without an embedded exception."""
        transport = SentryTransport(reporter=reporter)

        transport.log({"message": "boom", "level": "error", "tags": {"service": "api"}})

        assert len(reporter.reported_errors) == 1
        assert reporter.reported_errors[0]["error_message"] == "boom"
        assert reporter.reported_errors[0]["context"] == {
            "tags": {"service": "api"},
            "level": "error",
        }

    def test_callback_invoked(self, reporter):
        """Test that the completion callback runs once."""
        transport = SentryTransport(reporter=reporter)
        callback = MagicMock()

        transport.log({"message": "m", "level": "info"}, callback)

        callback.assert_called_once_with()

    def test_level_argument(self, reporter):
        """Test the out-of-band level indicator."""
        transport = SentryTransport(reporter=reporter)

        transport.log({"message": "m"}, level="error")

        assert reporter.has_errors()

    def test_silent_suppresses_remote_calls(self):
        """Test that silent mode still notifies and calls back."""
        reporter = MagicMock()
        transport = SentryTransport(reporter=reporter, silent=True, skip_sentry_init=True)
        listener = MagicMock()
        callback = MagicMock()
        transport.on("logged", listener)
        record = {"message": "boom", "level": "error"}

        action = transport.log(record, callback)

        assert action is TranslatorAction.SUPPRESSED
        reporter.capture_exception.assert_not_called()
        reporter.capture_message.assert_not_called()
        callback.assert_called_once_with()
        listener.assert_called_once_with(record)

    def test_silent_can_be_toggled(self, reporter):
        """Test that the silent attribute is read on every call."""
        transport = SentryTransport(reporter=reporter)
        transport.silent = True

        transport.log({"message": "m", "level": "info"})

        assert not reporter.has_messages()

    def test_scope_leaks_when_auto_clear_disabled(self, reporter):
        """Test that scope state persists between records without auto-clear."""
        transport = SentryTransport(reporter=reporter, auto_clear_scope=False)

        transport.log({"message": "one", "level": "info", "tags": {"a": 1}})
        transport.log({"message": "two", "level": "info"})

        assert reporter.captured_messages[1]["scope"]["tags"] == {"a": 1}


class TestLoggedNotification:
    """Tests for the deferred "logged" notification."""

    def test_not_delivered_inside_callback(self, reporter):
        """Test that listeners run after the completion callback."""
        transport = SentryTransport(reporter=reporter)
        order = []
        transport.on("logged", lambda info: order.append("logged"))

        transport.log({"message": "m", "level": "info"}, lambda: order.append("callback"))

        assert order == ["callback", "logged"]

    def test_delivered_before_log_returns_without_loop(self, reporter):
        """Test that without an event loop listeners have run when log returns."""
        transport = SentryTransport(reporter=reporter)
        listener = MagicMock()
        transport.on("logged", listener)

        transport.log({"message": "m", "level": "info"})

        listener.assert_called_once()

    def test_listener_that_logs_is_not_reentrant(self, reporter):
        """Test that a listener logging again is notified in FIFO order."""
        transport = SentryTransport(reporter=reporter)
        seen = []

        def listener(info):
            seen.append(info["message"])
            if info["message"] == "first":
                transport.log({"message": "second", "level": "info"})

        transport.on("logged", listener)
        transport.log({"message": "first", "level": "info"})

        assert seen == ["first", "second"]
        assert [m["message"] for m in reporter.captured_messages] == ["first", "second"]

    def test_listener_failure_does_not_break_log(self, reporter):
        """Test that a failing listener is logged, not raised."""
        transport = SentryTransport(reporter=reporter)
        transport.on("logged", MagicMock(side_effect=RuntimeError("listener")))

        transport.log({"message": "m", "level": "info"})

        assert reporter.has_messages()

    def test_off_removes_listener(self, reporter):
        """Test removing a listener."""
        transport = SentryTransport(reporter=reporter)
        listener = MagicMock()
        transport.on("logged", listener)
        transport.off("logged", listener)

        transport.log({"message": "m", "level": "info"})

        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_deferred_to_event_loop(self, reporter):
        """Test that inside an event loop the notification waits for the next tick."""
        transport = SentryTransport(reporter=reporter)
        listener = MagicMock()
        transport.on("logged", listener)

        transport.log({"message": "m", "level": "info"})
        listener.assert_not_called()

        await asyncio.sleep(0)
        listener.assert_called_once()


class TestShutdown:
    """Tests for end() and close()."""

    @pytest.mark.asyncio
    async def test_end_flushes_before_finish(self):
        """Test that flush completes before the finish event fires."""
        order = []
        reporter = MagicMock()
        reporter.flush.side_effect = lambda *args: order.append("flush")
        transport = SentryTransport(reporter=reporter, skip_sentry_init=True)
        transport.on("finish", lambda: order.append("finish"))

        result = await transport.end()

        assert result is transport
        assert order == ["flush", "finish"]
        assert transport.ended

    @pytest.mark.asyncio
    async def test_end_propagates_flush_failure(self):
        """Test that a failing flush is not swallowed."""
        reporter = MagicMock()
        reporter.flush.side_effect = RuntimeError("flush failed")
        transport = SentryTransport(reporter=reporter, skip_sentry_init=True)

        with pytest.raises(RuntimeError, match="flush failed"):
            await transport.end()

        assert not transport.ended

    def test_close_flushes(self, reporter):
        """Test the synchronous shutdown path."""
        transport = SentryTransport(reporter=reporter)

        transport.close(timeout=2.0)

        assert reporter.flush_count == 1
        assert transport.ended
