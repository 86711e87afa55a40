"""Tests for the debounced persister and the event bus."""

import logging
from unittest.mock import MagicMock

from sectionreview_core.events import EventBus
from sectionreview_core.persistence import DebouncedPersister


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _make_persister(save=None, delay=1.0, on_saved=None):
    clock = FakeClock()
    persister = DebouncedPersister(
        "prop-1", save or MagicMock(return_value=True), delay=delay, clock=clock, on_saved=on_saved
    )
    return persister, clock


class TestDebouncedPersister:
    def test_nothing_written_before_quiet_period(self):
        save = MagicMock(return_value=True)
        persister, clock = _make_persister(save)
        persister.schedule({"v": 1})
        clock.now = 0.9
        assert persister.poll() is None
        save.assert_not_called()

    def test_rapid_changes_coalesce_into_latest_blob(self):
        save = MagicMock(return_value=True)
        persister, clock = _make_persister(save)
        for i in range(5):
            persister.schedule({"v": i})
            clock.now += 0.3

        clock.now += 1.0
        assert persister.poll() is True
        save.assert_called_once_with("prop-1", {"v": 4})
        assert not persister.pending

    def test_flush_writes_pending_immediately(self):
        save = MagicMock(return_value=True)
        persister, _ = _make_persister(save)
        persister.schedule({"v": 1})
        assert persister.flush() is True
        save.assert_called_once_with("prop-1", {"v": 1})

    def test_flush_without_pending_is_noop(self):
        save = MagicMock(return_value=True)
        persister, _ = _make_persister(save)
        assert persister.flush() is None
        save.assert_not_called()

    def test_save_now_replaces_pending_write(self):
        save = MagicMock(return_value=True)
        persister, clock = _make_persister(save)
        persister.schedule({"v": 1})
        persister.save_now({"v": 2})

        clock.now = 10.0
        assert persister.poll() is None
        save.assert_called_once_with("prop-1", {"v": 2})

    def test_backend_failure_logged_not_raised(self, caplog):
        save = MagicMock(side_effect=ConnectionError("offline"))
        persister, _ = _make_persister(save)
        with caplog.at_level(logging.WARNING):
            assert persister.save_now({"v": 1}) is False
        assert "offline" in caplog.text

    def test_false_return_is_a_failure(self, caplog):
        on_saved = MagicMock()
        persister, _ = _make_persister(MagicMock(return_value=False), on_saved=on_saved)
        with caplog.at_level(logging.WARNING):
            assert persister.save_now({"v": 1}) is False
        on_saved.assert_not_called()
        assert "rejected" in caplog.text

    def test_on_saved_receives_blob(self):
        on_saved = MagicMock()
        persister, _ = _make_persister(on_saved=on_saved)
        persister.save_now({"v": 1})
        on_saved.assert_called_once_with({"v": 1})

    def test_no_retry_after_failure(self):
        save = MagicMock(return_value=False)
        persister, clock = _make_persister(save)
        persister.schedule({"v": 1})
        clock.now = 2.0
        persister.poll()
        clock.now = 5.0
        persister.poll()
        assert save.call_count == 1


class TestEventBus:
    def test_handlers_called_in_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe("reviews-updated", lambda p: calls.append(("a", p["propertyId"])))
        bus.subscribe("reviews-updated", lambda p: calls.append(("b", p["propertyId"])))
        bus.emit("reviews-updated", {"propertyId": "prop-1"})
        assert calls == [("a", "prop-1"), ("b", "prop-1")]

    def test_unsubscribe(self):
        bus = EventBus()
        handler = MagicMock()
        bus.subscribe("property-updated", handler)
        bus.unsubscribe("property-updated", handler)
        bus.unsubscribe("property-updated", handler)  # must not raise
        bus.emit("property-updated", {})
        handler.assert_not_called()

    def test_failing_handler_logged_and_skipped(self, caplog):
        bus = EventBus()
        after = MagicMock()
        bus.subscribe("reviews-updated", MagicMock(side_effect=ValueError("boom")))
        bus.subscribe("reviews-updated", after)

        with caplog.at_level(logging.ERROR):
            bus.emit("reviews-updated", {"propertyId": "prop-1"})

        after.assert_called_once_with({"propertyId": "prop-1"})
        assert "Handler for reviews-updated failed" in caplog.text
        assert "boom" in caplog.text

    def test_emit_without_subscribers(self):
        EventBus().emit("reviews-changed", {})
