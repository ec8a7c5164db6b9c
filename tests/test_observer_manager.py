"""Tests for the generic ObserverManager."""

from unittest.mock import Mock

import pytest

from haptiknit.model_manager import ObserverManager


@pytest.mark.unit
class TestObserverManager:
    """Test registration and notification."""

    def test_register_is_idempotent(self):
        manager = ObserverManager[object](observer_type_name="test")
        observer = Mock()
        manager.register(observer)
        manager.register(observer)
        assert len(manager) == 1
        assert observer in manager

    def test_notify_calls_callback(self):
        manager = ObserverManager[object]()
        observer = Mock()
        manager.register(observer)

        manager.notify("on_event", 1, key="x")

        observer.on_event.assert_called_once_with(1, key="x")

    def test_failing_observer_does_not_block_others(self):
        manager = ObserverManager[object]()
        broken = Mock()
        broken.on_event.side_effect = RuntimeError("boom")
        healthy = Mock()
        manager.register(broken)
        manager.register(healthy)

        manager.notify("on_event")

        healthy.on_event.assert_called_once()

    def test_missing_callback_is_logged(self):
        manager = ObserverManager[object]()
        manager.register(object())
        manager.notify("on_event")

    def test_unregister_and_clear(self):
        manager = ObserverManager[object]()
        first, second = Mock(), Mock()
        manager.register(first)
        manager.register(second)

        manager.unregister(first)
        assert manager.count() == 1

        manager.clear()
        assert len(manager) == 0
