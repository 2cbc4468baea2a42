"""Tests for the listener registry."""

import pytest

from confsync.services.listeners import ListenerRegistry


def test_notify_all_calls_listeners_in_order() -> None:
    registry = ListenerRegistry()
    calls: list[str] = []
    registry.register(lambda: calls.append("first"))
    registry.register(lambda: calls.append("second"))

    registry.notify_all()

    assert calls == ["first", "second"]
    assert len(registry.registered) == 2


def test_notify_all_without_listeners() -> None:
    ListenerRegistry().notify_all()


def test_failing_listener_propagates_and_skips_rest() -> None:
    registry = ListenerRegistry()
    calls: list[str] = []

    def failing() -> None:
        raise RuntimeError("listener failed")

    registry.register(failing)
    registry.register(lambda: calls.append("after"))

    with pytest.raises(RuntimeError):
        registry.notify_all()
    assert calls == []
