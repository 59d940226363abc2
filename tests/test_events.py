import logging

from auth.events import SESSION_EXPIRED_EVENT, SessionExpiredNotifier, session_expired


def test_emit_calls_every_listener() -> None:
    notifier = SessionExpiredNotifier()
    calls: list[str] = []
    notifier.subscribe(lambda: calls.append("sidebar"))
    notifier.subscribe(lambda: calls.append("router"))

    notifier.emit()

    assert calls == ["sidebar", "router"]


def test_unsubscribe_stops_delivery() -> None:
    notifier = SessionExpiredNotifier()
    calls: list[str] = []
    unsubscribe = notifier.subscribe(lambda: calls.append("router"))

    unsubscribe()
    unsubscribe()
    notifier.emit()

    assert calls == []
    assert len(notifier) == 0


def test_failing_listener_is_logged_and_skipped(caplog) -> None:
    notifier = SessionExpiredNotifier()
    calls: list[str] = []

    def broken() -> None:
        raise ValueError("boom")

    notifier.subscribe(broken)
    notifier.subscribe(lambda: calls.append("router"))

    with caplog.at_level(logging.ERROR, logger="designhub.client"):
        notifier.emit()

    assert calls == ["router"]
    assert "Listener for designhub:auth:session-expired failed" in caplog.text


def test_process_wide_default() -> None:
    assert session_expired.name == SESSION_EXPIRED_EVENT == "designhub:auth:session-expired"
