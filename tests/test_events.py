from mycontacts.core.events import EventBus


def test_handlers_run_in_order_and_history_is_bounded():
    bus = EventBus(max_history=3)
    calls = []

    bus.subscribe("menu.loaded", lambda e: calls.append(("first", e.data["sections"])))
    bus.subscribe("menu.loaded", lambda e: calls.append(("second", e.source)))

    bus.emit("menu.loaded", {"sections": 4}, source="menu")

    assert calls == [("first", 4), ("second", "menu")]

    for i in range(5):
        bus.emit("flow.presented", {"i": i})
    assert [e.data["i"] for e in bus.get_history()] == [2, 3, 4]
    assert bus.get_history("menu.loaded") == []


def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    seen = []

    def boom(_event):
        raise RuntimeError("handler failed")

    bus.subscribe("alert.presented", boom)
    bus.subscribe("alert.presented", lambda e: seen.append(e.data["title"]))

    bus.emit("alert.presented", {"title": "Error"})

    assert seen == ["Error"]


def test_unsubscribed_handler_is_not_called():
    bus = EventBus()
    seen = []
    handler = seen.append

    bus.subscribe("menu.loaded", handler)
    bus.unsubscribe("menu.loaded", handler)
    bus.unsubscribe("menu.loaded", handler)
    bus.emit("menu.loaded", {"sections": 4})

    assert seen == []
