import threading

import pytest

from storefront.store import Store


def test_set_notifies_subscribers():
    store = Store(1)
    seen = []
    store.subscribe(seen.append)

    store.set(2)
    store.update(lambda v: v * 10)

    assert store.get() == 20
    assert seen == [2, 20]


def test_unsubscribe_stops_notifications():
    store = Store("a")
    seen = []
    unsubscribe = store.subscribe(seen.append)

    unsubscribe()
    unsubscribe()
    store.set("b")

    assert seen == []


def test_failed_update_keeps_value():
    store = Store({"x": 1})

    def boom(value):
        raise RuntimeError("no")

    with pytest.raises(RuntimeError):
        store.update(boom)

    assert store.get() == {"x": 1}


def test_subscribers_run_outside_the_lock():
    store = Store(0)
    writers = []

    def listener(value):
        if value != 1:
            return
        # another thread must be able to write while we are being notified
        writer = threading.Thread(target=store.set, args=(2,))
        writer.start()
        writer.join(timeout=2)
        writers.append(writer)

    store.subscribe(listener)
    store.update(lambda v: v + 1)

    assert not writers[0].is_alive()
    assert store.get() == 2
