from __future__ import annotations

import threading

from app.services.session_store import InMemorySessionStore


def test_log_appends_events_in_order(store):
    store.begin("s1")
    store.log("s1", "first")
    store.log("s1", "second", "arXiv")

    progress = store.get("s1")

    assert [e.step for e in progress.events] == ["first", "second"]
    assert progress.events[1].source == "arXiv"
    assert progress.complete is False


def test_log_before_begin_is_a_no_op(store):
    store.log("ghost", "step")

    assert "ghost" not in store
    assert store.get("ghost").events == []


def test_unknown_session_reports_empty_incomplete(store):
    progress = store.get("missing")

    assert progress.events == []
    assert progress.complete is False
    assert progress.to_dict("missing") == {"sessionId": "missing", "steps": [], "complete": False}


def test_begin_resets_existing_session(store):
    store.begin("s1")
    store.log("s1", "old")
    store.complete("s1")

    store.begin("s1")

    progress = store.get("s1")
    assert progress.events == []
    assert progress.complete is False


def test_get_returns_a_snapshot(store):
    store.begin("s1")
    snapshot = store.get("s1")
    store.log("s1", "later")

    assert snapshot.events == []
    assert len(store.get("s1").events) == 1


def test_event_dict_omits_missing_source(store):
    store.begin("s1")
    store.log("s1", "Query categorized as: market")

    step = store.get("s1").to_dict("s1")["steps"][0]

    assert step["step"] == "Query categorized as: market"
    assert "source" not in step
    assert step["timestamp"]


def test_discard_removes_session(store):
    store.begin("s1")
    store.discard("s1")

    assert "s1" not in store
    assert len(store) == 0


def test_idle_sessions_are_evicted_after_ttl():
    now = [1000.0]
    store = InMemorySessionStore(ttl_seconds=60, clock=lambda: now[0])
    store.begin("old")
    now[0] += 30
    store.begin("fresh")
    now[0] += 45

    assert store.get("old").events == []
    assert "old" not in store
    assert "fresh" in store


def test_zero_ttl_never_evicts():
    now = [0.0]
    store = InMemorySessionStore(ttl_seconds=0, clock=lambda: now[0])
    store.begin("s1")
    now[0] += 10**9

    store.get("s1")

    assert "s1" in store


def test_concurrent_writers_keep_every_event(store):
    store.begin("s1")

    def writer(n: int):
        for i in range(200):
            store.log("s1", f"w{n}-{i}")

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.get("s1").events) == 800
