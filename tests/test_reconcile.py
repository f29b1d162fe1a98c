"""Tests for the reconciliation loop."""

import threading
from contextlib import ExitStack

import pytest

from request_board.client.reconcile import ReconciliationLoop
from request_board.client.session import ListSession
from request_board.errors import InternalError

from conftest import FakeAPI, RedrawRecorder, make_request


class TestTick:
    def test_unchanged_list_does_not_redraw(self, loop, fake_api, redraw):
        assert loop.tick() is False
        assert fake_api.count("list_requests") == 1
        assert redraw.count == 0

    def test_external_change_redraws_exactly_once(self, abcd, redraw):
        a, b, c = abcd[:3]
        api = FakeAPI([a, b, c])
        session = ListSession([a, b, c])
        loop = ReconciliationLoop(api, session, redraw)

        api.items = [b, a, c]
        assert loop.tick() is True
        assert loop.tick() is False
        assert redraw.count == 1
        assert [r.id for r in redraw.frames[0]] == [b.id, a.id, c.id]
        assert session.ids() == [b.id, a.id, c.id]

    def test_field_change_counts_as_change(self, loop, fake_api, session, redraw):
        fake_api.items[1] = fake_api.items[1].model_copy(update={"status": "completed"})
        assert loop.tick() is True
        assert session.find(2).status == "completed"

    def test_busy_session_skips_fetch(self, loop, fake_api, session, redraw):
        fake_api.items.reverse()
        with session.busy():
            assert loop.tick() is False
        assert fake_api.count("list_requests") == 0
        assert redraw.count == 0
        assert session.ids() == [1, 2, 3, 4]

    def test_busy_set_during_fetch_discards_result(self, loop, fake_api, session, redraw):
        fake_api.items.reverse()
        with ExitStack() as stack:
            fake_api.hooks["list_requests"] = lambda: stack.enter_context(session.busy())
            assert loop.tick() is False
        assert not session.is_busy
        assert session.ids() == [1, 2, 3, 4]
        assert redraw.count == 0

    def test_fetch_failure_is_swallowed(self, loop, fake_api, session, redraw, network_down):
        fake_api.fail["list_requests"] = network_down
        assert loop.tick() is False
        assert session.ids() == [1, 2, 3, 4]
        assert redraw.count == 0

        del fake_api.fail["list_requests"]
        fake_api.items.pop()
        assert loop.tick() is True

    def test_empty_server_list_replaces_local(self, loop, fake_api, session, redraw):
        fake_api.items = []
        assert loop.tick() is True
        assert session.items == []
        assert redraw.frames == [[]]


class TestReload:
    def test_always_redraws(self, loop, redraw):
        loop.reload()
        loop.reload()
        assert redraw.count == 2

    def test_reload_ignores_busy_flag(self, loop, fake_api, session):
        fake_api.items.reverse()
        with session.busy():
            loop.reload()
        assert session.ids() == [4, 3, 2, 1]

    def test_errors_propagate_and_keep_local_list(self, loop, fake_api, session, redraw):
        fake_api.fail["list_requests"] = InternalError("boom", status_code=500)
        with pytest.raises(InternalError):
            loop.reload()
        assert session.ids() == [1, 2, 3, 4]
        assert redraw.count == 0


class TestLifecycle:
    def test_rejects_non_positive_interval(self, fake_api, session, redraw):
        with pytest.raises(ValueError):
            ReconciliationLoop(fake_api, session, redraw, interval=0)

    def test_start_stop_restart(self, fake_api, session):
        changed = threading.Event()

        def on_change(items):
            changed.set()

        loop = ReconciliationLoop(fake_api, session, on_change, interval=0.01)
        fake_api.items.append(make_request(5, "E"))

        loop.start()
        assert loop.running
        assert session.poll_handle is loop
        assert changed.wait(2)
        loop.stop(timeout=2)
        assert not loop.running
        assert session.poll_handle is None

        changed.clear()
        fake_api.items.pop(0)
        loop.start()
        try:
            assert changed.wait(2)
        finally:
            loop.stop(timeout=2)
        assert session.ids() == [2, 3, 4, 5]

    def test_start_twice_keeps_one_thread(self, loop):
        loop.start()
        try:
            first = loop._thread
            loop.start()
            assert loop._thread is first
        finally:
            loop.stop(timeout=2)

    def test_stop_without_start_is_harmless(self, loop):
        loop.stop()
        assert not loop.running

    def test_polls_on_fixed_cadence(self, fake_api, session):
        # A fake clock: every wait "sleeps" the full remaining time.
        now = [0.0]
        loop = ReconciliationLoop(fake_api, session, RedrawRecorder(), interval=5.0, clock=lambda: now[0])
        waits = []

        class FakeEvent:
            def wait(self, timeout):
                waits.append(timeout)
                now[0] += timeout
                # the tick itself takes 2 seconds
                now[0] += 2.0 if len(waits) < 4 else 0.0
                return len(waits) >= 4

        loop._run(FakeEvent())
        assert waits[0] == 5.0
        assert waits[1:] == [3.0, 3.0, 3.0]
        assert fake_api.count("list_requests") == 3


class TestReplaceUnlessBusy:
    def test_swaps_when_idle(self, session, abcd):
        assert session.replace_unless_busy(abcd[::-1]) is True
        assert session.ids() == [4, 3, 2, 1]

    def test_keeps_list_while_busy(self, session, abcd):
        with session.busy():
            assert session.replace_unless_busy(abcd[::-1]) is False
        assert session.ids() == [1, 2, 3, 4]

    def test_busy_entered_under_the_same_lock(self, session, abcd):
        # Holding the lock blocks busy(), so the check and the swap cannot
        # be split by an action starting on another thread.
        entered = threading.Event()

        def start_action():
            with session.busy():
                entered.set()

        with session._lock:
            worker = threading.Thread(target=start_action)
            worker.start()
            assert not entered.wait(0.05)
            assert session.replace_unless_busy(abcd[::-1]) is True
        worker.join(2)
        assert entered.is_set()
        assert session.ids() == [4, 3, 2, 1]
