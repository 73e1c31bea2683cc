import json
import logging
import threading

import pytest
import websocket

from conftest import FakeSocketApp
from solver_channel import (
    SolverChannel, SolverParameters, build_solve_request, parse_path_message,
)


def test_parameters_must_be_positive():
    assert SolverParameters().to_dict() == {"alpha": 1.0, "beta": 3.0, "rho": 0.5}
    with pytest.raises(ValueError):
        SolverParameters(alpha=0)
    with pytest.raises(ValueError):
        SolverParameters(rho=float('nan'))


def test_build_solve_request():
    msg = build_solve_request([[0, 3], [3, 0]], SolverParameters(2, 4, 0.1))
    assert msg == {
        "type": "solve",
        "data": [[0.0, 3.0], [3.0, 0.0]],
        "params": {"alpha": 2.0, "beta": 4.0, "rho": 0.1},
    }
    assert "params" not in build_solve_request([[0.0]])


@pytest.mark.parametrize("raw", [
    '{"type": "update", "payload": [2, 0, 1]}',
    '{"type": "path", "payload": "[2, 0, 1]"}',
    {"type": "path", "payload": [2, 0, 1]},
    b'{"type": "path", "payload": "[2,0,1]"}',
])
def test_parse_accepts_list_and_string_payloads(raw):
    assert parse_path_message(raw) == [2, 0, 1]


@pytest.mark.parametrize("raw", [
    'not json',
    '[1, 2, 3]',
    '{"type": "path"}',
    '{"type": "path", "payload": "[1, 2"}',
    '{"type": "path", "payload": [1, "2"]}',
    '{"type": "path", "payload": [true, false]}',
    '{"type": "path", "payload": 5}',
])
def test_parse_discards_malformed_messages_with_a_warning(raw, caplog):
    with caplog.at_level(logging.WARNING, logger="solver_channel"):
        assert parse_path_message(raw) is None
    assert any("Discarding" in r.getMessage() for r in caplog.records)


def test_send_while_disconnected_is_queued_then_flushed_on_open():
    channel = SolverChannel(app_factory=FakeSocketApp)
    assert channel.send_solve_request([[0.0]]) is False
    assert channel.send_solve_request([[0.0, 1.0], [1.0, 0.0]]) is False
    # only the latest request is kept
    assert len(channel.pending) == 1

    app = FakeSocketApp(channel.url)
    channel._app = app
    channel._on_open(app)
    assert channel.connected
    assert [json.loads(t)["data"] for t in app.sent] == [[[0.0, 1.0], [1.0, 0.0]]]
    assert not channel.pending

    assert channel.send_solve_request([[0.0]], SolverParameters()) is True
    assert json.loads(app.sent[-1])["params"] == {"alpha": 1.0, "beta": 3.0, "rho": 0.5}


def test_drop_policy_discards_offline_requests(caplog):
    channel = SolverChannel(send_policy="drop", app_factory=FakeSocketApp)
    with caplog.at_level(logging.WARNING, logger="solver_channel"):
        assert channel.send_solve_request([[0.0]]) is False
    assert not channel.pending
    assert "dropped" in caplog.text


def test_unknown_policy():
    with pytest.raises(ValueError):
        SolverChannel(send_policy="retry")


def test_close_marks_disconnected():
    channel = SolverChannel(app_factory=FakeSocketApp)
    app = FakeSocketApp(channel.url)
    channel._app = app
    channel._on_open(app)
    channel._on_close(app, 1000, "bye")
    assert not channel.connected
    channel.close()
    assert app.closed


def test_poll_drains_queue_and_skips_bad_messages():
    channel = SolverChannel(app_factory=FakeSocketApp)
    channel._on_message(None, '{"type": "path", "payload": [0, 1]}')
    channel._on_message(None, 'garbage')
    channel._on_message(None, '{"type": "path", "payload": "[1, 0]"}')
    assert channel.poll() == [[0, 1], [1, 0]]
    assert channel.poll() == []


def test_reconnect_delay_must_be_positive():
    with pytest.raises(ValueError):
        SolverChannel(reconnect_delay=0)
    with pytest.raises(ValueError):
        SolverChannel(reconnect_delay=-1)


class ShortLivedSocketApp(FakeSocketApp):
    """Opens, delivers one path and drops the connection."""

    def run_forever(self):
        super().run_forever()
        self.on_open(self)
        self.on_message(self, '{"type": "path", "payload": [0, 1]}')


def test_worker_reconnects_and_stops_on_close():
    apps = []
    reconnected = threading.Event()

    def factory(url, **callbacks):
        app = ShortLivedSocketApp(url, **callbacks)
        apps.append(app)
        if len(apps) >= 2:
            reconnected.set()
        return app

    channel = SolverChannel(reconnect_delay=0.01, app_factory=factory)
    assert channel.send_solve_request([[0.0]]) is False
    channel.start()
    assert reconnected.wait(2.0)

    thread = channel._thread
    channel.close()
    assert not thread.is_alive()
    assert channel._thread is None
    assert not channel.connected

    # the request queued before start went out on the first connection
    assert json.loads(apps[0].sent[0])["data"] == [[0.0]]
    assert not channel.pending
    assert [0, 1] in channel.poll()
    assert apps[0].runs == 1 and len(apps) >= 2


def test_close_during_connect_skips_run():
    apps = []
    channel = SolverChannel(app_factory=FakeSocketApp)

    def factory(url, **callbacks):
        app = FakeSocketApp(url, **callbacks)
        apps.append(app)
        # close() lands between creating the app and publishing it
        channel.close()
        return app

    channel.app_factory = factory
    channel._run()
    assert len(apps) == 1
    assert apps[0].runs == 0
    assert channel._app is None


def test_close_without_start_is_harmless():
    channel = SolverChannel(app_factory=FakeSocketApp)
    channel.close()
    assert not channel.connected


class ClosedSocketApp(FakeSocketApp):
    def send(self, text):
        raise websocket.WebSocketConnectionClosedException("socket is already closed.")


@pytest.mark.parametrize("policy, pending", [("queue", 1), ("drop", 0)])
def test_send_on_dead_socket_falls_back_to_policy(policy, pending, caplog):
    channel = SolverChannel(send_policy=policy, app_factory=ClosedSocketApp)
    app = ClosedSocketApp(channel.url)
    channel._app = app
    channel._on_open(app)
    assert channel.connected

    with caplog.at_level(logging.WARNING, logger="solver_channel"):
        assert channel.send_solve_request([[0.0]]) is False
    assert not channel.connected
    assert len(channel.pending) == pending
    assert "Send failed" in caplog.text
