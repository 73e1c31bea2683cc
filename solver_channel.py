"""
TSP Map Editor - Solver Channel
Persistent WebSocket connection to the external TSP solver.

The socket lives on a background thread. Inbound messages are only put on a
queue there; the UI thread drains it with poll(), so editor state is never
touched off the main thread.
"""

import json
import logging
import math
import queue
import threading
from collections import deque
from dataclasses import dataclass, asdict
from typing import Any, Callable, Deque, Dict, List, Optional, Sequence

import websocket

logger = logging.getLogger(__name__)

SEND_POLICIES = ("queue", "drop")


@dataclass(frozen=True)
class SolverParameters:
    """Search parameters passed through to the solver untouched."""
    alpha: float = 1.0
    beta: float = 3.0
    rho: float = 0.5

    def __post_init__(self):
        for name, value in asdict(self).items():
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be a positive number, got {value!r}")

    def to_dict(self) -> Dict[str, float]:
        return {k: float(v) for k, v in asdict(self).items()}


def build_solve_request(matrix: Sequence[Sequence[float]],
                        params: Optional[SolverParameters] = None) -> Dict[str, Any]:
    """Build the outbound solve message."""
    message = {"type": "solve", "data": [list(map(float, row)) for row in matrix]}
    if params is not None:
        message["params"] = params.to_dict()
    return message


def parse_path_message(raw) -> Optional[List[int]]:
    """
    Decode an inbound solver message into a list of city indices.

    The payload may be a JSON array or a string holding one. Anything that
    does not decode to a list of integers is logged and dropped.

    Returns:
        The path indices, or None for a malformed message
    """
    try:
        message = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
    except ValueError as e:
        logger.warning("Discarding undecodable solver message: %s", e)
        return None

    if not isinstance(message, dict) or "payload" not in message:
        logger.warning("Discarding solver message without payload: %r", message)
        return None

    payload = message["payload"]
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            logger.warning("Discarding solver message with bad payload string: %s", e)
            return None

    if not isinstance(payload, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in payload):
        logger.warning("Discarding solver message, payload is not a list of indices: %r", payload)
        return None

    return payload


class SolverChannel:
    """
    One persistent duplex connection to the solver.

    Sends made before the socket is open are either queued and flushed on
    connect, or dropped, depending on `send_policy`. Only the latest
    `max_pending` queued requests are kept.
    """

    def __init__(
        self,
        url: str = "ws://localhost:8080",
        send_policy: str = "queue",
        max_pending: int = 1,
        reconnect_delay: float = 2.0,
        app_factory: Callable[..., Any] = websocket.WebSocketApp,
    ):
        if send_policy not in SEND_POLICIES:
            raise ValueError(f"Unknown send policy: {send_policy!r}")
        if reconnect_delay <= 0:
            raise ValueError(f"reconnect_delay must be positive, got {reconnect_delay}")
        self.url = url
        self.send_policy = send_policy
        self.reconnect_delay = reconnect_delay
        self.app_factory = app_factory

        self.inbound: "queue.Queue[Any]" = queue.Queue()
        self.pending: Deque[str] = deque(maxlen=max_pending)

        self._app = None
        self._connected = False
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def connected(self) -> bool:
        return self._connected

    # --------------------------------------------------------
    def start(self):
        """Open the connection on a daemon thread and keep it open until close()."""
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="solver-channel", daemon=True)
        self._thread.start()

    def _run(self):
        while not self._stop.is_set():
            app = self.app_factory(
                self.url,
                on_open=self._on_open,
                on_message=self._on_message,
                on_error=self._on_error,
                on_close=self._on_close,
            )
            with self._lock:
                if self._stop.is_set():
                    break
                self._app = app
            logger.info("Connecting to solver at %s", self.url)
            try:
                app.run_forever()
            except websocket.WebSocketException as e:
                logger.warning("Solver connection failed: %s", e)
            with self._lock:
                self._connected = False
                self._app = None
            if self._stop.wait(self.reconnect_delay):
                break
            logger.info("Reconnecting to solver in background")

    def close(self, timeout: float = 2.0):
        """Stop reconnecting, close the socket and wait for the worker thread."""
        with self._lock:
            self._stop.set()
            app = self._app
            self._connected = False
        if app is not None:
            app.close()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Solver channel thread did not stop within %.1fs", timeout)

    # --------------------------------------------------------
    def _on_open(self, ws):
        with self._lock:
            self._connected = True
            flushed = list(self.pending)
            self.pending.clear()
        logger.info("Solver connection open")
        for text in flushed:
            ws.send(text)
        if flushed:
            logger.info("Flushed %d queued solve request(s)", len(flushed))

    def _on_message(self, ws, message):
        self.inbound.put(message)

    def _on_error(self, ws, error):
        logger.warning("Solver channel error: %s", error)

    def _on_close(self, ws, close_status_code=None, close_msg=None):
        with self._lock:
            self._connected = False
        logger.info("Solver connection closed (code=%s)", close_status_code)

    # --------------------------------------------------------
    def send_solve_request(self, matrix: Sequence[Sequence[float]],
                           params: Optional[SolverParameters] = None) -> bool:
        """
        Send a solve request without blocking.

        Returns:
            True if the message went out on an open socket
        """
        text = json.dumps(build_solve_request(matrix, params))
        with self._lock:
            app = self._app if self._connected else None
            if app is None:
                return self._hold(text)
        try:
            app.send(text)
            return True
        except websocket.WebSocketException as e:
            logger.warning("Send failed, solver connection lost: %s", e)
            with self._lock:
                self._connected = False
                return self._hold(text)

    def _hold(self, text: str) -> bool:
        if self.send_policy == "queue":
            self.pending.append(text)
            logger.info("Solver not connected, queued solve request")
        else:
            logger.warning("Solver not connected, dropped solve request")
        return False

    def poll(self) -> List[List[int]]:
        """Drain the inbound queue and return every well-formed path, oldest first."""
        paths = []
        while True:
            try:
                raw = self.inbound.get_nowait()
            except queue.Empty:
                break
            path = parse_path_message(raw)
            if path is not None:
                paths.append(path)
        return paths
