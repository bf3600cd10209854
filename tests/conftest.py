import json
import socket
import threading
import time

import pytest

from awx_syslog.config import Config, SyslogConfig
from awx_syslog.metrics import Metrics


@pytest.fixture
def activity_stream_event():
    return {
        "@timestamp": "2024-01-15T10:30:00.123Z",
        "cluster_host_id": "awx-1",
        "level": "INFO",
        "logger_name": "activity_stream",
        "path": "awx/main/signals.py",
        "actor": "admin",
        "operation": "create",
        "changes": {"name": "Demo"},
        "object1": {"type": "job_template", "name": "Demo JT"},
    }


@pytest.fixture
def job_event():
    return {
        "@timestamp": "2024-01-15T10:30:00Z",
        "cluster_host_id": "awx-1",
        "level": "INFO",
        "logger_name": "job_events",
        "path": "awx/main/tasks.py",
        "event_host": "web01",
        "event_data": {"res": {"changed": True}},
        "job_id": 42,
        "task_name": "deploy",
        "play_name": "site",
    }


@pytest.fixture
def unknown_event():
    return {
        "level": "DEBUG",
        "cluster_host_id": "awx-2",
        "custom": "value",
        "count": 3,
        "nested": {"a": 1},
    }


def encode(event: dict) -> bytes:
    return json.dumps(event).encode("utf-8")


class FakeForwarder:
    """Records messages instead of sending them; can be told to fail."""

    def __init__(self, error: Exception | None = None):
        self.sent: list[str] = []
        self.error = error

    def send(self, wire: str):
        if self.error is not None:
            raise self.error
        self.sent.append(wire)


@pytest.fixture
def metrics():
    return Metrics()


@pytest.fixture
def config():
    return Config(hostname_field="awx.example.com", syslog=SyslogConfig(server_addr="127.0.0.1:5514"))


@pytest.fixture
def udp_collector():
    """A UDP socket on an OS-assigned port standing in for a syslog server."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


class TCPCollector:
    """Accepts one connection at a time and stores everything read until EOF."""

    def __init__(self):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(5)
        self._sock.settimeout(0.2)
        self.address = "%s:%d" % self._sock.getsockname()
        self.received: list[bytes] = []
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            with conn:
                conn.settimeout(2.0)
                chunks = []
                while True:
                    data = conn.recv(65536)
                    if not data:
                        break
                    chunks.append(data)
                self.received.append(b"".join(chunks))

    def wait_for(self, count: int, timeout: float = 2.0) -> list[bytes]:
        deadline = time.monotonic() + timeout
        while len(self.received) < count and time.monotonic() < deadline:
            time.sleep(0.05)
        return list(self.received)

    def close(self):
        self._stop.set()
        self._thread.join(timeout=2)
        self._sock.close()


@pytest.fixture
def tcp_collector():
    collector = TCPCollector()
    yield collector
    collector.close()
