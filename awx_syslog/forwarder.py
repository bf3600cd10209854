"""Sends serialized syslog messages to the collector over TCP, UDP or TLS.

One connection per message: no pooling, queueing or retry.
"""

import logging
import socket
import ssl

from awx_syslog.config import ConfigError, SyslogConfig, split_host_port
from awx_syslog.errors import AWXSyslogError
from awx_syslog.tls_context import create_client_context

logger = logging.getLogger(__name__)

PROTOCOLS = ("tcp", "udp", "tls")
FRAMINGS = ("none", "octet-counting", "lf")


class UnsupportedProtocolError(AWXSyslogError):
    """Raised when the configured transport is not tcp, udp or tls."""


class ForwardingError(AWXSyslogError):
    """Raised when the message could not be delivered to the collector."""


def frame_message(wire: str, framing: str = "none") -> bytes:
    """Encode *wire* for a stream transport (RFC 6587)."""
    data = wire.encode("utf-8")
    if framing == "octet-counting":
        return str(len(data)).encode("ascii") + b" " + data
    if framing == "lf":
        return data + b"\n"
    if framing == "none":
        return data
    raise ForwardingError(f"unknown framing {framing!r}, expected one of {', '.join(FRAMINGS)}")


def send_message(protocol: str, address: str, wire: str, framing: str = "none",
                 timeout: float | None = 10.0, ssl_context: ssl.SSLContext | None = None):
    """Connect to *address* over *protocol* and write *wire* once.

    Raises:
        UnsupportedProtocolError: Before any network activity, for an unknown protocol.
        ForwardingError: If the address is malformed or the connection/write fails.
    """
    protocol = (protocol or "").lower()
    if protocol not in PROTOCOLS:
        raise UnsupportedProtocolError(
            f"invalid syslog protocol {protocol!r}, expected one of {', '.join(PROTOCOLS)}"
        )

    try:
        host, port = split_host_port(address)
    except ConfigError as exc:
        raise ForwardingError(str(exc)) from exc

    try:
        if protocol == "udp":
            _send_udp(host, port, wire.encode("utf-8"), timeout)
        else:
            payload = frame_message(wire, framing)
            if protocol == "tls":
                _send_tls(host, port, payload, timeout, ssl_context or create_client_context())
            else:
                _send_tcp(host, port, payload, timeout)
    except (OSError, ssl.SSLError) as exc:
        raise ForwardingError(f"{protocol} send to {address} failed: {exc}") from exc

    logger.debug("Sent %d bytes to %s over %s", len(wire), address, protocol)


def _send_udp(host: str, port: int, data: bytes, timeout):
    family = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0][0]
    with socket.socket(family, socket.SOCK_DGRAM) as sock:
        sock.settimeout(timeout)
        sock.sendto(data, (host, port))


def _send_tcp(host: str, port: int, data: bytes, timeout):
    with socket.create_connection((host, port), timeout=timeout) as sock:
        sock.sendall(data)


def _send_tls(host: str, port: int, data: bytes, timeout, ctx: ssl.SSLContext):
    with socket.create_connection((host, port), timeout=timeout) as raw_sock:
        with ctx.wrap_socket(raw_sock, server_hostname=host) as sock:
            sock.sendall(data)


class SyslogForwarder:
    """Forwards messages using the transport settings in a SyslogConfig."""

    def __init__(self, config: SyslogConfig):
        self._config = config
        self._ssl_ctx = None

    @property
    def protocol(self) -> str:
        return self._config.protocol.lower()

    def _tls_context(self) -> ssl.SSLContext:
        if self._ssl_ctx is None:
            try:
                self._ssl_ctx = create_client_context(
                    self._config.tls.ca_file, self._config.tls.insecure_skip_verify
                )
            except (OSError, ssl.SSLError) as exc:
                raise ForwardingError(f"cannot load TLS settings: {exc}") from exc
        return self._ssl_ctx

    def send(self, wire: str):
        ctx = self._tls_context() if self.protocol == "tls" else None
        send_message(
            self.protocol, self._config.server_addr, wire,
            framing=self._config.framing,
            timeout=self._config.timeout,
            ssl_context=ctx,
        )
