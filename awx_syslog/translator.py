"""Translates AWX JSON log bodies into RFC 5424 syslog messages."""

import logging
from dataclasses import dataclass

from awx_syslog.messages import message_for
from awx_syslog.models import CommonFields
from awx_syslog.parser import parse_awx_log
from awx_syslog.rfc5424 import MAX_APP_NAME_LEN, MAX_HOSTNAME_LEN, SyslogMessage, sanitize_header
from awx_syslog.severity import FACILITY_AUDIT, priority_for
from awx_syslog.structured_data import build_structured_data

logger = logging.getLogger(__name__)

APP_NAME_PREFIX = "awx-controller-"


@dataclass(frozen=True)
class Translation:
    logger_type: str
    common: CommonFields
    message: SyslogMessage
    wire: str


def awx_event_to_syslog_message(logger_type: str, common: CommonFields, residual: dict,
                                hostname: str = "") -> SyslogMessage:
    """Assemble the syslog message model for one parsed AWX event."""
    msg_id, text = message_for(logger_type, residual)
    app_name = _header_value("app-name", f"{APP_NAME_PREFIX}{common.cluster_host_id}", MAX_APP_NAME_LEN)
    return SyslogMessage(
        priority=priority_for(common.level, FACILITY_AUDIT),
        version=1,
        timestamp=common.timestamp,
        hostname=_header_value("hostname", hostname, MAX_HOSTNAME_LEN),
        app_name=app_name,
        msg_id=msg_id,
        structured_data=build_structured_data(logger_type, common, residual),
        message=text,
    )


def _header_value(label: str, value: str, max_len: int) -> str:
    safe = sanitize_header(value, max_len)
    if safe != value:
        logger.debug("Rewrote %s %r as %r", label, value, safe)
    return safe


def translate(payload: bytes, hostname: str = "", counter=None) -> Translation:
    """Parse *payload* and render it as an RFC 5424 message.

    *counter*, when given, has ``increment(logger_type)`` called once the body
    has parsed, before serialization.

    Raises:
        ParseError: If *payload* is not a JSON object.
        SerializationError: If the assembled message cannot be rendered.
    """
    logger_type, common, residual = parse_awx_log(payload)
    if counter is not None:
        counter.increment(logger_type)
    logger.info("Parsed log type: %s", logger_type or "<empty>")

    message = awx_event_to_syslog_message(logger_type, common, residual, hostname)
    return Translation(
        logger_type=logger_type,
        common=common,
        message=message,
        wire=message.to_wire(),
    )
