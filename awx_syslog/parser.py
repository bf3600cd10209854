"""Parses raw AWX JSON log bodies into common fields and residual fields."""

import json
import logging
import re
from datetime import datetime

from awx_syslog.errors import AWXSyslogError
from awx_syslog.models import COMMON_KEYS, CommonFields

logger = logging.getLogger(__name__)

_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


class ParseError(AWXSyslogError):
    """Raised when a request body is not a JSON object."""


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp; returns None when *value* is not one."""
    if not _RFC3339_RE.match(value):
        return None
    # fromisoformat accepts at most 6 fractional digits
    normalized = re.sub(r"(\.\d{6})\d+", r"\1", value.upper().replace("Z", "+00:00"))
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _string(raw: dict, key: str) -> str:
    value = raw.get(key)
    return value if isinstance(value, str) else ""


def parse_awx_log(payload: bytes) -> tuple[str, CommonFields, dict]:
    """Split an AWX log body into (logger_type, common fields, residual fields).

    Raises:
        ParseError: If *payload* is not UTF-8 JSON or not a JSON object.
    """
    try:
        raw = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
        raise ParseError(f"invalid JSON body: {exc}") from exc

    if not isinstance(raw, dict):
        raise ParseError(f"expected a JSON object, got {type(raw).__name__}")

    common = CommonFields(
        cluster_host_id=_string(raw, "cluster_host_id"),
        level=_string(raw, "level"),
        logger_name=_string(raw, "logger_name"),
        path=_string(raw, "path"),
    )

    stamp = raw.get("@timestamp")
    if isinstance(stamp, str):
        common.timestamp = parse_timestamp(stamp)
        if common.timestamp is None:
            logger.debug("Ignoring malformed @timestamp %r", stamp)

    residual = {k: v for k, v in raw.items() if k not in COMMON_KEYS}
    return common.logger_name, common, residual
