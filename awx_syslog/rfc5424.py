"""RFC 5424 syslog message model and wire serializer.

Wire layout::

    <PRI>VERSION SP TIMESTAMP SP HOSTNAME SP APP-NAME SP PROCID SP MSGID SP SD [SP MSG]

Absent header fields are written as the NILVALUE ``-``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from awx_syslog.errors import AWXSyslogError

NILVALUE = "-"

MAX_PRIORITY = 191
MAX_HOSTNAME_LEN = 255
MAX_APP_NAME_LEN = 48
MAX_PROCID_LEN = 128
MAX_MSGID_LEN = 32
MAX_SD_NAME_LEN = 32


class SerializationError(AWXSyslogError):
    """Raised when a message violates the RFC 5424 structure."""


def _is_printusascii(value: str) -> bool:
    return all(33 <= ord(c) <= 126 for c in value)


def is_valid_sd_name(name: str) -> bool:
    """SD-ID / PARAM-NAME: 1..32 printable ASCII chars except '=', ' ', ']' and '"'."""
    return (
        0 < len(name) <= MAX_SD_NAME_LEN
        and _is_printusascii(name)
        and not any(c in name for c in '=]"')
    )


def sanitize_header(value: str, max_len: int) -> str:
    """Replace characters outside printable ASCII with '_' and cut to *max_len*."""
    return "".join(c if 33 <= ord(c) <= 126 else "_" for c in value)[:max_len]


def escape_param_value(value: str) -> str:
    """Escape '\\', '"' and ']' with a backslash."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("]", "\\]")


def format_timestamp(ts: datetime | None) -> str:
    """Render *ts* as RFC 3339 with second precision, 'Z' for UTC."""
    if ts is None:
        return NILVALUE
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    text = ts.replace(microsecond=0).isoformat()
    if ts.utcoffset().total_seconds() == 0:
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass
class SyslogMessage:
    priority: int = 0
    version: int = 1
    timestamp: datetime | None = None
    hostname: str = ""
    app_name: str = ""
    proc_id: str = ""
    msg_id: str = ""
    structured_data: dict[str, dict[str, str]] = field(default_factory=dict)
    message: str = ""

    def to_wire(self) -> str:
        """Serialize to the RFC 5424 text form.

        Raises:
            SerializationError: If any header field or SD element is invalid.
        """
        if not 0 <= self.priority <= MAX_PRIORITY:
            raise SerializationError(f"priority {self.priority} out of range 0..{MAX_PRIORITY}")
        if not 1 <= self.version <= 999:
            raise SerializationError(f"version {self.version} out of range 1..999")

        header = [
            f"<{self.priority}>{self.version}",
            format_timestamp(self.timestamp),
            _header_field("hostname", self.hostname, MAX_HOSTNAME_LEN),
            _header_field("app-name", self.app_name, MAX_APP_NAME_LEN),
            _header_field("procid", self.proc_id, MAX_PROCID_LEN),
            _header_field("msgid", self.msg_id, MAX_MSGID_LEN),
            self._render_structured_data(),
        ]
        line = " ".join(header)
        if self.message:
            line += " " + self.message
        return line

    def _render_structured_data(self) -> str:
        if not self.structured_data:
            return NILVALUE

        parts = []
        for sd_id, params in self.structured_data.items():
            if not is_valid_sd_name(sd_id):
                raise SerializationError(f"invalid SD-ID {sd_id!r}")
            element = [sd_id]
            for name, value in params.items():
                if not is_valid_sd_name(name):
                    raise SerializationError(f"invalid PARAM-NAME {name!r} in {sd_id}")
                element.append(f'{name}="{escape_param_value(value)}"')
            parts.append("[" + " ".join(element) + "]")
        return "".join(parts)


def _header_field(label: str, value: str, max_len: int) -> str:
    if not value:
        return NILVALUE
    if len(value) > max_len:
        raise SerializationError(f"{label} longer than {max_len} characters: {value!r}")
    if not _is_printusascii(value):
        raise SerializationError(f"{label} contains non-printable characters: {value!r}")
    return value
