"""Registry of known AWX logger types.

Each logger type declares the JSON keys of its payload, the structured-data
parameter name each key is written under and the JSON kind it must have.
Residual event fields are decoded against that declaration leniently: a value
of the wrong kind is dropped to the field's zero value instead of failing the
event.
"""

import logging
from dataclasses import dataclass

from awx_syslog.models import (
    ActivityStreamLog,
    AWXLog,
    JobEventLog,
    SystemTrackingLog,
    UnknownLog,
)

logger = logging.getLogger(__name__)

UNKNOWN_SD_ID = "unknown_log"


@dataclass(frozen=True)
class FieldSpec:
    key: str      # JSON key in the event
    param: str    # structured-data parameter name
    kind: type    # str, int or dict


@dataclass(frozen=True)
class LogTypeSpec:
    logger_type: str
    sd_id: str
    payload_cls: type
    fields: tuple


REGISTRY: dict[str, LogTypeSpec] = {
    "activity_stream": LogTypeSpec(
        logger_type="activity_stream",
        sd_id="activity_stream",
        payload_cls=ActivityStreamLog,
        fields=(
            FieldSpec("actor", "actor", str),
            FieldSpec("changes", "changes", dict),
            FieldSpec("operation", "operation", str),
            FieldSpec("object1", "object1", dict),
            FieldSpec("object2", "object2", dict),
        ),
    ),
    "job_events": LogTypeSpec(
        logger_type="job_events",
        sd_id="job_events",
        payload_cls=JobEventLog,
        fields=(
            FieldSpec("event_host", "eventhost", str),
            FieldSpec("event_data", "eventdata", dict),
            FieldSpec("job_id", "jobid", int),
            FieldSpec("task_name", "taskname", str),
            FieldSpec("play_name", "playname", str),
        ),
    ),
    "system_tracking": LogTypeSpec(
        logger_type="system_tracking",
        sd_id="system_tracking",
        payload_cls=SystemTrackingLog,
        fields=(
            FieldSpec("services", "services", dict),
            FieldSpec("package", "package", dict),
            FieldSpec("files", "files", dict),
            FieldSpec("host", "host", str),
            FieldSpec("inventory_id", "inventoryid", int),
        ),
    ),
    # Generic controller logs are written under "awx_log", not "awx".
    "awx": LogTypeSpec(
        logger_type="awx",
        sd_id="awx_log",
        payload_cls=AWXLog,
        fields=(
            FieldSpec("msg", "msg", str),
            FieldSpec("traceback", "traceback", str),
        ),
    ),
}


def lookup(logger_type: str) -> LogTypeSpec | None:
    """Return the spec for *logger_type*, or None when it is not recognized."""
    return REGISTRY.get(logger_type)


def _matches(kind: type, value) -> bool:
    if kind is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, kind)


def decode_field(spec: FieldSpec, value, logger_type: str = ""):
    """Coerce one JSON value to the declared kind, falling back to the zero value."""
    if value is None:
        return _zero(spec.kind)
    if _matches(spec.kind, value):
        return value
    # JSON encoders may write whole numbers as 5.0.
    if spec.kind is int and isinstance(value, float) and value.is_integer():
        return int(value)
    logger.debug(
        "Dropping %s field %r: expected %s, got %s",
        logger_type or "event", spec.key, spec.kind.__name__, type(value).__name__,
    )
    return _zero(spec.kind)


def _zero(kind: type):
    return kind()


def decode_payload(logger_type: str, residual: dict):
    """Decode *residual* into the typed payload for *logger_type*.

    Unrecognized types yield an UnknownLog carrying the residual unchanged.
    """
    spec = lookup(logger_type)
    if spec is None:
        return UnknownLog(fields=dict(residual))

    values = {f.key: decode_field(f, residual.get(f.key), logger_type) for f in spec.fields}
    return spec.payload_cls(**values)
