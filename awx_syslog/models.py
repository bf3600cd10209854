"""AWX log event model: common schema fields plus one typed payload per logger type."""

from dataclasses import dataclass, field
from datetime import datetime

# Top-level keys every AWX log event may carry, regardless of logger type.
COMMON_KEYS = ("cluster_host_id", "level", "logger_name", "@timestamp", "path")


@dataclass
class CommonFields:
    cluster_host_id: str = ""   # host within the controller cluster
    level: str = ""             # python log level name
    logger_name: str = ""       # e.g. "activity_stream", "job_events"
    timestamp: datetime | None = None
    path: str = ""              # code path that emitted the log


@dataclass
class ActivityStreamLog:
    actor: str = ""
    changes: dict = field(default_factory=dict)
    operation: str = ""
    object1: dict = field(default_factory=dict)
    object2: dict = field(default_factory=dict)


@dataclass
class JobEventLog:
    event_host: str = ""
    event_data: dict = field(default_factory=dict)
    job_id: int = 0
    task_name: str = ""
    play_name: str = ""


@dataclass
class SystemTrackingLog:
    services: dict = field(default_factory=dict)
    package: dict = field(default_factory=dict)
    files: dict = field(default_factory=dict)
    host: str = ""
    inventory_id: int = 0


@dataclass
class AWXLog:
    msg: str = ""
    traceback: str = ""


@dataclass
class UnknownLog:
    """Residual fields of an event whose logger type is not recognized."""
    fields: dict = field(default_factory=dict)
