"""Derives the MSGID and a short human-readable message for each logger type."""


def _string(data: dict, key: str, default: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def describe_activity_stream(data: dict) -> tuple[str, str]:
    actor = _string(data, "actor", "unknown")
    operation = _string(data, "operation", "unknown")

    obj1 = data.get("object1")
    if isinstance(obj1, dict):
        target = f"{_string(obj1, 'type', 'object')} '{_string(obj1, 'name', 'unnamed')}'"
    else:
        target = "object"

    return "ACTIVITY_STREAM", f"User {actor} performed {operation} on {target}"


def describe_job_event(data: dict) -> tuple[str, str]:
    event_host = _string(data, "event_host", "unknown")
    task_name = _string(data, "task_name", "")

    if task_name:
        return "JOB_EVENT", f"Job event on host {event_host}: task '{task_name}'"
    return "JOB_EVENT", f"Job event on host {event_host}"


def describe_system_tracking(data: dict) -> tuple[str, str]:
    host = _string(data, "host", "unknown")

    # First key present wins.
    scan_type = next((k for k in ("services", "package", "files") if k in data), "unknown")
    return "SYSTEM_TRACKING", f"System tracking scan ({scan_type}) for host {host}"


def describe_awx(data: dict) -> tuple[str, str]:
    msg = _string(data, "msg", "No message")

    if _string(data, "traceback", ""):
        return "AWX_ERROR", f"AWX Error: {msg}"
    return "AWX_LOG", msg


_RULES = {
    "activity_stream": describe_activity_stream,
    "job_events": describe_job_event,
    "system_tracking": describe_system_tracking,
    "awx": describe_awx,
}


def message_for(logger_type: str, residual: dict) -> tuple[str, str]:
    """Return (msg_id, message) for an event of *logger_type*."""
    rule = _RULES.get(logger_type)
    if rule is None:
        return "UNKNOWN", f"Unknown log type: {logger_type}"
    return rule(residual)
