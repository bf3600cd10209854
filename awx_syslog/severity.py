"""Maps Python log level names to RFC 5424 severities."""

FACILITY_AUDIT = 13
DEFAULT_SEVERITY = 6

_LEVEL_TO_SEVERITY: dict[str, int] = {
    "CRITICAL": 2,
    "ERROR": 3,
    "WARNING": 4,
    "WARN": 4,
    "INFO": 6,
    "DEBUG": 7,
}


def level_to_severity(level: str) -> int:
    """Return the syslog severity for *level*; unknown levels map to informational."""
    return _LEVEL_TO_SEVERITY.get((level or "").upper(), DEFAULT_SEVERITY)


def priority_for(level: str, facility: int = FACILITY_AUDIT) -> int:
    return facility * 8 + level_to_severity(level)
