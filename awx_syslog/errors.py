"""Exception hierarchy shared by the translation pipeline and its collaborators."""


class AWXSyslogError(Exception):
    """Base class for all errors raised by awx-syslog."""
