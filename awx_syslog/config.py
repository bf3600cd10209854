"""Configuration loading: defaults, then YAML file, then env vars, then CLI args."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from awx_syslog.errors import AWXSyslogError

logger = logging.getLogger(__name__)

ENV_PREFIX = "AWX_SYSLOG_"
CONFIG_ENV_VAR = "AWX_SYSLOG_CONFIG"
SEARCH_PATHS = (
    "/etc/awx-syslog/config.yaml",
    "~/.awx-syslog/config.yaml",
    "./config.yaml",
)


class ConfigError(AWXSyslogError):
    """Raised when a config file or value cannot be used."""


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class TLSConfig:
    ca_file: str = ""
    insecure_skip_verify: bool = False


@dataclass(frozen=True)
class SyslogConfig:
    server_addr: str = "127.0.0.1:514"
    protocol: str = "udp"          # tcp, udp, tls
    framing: str = "none"          # none, octet-counting, lf (stream transports only)
    timeout: float = 10.0
    tls: TLSConfig = field(default_factory=TLSConfig)


@dataclass(frozen=True)
class Config:
    listen_addr: str = ":8080"
    log_level: str = "info"        # debug, info, warn, error, critical
    hostname_field: str = ""       # HOSTNAME written into every syslog message
    syslog: SyslogConfig = field(default_factory=SyslogConfig)


def find_config_file(path: str | None = None) -> tuple[str | None, bool]:
    """Return (path, explicit). Explicit paths come from the CLI or AWX_SYSLOG_CONFIG."""
    if path:
        return path, True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path, True
    for candidate in SEARCH_PATHS:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            return expanded, False
    return None, False


def load_yaml_config(path: str | None, required: bool = False) -> dict:
    """Load a YAML config file. Returns an empty dict if there is none to load."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        if required:
            raise ConfigError(f"config file {path} not found")
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def _env(name: str, default):
    return os.environ.get(ENV_PREFIX + name, default)


def _pick(cli_value, env_name: str, yaml_value):
    if cli_value is not None:
        return cli_value
    return _env(env_name, yaml_value)


def _section(data: dict, name: str, prefix: str = "") -> dict:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"config section {prefix}{name} must be a mapping, got {type(value).__name__}")
    return value


def load_config(cli_args=None, yaml_data: dict | None = None) -> Config:
    """Build Config from parsed CLI args (argparse.Namespace), env vars and YAML data.

    Precedence, highest first: CLI args, AWX_SYSLOG_* env vars, YAML, defaults.
    """
    yaml_data = yaml_data or {}
    syslog_yaml = _section(yaml_data, "syslog")
    tls_yaml = _section(syslog_yaml, "tls", prefix="syslog.")
    args = vars(cli_args) if cli_args is not None else {}

    try:
        tls = TLSConfig(
            ca_file=_env("SYSLOG_TLS_CA_FILE", tls_yaml.get("ca_file", TLSConfig.ca_file)),
            insecure_skip_verify=_parse_bool(_env(
                "SYSLOG_TLS_INSECURE_SKIP_VERIFY",
                tls_yaml.get("insecure_skip_verify", TLSConfig.insecure_skip_verify),
            )),
        )
        syslog = SyslogConfig(
            server_addr=str(_pick(args.get("syslog_server_addr"), "SYSLOG_SERVER_ADDR",
                                  syslog_yaml.get("server_addr", SyslogConfig.server_addr))),
            protocol=str(_pick(args.get("syslog_protocol"), "SYSLOG_PROTOCOL",
                               syslog_yaml.get("protocol", SyslogConfig.protocol))),
            framing=str(_env("SYSLOG_FRAMING", syslog_yaml.get("framing", SyslogConfig.framing))),
            timeout=float(_env("SYSLOG_TIMEOUT", syslog_yaml.get("timeout", SyslogConfig.timeout))),
            tls=tls,
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid syslog config: {exc}") from exc

    return Config(
        listen_addr=str(_pick(args.get("listen_addr"), "LISTEN_ADDR",
                              yaml_data.get("listen_addr", Config.listen_addr))),
        log_level=str(_pick(args.get("log_level"), "LOG_LEVEL",
                            yaml_data.get("log_level", Config.log_level))),
        hostname_field=str(_pick(args.get("hostname_field"), "HOSTNAME_FIELD",
                                 yaml_data.get("hostname_field", Config.hostname_field))),
        syslog=syslog,
    )


def split_host_port(addr: str, default_host: str = "") -> tuple[str, int]:
    """Split 'host:port' (or '[v6]:port', or ':port') into (host, port)."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigError(f"address {addr!r} must be host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host or default_host, int(port)
