"""Command line entry point: ``awx-syslog serve``."""

import argparse
import logging
import sys

from awx_syslog.app import create_app
from awx_syslog.config import ConfigError, find_config_file, load_config, load_yaml_config, split_host_port
from awx_syslog.forwarder import PROTOCOLS

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "fatal": logging.CRITICAL,
}


def parse_log_level(name: str) -> int:
    """Map a config log level name to a logging level; unknown names mean INFO."""
    return _LEVELS.get((name or "").strip().lower(), logging.INFO)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="awx-syslog",
        description="Receives AWX JSON logs over HTTP and forwards them to a syslog server",
    )
    parser.add_argument(
        "-c", "--config", default=None,
        help="config file (default is /etc/awx-syslog/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", aliases=["s"], help="Serve the AWX JSON->Syslog server")
    serve.add_argument("--listen-addr", default=None, help="HTTP listen address, host:port")
    serve.add_argument("--syslog-server-addr", default=None, help="syslog collector address, host:port")
    serve.add_argument("--syslog-protocol", default=None, help=f"one of {', '.join(PROTOCOLS)}")
    serve.add_argument("--hostname-field", default=None, help="HOSTNAME written into syslog messages")
    serve.add_argument("--log-level", default=None, help="debug, info, warn, error or critical")
    return parser


def serve(config) -> None:
    host, port = split_host_port(config.listen_addr, default_host="0.0.0.0")
    if config.syslog.protocol.lower() not in PROTOCOLS:
        logger.warning("Syslog protocol %r is not supported; requests will be rejected",
                       config.syslog.protocol)

    app = create_app(config)
    logger.info("Listening on %s:%d, forwarding to %s over %s",
                host, port, config.syslog.server_addr, config.syslog.protocol)
    app.run(host=host, port=port, threaded=True, use_reloader=False)


def main(argv=None) -> int:
    parser = build_cli_parser()
    args = parser.parse_args(argv)

    if args.command not in ("serve", "s"):
        parser.print_help()
        return 1

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)

    try:
        path, explicit = find_config_file(args.config)
        config = load_config(args, load_yaml_config(path, required=explicit))
    except ConfigError as exc:
        logger.error("Error loading config: %s", exc)
        return 1

    logging.getLogger().setLevel(parse_log_level(config.log_level))

    try:
        serve(config)
    except ConfigError as exc:
        logger.error("Could not serve AWX syslog server: %s", exc)
        return 1
    return 0
