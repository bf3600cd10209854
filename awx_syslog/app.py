"""Flask app: receives AWX log events over HTTP and forwards them as syslog."""

import logging

from flask import Flask, jsonify, request

from awx_syslog.config import Config
from awx_syslog.forwarder import ForwardingError, SyslogForwarder, UnsupportedProtocolError
from awx_syslog.metrics import Metrics
from awx_syslog.parser import ParseError
from awx_syslog.rfc5424 import SerializationError
from awx_syslog.translator import translate

logger = logging.getLogger(__name__)


def create_app(config: Config, metrics: Metrics | None = None, forwarder=None) -> Flask:
    """Flask application factory.

    *forwarder* needs a ``send(wire)`` method; defaults to a SyslogForwarder
    built from ``config.syslog``.
    """
    app = Flask(__name__)

    if metrics is None:
        metrics = Metrics()
    if forwarder is None:
        forwarder = SyslogForwarder(config.syslog)

    # Store components on app for access in tests
    app.config["components"] = {
        "config": config,
        "metrics": metrics,
        "forwarder": forwarder,
    }

    @app.route("/health")
    def health():
        return jsonify(status="ok")

    @app.route("/metrics")
    def metrics_view():
        return jsonify(metrics.snapshot())

    @app.route("/", methods=["POST"])
    def ingest_log():
        body = request.get_data()
        logger.debug("Received log: %r", body)

        try:
            result = translate(body, hostname=config.hostname_field, counter=metrics)
        except ParseError as exc:
            logger.error("Failed to parse AWX log: %s", exc)
            return jsonify(status="invalid", error=str(exc)), 400
        except SerializationError as exc:
            logger.error("Failed to serialize syslog message: %s", exc)
            return jsonify(status="error", error=str(exc)), 500

        logger.info("Generated syslog message: %s", result.wire)

        try:
            forwarder.send(result.wire)
        except UnsupportedProtocolError as exc:
            logger.error("Invalid syslog protocol: %s", exc)
            return jsonify(status="error", error=str(exc)), 400
        except ForwardingError as exc:
            # Delivery is best-effort: the caller still gets a success response.
            metrics.record_forward_error()
            logger.error("Failed to forward to syslog server: %s", exc)
        else:
            metrics.record_forwarded()

        return jsonify(status="ok", msgid=result.message.msg_id)

    return app
