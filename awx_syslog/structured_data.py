"""Builds the RFC 5424 structured-data elements for an AWX log event."""

import json
import logging

from awx_syslog import registry
from awx_syslog.models import CommonFields
from awx_syslog.rfc5424 import is_valid_sd_name

logger = logging.getLogger(__name__)

COMMON_SD_ID = "awx_common"


def render_value(value) -> str:
    """Strings pass through; every other JSON value is rendered as JSON text."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def build_structured_data(logger_type: str, common: CommonFields,
                          residual: dict) -> dict[str, dict[str, str]]:
    """Return SD elements keyed by SD-ID, in wire order.

    ``awx_common`` always comes first. Recognized logger types contribute one
    parameter per declared field; anything else has its residual fields copied
    verbatim under ``unknown_log``.
    """
    elements: dict[str, dict[str, str]] = {
        COMMON_SD_ID: {
            "logger_name": logger_type,
            "cluster_host_id": common.cluster_host_id,
            "path": common.path,
        }
    }

    payload = registry.decode_payload(logger_type, residual)
    spec = registry.lookup(logger_type)
    if spec is None:
        elements[registry.UNKNOWN_SD_ID] = _unknown_params(payload.fields)
        return elements

    elements[spec.sd_id] = {
        f.param: render_value(getattr(payload, f.key)) for f in spec.fields
    }
    return elements


def _unknown_params(residual: dict) -> dict[str, str]:
    params = {}
    for key, value in residual.items():
        if not is_valid_sd_name(key):
            logger.debug("Skipping field %r: not a valid structured-data name", key)
            continue
        params[key] = render_value(value)
    return params
