"""End-to-end tests for translate(): JSON body in, RFC 5424 line out."""

import json
import logging

import pytest

from awx_syslog.metrics import Metrics
from awx_syslog.parser import ParseError
from awx_syslog.rfc5424 import SerializationError
from awx_syslog.translator import awx_event_to_syslog_message, translate
from awx_syslog.models import CommonFields
from conftest import encode


class TestScenarios:
    def test_awx_error_with_traceback(self):
        result = translate(b'{"logger_name":"awx","level":"ERROR","msg":"boom","traceback":"x"}')
        assert result.message.msg_id == "AWX_ERROR"
        assert result.message.message == "AWX Error: boom"
        assert result.wire.startswith("<107>1 ")
        assert result.wire.endswith(" AWX Error: boom")

    def test_job_event(self):
        result = translate(b'{"logger_name":"job_events","event_host":"h1","task_name":"deploy"}')
        assert result.message.msg_id == "JOB_EVENT"
        assert result.message.message == "Job event on host h1: task 'deploy'"
        assert result.wire == (
            "<110>1 - - awx-controller- - JOB_EVENT "
            '[awx_common logger_name="job_events" cluster_host_id="" path=""]'
            '[job_events eventhost="h1" eventdata="{}" jobid="0" taskname="deploy" playname=""] '
            "Job event on host h1: task 'deploy'"
        )

    def test_system_tracking_package_scan(self):
        result = translate(b'{"logger_name":"system_tracking","host":"h2","package":{}}')
        assert result.message.msg_id == "SYSTEM_TRACKING"
        assert result.message.message == "System tracking scan (package) for host h2"

    def test_activity_stream(self, activity_stream_event):
        result = translate(encode(activity_stream_event), hostname="awx.example.com")
        assert result.wire.startswith(
            "<110>1 2024-01-15T10:30:00Z awx.example.com awx-controller-awx-1 - ACTIVITY_STREAM "
            '[awx_common logger_name="activity_stream" cluster_host_id="awx-1" path="awx/main/signals.py"]'
            '[activity_stream actor="admin" changes="{\\"name\\": \\"Demo\\"}" operation="create" '
        )
        assert result.wire.endswith("User admin performed create on job_template 'Demo JT'")

    def test_malformed_json(self):
        with pytest.raises(ParseError):
            translate(b"{not json")


class TestPriority:
    @pytest.mark.parametrize("level,severity", [
        ("CRITICAL", 2), ("critical", 2), ("Error", 3), ("warn", 4), ("WARNING", 4),
        ("info", 6), ("DeBuG", 7), ("", 6), ("NOTICE", 6),
    ])
    def test_priority_prefix(self, level, severity):
        body = json.dumps({"logger_name": "awx", "level": level, "msg": "m"}).encode()
        assert translate(body).wire.startswith(f"<{13 * 8 + severity}>1 ")

    def test_missing_level(self):
        assert translate(b'{"logger_name": "awx"}').message.priority == 110


class TestDeterminism:
    def test_identical_input_identical_output(self, job_event):
        body = encode(job_event)
        assert translate(body, hostname="h").wire == translate(body, hostname="h").wire


class TestUnknownTypes:
    def test_residual_completeness(self, unknown_event):
        result = translate(encode(unknown_event))
        params = result.message.structured_data["unknown_log"]
        assert set(params) == {"custom", "count", "nested"}
        assert result.message.msg_id == "UNKNOWN"
        assert result.message.message == "Unknown log type: "

    def test_unrecognized_name(self):
        result = translate(b'{"logger_name": "awx.main.tasks", "foo": "bar"}')
        assert result.message.structured_data["unknown_log"] == {"foo": "bar"}
        assert result.message.message == "Unknown log type: awx.main.tasks"
        assert '[unknown_log foo="bar"]' in result.wire


class TestTimestamp:
    def test_malformed_timestamp_gives_nil(self):
        result = translate(b'{"logger_name": "awx", "@timestamp": "soon", "msg": "m"}')
        assert result.wire.startswith("<110>1 - ")

    def test_offset_timestamp(self):
        result = translate(b'{"logger_name": "awx", "@timestamp": "2024-01-15T10:30:00.5+02:00"}')
        assert result.wire.startswith("<110>1 2024-01-15T10:30:00+02:00 ")


class TestCounter:
    def test_counted_after_parse(self, metrics):
        translate(b'{"logger_name": "awx"}', counter=metrics)
        translate(b'{"logger_name": "job_events"}', counter=metrics)
        snap = metrics.snapshot()
        assert snap["awx_syslog_logs_received"] == 2
        assert snap["logger_type_distribution"] == {"awx": 1, "job_events": 1}

    def test_not_counted_when_malformed(self, metrics):
        with pytest.raises(ParseError):
            translate(b"[1, 2]", counter=metrics)
        assert metrics.logs_received == 0

    def test_counted_even_when_serialization_fails(self, monkeypatch):
        monkeypatch.setattr("awx_syslog.translator.build_structured_data",
                            lambda *args: {"bad id": {}})
        counter = Metrics()
        with pytest.raises(SerializationError):
            translate(b'{"logger_name": "awx"}', counter=counter)
        assert counter.logs_received == 1


class TestAssembly:
    def test_app_name_and_hostname(self):
        common = CommonFields(cluster_host_id="node-3", level="INFO", logger_name="awx")
        msg = awx_event_to_syslog_message("awx", common, {"msg": "m"}, hostname="collector-host")
        assert msg.app_name == "awx-controller-node-3"
        assert msg.hostname == "collector-host"
        assert msg.version == 1
        assert list(msg.structured_data) == ["awx_common", "awx_log"]

    @pytest.mark.parametrize("cluster_host_id, app_name", [
        ("node 3", "awx-controller-node_3"),
        ("n\u0153ud", "awx-controller-n_ud"),
        ("awx-web-7d9f8c6b5d-x2kq9.awx.svc.cluster.local",
         "awx-controller-awx-web-7d9f8c6b5d-x2kq9.awx.svc."),
    ])
    def test_unsafe_cluster_host_id_is_sanitized(self, cluster_host_id, app_name):
        body = json.dumps({"logger_name": "awx", "level": "INFO",
                           "cluster_host_id": cluster_host_id}).encode()
        result = translate(body)
        assert result.message.app_name == app_name
        assert len(result.message.app_name) <= 48
        assert result.wire.startswith(f"<110>1 - - {app_name} - ")
        assert result.message.structured_data["awx_common"]["cluster_host_id"] == cluster_host_id

    def test_unsafe_hostname_is_sanitized(self):
        result = translate(b'{"logger_name": "awx"}', hostname="collector host")
        assert result.message.hostname == "collector_host"

    def test_sanitized_header_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="awx_syslog.translator"):
            translate(b'{"logger_name": "awx", "cluster_host_id": "node 3"}')
        assert "awx-controller-node_3" in caplog.text
