"""Tests for the stdin and file line sources."""

import io

import pytest

from conftest import error_records
from pythonpstats.monitors import FileMonitor, InputStreamError, MonitorError, StdinMonitor
from pythonpstats.monitors import file as file_monitor_module


class FailingStream:
    def readline(self):
        raise OSError("bad file descriptor")


def test_stdin_monitor_forwards_until_end_of_stream(writer):
    stream = io.BytesIO(
        b'{"origin":"impstats","utime":1}\n'
        b"no json here\n"
        b'{"origin":"impstats","stime":2}'
    )
    monitor = StdinMonitor(writer, stream=stream)

    with pytest.raises(InputStreamError, match="end of stream"):
        monitor.start()

    # the unterminated last frame is never parsed
    assert writer.lines == ["rsyslog.resource_usage.utime:1|g\n"]


def test_stdin_monitor_read_error_is_fatal(writer):
    monitor = StdinMonitor(writer, stream=FailingStream())
    with pytest.raises(InputStreamError, match="bad file descriptor"):
        monitor.start()
    assert writer.lines == []


def test_input_stream_error_is_monitor_error():
    assert issubclass(InputStreamError, MonitorError)


def test_process_line_returns_metric_count(writer):
    monitor = StdinMonitor(writer, stream=io.BytesIO())
    line = b'{"origin":"imudp","name":"imudp(*:514)","submitted":10,"disallowed":0}\n'
    assert monitor.process_line(line) == 2
    assert sorted(writer.lines) == [
        "rsyslog.imudp,tag1=imudp_514,tag2=disallowed:0|g\n",
        "rsyslog.imudp,tag1=imudp_514,tag2=submitted:10|g\n",
    ]


def test_file_monitor_reads_each_line_once(writer, tmp_path):
    log = tmp_path / "impstats.log"
    log.write_text(
        '{"origin":"impstats","utime":1}\n'
        '{"origin":"dynstats","values":{"hits":2}}\n'
    )
    offset_dir = tmp_path / "offsets"
    monitor = FileMonitor(writer, str(log), offset_dir=str(offset_dir))

    assert monitor.offset_path == str(offset_dir / "impstats.log.offset")
    assert offset_dir.is_dir()

    assert monitor.poll_once() == 2
    assert monitor.poll_once() == 0

    with log.open("a") as f:
        f.write('{"origin":"impstats","stime":3}\n')
    assert monitor.poll_once() == 1

    assert writer.lines == [
        "rsyslog.resource_usage.utime:1|g\n",
        "rsyslog.dynstats.hits:2|g\n",
        "rsyslog.resource_usage.stime:3|g\n",
    ]


def test_file_monitor_survives_invalid_utf8(writer, tmp_path):
    log = tmp_path / "impstats.log"
    log.write_bytes(
        b'{"origin":"impstats","utime":1}\n'
        b'{"origin":"impstats","bad\xff":2}\n'
        b'{"origin":"impstats","stime":3}\n'
    )
    monitor = FileMonitor(writer, str(log), offset_dir=str(tmp_path / "offsets"))

    assert monitor.poll_once() == 3
    assert monitor.poll_once() == 0
    assert writer.lines == [
        "rsyslog.resource_usage.utime:1|g\n",
        "rsyslog.resource_usage.bad:2|g\n",
        "rsyslog.resource_usage.stime:3|g\n",
    ]


def test_file_monitor_poll_lines_ends_after_stop(writer, tmp_path, monkeypatch):
    log = tmp_path / "impstats.log"
    log.write_text('{"origin":"impstats","utime":1}\n')
    monitor = FileMonitor(
        writer, str(log), poll_interval=0.01, offset_dir=str(tmp_path / "offsets")
    )
    sleeps = []

    def fake_sleep(seconds):
        sleeps.append(seconds)
        monitor.stop()

    monkeypatch.setattr(file_monitor_module.time, "sleep", fake_sleep)
    monitor.start()

    assert sleeps == [0.01]
    assert writer.lines == ["rsyslog.resource_usage.utime:1|g\n"]


def test_file_monitor_missing_file_is_logged(writer, tmp_path, caplog):
    monitor = FileMonitor(
        writer, str(tmp_path / "absent.log"), offset_dir=str(tmp_path / "offsets")
    )
    assert monitor.poll_once() == 0
    assert writer.lines == []
    assert len(error_records(caplog)) == 1
