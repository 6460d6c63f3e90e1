"""Tests for JSON value kinds and metric line rendering."""

import pytest

from pythonpstats.models import JsonKind, MetricLine, json_kind


@pytest.mark.parametrize(
    "value, kind",
    [
        (1, JsonKind.NUMBER),
        (2.5, JsonKind.NUMBER),
        (-0.0, JsonKind.NUMBER),
        (True, JsonKind.BOOL),
        (False, JsonKind.BOOL),
        ("12", JsonKind.STRING),
        (None, JsonKind.NULL),
        ({"a": 1}, JsonKind.OBJECT),
        ([1, 2], JsonKind.ARRAY),
    ],
)
def test_json_kind(value, kind):
    assert json_kind(value) is kind


def test_json_kind_rejects_non_json_values():
    with pytest.raises(TypeError):
        json_kind(object())


def test_tagless_metric_line():
    metric = MetricLine("dynstats", "foo_bar", 3)
    assert metric.to_statsite_format() == "rsyslog.dynstats.foo_bar:3|g\n"


def test_tagged_metric_line():
    metric = MetricLine("imuxsock", "count", 5, tag="input_rate")
    assert (
        metric.to_statsite_format()
        == "rsyslog.imuxsock,tag1=input_rate,tag2=count:5|g\n"
    )


def test_empty_tag_renders_tagless():
    metric = MetricLine("resource_usage", "utime", 7, tag="")
    assert metric.tag is None
    assert metric.to_statsite_format() == "rsyslog.resource_usage.utime:7|g\n"
